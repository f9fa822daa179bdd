"""Shared test fixtures -- synthetic source trees with hidden whitespace payloads."""

import pytest

from sandworm import log

# A line hiding code 60 spaces past the visible margin
PAYLOAD_LINE = 'x' + ' ' * 60 + 'y'

# Bytes that are never valid UTF-8
BINARY_JUNK = b'\x89PNG\r\n\x1a\n\xff\xfe\x00\x00\xc3\x28'


@pytest.fixture(autouse=True)
def _no_color():
    """Keep output free of ANSI codes unless a test asks for them."""
    log.set_color_enabled(False)
    yield
    log.set_color_enabled(False)


@pytest.fixture
def write_file(tmp_path):
    """Factory writing text (or bytes) to a path relative to tmp_path."""
    def _write(relpath, content):
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_bytes(content.encode('utf-8'))
        return path
    return _write


@pytest.fixture
def infected_tree(tmp_path, write_file):
    """A small project with one infected file among clean, binary and
    excluded content.

    Layout::

        src/app.js            -- payload on line 3
        src/util.js           -- clean
        .hidden/config.js     -- payload on line 1 (dotfiles are scanned)
        assets/logo.png       -- binary
        node_modules/pkg/index.js -- payload, but excluded
        build/out.js          -- payload, but excluded
    """
    write_file('src/app.js', 'const a = 1;\nconst b = 2;\n' + PAYLOAD_LINE + '\n')
    write_file('src/util.js', 'export function add(a, b) {\n  return a + b;\n}\n')
    write_file('.hidden/config.js', PAYLOAD_LINE + '\n')
    write_file('assets/logo.png', BINARY_JUNK * 10)
    write_file('node_modules/pkg/index.js', PAYLOAD_LINE + '\n')
    write_file('build/out.js', PAYLOAD_LINE + '\n')
    return tmp_path


@pytest.fixture
def clean_tree(tmp_path, write_file):
    """A project with nothing to find."""
    write_file('README.md', '# Project\n\nNothing to see here.\n')
    write_file('src/main.py', 'def main():\n    return 0\n')
    return tmp_path
