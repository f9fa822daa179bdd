"""Directory traversal -- enumerate every regular file under a root.

Unlike most source tools this deliberately does not honour .gitignore and
friends, and it visits dotfiles: injected payloads are just as likely to
sit in an ignored or hidden file. Only well-known dependency, build and
cache directories are pruned.
"""

import logging
import os
import stat
from pathlib import Path
from typing import Iterator, List

logger = logging.getLogger(__name__)

# Directory basenames never descended into (exact, case-sensitive match)
EXCLUDED_DIRS = frozenset({
    'node_modules',
    '.git',
    'vendor',
    '.pnpm',
    'dist',
    'build',
    '.cache',
    '__pycache__',
    '.venv',
    'venv',
    '.tox',
})


class WalkError(Exception):
    """The scan root itself cannot be walked."""


def is_excluded_dir(name: str) -> bool:
    """Check a directory basename against the denylist."""
    return name in EXCLUDED_DIRS


def _walk_dir(directory: str) -> Iterator[Path]:
    def _on_error(e):
        logger.debug('skip directory %s: %s', e.filename, e)

    # os.walk is iterative from Python 3.12, so nesting depth is unbounded
    for dirpath, dirnames, filenames in os.walk(directory, onerror=_on_error):
        dirnames[:] = [d for d in dirnames if not is_excluded_dir(d)]

        for fname in filenames:
            filepath = os.path.join(dirpath, fname)
            try:
                st = os.lstat(filepath)
            except OSError as e:
                logger.debug('skip entry %s: %s', filepath, e)
                continue
            if stat.S_ISREG(st.st_mode):
                yield Path(filepath)


def iter_candidate_files(root) -> Iterator[Path]:
    """Yield every regular file under *root*.

    Symlinks are neither followed nor yielded, and per-entry errors
    (permission denied, entries vanishing mid-walk) are skipped.

    Raises:
        WalkError: if *root* does not exist or cannot be listed.
    """
    root = os.fspath(root)
    if not os.path.isdir(root):
        if os.path.isfile(root):
            yield Path(root)
            return
        raise WalkError(f'Path does not exist or is not a directory: {root}')

    # Probe once so an unreadable root is fatal rather than silently empty
    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise WalkError(f'Cannot walk {root}: {e}') from e

    yield from _walk_dir(root)


def collect_candidate_files(root) -> List[Path]:
    """Collect all candidate files under *root*, sorted by path."""
    files = list(iter_candidate_files(root))
    files.sort()
    return files
