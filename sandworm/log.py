"""Logging utilities -- ANSI terminal colors and timestamped log lines.

Provides consistent color-coded output for the CLI, and plain
timestamped lines for the optional --log file.
"""

import sys
from datetime import datetime

import click

# ---------------------------------------------------------------------------
# ANSI color codes
# ---------------------------------------------------------------------------

_RESET = '\033[0m'
_DIM = '\033[2m'

_GREEN = '\033[32m'
_YELLOW = '\033[33m'
_CYAN = '\033[36m'

_BOLD_RED = '\033[1;31m'
_BOLD_YELLOW = '\033[1;33m'
_BOLD_WHITE = '\033[1;37m'


def _is_tty():
    """Check if stdout is a terminal (not piped)."""
    try:
        return sys.stdout.isatty()
    except AttributeError:
        return False


# Module-level flag -- set once at import time
_USE_COLOR = _is_tty()


def set_color_enabled(enabled: bool):
    """Override automatic color detection."""
    global _USE_COLOR
    _USE_COLOR = enabled


def color_enabled() -> bool:
    return _USE_COLOR


def _c(code: str, text: str) -> str:
    """Apply ANSI code if color is enabled."""
    if _USE_COLOR:
        return f'{code}{text}{_RESET}'
    return text


def printable(text: str) -> str:
    """Escape control characters so scanned content can't drive the terminal.

    Tabs are kept. Any other non-printable character is shown as its
    Python escape, so ESC becomes ``\\x1b``.
    """
    return ''.join(ch if ch == '\t' or ch.isprintable() else repr(ch)[1:-1]
                   for ch in text)


def echo(text: str = '', err: bool = False):
    """click.echo that keeps or strips ANSI codes per the color flag."""
    click.echo(text, err=err, color=_USE_COLOR)


# ---------------------------------------------------------------------------
# CLI formatting helpers
# ---------------------------------------------------------------------------

def cli_success(text: str) -> str:
    """Green text for a clean scan."""
    return _c(_GREEN, text)


def cli_warning(text: str) -> str:
    """Bold yellow text for the findings headline."""
    return _c(_BOLD_YELLOW, text)


def cli_error(text: str) -> str:
    """Red text for errors."""
    return _c(_BOLD_RED, text)


def cli_info(text: str) -> str:
    """Cyan text for progress and status messages."""
    return _c(_CYAN, text)


def cli_dim(text: str) -> str:
    """Dim text for line previews."""
    return _c(_DIM, text)


def cli_bold(text: str) -> str:
    """Bold white text for file headers."""
    return _c(_BOLD_WHITE, text)


def cli_finding(text: str) -> str:
    """Yellow text for individual finding lines."""
    return _c(_YELLOW, text)


# ---------------------------------------------------------------------------
# Log file formatting (always plain text with timestamps and levels)
# ---------------------------------------------------------------------------

def _timestamp() -> str:
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def log_info(msg: str) -> str:
    """Format a log file INFO line."""
    return f'[{_timestamp()}] [INFO]  {msg}'


def log_warn(msg: str) -> str:
    """Format a log file WARN line."""
    return f'[{_timestamp()}] [WARN]  {msg}'


def log_error(msg: str) -> str:
    """Format a log file ERROR line."""
    return f'[{_timestamp()}] [ERROR] {msg}'
