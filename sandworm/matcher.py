"""Whitespace-run detection -- the single signature sandworm looks for.

Obfuscated payloads are commonly hidden by padding a line with hundreds of
spaces or tabs so the real code sits far past the visible margin of an
editor. A line is flagged when it holds a run of at least N consecutive
space/tab characters.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


@dataclass(frozen=True)
class WhitespaceRun:
    """Character span [start, end) of a matched run within a line."""
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


@lru_cache(maxsize=32)
def compile_pattern(min_whitespace: int) -> re.Pattern:
    """Return the compiled run pattern for a minimum length."""
    if min_whitespace < 1:
        raise ValueError(f'min_whitespace must be >= 1, got {min_whitespace}')
    return re.compile(r'[ \t]{%d,}' % min_whitespace)


def find_whitespace_run(line: str, min_whitespace: int) -> Optional[WhitespaceRun]:
    """Find the first run of at least ``min_whitespace`` spaces/tabs.

    The regex is greedy and matches leftmost, so the returned span is the
    whole maximal run, starting at the first qualifying one in the line.

    Args:
        line: Decoded text line (without its newline).
        min_whitespace: Minimum run length to report.

    Returns:
        WhitespaceRun, or None if the line has no qualifying run.
    """
    m = compile_pattern(min_whitespace).search(line)
    if m is None:
        return None
    return WhitespaceRun(m.start(), m.end())
