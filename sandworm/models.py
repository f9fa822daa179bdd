"""Data models for sandworm scan configuration, findings and reports."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

# Default minimum run of consecutive spaces/tabs to flag
DEFAULT_MIN_WHITESPACE = 50

# Files larger than this are skipped (10MB)
DEFAULT_MAX_SIZE = 10_000_000

# File scan outcomes
STATUS_SCANNED = "scanned"
STATUS_PARTIAL = "partial"          # decode/read error part-way through
STATUS_TOO_LARGE = "too_large"
STATUS_EMPTY = "empty"
STATUS_NOT_FILE = "not_file"
STATUS_UNREADABLE = "unreadable"

SKIP_STATUSES = (STATUS_TOO_LARGE, STATUS_EMPTY, STATUS_NOT_FILE, STATUS_UNREADABLE)


def default_workers() -> int:
    """Worker pool size matching available hardware parallelism."""
    return os.cpu_count() or 1


@dataclass(frozen=True)
class ScanConfig:
    """Immutable settings for one scan invocation."""
    root: str
    min_whitespace: int = DEFAULT_MIN_WHITESPACE
    max_size: int = DEFAULT_MAX_SIZE
    verbose: bool = False
    workers: int = field(default_factory=default_workers)
    sort_by_path: bool = True

    def __post_init__(self):
        if self.min_whitespace < 1:
            raise ValueError(
                f"min_whitespace must be >= 1, got {self.min_whitespace}")
        if self.max_size < 0:
            raise ValueError(f"max_size must be >= 0, got {self.max_size}")
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")


@dataclass(frozen=True)
class Finding:
    """A single line containing a suspicious whitespace run."""
    path: Path
    line_num: int
    ws_count: int
    line_preview: str

    def to_dict(self) -> dict:
        return {
            "path": str(self.path),
            "line": self.line_num,
            "whitespace_chars": self.ws_count,
            "preview": self.line_preview,
        }


@dataclass
class FileScanResult:
    """Outcome of scanning a single file.

    Every skip status carries an empty findings list; callers that only
    care about findings never need to look at ``status``.
    """
    path: Path
    status: str = STATUS_SCANNED
    findings: List[Finding] = field(default_factory=list)

    @property
    def skipped(self) -> bool:
        return self.status in SKIP_STATUSES


@dataclass
class ScanReport:
    """Aggregate result of a whole-tree scan."""
    root: str
    min_whitespace: int
    files_found: int = 0
    files_scanned: int = 0
    findings: List[Finding] = field(default_factory=list)
    skipped: Dict[str, int] = field(default_factory=dict)
    partial_files: int = 0
    elapsed_seconds: float = 0.0

    @property
    def is_clean(self) -> bool:
        return not self.findings
