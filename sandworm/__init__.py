"""sandworm -- scan filesystems for whitespace obfuscation.

Flags text lines holding long runs of spaces/tabs, the signature of
payloads hidden past the visible margin of a source line (the Shai-Hulud
npm supply-chain attack).
"""

__version__ = "1.0.0"

from sandworm.models import (
    FileScanResult,
    Finding,
    ScanConfig,
    ScanReport,
)
from sandworm.matcher import find_whitespace_run
from sandworm.scanner import scan_file
from sandworm.walker import EXCLUDED_DIRS, WalkError, collect_candidate_files
from sandworm.batch import run_scan, scan_batch

__all__ = [
    "__version__",
    "Finding",
    "FileScanResult",
    "ScanConfig",
    "ScanReport",
    "EXCLUDED_DIRS",
    "WalkError",
    "find_whitespace_run",
    "scan_file",
    "collect_candidate_files",
    "scan_batch",
    "run_scan",
]
