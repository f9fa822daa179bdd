"""Per-file scanning -- line-by-line whitespace-run detection.

Files the scanner has no business reading (binaries, device nodes,
permission-restricted or oversized files) are skipped silently; the skip
reason is kept on the FileScanResult and logged at DEBUG level only.
"""

import logging
import os
import stat
from pathlib import Path
from typing import List

from sandworm.matcher import find_whitespace_run
from sandworm.models import (
    DEFAULT_MAX_SIZE,
    DEFAULT_MIN_WHITESPACE,
    STATUS_EMPTY,
    STATUS_NOT_FILE,
    STATUS_PARTIAL,
    STATUS_TOO_LARGE,
    STATUS_UNREADABLE,
    FileScanResult,
    Finding,
)

logger = logging.getLogger(__name__)

# Preview length in characters, and the marker appended when a line is cut
PREVIEW_CHARS = 120
TRUNCATION_MARKER = '...'


def make_preview(line: str, limit: int = PREVIEW_CHARS) -> str:
    """Truncate a line for display.

    Python strings index code points, so slicing never splits a
    multi-byte character.
    """
    if len(line) > limit:
        return line[:limit] + TRUNCATION_MARKER
    return line


def _decode_line(raw: bytes) -> str:
    """Decode one raw line as strict UTF-8 and drop its line terminator."""
    if raw.endswith(b'\n'):
        raw = raw[:-1]
        if raw.endswith(b'\r'):
            raw = raw[:-1]
    return raw.decode('utf-8')


def scan_file(filepath: Path,
              min_whitespace: int = DEFAULT_MIN_WHITESPACE,
              max_size: int = DEFAULT_MAX_SIZE) -> FileScanResult:
    """Scan a single file for long whitespace runs.

    Args:
        filepath: Path to the file to scan.
        min_whitespace: Minimum run of spaces/tabs to flag.
        max_size: Files larger than this many bytes are skipped.

    Returns:
        FileScanResult. Findings are in line order; on a decode or read
        error part-way through, the findings collected so far are kept
        and the status is ``partial``.
    """
    filepath = Path(filepath)

    try:
        st = os.stat(filepath)
    except OSError as e:
        logger.debug('skip %s: stat failed (%s)', filepath, e)
        return FileScanResult(filepath, status=STATUS_UNREADABLE)

    if not stat.S_ISREG(st.st_mode):
        logger.debug('skip %s: not a regular file', filepath)
        return FileScanResult(filepath, status=STATUS_NOT_FILE)
    if st.st_size == 0:
        return FileScanResult(filepath, status=STATUS_EMPTY)
    if st.st_size > max_size:
        logger.debug('skip %s: %d bytes exceeds max size %d',
                     filepath, st.st_size, max_size)
        return FileScanResult(filepath, status=STATUS_TOO_LARGE)

    try:
        f = open(filepath, 'rb')
    except OSError as e:
        logger.debug('skip %s: open failed (%s)', filepath, e)
        return FileScanResult(filepath, status=STATUS_UNREADABLE)

    result = FileScanResult(filepath)
    findings = result.findings

    with f:
        line_num = 0
        try:
            for raw in f:
                line_num += 1
                try:
                    line = _decode_line(raw)
                except UnicodeDecodeError:
                    # Binary content -- stop here, keep what we have
                    logger.debug('stop %s at line %d: not valid UTF-8',
                                 filepath, line_num)
                    result.status = STATUS_PARTIAL
                    break

                run = find_whitespace_run(line, min_whitespace)
                if run is not None:
                    findings.append(Finding(
                        path=filepath,
                        line_num=line_num,
                        ws_count=run.length,
                        line_preview=make_preview(line),
                    ))
        except OSError as e:
            logger.debug('stop %s at line %d: read failed (%s)',
                         filepath, line_num, e)
            result.status = STATUS_PARTIAL

    return result


def scan_file_findings(filepath: Path,
                       min_whitespace: int = DEFAULT_MIN_WHITESPACE,
                       max_size: int = DEFAULT_MAX_SIZE) -> List[Finding]:
    """Scan a file and return only its findings (empty for any skip)."""
    return scan_file(filepath, min_whitespace, max_size).findings
