"""Batch scanning -- walk a tree and fan files out across a thread pool.

Each file is scanned independently and returns its own result batch;
results are merged only after the pool has drained.
"""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, List, Optional

from sandworm.models import (
    STATUS_PARTIAL,
    STATUS_UNREADABLE,
    FileScanResult,
    ScanConfig,
    ScanReport,
)
from sandworm.scanner import scan_file
from sandworm.walker import collect_candidate_files


def _scan_one(filepath: Path, config: ScanConfig) -> FileScanResult:
    try:
        return scan_file(filepath, config.min_whitespace, config.max_size)
    except Exception:
        # Anything unexpected counts as an unreadable file
        return FileScanResult(filepath, status=STATUS_UNREADABLE)


def scan_batch(
    paths: List[Path],
    config: ScanConfig,
    progress_callback: Optional[Callable] = None,
) -> List[FileScanResult]:
    """Scan a list of files.

    Args:
        paths: Candidate files, usually from collect_candidate_files().
        config: Scan settings; ``workers`` sizes the pool.
        progress_callback: Called with (index, total, filepath, result)
            after each file completes.

    Returns:
        One FileScanResult per path. With ``config.sort_by_path`` the list
        follows the order of *paths*; otherwise it follows completion order.
    """
    if config.workers > 1 and len(paths) > 1:
        return _scan_parallel(paths, config, progress_callback)
    return _scan_sequential(paths, config, progress_callback)


def _scan_sequential(
    paths: List[Path],
    config: ScanConfig,
    progress_callback: Optional[Callable],
) -> List[FileScanResult]:
    """Scan files one after another."""
    results = []
    total = len(paths)

    for i, filepath in enumerate(paths):
        result = _scan_one(filepath, config)
        results.append(result)
        if progress_callback:
            progress_callback(i + 1, total, filepath, result)

    return results


def _scan_parallel(
    paths: List[Path],
    config: ScanConfig,
    progress_callback: Optional[Callable],
) -> List[FileScanResult]:
    """Scan files concurrently using a thread pool.

    File reads release the GIL, so threads overlap I/O across files.
    """
    total = len(paths)
    by_index = [None] * total
    completed = []

    with ThreadPoolExecutor(max_workers=config.workers) as executor:
        futures = {}
        for i, filepath in enumerate(paths):
            future = executor.submit(_scan_one, filepath, config)
            futures[future] = (i, filepath)

        for future in as_completed(futures):
            index, filepath = futures[future]
            result = future.result()

            by_index[index] = result
            completed.append(result)
            if progress_callback:
                progress_callback(len(completed), total, filepath, result)

    if config.sort_by_path:
        return by_index
    return completed


def run_scan(
    config: ScanConfig,
    progress_callback: Optional[Callable] = None,
    collected_callback: Optional[Callable] = None,
) -> ScanReport:
    """Walk, scan and collect a whole tree into a ScanReport.

    Elapsed time covers the walk as well as the scan.

    Args:
        config: Scan settings.
        progress_callback: Forwarded to scan_batch().
        collected_callback: Called with the candidate path list once the
            walk has finished, before any file is scanned.

    Raises:
        WalkError: if the root cannot be walked at all.
    """
    t0 = time.monotonic()

    paths = collect_candidate_files(config.root)
    if collected_callback:
        collected_callback(paths)

    report = ScanReport(root=config.root, min_whitespace=config.min_whitespace,
                        files_found=len(paths))

    results = scan_batch(paths, config, progress_callback)

    for result in results:
        report.files_scanned += 1
        if result.skipped:
            report.skipped[result.status] = report.skipped.get(result.status, 0) + 1
        elif result.status == STATUS_PARTIAL:
            report.partial_files += 1
        report.findings.extend(result.findings)

    report.elapsed_seconds = time.monotonic() - t0
    return report
