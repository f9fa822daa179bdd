"""Report aggregation -- group findings by file and render text or JSON."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple

import sandworm
from sandworm import log
from sandworm.models import Finding, ScanReport


def affected_files(findings: List[Finding]) -> List[Path]:
    """Distinct paths with at least one finding, in first-arrival order."""
    return list(dict.fromkeys(f.path for f in findings))


def group_findings(findings: List[Finding]) -> List[Tuple[Path, List[Finding]]]:
    """Group consecutive findings that share a path.

    Findings are not re-sorted: a path gets a new group each time it
    reappears after a different path.
    """
    groups = []
    current_path = None
    for finding in findings:
        if not groups or finding.path != current_path:
            current_path = finding.path
            groups.append((current_path, []))
        groups[-1][1].append(finding)
    return groups


def clean_message(min_whitespace: int) -> str:
    return f'No files with {min_whitespace}+ consecutive whitespace chars found.'


def summary_message(report: ScanReport) -> str:
    return f'Scanned {report.files_scanned} files in {report.elapsed_seconds:.2f}s'


def _report_lines(report: ScanReport, verbose: bool):
    """Yield (style, text) pairs for the findings body."""
    files = affected_files(report.findings)
    yield None, ''
    yield log.cli_warning, (f'FOUND {len(files)} file(s) with '
                            f'{report.min_whitespace}+ consecutive whitespace chars:')
    yield None, ''
    for path, findings in group_findings(report.findings):
        yield log.cli_bold, f'  {log.printable(str(path))}'
        for f in findings:
            yield log.cli_finding, f'    Line {f.line_num}: {f.ws_count} whitespace chars'
            if verbose:
                yield log.cli_dim, f'      {log.printable(f.line_preview)}'


def format_report(report: ScanReport, verbose: bool = False) -> List[str]:
    """Render the findings body as plain lines (no trailing newlines).

    Returns an empty list when the report is clean; the clean message is
    a status line, see print_report().
    """
    if report.is_clean:
        return []
    return [text for _, text in _report_lines(report, verbose)]


def print_report(report: ScanReport, verbose: bool = False):
    """Print the report: findings to stdout, status lines to stderr."""
    if report.is_clean:
        log.echo(err=True)
        log.echo(log.cli_success(clean_message(report.min_whitespace)), err=True)
    else:
        for style, text in _report_lines(report, verbose):
            log.echo(style(text) if style else text)

    log.echo(err=True)
    log.echo(log.cli_info(summary_message(report)), err=True)


def report_to_dict(report: ScanReport) -> dict:
    """Build a JSON-serialisable record of a scan."""
    files = affected_files(report.findings)
    return {
        'sandworm_version': sandworm.__version__,
        'generated': datetime.now(timezone.utc).isoformat(),
        'root': report.root,
        'min_whitespace': report.min_whitespace,
        'summary': {
            'files_found': report.files_found,
            'files_scanned': report.files_scanned,
            'files_with_findings': len(files),
            'total_findings': len(report.findings),
            'partial_files': report.partial_files,
            'skipped': dict(sorted(report.skipped.items())),
            'elapsed_seconds': round(report.elapsed_seconds, 3),
        },
        'files': [
            {
                'path': str(path),
                'findings': [f.to_dict() for f in findings],
            }
            for path, findings in group_findings(report.findings)
        ],
    }


def write_json_report(report: ScanReport, output_path: Optional[Path]) -> dict:
    """Write the JSON report to *output_path* (if given) and return it."""
    data = report_to_dict(report)
    if output_path is not None:
        with open(str(output_path), 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
    return data
