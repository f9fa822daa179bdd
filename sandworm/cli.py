"""CLI interface for sandworm -- scan a tree for whitespace obfuscation."""

import os
import sys
from pathlib import Path

import click

import sandworm
from sandworm import log
from sandworm.batch import run_scan
from sandworm.models import DEFAULT_MAX_SIZE, DEFAULT_MIN_WHITESPACE, ScanConfig, default_workers
from sandworm.report import affected_files, print_report, summary_message, write_json_report
from sandworm.walker import WalkError


def default_root() -> str:
    """The invoking user's home directory, or '.' if it can't be resolved."""
    home = os.environ.get('HOME') or os.path.expanduser('~')
    if not home or home == '~':
        return '.'
    return home


@click.command()
@click.version_option(version=sandworm.__version__, prog_name='sandworm')
@click.argument('path', required=False, type=click.Path(file_okay=True, dir_okay=True))
@click.option('--min-whitespace', '-n', type=click.IntRange(min=1),
              default=DEFAULT_MIN_WHITESPACE, show_default=True,
              help='Minimum consecutive whitespace characters to flag.')
@click.option('--verbose', '-v', is_flag=True, help='Show line preview for each finding.')
@click.option('--max-size', type=click.IntRange(min=0), default=DEFAULT_MAX_SIZE,
              show_default=True, help='Skip files larger than this many bytes.')
@click.option('--workers', '-w', type=click.IntRange(min=1), default=None,
              help='Number of parallel workers (default: CPU count).')
@click.option('--sort/--no-sort', 'sort_by_path', default=True, show_default=True,
              help='Report files in path order, or in scan completion order.')
@click.option('--json-out', type=click.Path(dir_okay=False),
              help='Also write results as JSON to this file.')
@click.option('--log', 'log_path', type=click.Path(dir_okay=False),
              help='Write a timestamped log to this file.')
@click.option('--fail-on-findings', is_flag=True,
              help='Exit with status 1 if any finding is reported.')
@click.option('--color/--no-color', default=None,
              help='Force colored output on or off (default: auto).')
def main(path, min_whitespace, verbose, max_size, workers, sort_by_path,
         json_out, log_path, fail_on_findings, color):
    """Scan PATH for files with long runs of whitespace characters.

    Long space/tab runs are how the Shai-Hulud attack hides payloads past
    the visible edge of a source line. PATH defaults to your home
    directory. Dependency, build and cache directories (node_modules,
    .git, dist, ...) are skipped; hidden and git-ignored files are not.
    """
    if color is not None:
        log.set_color_enabled(color)

    config = ScanConfig(
        root=path or default_root(),
        min_whitespace=min_whitespace,
        max_size=max_size,
        verbose=verbose,
        workers=workers or default_workers(),
        sort_by_path=sort_by_path,
    )

    log_file = None
    if log_path:
        try:
            log_file = open(log_path, 'w', encoding='utf-8')
        except OSError as e:
            log.echo(log.cli_error(f'Error: cannot open log file {log_path}: {e}'), err=True)
            sys.exit(1)

    def log_msg(line):
        if log_file:
            log_file.write(line + '\n')
            log_file.flush()

    def on_collected(paths):
        log.echo(log.cli_info(f'Found {len(paths)} files to scan'), err=True)
        log_msg(log.log_info(f'Found {len(paths)} files to scan'))

    log.echo(log.cli_info(
        f'Scanning {config.root} for files with {config.min_whitespace}+ '
        f'consecutive whitespace chars...'), err=True)
    log_msg(log.log_info(f'sandworm v{sandworm.__version__} scanning {config.root} '
                         f'(min whitespace {config.min_whitespace}, '
                         f'{config.workers} workers)'))

    try:
        report = run_scan(config, collected_callback=on_collected)
    except WalkError as e:
        log.echo(log.cli_error(f'Error: {e}'), err=True)
        log_msg(log.log_error(str(e)))
        if log_file:
            log_file.close()
        sys.exit(1)

    print_report(report, verbose=config.verbose)

    for finding in report.findings:
        log_msg(log.log_warn(f'{finding.path}:{finding.line_num}: '
                             f'{finding.ws_count} whitespace chars'))
    log_msg(log.log_info(f'{len(affected_files(report.findings))} file(s) with findings'))
    log_msg(log.log_info(summary_message(report)))

    if json_out:
        try:
            write_json_report(report, Path(json_out))
        except OSError as e:
            log.echo(log.cli_error(f'Error: cannot write {json_out}: {e}'), err=True)
            log_msg(log.log_error(f'cannot write {json_out}: {e}'))
            if log_file:
                log_file.close()
            sys.exit(1)
        log.echo(log.cli_info(f'Results written to {json_out}'), err=True)

    if log_file:
        log_file.close()

    if fail_on_findings and not report.is_clean:
        sys.exit(1)


if __name__ == '__main__':
    main()
