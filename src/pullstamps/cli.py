"""
Command-line interface for pullstamps.

Main entry point for the raid-log to video-chapter converter.
"""

import sys
from pathlib import Path
from typing import Optional, Sequence

import click
from tqdm import tqdm

from . import __version__
from .parser import STRATEGIES, LogTextParser
from .remote import DEFAULT_TIMEOUT, WarcraftLogsClient
from .session import ConverterSession
from .utils import PullstampsError, get_logger, setup_logging

logger = get_logger(__name__)


@click.command()
@click.version_option(version=__version__, prog_name="pullstamps")
@click.argument("start_time")
@click.argument(
    "log_path",
    required=False,
    type=click.Path(exists=True, dir_okay=False, allow_dash=True),
)
@click.option(
    "-u",
    "--url",
    "report_url",
    help="Warcraftlogs report URL to import pulls from",
)
@click.option(
    "--api-key",
    type=str,
    envvar="WCL_API_KEY",
    help="Warcraftlogs v1 API key (or set WCL_API_KEY env var)",
)
@click.option(
    "--timeout",
    default=DEFAULT_TIMEOUT,
    type=float,
    help="Report request timeout in seconds. Default: 30",
)
@click.option(
    "-s",
    "--strategy",
    default="structured",
    type=click.Choice(STRATEGIES),
    help="How to read pasted log text. Default: structured",
)
@click.option(
    "-x",
    "--exclude",
    multiple=True,
    type=int,
    help="Pull position (1-based) to drop before generating; repeatable",
)
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(dir_okay=False),
    help="Write timestamps to this file instead of stdout",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose logging",
)
@click.option(
    "--log-file",
    type=click.Path(),
    help="Optional log file path",
)
def main(
    start_time,
    log_path,
    report_url,
    api_key,
    timeout,
    strategy,
    exclude,
    output_path,
    verbose,
    log_file,
):
    """
    pullstamps - Raid log pulls to video chapter timestamps

    Convert pull times from Warcraftlogs into offsets from the moment your
    recording started, ready to paste into a video description.

    \b
    Arguments:
        START_TIME: Real time the recording started (7:30, 19:30 or 19:30:00).
                    Hours before 12 without seconds are read as PM.
        LOG_PATH:   Text copied from a Warcraftlogs report ("-" for stdin)

    \b
    Example:
        pullstamps 19:30 pulls.txt
        pullstamps 7:30 --url https://www.warcraftlogs.com/reports/AbC123 -o chapters.txt
    """
    setup_logging(verbose=verbose, log_file=log_file)

    if not log_path and not report_url:
        raise click.UsageError("Provide LOG_PATH or --url to import pulls from.")

    try:
        result = run_pipeline(
            start_time=start_time,
            log_path=log_path,
            report_url=report_url,
            api_key=api_key,
            timeout=timeout,
            strategy=strategy,
            exclude=exclude,
            output_path=output_path,
        )

        if output_path:
            display_summary(result, output_path)
            click.echo(f"\n✅ Success! Timestamps saved to: {output_path}\n", err=True)
        else:
            click.echo(result["text"])
        sys.exit(0)

    except PullstampsError as e:
        click.echo(f"\n❌ Error: {e}\n", err=True)
        logger.error(f"Conversion failed: {e}", exc_info=True)
        sys.exit(1)

    except KeyboardInterrupt:
        click.echo("\n\n⚠️  Interrupted by user\n", err=True)
        sys.exit(130)

    except Exception as e:
        click.echo(f"\n❌ Unexpected error: {e}\n", err=True)
        logger.error(f"Unexpected error: {e}", exc_info=True)
        sys.exit(1)


def run_pipeline(
    start_time: str,
    log_path: Optional[str],
    report_url: Optional[str],
    api_key: Optional[str],
    timeout: float,
    strategy: str,
    exclude: Sequence[int] = (),
    output_path: Optional[str] = None,
) -> dict:
    """
    Import pulls, drop excluded ones and generate timestamps.

    Args:
        start_time: Recording start time as typed
        log_path: Pasted log text file, "-" for stdin, or None
        report_url: Report URL, or None
        api_key: Warcraftlogs API key
        timeout: Request timeout in seconds
        strategy: Parse strategy for pasted text
        exclude: 1-based positions of pulls to drop
        output_path: Optional output file

    Returns:
        Dictionary with pipeline results and statistics
    """
    results = {}
    session = ConverterSession(reference_time=start_time)

    with tqdm(total=3, desc="Pipeline Progress", unit="phase", leave=False) as pbar:
        pbar.set_description("Importing pulls")

        if log_path:
            parser = LogTextParser(strategy=strategy)
            text = parser.load_text(log_path)
            results["pasted"] = session.import_text(text, strategy=strategy)

        if report_url:
            client = WarcraftLogsClient(api_key=api_key, timeout=timeout)
            results["remote"] = session.import_report(report_url, client)
            results["report_date"] = session.report_date

        pbar.update(1)

        pbar.set_description("Editing pulls")
        results["excluded"] = exclude_entries(session, exclude)
        pbar.update(1)

        pbar.set_description("Generating")
        text = session.generate(output_path=output_path)
        pbar.update(1)

    results["text"] = text
    results["entries"] = len(session.entries)
    return results


def exclude_entries(session: ConverterSession, positions: Sequence[int]) -> int:
    """
    Remove pulls by their 1-based position in the imported list.

    Positions refer to the list before any removal.
    """
    targets = []
    for position in positions:
        if 1 <= position <= len(session.entries):
            targets.append(session.entries[position - 1].id)
        else:
            click.echo(f"⚠️  Warning: no pull at position {position}, ignoring", err=True)

    return sum(1 for entry_id in set(targets) if session.remove_entry(entry_id))


def display_summary(results: dict, output_path: str):
    """
    Display conversion summary statistics.

    Args:
        results: Pipeline results dictionary
        output_path: Output file path
    """
    click.echo(f"\n{'='*60}", err=True)
    click.echo("Summary", err=True)
    click.echo(f"{'='*60}", err=True)

    if "pasted" in results:
        click.echo(f"Pasted text:   {results['pasted']} pulls", err=True)

    if "remote" in results:
        report_date = results.get("report_date")
        date_text = f" ({report_date:%Y-%m-%d})" if report_date else ""
        click.echo(f"Report:        {results['remote']} pulls{date_text}", err=True)

    if results.get("excluded"):
        click.echo(f"Excluded:      {results['excluded']} pulls", err=True)

    click.echo(f"Output:        {results['entries']} timestamps", err=True)
    click.echo(f"File:          {Path(output_path).resolve()}", err=True)
    click.echo(f"{'='*60}", err=True)


if __name__ == "__main__":
    main()
