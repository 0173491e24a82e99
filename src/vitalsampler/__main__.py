"""
Command-line interface for vitalsampler.
Loads a table of device measurements, samples it onto a fixed grid,
and prints or writes the sampled series.
"""

import logging
import sys
import typing

import click
from stairval.notepad import create_notepad

from .errors import InvalidArgument
from .loader import load_measurements, parse_instant
from .sampler import DEFAULT_INTERVAL_MINUTES, MeasurementSampler
from .writer import flatten, sample_set_to_json, write_sample_set

logger = logging.getLogger(__name__)

INTERVAL_ENVVAR = "VITALSAMPLER_INTERVAL_MINUTES"

input_path_option = click.option(
    "-i",
    "--input-path",
    "input_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="path to a CSV file or Excel workbook with time, value and kind columns",
)
start_option = click.option(
    "-s",
    "--start",
    "start",
    required=True,
    type=str,
    help="start of sampling as ISO-8601 (e.g. 2017-01-03T10:00:00Z)",
)
interval_option = click.option(
    "-n",
    "--interval",
    "interval_minutes",
    default=DEFAULT_INTERVAL_MINUTES,
    show_default=True,
    type=int,
    envvar=INTERVAL_ENVVAR,
    help=f"grid interval in minutes (env: {INTERVAL_ENVVAR})",
)


@click.group()
def main():
    """vitalsampler: sample medical device measurements onto a fixed time grid."""
    pass


@main.command(name="sample")
@input_path_option
@start_option
@interval_option
@click.option(
    "-o",
    "--output-path",
    "output_path",
    type=click.Path(dir_okay=False, writable=True),
    help="write the sampled series to this .csv or .xlsx file instead of stdout",
)
@click.option("-r", "--raw-json", is_flag=True, help="print the sampled series as JSON")
@click.option("--verbose-logging", is_flag=True, help="Also emit debug logs to stderr")
@click.option(
    "--log-file-path",
    type=click.Path(dir_okay=False, writable=True),
    help="Append timestamped logs to this file",
)
def sample(
    input_path: str,
    start: str,
    interval_minutes: int,
    output_path: typing.Optional[str] = None,
    raw_json: bool = False,
    verbose_logging: bool = False,
    log_file_path: typing.Optional[str] = None,
):
    """
    Read the measurement table, then:
      - drop rows that cannot be mapped (reported below)
      - sample every measurement kind onto the grid
      - print the series, or write them to --output-path
    """
    _configure_logging(verbose_logging, log_file_path)

    # 1) Build the sampler and parse the start instant
    sampler = _make_sampler(interval_minutes)
    start_of_sampling = _parse_start(start)

    # 2) Load the measurements and collect issues
    notepad = create_notepad("measurements")
    try:
        measurements = load_measurements(input_path, notepad)
    except InvalidArgument as e:
        _fail(str(e))

    # 3) Report any errors or warnings
    _report_issues(notepad)

    # 4) Sample
    logger.info(
        f"Sampling {len(measurements)} measurements from {start_of_sampling.isoformat()} "
        f"every {sampler.interval_minutes} min"
    )
    sample_set = sampler.sample(start_of_sampling, measurements)

    # 5) Output
    if output_path:
        try:
            written = write_sample_set(sample_set, output_path)
        except InvalidArgument as e:
            _fail(str(e))
        click.echo(f"Wrote sampled series to {written}")
    elif raw_json:
        click.echo(sample_set_to_json(sample_set))
        return
    else:
        _echo_table(sample_set)

    # 6) Final summary
    click.echo(
        f"Sampled {len(measurements)} measurements into {len(sample_set)} series"
    )


@main.command(name="grid")
@input_path_option
@start_option
@interval_option
def grid(input_path: str, start: str, interval_minutes: int):
    """
    Print the grid the measurements in the table would be sampled onto.
    """
    sampler = _make_sampler(interval_minutes)
    start_of_sampling = _parse_start(start)

    notepad = create_notepad("measurements")
    try:
        measurements = load_measurements(input_path, notepad)
    except InvalidArgument as e:
        _fail(str(e))
    _report_issues(notepad)

    grid_times = sampler.build_grid(start_of_sampling, [m.time for m in measurements])
    if not grid_times:
        click.echo("Empty grid")
        return
    for grid_time in grid_times:
        click.echo(grid_time.isoformat())


def _configure_logging(verbose_logging: bool, log_file_path: typing.Optional[str]) -> None:
    handlers: list[logging.Handler] = []
    if log_file_path:
        handlers.append(logging.FileHandler(log_file_path, mode="a", encoding="utf-8"))
    if verbose_logging:
        handlers.append(logging.StreamHandler(sys.stderr))
    if handlers:
        logging.basicConfig(
            level=logging.DEBUG if verbose_logging else logging.INFO,
            format="%(asctime)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            handlers=handlers,
            force=True,
        )


def _make_sampler(interval_minutes: int) -> MeasurementSampler:
    try:
        return MeasurementSampler(interval_minutes)
    except InvalidArgument as e:
        _fail(str(e))


def _parse_start(start: str):
    try:
        return parse_instant(start)
    except InvalidArgument as e:
        _fail(f"invalid --start: {e}")


def _fail(message: str) -> typing.NoReturn:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _report_issues(notepad):
    # if there were errors, show them
    if notepad.has_errors(include_subsections=True):
        click.echo("Errors found in measurements:")
        for err in notepad.errors():
            click.echo(f"- {err.message}")
    # show any warnings but keep going
    if notepad.has_warnings(include_subsections=True):
        click.echo("Warnings found in measurements:")
        for w in notepad.warnings():
            click.echo(f"- {w.message}")


def _echo_table(sample_set) -> None:
    click.echo(f"{'TIME':26}  {'KIND':10}  VALUE")
    for measurement in flatten(sample_set):
        click.echo(
            f"{measurement.time.isoformat():26}  "
            f"{measurement.kind.name.lower():10}  {measurement.value}"
        )


if __name__ == "__main__":
    main()
