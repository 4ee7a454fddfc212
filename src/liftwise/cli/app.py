"""Shared Typer app object, shared option types, and store utilities."""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.models import ProgramInfo
from ..core.timeframe import date_range_for_timeframe
from ..io.history_store import HistoryStore, get_default_store
from ..io.serializers import ValidationError, parse_date, validate_timeframe

# Shared --data-dir option type used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-d", help="Program data directory (default: $LIFTWISE_HOME or ~/.liftwise)"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

TimeFrameOption = Annotated[
    str,
    typer.Option("--timeframe", "-t", help="week, month, program, all, or custom"),
]

StartOption = Annotated[
    Optional[str],
    typer.Option("--start", help="Custom range start (YYYY-MM-DD)"),
]

EndOption = Annotated[
    Optional[str],
    typer.Option("--end", help="Custom range end (YYYY-MM-DD)"),
]

IncludeBadDaysOption = Annotated[
    bool,
    typer.Option("--include-bad-days", help="Count workouts logged on bad days"),
]

app = typer.Typer(
    name="liftwise",
    help="Rating-based progression and training analytics for strength programs.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """
    Progression and analytics for a strength training program.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def get_store(data_dir: Path | None) -> HistoryStore:
    """Get history store from path or default location."""
    if data_dir is None:
        return get_default_store()
    return HistoryStore(data_dir)


def today() -> date:
    """Local calendar date used as the reference for time frames."""
    return datetime.now().date()


def resolve_date_range(
    timeframe: str,
    program: ProgramInfo,
    start: str | None = None,
    end: str | None = None,
    reference: date | None = None,
) -> tuple[date, date] | None:
    """
    Turn the time-frame options into an inclusive date range.

    "custom" requires --start; --end defaults to today.

    Raises:
        ValidationError: If the options are invalid
    """
    tf = validate_timeframe(timeframe)
    reference = reference or today()

    if tf == "custom":
        if start is None:
            raise ValidationError("--start is required with --timeframe custom")
        start_date = parse_date(start)
        end_date = parse_date(end) if end is not None else reference
        if end_date < start_date:
            raise ValidationError(f"--end ({end_date}) is before --start ({start_date})")
        return start_date, end_date

    if start is not None or end is not None:
        raise ValidationError("--start/--end can only be used with --timeframe custom")
    return date_range_for_timeframe(tf, program.start_date, reference)
