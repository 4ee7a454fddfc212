"""Analytics commands: frequency, volume, stats."""

import json
import logging
from dataclasses import asdict, replace
from datetime import datetime

import typer

from ...core.program_stats import program_statistics
from ...core.streaks import compute_frequency_stats
from ...core.volume import aggregate_volume
from ...io.serializers import ValidationError, program_to_dict
from .. import views
from ..app import (
    DataDirOption,
    EndOption,
    IncludeBadDaysOption,
    JsonOption,
    StartOption,
    TimeFrameOption,
    app,
    get_store,
    resolve_date_range,
)

logger = logging.getLogger(__name__)


def _jsonable(data):
    """Convert dates inside asdict() output to ISO strings."""
    if isinstance(data, dict):
        return {k: _jsonable(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [_jsonable(v) for v in data]
    if hasattr(data, "isoformat"):
        return data.isoformat()
    return data


@app.command()
def frequency(
    timeframe: TimeFrameOption = "program",
    start: StartOption = None,
    end: EndOption = None,
    include_bad_days: IncludeBadDaysOption = False,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show workout streaks, consistency and weekly frequency.
    """
    store = get_store(data_dir)

    try:
        program = store.load_program()
        date_range = resolve_date_range(timeframe, program, start, end)
        events = store.load_completions(date_range, exclude_bad_days=not include_bad_days)
        bad_days = store.bad_day_count(date_range)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    now = datetime.now()
    if include_bad_days:
        # bad days are already part of events; report them without adding them twice
        stats = replace(
            compute_frequency_stats(events, program.expected_per_week, program.start_date, now),
            bad_day_count=bad_days,
        )
    else:
        stats = compute_frequency_stats(
            events, program.expected_per_week, program.start_date, now, bad_day_count=bad_days
        )
    logger.debug(
        "Calculated frequency data: %d workouts, streak %d, consistency %d%%",
        stats.total_workouts, stats.current_streak, stats.consistency,
    )

    if json_out:
        print(json.dumps(_jsonable(asdict(stats)), indent=2))
        return

    views.print_frequency(stats)


@app.command()
def volume(
    timeframe: TimeFrameOption = "program",
    start: StartOption = None,
    end: EndOption = None,
    include_bad_days: IncludeBadDaysOption = False,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show training volume by date, week, muscle group and exercise.
    """
    store = get_store(data_dir)

    try:
        program = store.load_program()
        date_range = resolve_date_range(timeframe, program, start, end)
        records = store.load_exercises(date_range, exclude_bad_days=not include_bad_days)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    stats = aggregate_volume(r.to_volume_sample() for r in records)
    logger.debug(
        "Calculated volume data: %d exercises, %d days, total %.1f kg",
        len(records), stats.workout_days, stats.total_volume,
    )

    if json_out:
        print(json.dumps(_jsonable(asdict(stats)), indent=2))
        return

    views.print_volume(stats)


@app.command()
def stats(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show whole-program statistics and the most improved exercises.
    """
    store = get_store(data_dir)

    try:
        program = store.load_program()
        completions = store.load_completions(exclude_bad_days=False)
        entries = store.load_progressions()
        records = store.load_exercises(exclude_bad_days=False)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    result = program_statistics(
        program,
        [c.timestamp for c in completions],
        entries,
        [r.to_volume_sample() for r in records],
    )

    if json_out:
        data = _jsonable(asdict(result))
        data["program"] = program_to_dict(program)
        print(json.dumps(data, indent=2))
        return

    views.print_program_statistics(result)
