"""Workout commands: complete."""

import json
import logging
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.models import CompletionEvent
from ...io.serializers import ValidationError, completion_to_dict, parse_timestamp
from .. import views
from ..app import DataDirOption, JsonOption, app, get_store

logger = logging.getLogger(__name__)


@app.command()
def complete(
    when: Annotated[
        Optional[str],
        typer.Option("--date", help="Completion time, YYYY-MM-DD or ISO 8601 (default: now)"),
    ] = None,
    bad_day: Annotated[
        bool,
        typer.Option("--bad-day", help="Mark the workout as a bad day"),
    ] = False,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Record a completed workout for frequency tracking.

    Bad-day workouts are stored but left out of streaks and consistency
    unless --include-bad-days is passed to the stats commands.
    """
    store = get_store(data_dir)

    try:
        store.load_program()
        timestamp = parse_timestamp(when) if when else datetime.now()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    event = CompletionEvent(timestamp=timestamp, is_bad_day=bad_day)
    store.append_completion(event)
    logger.debug("Recorded workout completion at %s (bad day: %s)", timestamp, bad_day)

    if json_out:
        print(json.dumps(completion_to_dict(event), indent=2))
        return

    suffix = " (bad day)" if bad_day else ""
    views.print_success(f"Workout completed on {timestamp.date().isoformat()}{suffix}.")
