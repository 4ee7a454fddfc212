"""Progression commands: rate, preview, history."""

import json
import logging
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.engine.config_loader import load_increment_settings
from ...core.models import (
    Baseline,
    CompletedExercise,
    EquipmentIncrementSettings,
    PerformanceSample,
    ProgressionHistoryEntry,
    ProgressionResult,
)
from ...core.progression import compute_progression, summarize_progressions
from ...io.serializers import (
    ValidationError,
    baseline_to_dict,
    parse_timestamp,
    progression_entry_to_dict,
    validate_equipment,
    validate_non_negative,
    validate_positive,
    validate_rating,
)
from .. import views
from ..app import DataDirOption, JsonOption, app, get_store

logger = logging.getLogger(__name__)

ExerciseArgument = Annotated[str, typer.Argument(help="Exercise name, e.g. 'Bench Press'")]
SetsOption = Annotated[int, typer.Option("--sets", "-s", help="Sets performed")]
RepsOption = Annotated[int, typer.Option("--reps", "-r", help="Reps per set")]
WeightOption = Annotated[float, typer.Option("--weight", "-w", help="Load in kg (0 for bodyweight)")]
RatingOption = Annotated[int, typer.Option("--rating", "-R", help="Difficulty 1 (very easy) to 5 (too hard)")]
EquipmentOption = Annotated[
    str,
    typer.Option("--equipment", "-e", help="BARBELL, DUMBBELL, CABLE, MACHINE, or BODYWEIGHT"),
]
CompoundOption = Annotated[
    bool,
    typer.Option("--compound/--isolation", help="Multi-joint (compound) or single-joint exercise"),
]
AdaptiveOption = Annotated[
    Optional[bool],
    typer.Option("--adaptive/--fixed", help="Override the adaptive-increment setting"),
]


def _settings_for(store_dir, adaptive: bool | None) -> EquipmentIncrementSettings:
    settings = load_increment_settings(store_dir)
    if adaptive is None:
        return settings
    return EquipmentIncrementSettings(
        barbell=settings.barbell,
        dumbbell=settings.dumbbell,
        cable=settings.cable,
        machine=settings.machine,
        adaptive=adaptive,
    )


def _find_baseline(baselines: dict[str, Baseline], exercise: str) -> tuple[str, Baseline] | None:
    """Look up a stored target by exercise name (case-insensitive)."""
    wanted = exercise.lower()
    for name, baseline in baselines.items():
        if name.lower() == wanted:
            return name, baseline
    return None


def _progression_json(sample: PerformanceSample, result: ProgressionResult | None) -> dict:
    data = {
        "exercise": sample.exercise_name,
        "rating": sample.rating,
        "old_weight": sample.weight,
        "old_reps": sample.reps,
    }
    if result is None:
        data["progression"] = None
    else:
        data["progression"] = {
            "new_weight": result.new_weight,
            "new_reps": result.new_reps,
            "deload": result.deload,
        }
    return data


@app.command()
def rate(
    exercise: ExerciseArgument,
    sets: SetsOption,
    reps: RepsOption,
    rating: RatingOption,
    weight: WeightOption = 0.0,
    equipment: EquipmentOption = "BARBELL",
    compound: CompoundOption = True,
    muscle_groups: Annotated[
        Optional[list[str]],
        typer.Option("--muscle-group", "-m", help="Muscle group worked (repeatable)"),
    ] = None,
    when: Annotated[
        Optional[str],
        typer.Option("--date", help="Completion time, YYYY-MM-DD or ISO 8601 (default: now)"),
    ] = None,
    bad_day: Annotated[
        bool,
        typer.Option("--bad-day", help="Log the exercise without progressing it"),
    ] = False,
    adaptive: AdaptiveOption = None,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Record a rated exercise and apply the next progression.

    On a bad day the exercise is still recorded, but the target is left
    unchanged.
    """
    store = get_store(data_dir)

    try:
        program = store.load_program()
        validate_rating(rating)
        validate_positive(sets, "sets")
        validate_positive(reps, "reps")
        validate_non_negative(weight, "weight")
        equipment_type = validate_equipment(equipment)
        completed_at = parse_timestamp(when) if when else datetime.now()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    record = CompletedExercise(
        exercise_name=exercise,
        sets=sets,
        reps=reps,
        weight=weight,
        rating=rating,
        equipment_type=equipment_type,
        is_compound=compound,
        completed_at=completed_at,
        muscle_groups=list(muscle_groups or []),
        is_bad_day=bad_day,
    )
    store.append_exercise(record)
    sample = record.to_performance_sample()

    if bad_day:
        logger.debug("Skipping progression for %s on a bad day", exercise)
        if json_out:
            print(json.dumps(_progression_json(sample, None), indent=2))
            return
        views.print_info(f"Recorded {exercise} on a bad day; target unchanged.")
        return

    result = compute_progression(sample, program.goal, _settings_for(store.data_dir, adaptive))
    store.append_progression(
        ProgressionHistoryEntry(
            exercise_name=exercise,
            old_weight=weight,
            new_weight=result.new_weight,
            old_reps=reps,
            new_reps=result.new_reps,
            created_at=completed_at,
            reason=f"Rating-based progression ({rating}/5)",
        )
    )
    store.upsert_baseline(exercise, Baseline(sets=sets, reps=result.new_reps, weight=result.new_weight))
    logger.debug(
        "Progression for %s: %s kg x %d -> %s kg x %d",
        exercise, weight, reps, result.new_weight, result.new_reps,
    )

    if json_out:
        print(json.dumps(_progression_json(sample, result), indent=2))
        return

    views.print_progression(sample, result)


@app.command()
def preview(
    exercise: ExerciseArgument,
    sets: SetsOption,
    reps: RepsOption,
    rating: RatingOption,
    weight: WeightOption = 0.0,
    equipment: EquipmentOption = "BARBELL",
    compound: CompoundOption = True,
    adaptive: AdaptiveOption = None,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the next target for a rating without recording anything.
    """
    store = get_store(data_dir)

    try:
        program = store.load_program()
        validate_rating(rating)
        validate_positive(sets, "sets")
        validate_positive(reps, "reps")
        validate_non_negative(weight, "weight")
        equipment_type = validate_equipment(equipment)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    sample = PerformanceSample(
        sets=sets,
        reps=reps,
        weight=weight,
        rating=rating,
        equipment_type=equipment_type,
        is_compound=compound,
        exercise_name=exercise,
    )
    result = compute_progression(sample, program.goal, _settings_for(store.data_dir, adaptive))

    if json_out:
        print(json.dumps(_progression_json(sample, result), indent=2))
        return

    views.print_progression(sample, result)


@app.command()
def history(
    exercise: Annotated[
        Optional[str],
        typer.Option("--exercise", "-e", help="Only show this exercise"),
    ] = None,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show progression history and its summary.

    With --exercise, the current target stored for that exercise is shown too.
    """
    store = get_store(data_dir)

    try:
        entries = store.load_progressions(exercise_name=exercise)
        baseline = _find_baseline(store.load_baselines(), exercise) if exercise else None
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    summary = summarize_progressions(entries)

    if json_out:
        last = summary.last_progression_date
        data = {
            "entries": [progression_entry_to_dict(e) for e in entries],
            "summary": {
                "total_progressions": summary.total_progressions,
                "average_weight_increase": round(summary.average_weight_increase, 4),
                "average_reps_increase": round(summary.average_reps_increase, 4),
                "last_progression_date": last.isoformat() if last else None,
            },
        }
        if exercise:
            data["baseline"] = baseline_to_dict(baseline[1]) if baseline else None
        print(json.dumps(data, indent=2))
        return

    views.print_progression_history(entries, summary)
    if baseline:
        views.print_baseline(*baseline)
