"""
JSON serialization and boundary validation for liftwise records.

Handles conversion between dataclasses and JSON-compatible dicts, and the
input checks the engine itself does not perform.
"""

import json
import re
from datetime import date, datetime
from typing import Any

from ..core.config import MAX_INCREMENT_KG
from ..core.models import (
    Baseline,
    CompletedExercise,
    CompletionEvent,
    Equipment,
    EquipmentIncrementSettings,
    Goal,
    ProgramInfo,
    ProgressionHistoryEntry,
)
from ..core.timeframe import TIME_FRAMES, TimeFrame


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> str:
    """
    Validate and normalize date string to ISO format.

    Args:
        date_str: Date string to validate

    Returns:
        Normalized YYYY-MM-DD string

    Raises:
        ValidationError: If date format is invalid
    """
    if not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e

    return date_str


def parse_date(date_str: str) -> date:
    """Validate and parse a YYYY-MM-DD string."""
    return datetime.strptime(validate_date(date_str), "%Y-%m-%d").date()


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp, or a bare date (taken as midnight).

    Stored timestamps are naive local time; a value with a UTC offset is
    converted to local time and the offset dropped.

    Raises:
        ValidationError: If the value is not ISO 8601
    """
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid timestamp: {value!r}. Expected ISO 8601") from e
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is positive.

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def validate_rating(rating: int) -> int:
    """
    Validate a difficulty rating.

    The progression calculator treats anything outside 1–5 as "no change";
    the boundary rejects it instead so typos are not silently ignored.

    Raises:
        ValidationError: If rating is not an integer in 1..5
    """
    if not isinstance(rating, int) or isinstance(rating, bool) or not 1 <= rating <= 5:
        raise ValidationError(f"rating must be an integer from 1 to 5, got {rating!r}")
    return rating


def validate_equipment(equipment: str) -> Equipment:
    """
    Validate an equipment type (case-insensitive).

    Raises:
        ValidationError: If equipment is unknown
    """
    try:
        return Equipment(str(equipment).upper())
    except ValueError as e:
        valid = ", ".join(m.value for m in Equipment)
        raise ValidationError(f"Invalid equipment: {equipment}. Must be one of {valid}") from e


def validate_goal(goal: str) -> Goal:
    """
    Validate a program goal (case-insensitive).

    Raises:
        ValidationError: If goal is unknown
    """
    try:
        return Goal(str(goal).upper())
    except ValueError as e:
        raise ValidationError(f"Invalid goal: {goal}. Must be STRENGTH or HYPERTROPHY") from e


def validate_timeframe(timeframe: str) -> TimeFrame:
    """
    Validate a stats time frame.

    Raises:
        ValidationError: If timeframe is unknown
    """
    if timeframe not in TIME_FRAMES:
        raise ValidationError(f"Invalid timeframe: {timeframe}. Must be one of {TIME_FRAMES}")
    return timeframe  # type: ignore


def validate_increment(value: float, name: str) -> float:
    """
    Validate a user weight increment: 0 < value ≤ 100 kg.

    Raises:
        ValidationError: If out of range
    """
    validate_positive(value, name)
    if value > MAX_INCREMENT_KG:
        raise ValidationError(f"{name} must be at most {MAX_INCREMENT_KG:g} kg, got {value}")
    return float(value)


def validate_increment_settings(settings: EquipmentIncrementSettings) -> EquipmentIncrementSettings:
    """Validate every increment of a settings object."""
    for name in ("barbell", "dumbbell", "cable", "machine"):
        validate_increment(getattr(settings, name), f"{name} increment")
    return settings


# ---------------------------------------------------------------------------
# Completed exercises
# ---------------------------------------------------------------------------


def completed_exercise_to_dict(record: CompletedExercise) -> dict[str, Any]:
    """
    Convert CompletedExercise to JSON-compatible dict.

    Args:
        record: Completed exercise

    Returns:
        Dict representation
    """
    return {
        "exercise": record.exercise_name,
        "sets": record.sets,
        "reps": record.reps,
        "weight": record.weight,
        "rating": record.rating,
        "equipment": record.equipment_type.value,
        "is_compound": record.is_compound,
        "muscle_groups": list(record.muscle_groups),
        "completed_at": record.completed_at.isoformat(),
        "is_bad_day": record.is_bad_day,
    }


def dict_to_completed_exercise(data: dict[str, Any]) -> CompletedExercise:
    """
    Convert dict to CompletedExercise.

    Args:
        data: Dict representation

    Returns:
        CompletedExercise instance

    Raises:
        ValidationError: If data is invalid
    """
    try:
        name = data["exercise"]
        sets = int(data["sets"])
        reps = int(data["reps"])
        weight = float(data.get("weight", 0.0))
        rating = int(data["rating"])
        completed_at = parse_timestamp(data["completed_at"])
        equipment = data["equipment"]
    except KeyError as e:
        raise ValidationError(f"Missing field: {e.args[0]}") from e
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid completed exercise: {e}") from e

    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"Invalid exercise name: {name!r}")
    validate_positive(sets, "sets")
    validate_positive(reps, "reps")
    validate_non_negative(weight, "weight")
    validate_rating(rating)
    muscle_groups = data.get("muscle_groups", [])
    if not isinstance(muscle_groups, list):
        raise ValidationError(f"muscle_groups must be a list, got {muscle_groups!r}")

    return CompletedExercise(
        exercise_name=name,
        sets=sets,
        reps=reps,
        weight=weight,
        rating=rating,
        equipment_type=validate_equipment(equipment),
        is_compound=bool(data.get("is_compound", False)),
        completed_at=completed_at,
        muscle_groups=[str(g) for g in muscle_groups],
        is_bad_day=bool(data.get("is_bad_day", False)),
    )


# ---------------------------------------------------------------------------
# Workout completions
# ---------------------------------------------------------------------------


def completion_to_dict(event: CompletionEvent) -> dict[str, Any]:
    """Convert CompletionEvent to JSON-compatible dict."""
    return {
        "timestamp": event.timestamp.isoformat(),
        "is_bad_day": event.is_bad_day,
    }


def dict_to_completion(data: dict[str, Any]) -> CompletionEvent:
    """
    Convert dict to CompletionEvent.

    Raises:
        ValidationError: If data is invalid
    """
    if "timestamp" not in data:
        raise ValidationError("Missing field: timestamp")
    return CompletionEvent(
        timestamp=parse_timestamp(data["timestamp"]),
        is_bad_day=bool(data.get("is_bad_day", False)),
    )


# ---------------------------------------------------------------------------
# Progression history
# ---------------------------------------------------------------------------


def progression_entry_to_dict(entry: ProgressionHistoryEntry) -> dict[str, Any]:
    """Convert ProgressionHistoryEntry to JSON-compatible dict."""
    return {
        "exercise": entry.exercise_name,
        "old_weight": entry.old_weight,
        "new_weight": entry.new_weight,
        "old_reps": entry.old_reps,
        "new_reps": entry.new_reps,
        "created_at": entry.created_at.isoformat(),
        "reason": entry.reason,
    }


def dict_to_progression_entry(data: dict[str, Any]) -> ProgressionHistoryEntry:
    """
    Convert dict to ProgressionHistoryEntry.

    Raises:
        ValidationError: If data is invalid
    """
    try:
        return ProgressionHistoryEntry(
            exercise_name=str(data["exercise"]),
            old_weight=float(data["old_weight"]),
            new_weight=float(data["new_weight"]),
            old_reps=int(data["old_reps"]),
            new_reps=int(data["new_reps"]),
            created_at=parse_timestamp(data["created_at"]),
            reason=str(data.get("reason", "Rating-based progression")),
        )
    except KeyError as e:
        raise ValidationError(f"Missing field: {e.args[0]}") from e
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid progression entry: {e}") from e


# ---------------------------------------------------------------------------
# Program and baselines
# ---------------------------------------------------------------------------


def program_to_dict(program: ProgramInfo) -> dict[str, Any]:
    """Convert ProgramInfo to JSON-compatible dict."""
    return {
        "name": program.name,
        "goal": program.goal.value,
        "start_date": program.start_date.isoformat(),
        "expected_per_week": program.expected_per_week,
        "total_workouts": program.total_workouts,
        "status": program.status,
    }


def dict_to_program(data: dict[str, Any]) -> ProgramInfo:
    """
    Convert dict to ProgramInfo.

    Raises:
        ValidationError: If data is invalid
    """
    try:
        expected = int(data["expected_per_week"])
        total = int(data.get("total_workouts", 0))
        start = parse_date(data["start_date"])
        name = str(data["name"])
        goal = validate_goal(data.get("goal", "HYPERTROPHY"))
    except KeyError as e:
        raise ValidationError(f"Missing field: {e.args[0]}") from e
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid program: {e}") from e

    validate_non_negative(expected, "expected_per_week")
    validate_non_negative(total, "total_workouts")

    try:
        return ProgramInfo(
            name=name,
            goal=goal,
            start_date=start,
            expected_per_week=expected,
            total_workouts=total,
            status=data.get("status", "ACTIVE"),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def baseline_to_dict(baseline: Baseline) -> dict[str, Any]:
    """Convert Baseline to JSON-compatible dict."""
    return {"sets": baseline.sets, "reps": baseline.reps, "weight": baseline.weight}


def dict_to_baseline(data: dict[str, Any]) -> Baseline:
    """
    Convert dict to Baseline.

    Raises:
        ValidationError: If data is invalid
    """
    try:
        return Baseline(
            sets=int(data["sets"]),
            reps=int(data["reps"]),
            weight=float(data["weight"]),
        )
    except KeyError as e:
        raise ValidationError(f"Missing field: {e.args[0]}") from e
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid baseline: {e}") from e


def to_json_line(data: dict[str, Any]) -> str:
    """Serialize a record dict to one compact JSON line."""
    return json.dumps(data, separators=(",", ":"))
