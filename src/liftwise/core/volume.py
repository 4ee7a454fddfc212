"""
Training volume aggregation.

volume = sets × reps × weight per completed exercise, reduced four ways
over the same samples. A sample tagged with several muscle groups adds its
full volume to each of them, so the muscle-group breakdown measures
stimulus per muscle and may sum to more than total_volume.
"""

from typing import Iterable

from .models import (
    DateVolume,
    ExerciseVolume,
    MuscleGroupVolume,
    VolumeSample,
    VolumeStats,
    WeeklyVolume,
)
from .weeks import iso_week_number, sunday_week_start


def volume_by_date(samples: Iterable[VolumeSample]) -> list[DateVolume]:
    """Volume per calendar day, ascending by ISO date string."""
    totals: dict[str, float] = {}
    for s in samples:
        key = s.completed_at.date().isoformat()
        totals[key] = totals.get(key, 0.0) + s.volume
    return [DateVolume(date=d, volume=v) for d, v in sorted(totals.items())]


def volume_by_muscle_group(samples: Iterable[VolumeSample]) -> list[MuscleGroupVolume]:
    """Volume per muscle group, largest first; each tag gets the full sample volume."""
    totals: dict[str, float] = {}
    for s in samples:
        for group in sorted(s.muscle_groups):
            totals[group] = totals.get(group, 0.0) + s.volume
    ranked = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)
    return [MuscleGroupVolume(muscle_group=g, volume=v) for g, v in ranked]


def volume_by_exercise(samples: Iterable[VolumeSample]) -> list[ExerciseVolume]:
    """Volume per exact exercise name, largest first."""
    totals: dict[str, float] = {}
    for s in samples:
        totals[s.exercise_name] = totals.get(s.exercise_name, 0.0) + s.volume
    ranked = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)
    return [ExerciseVolume(exercise=name, volume=v) for name, v in ranked]


def weekly_volume(samples: Iterable[VolumeSample]) -> list[WeeklyVolume]:
    """
    Volume per ISO week number, ascending.

    week_start is the Sunday of the first sample seen for that week number.
    """
    weeks: dict[int, WeeklyVolume] = {}
    for s in samples:
        number = iso_week_number(s.completed_at)
        if number not in weeks:
            weeks[number] = WeeklyVolume(
                week_start=sunday_week_start(s.completed_at),
                volume=0.0,
                week_number=number,
            )
        weeks[number].volume += s.volume
    return sorted(weeks.values(), key=lambda w: w.week_number)


def aggregate_volume(samples: Iterable[VolumeSample]) -> VolumeStats:
    """
    Compute every volume breakdown for a set of completed exercises.

    Invariant: total_volume == sum(volume_by_date) == sum(volume_by_exercise).

    Args:
        samples: Completed exercises (already filtered by the caller)

    Returns:
        VolumeStats
    """
    items = list(samples)
    return VolumeStats(
        volume_by_date=volume_by_date(items),
        volume_by_muscle_group=volume_by_muscle_group(items),
        volume_by_exercise=volume_by_exercise(items),
        weekly_data=weekly_volume(items),
        total_volume=sum(s.volume for s in items),
        workout_days=len({s.completed_at.date() for s in items}),
    )
