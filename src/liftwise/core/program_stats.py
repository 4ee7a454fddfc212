"""
Whole-program statistics: strength gains and completion figures.
"""

from datetime import datetime
from typing import Iterable, Sequence

from .config import MOST_IMPROVED_LIMIT
from .metrics import mean, percent_gain, round_half_up
from .models import (
    ProgramInfo,
    ProgramStatistics,
    ProgressionHistoryEntry,
    StrengthGain,
    VolumeSample,
)


def strength_gains(history: Iterable[ProgressionHistoryEntry]) -> list[StrengthGain]:
    """
    First vs latest prescribed weight per exercise.

    Entries are taken in chronological order. Exercises whose first weight
    is 0 (bodyweight) and those without a positive gain are dropped.

    Args:
        history: Progression history across exercises

    Returns:
        One StrengthGain per improving exercise, in first-seen order
    """
    first: dict[str, float] = {}
    latest: dict[str, float] = {}
    for entry in sorted(history, key=lambda e: e.created_at):
        first.setdefault(entry.exercise_name, entry.new_weight)
        latest[entry.exercise_name] = entry.new_weight

    gains: list[StrengthGain] = []
    for name, first_weight in first.items():
        if first_weight <= 0:
            continue
        gain = percent_gain(first_weight, latest[name])
        if gain > 0:
            gains.append(
                StrengthGain(
                    exercise=name,
                    first_weight=first_weight,
                    latest_weight=latest[name],
                    percent_gain=gain,
                )
            )
    return gains


def program_statistics(
    program: ProgramInfo,
    completion_times: Sequence[datetime],
    history: Iterable[ProgressionHistoryEntry],
    samples: Iterable[VolumeSample],
) -> ProgramStatistics:
    """
    Summarise a program.

    days_active            distinct calendar days with a completion
    completion_percentage  round(completions / planned workouts × 100)
    average_percent_gain   mean strength gain, 2 decimals
    most_improved          top 5 strength gains

    Args:
        program: Program metadata
        completion_times: Workout completion timestamps
        history: Progression history for the program
        samples: Completed exercises for the program

    Returns:
        ProgramStatistics
    """
    days_active = len({t.date() for t in completion_times})

    if program.total_workouts > 0:
        completion_percentage = int(
            round_half_up(len(completion_times) / program.total_workouts * 100)
        )
    else:
        completion_percentage = 0

    gains = strength_gains(history)
    total_volume = sum(s.volume for s in samples)
    most_improved = sorted(gains, key=lambda g: g.percent_gain, reverse=True)[:MOST_IMPROVED_LIMIT]

    return ProgramStatistics(
        program=program,
        days_active=days_active,
        completion_percentage=completion_percentage,
        strength_gains=gains,
        average_percent_gain=round_half_up(mean([g.percent_gain for g in gains]), 2),
        total_volume=int(round_half_up(total_volume)),
        most_improved=most_improved,
    )
