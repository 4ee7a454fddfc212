"""
Progression calculator: next weight/reps target from a rated performance.

Each sample is first classified into one of three schemes, then the rating
is looked up in that scheme's table:

  BODYWEIGHT_REPS     pull-ups, chin-ups, dips, push-ups: load pinned at 0,
                      reps move, clamped to [MIN_REPS, MAX_REPS]
  LOAD_ONLY           strength goal, or hypertrophy on a compound lift:
                      reps fixed, load moves by a multiple of the increment
  DOUBLE_PROGRESSION  hypertrophy on an isolation lift: load or reps,
                      whichever changes sets × reps × weight by the
                      larger (rating 2) or smaller (rating 3) amount

Ratings outside 1..5 leave the prescription unchanged. Weight is not
floored, so rating 5 on a very light load can go negative.
"""

import math
import re
from enum import Enum
from typing import Iterable

from .config import (
    ADAPTIVE_BARBELL_INCREMENT,
    ADAPTIVE_HEAVY_INCREMENT,
    ADAPTIVE_LIGHT_INCREMENT,
    ADAPTIVE_LIGHT_THRESHOLD_KG,
    BODYWEIGHT_REP_STEPS,
    DEFAULT_ADAPTIVE,
    DEFAULT_BARBELL_INCREMENT,
    DEFAULT_CABLE_INCREMENT,
    DEFAULT_DUMBBELL_INCREMENT,
    DEFAULT_MACHINE_INCREMENT,
    DELOAD_RATING,
    LOAD_STEPS,
    MAX_REPS,
    MIN_REPS,
    SPECIAL_BODYWEIGHT_EXERCISES,
)
from .metrics import mean
from .models import (
    Equipment,
    EquipmentIncrementSettings,
    Goal,
    PerformanceSample,
    ProgressionHistoryEntry,
    ProgressionResult,
    ProgressionSummary,
)


class ProgressionScheme(str, Enum):
    BODYWEIGHT_REPS = "BODYWEIGHT_REPS"
    LOAD_ONLY = "LOAD_ONLY"
    DOUBLE_PROGRESSION = "DOUBLE_PROGRESSION"


# (goal, is_compound) → scheme for everything that is not a special
# bodyweight exercise
_SCHEME_TABLE: dict[tuple[Goal, bool], ProgressionScheme] = {
    (Goal.STRENGTH, True): ProgressionScheme.LOAD_ONLY,
    (Goal.STRENGTH, False): ProgressionScheme.LOAD_ONLY,
    (Goal.HYPERTROPHY, True): ProgressionScheme.LOAD_ONLY,
    (Goal.HYPERTROPHY, False): ProgressionScheme.DOUBLE_PROGRESSION,
}


def normalize_exercise_name(name: str) -> str:
    """
    Canonical form used for special-exercise matching.

    "Pull-Up", "pull up" and "PULL_UP" all become "PULL UP".
    """
    return re.sub(r"[\s\-_]+", " ", name.strip()).upper()


def is_special_bodyweight(sample: PerformanceSample) -> bool:
    """True for bodyweight exercises whose progression is reps only."""
    return (
        sample.equipment_type == Equipment.BODYWEIGHT
        and normalize_exercise_name(sample.exercise_name) in SPECIAL_BODYWEIGHT_EXERCISES
    )


def classify_scheme(sample: PerformanceSample, goal: Goal) -> ProgressionScheme:
    """
    Pick the progression scheme for a sample.

    Args:
        sample: Rated performance
        goal: Program goal

    Returns:
        ProgressionScheme
    """
    if is_special_bodyweight(sample):
        return ProgressionScheme.BODYWEIGHT_REPS
    return _SCHEME_TABLE[(Goal(goal), bool(sample.is_compound))]


def weight_increment(
    weight: float,
    equipment: Equipment,
    settings: EquipmentIncrementSettings,
) -> float:
    """
    Load step for one progression.

    Adaptive: 2.5 kg on a barbell; otherwise 1 kg below 10 kg and 2 kg from
    10 kg up. Fixed: the user's value for the equipment, whatever the load.

    Args:
        weight: Current working weight (kg)
        equipment: Equipment type
        settings: User increment settings

    Returns:
        Increment in kg
    """
    if not settings.adaptive:
        return settings.fixed_increment(equipment)
    if equipment == Equipment.BARBELL:
        return ADAPTIVE_BARBELL_INCREMENT
    if weight < ADAPTIVE_LIGHT_THRESHOLD_KG:
        return ADAPTIVE_LIGHT_INCREMENT
    return ADAPTIVE_HEAVY_INCREMENT


def build_increment_settings(
    barbell: float | None = None,
    dumbbell: float | None = None,
    cable: float | None = None,
    machine: float | None = None,
    adaptive: bool | None = None,
) -> EquipmentIncrementSettings:
    """
    Build increment settings, filling anything not supplied with defaults.

    Returns:
        EquipmentIncrementSettings
    """
    return EquipmentIncrementSettings(
        barbell=DEFAULT_BARBELL_INCREMENT if barbell is None else float(barbell),
        dumbbell=DEFAULT_DUMBBELL_INCREMENT if dumbbell is None else float(dumbbell),
        cable=DEFAULT_CABLE_INCREMENT if cable is None else float(cable),
        machine=DEFAULT_MACHINE_INCREMENT if machine is None else float(machine),
        adaptive=DEFAULT_ADAPTIVE if adaptive is None else bool(adaptive),
    )


# ---------------------------------------------------------------------------
# Schemes
# ---------------------------------------------------------------------------


def _bodyweight_progression(sample: PerformanceSample) -> ProgressionResult:
    step = BODYWEIGHT_REP_STEPS.get(sample.rating, 0)
    if step > 0:
        new_reps = min(sample.reps + step, MAX_REPS)
    elif step < 0:
        new_reps = max(sample.reps + step, MIN_REPS)
    else:
        new_reps = sample.reps
    return ProgressionResult(
        new_weight=0.0,
        new_reps=new_reps,
        deload=sample.rating == DELOAD_RATING,
    )


def _load_only_progression(sample: PerformanceSample, increment: float) -> ProgressionResult:
    step = LOAD_STEPS.get(sample.rating, 0)
    return ProgressionResult(
        new_weight=sample.weight + step * increment,
        new_reps=sample.reps,
        deload=sample.rating == DELOAD_RATING,
    )


def marginal_volumes(sample: PerformanceSample, increment: float) -> tuple[float, float]:
    """
    Volume gained by adding one increment vs. adding one rep.

    vol_w = sets × reps × (weight + inc) − sets × reps × weight
    vol_r = sets × (reps + 1) × weight − sets × reps × weight
            (+inf once reps ≥ MAX_REPS, so load always wins there)

    Returns:
        (vol_if_weight_up, vol_if_rep_up)
    """
    current = sample.volume
    vol_weight = sample.sets * sample.reps * (sample.weight + increment) - current
    if sample.reps >= MAX_REPS:
        vol_reps = math.inf
    else:
        vol_reps = sample.sets * (sample.reps + 1) * sample.weight - current
    return vol_weight, vol_reps


def _double_progression(sample: PerformanceSample, increment: float) -> ProgressionResult:
    weight, reps, rating = sample.weight, sample.reps, sample.rating
    at_cap = reps >= MAX_REPS

    if rating == 1:
        return ProgressionResult(
            new_weight=weight + increment,
            new_reps=reps if at_cap else reps + 1,
        )

    if rating in (2, 3):
        if at_cap:
            return ProgressionResult(new_weight=weight + increment, new_reps=reps)
        vol_weight, vol_reps = marginal_volumes(sample, increment)
        # Easy → bigger jump, moderate → smaller jump; ties go to reps
        load_wins = vol_weight > vol_reps if rating == 2 else vol_weight < vol_reps
        if load_wins:
            return ProgressionResult(new_weight=weight + increment, new_reps=reps)
        return ProgressionResult(new_weight=weight, new_reps=reps + 1)

    if rating == DELOAD_RATING:
        return ProgressionResult(new_weight=weight - increment, new_reps=reps, deload=True)

    return ProgressionResult(new_weight=weight, new_reps=reps)


def compute_progression(
    sample: PerformanceSample,
    goal: Goal,
    settings: EquipmentIncrementSettings | None = None,
) -> ProgressionResult:
    """
    Compute the next target for a rated performance.

    Args:
        sample: Completed performance with its 1–5 rating
        goal: Program goal (STRENGTH or HYPERTROPHY)
        settings: User increment settings (defaults when None)

    Returns:
        ProgressionResult with the new weight and reps
    """
    if settings is None:
        settings = build_increment_settings()

    scheme = classify_scheme(sample, goal)
    if scheme is ProgressionScheme.BODYWEIGHT_REPS:
        return _bodyweight_progression(sample)

    increment = weight_increment(sample.weight, sample.equipment_type, settings)
    if scheme is ProgressionScheme.LOAD_ONLY:
        return _load_only_progression(sample, increment)
    return _double_progression(sample, increment)


def summarize_progressions(history: Iterable[ProgressionHistoryEntry]) -> ProgressionSummary:
    """
    Summarise an exercise's progression history.

    Averages only count positive changes, so deloads and unchanged entries
    do not drag the mean increase down.

    Args:
        history: Progression entries in any order

    Returns:
        ProgressionSummary (all zeros / None for an empty history)
    """
    entries = list(history)
    if not entries:
        return ProgressionSummary(
            total_progressions=0,
            average_weight_increase=0.0,
            average_reps_increase=0.0,
            last_progression_date=None,
        )

    weight_increases = [
        e.new_weight - e.old_weight for e in entries if e.new_weight - e.old_weight > 0
    ]
    reps_increases = [
        float(e.new_reps - e.old_reps) for e in entries if e.new_reps - e.old_reps > 0
    ]

    return ProgressionSummary(
        total_progressions=len(entries),
        average_weight_increase=mean(weight_increases),
        average_reps_increase=mean(reps_increases),
        last_progression_date=max(e.created_at for e in entries),
    )
