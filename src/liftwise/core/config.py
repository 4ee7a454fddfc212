"""
Configuration constants for the progression and analytics engine.

All adjustable parameters are centralized here for easy tuning.
User-level overrides (increments, adaptive flag) are loaded from YAML by
core/engine/config_loader.py and merged over these defaults.
"""

from typing import Final

# =============================================================================
# REP RANGE
# =============================================================================

MAX_REPS: Final[int] = 20  # Rep cap; above this only load moves
MIN_REPS: Final[int] = 1  # Floor for the bodyweight rep path

# =============================================================================
# SPECIAL BODYWEIGHT EXERCISES
# =============================================================================

# Normalised names (upper case, single spaces). Load is pinned to 0 and only
# reps move for these, whatever the goal.
SPECIAL_BODYWEIGHT_EXERCISES: Final[frozenset[str]] = frozenset(
    {
        "PULL UP",
        "CHIN UP",
        "DIP",
        "PUSH UP",
        "PUSH UP DEFICIT",
    }
)

# Rating → rep delta on the bodyweight path
BODYWEIGHT_REP_STEPS: Final[dict[int, int]] = {
    1: 2,  # Very easy
    2: 1,  # Easy
    3: 1,  # Moderate
    4: 0,  # Hard
    5: -2,  # Too hard
}

# =============================================================================
# LOAD-ONLY PROGRESSION
# =============================================================================

# Rating → multiple of the weight increment
LOAD_STEPS: Final[dict[int, int]] = {
    1: 4,
    2: 2,
    3: 1,
    4: 0,
    5: -2,
}

DELOAD_RATING: Final[int] = 5

# =============================================================================
# WEIGHT INCREMENTS (kg)
# =============================================================================

ADAPTIVE_BARBELL_INCREMENT: Final[float] = 2.5
ADAPTIVE_LIGHT_INCREMENT: Final[float] = 1.0  # weight below threshold
ADAPTIVE_HEAVY_INCREMENT: Final[float] = 2.0
ADAPTIVE_LIGHT_THRESHOLD_KG: Final[float] = 10.0

DEFAULT_BARBELL_INCREMENT: Final[float] = 2.5
DEFAULT_DUMBBELL_INCREMENT: Final[float] = 2.0
DEFAULT_CABLE_INCREMENT: Final[float] = 2.5
DEFAULT_MACHINE_INCREMENT: Final[float] = 5.0
DEFAULT_ADAPTIVE: Final[bool] = True

MAX_INCREMENT_KG: Final[float] = 100.0  # Upper bound accepted from user settings

# =============================================================================
# STREAKS AND CONSISTENCY
# =============================================================================

WEEKLY_STREAK_THRESHOLD: Final[float] = 0.75  # Fraction of target workouts per week
LONGEST_STREAK_MAX_GAP_DAYS: Final[int] = 3  # Allows rest days inside a run

# =============================================================================
# PROGRAM STATISTICS
# =============================================================================

MOST_IMPROVED_LIMIT: Final[int] = 5
