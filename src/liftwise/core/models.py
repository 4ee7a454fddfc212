"""
Data models for liftwise.

Dataclasses for the engine's inputs (performance samples, completion events,
volume samples), its outputs (progression results, statistics) and the
records the store keeps on disk. Numeric fields are not range-checked here;
that belongs to the boundary layer (io/serializers.py). Only enum-valued
fields are coerced and validated.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Literal

ProgramStatus = Literal["ACTIVE", "COMPLETED", "PAUSED"]


class Equipment(str, Enum):
    """Equipment type of an exercise, as recorded in the exercise catalog."""

    BARBELL = "BARBELL"
    DUMBBELL = "DUMBBELL"
    CABLE = "CABLE"
    MACHINE = "MACHINE"
    BODYWEIGHT = "BODYWEIGHT"


class Goal(str, Enum):
    """Training goal of a program."""

    STRENGTH = "STRENGTH"
    HYPERTROPHY = "HYPERTROPHY"


def _coerce_enum(enum_cls: type[Enum], value: object, name: str) -> Enum:
    try:
        return enum_cls(value)
    except ValueError as e:
        valid = ", ".join(m.value for m in enum_cls)  # type: ignore[attr-defined]
        raise ValueError(f"Invalid {name}: {value!r}. Must be one of {valid}") from e


# =============================================================================
# Progression
# =============================================================================


@dataclass(frozen=True)
class PerformanceSample:
    """
    One completed exercise performance plus the user's difficulty rating.

    rating: 1 = very easy ... 5 = too hard. Anything else is accepted and
    treated as "no change" by the calculator.
    """

    sets: int
    reps: int
    weight: float
    rating: int
    equipment_type: Equipment
    is_compound: bool
    exercise_name: str

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "equipment_type", _coerce_enum(Equipment, self.equipment_type, "equipment_type")
        )

    @property
    def volume(self) -> float:
        """sets × reps × weight for this performance."""
        return self.sets * self.reps * self.weight


@dataclass(frozen=True)
class ProgressionResult:
    """Next target for an exercise. deload is True when the prescription was lowered."""

    new_weight: float
    new_reps: int
    deload: bool = False


@dataclass(frozen=True)
class EquipmentIncrementSettings:
    """
    Per-equipment weight increments (kg) and the adaptive switch.

    With adaptive=True the calculator ignores the fixed values and picks an
    increment from the equipment and current load instead.
    """

    barbell: float = 2.5
    dumbbell: float = 2.0
    cable: float = 2.5
    machine: float = 5.0
    adaptive: bool = True

    def fixed_increment(self, equipment: Equipment) -> float:
        """Return the user's fixed increment for the equipment (bodyweight shares dumbbell)."""
        by_equipment = {
            Equipment.BARBELL: self.barbell,
            Equipment.DUMBBELL: self.dumbbell,
            Equipment.BODYWEIGHT: self.dumbbell,
            Equipment.CABLE: self.cable,
            Equipment.MACHINE: self.machine,
        }
        return by_equipment[Equipment(equipment)]


@dataclass(frozen=True)
class ProgressionHistoryEntry:
    """One applied progression, as persisted by the caller."""

    exercise_name: str
    old_weight: float
    new_weight: float
    old_reps: int
    new_reps: int
    created_at: datetime
    reason: str = "Rating-based progression"


@dataclass
class ProgressionSummary:
    """Aggregate view over an exercise's progression history."""

    total_progressions: int
    average_weight_increase: float
    average_reps_increase: float
    last_progression_date: datetime | None


# =============================================================================
# Streaks and consistency
# =============================================================================


@dataclass(frozen=True)
class CompletionEvent:
    """One workout session completion (not one exercise)."""

    timestamp: datetime
    is_bad_day: bool = False


@dataclass(frozen=True)
class WeekBucket:
    """
    Week a timestamp falls in.

    week_number is ISO-style (Thursday-anchored); week_start is the Sunday
    that opens the calendar week and is used for display only.
    """

    week_number: int
    week_start: date


@dataclass
class WeeklyFrequency:
    """Workout count for one ISO week number."""

    week_start: date
    workout_count: int
    week_number: int


@dataclass
class FrequencyStats:
    """Streak, consistency and frequency figures for a set of completions."""

    current_streak: int
    longest_streak: int
    total_workouts: int
    avg_workouts_per_week: float
    consistency: int
    weekly_frequency: list[WeeklyFrequency] = field(default_factory=list)
    bad_day_count: int = 0


# =============================================================================
# Volume
# =============================================================================


@dataclass(frozen=True)
class VolumeSample:
    """A completed exercise reduced to what the volume aggregator needs."""

    sets: int
    reps: int
    weight: float
    exercise_name: str
    muscle_groups: frozenset[str]
    completed_at: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "muscle_groups", frozenset(self.muscle_groups))

    @property
    def volume(self) -> float:
        """sets × reps × weight."""
        return self.sets * self.reps * self.weight


@dataclass
class DateVolume:
    date: str  # ISO format: YYYY-MM-DD
    volume: float


@dataclass
class MuscleGroupVolume:
    muscle_group: str
    volume: float


@dataclass
class ExerciseVolume:
    exercise: str
    volume: float


@dataclass
class WeeklyVolume:
    week_start: date
    volume: float
    week_number: int


@dataclass
class VolumeStats:
    """All volume breakdowns for one sample set."""

    volume_by_date: list[DateVolume] = field(default_factory=list)
    volume_by_muscle_group: list[MuscleGroupVolume] = field(default_factory=list)
    volume_by_exercise: list[ExerciseVolume] = field(default_factory=list)
    weekly_data: list[WeeklyVolume] = field(default_factory=list)
    total_volume: float = 0.0
    workout_days: int = 0  # distinct calendar days with at least one sample


# =============================================================================
# Program statistics
# =============================================================================


@dataclass
class ProgramInfo:
    """Program metadata supplied by the caller."""

    name: str
    goal: Goal
    start_date: date
    expected_per_week: int
    total_workouts: int = 0  # planned workouts in the program
    status: ProgramStatus = "ACTIVE"

    def __post_init__(self) -> None:
        self.goal = _coerce_enum(Goal, self.goal, "goal")  # type: ignore[assignment]
        if self.status not in ("ACTIVE", "COMPLETED", "PAUSED"):
            raise ValueError(f"Invalid status: {self.status}")


@dataclass
class StrengthGain:
    exercise: str
    first_weight: float
    latest_weight: float
    percent_gain: float


@dataclass
class ProgramStatistics:
    """Whole-program summary figures."""

    program: ProgramInfo
    days_active: int
    completion_percentage: int
    strength_gains: list[StrengthGain]
    average_percent_gain: float
    total_volume: int
    most_improved: list[StrengthGain]


# =============================================================================
# Stored records
# =============================================================================


@dataclass
class Baseline:
    """Current target sets/reps/weight for an exercise within the program."""

    sets: int
    reps: int
    weight: float


@dataclass
class CompletedExercise:
    """
    A completed exercise as recorded by the store.

    Carries the catalog attributes (equipment, compound flag, muscle groups)
    resolved at log time so the engine never has to look them up.
    """

    exercise_name: str
    sets: int
    reps: int
    weight: float
    rating: int
    equipment_type: Equipment
    is_compound: bool
    completed_at: datetime
    muscle_groups: list[str] = field(default_factory=list)
    is_bad_day: bool = False

    def __post_init__(self) -> None:
        self.equipment_type = _coerce_enum(  # type: ignore[assignment]
            Equipment, self.equipment_type, "equipment_type"
        )

    def to_performance_sample(self) -> PerformanceSample:
        return PerformanceSample(
            sets=self.sets,
            reps=self.reps,
            weight=self.weight,
            rating=self.rating,
            equipment_type=self.equipment_type,
            is_compound=self.is_compound,
            exercise_name=self.exercise_name,
        )

    def to_volume_sample(self) -> VolumeSample:
        return VolumeSample(
            sets=self.sets,
            reps=self.reps,
            weight=self.weight,
            exercise_name=self.exercise_name,
            muscle_groups=frozenset(self.muscle_groups),
            completed_at=self.completed_at,
        )
