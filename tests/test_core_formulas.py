"""
Formula-focused unit tests for the liftwise analytics engine.

Covers the progression calculator, the streak and consistency engine, the
volume aggregator, the shared week helper and the program statistics.

Values are hand-computed from the formulas.
"""

import math
from datetime import date, datetime, timedelta

import pytest

from liftwise.core.config import MAX_REPS, MIN_REPS
from liftwise.core.metrics import mean, percent_gain, round_half_up
from liftwise.core.models import (
    CompletionEvent,
    Equipment,
    EquipmentIncrementSettings,
    Goal,
    PerformanceSample,
    ProgramInfo,
    ProgressionHistoryEntry,
    VolumeSample,
)
from liftwise.core.program_stats import program_statistics, strength_gains
from liftwise.core.progression import (
    ProgressionScheme,
    build_increment_settings,
    classify_scheme,
    compute_progression,
    marginal_volumes,
    normalize_exercise_name,
    summarize_progressions,
    weight_increment,
)
from liftwise.core.streaks import (
    average_workouts_per_week,
    compute_frequency_stats,
    consistency_score,
    current_weekly_streak,
    longest_streak,
    weekly_frequency,
)
from liftwise.core.timeframe import date_range_for_timeframe
from liftwise.core.volume import aggregate_volume, volume_by_muscle_group, weekly_volume
from liftwise.core.weeks import (
    iso_week_number,
    monday_week_start,
    sunday_week_start,
    week_bucket,
    week_key,
)

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

ADAPTIVE = EquipmentIncrementSettings()


def _sample(
    weight: float,
    reps: int,
    rating: int,
    *,
    sets: int = 3,
    equipment: Equipment | str = Equipment.BARBELL,
    compound: bool = True,
    name: str = "Squat",
) -> PerformanceSample:
    return PerformanceSample(
        sets=sets,
        reps=reps,
        weight=weight,
        rating=rating,
        equipment_type=equipment,
        is_compound=compound,
        exercise_name=name,
    )


def _curl(weight: float = 12.0, reps: int = 10, rating: int = 2) -> PerformanceSample:
    return _sample(weight, reps, rating, equipment=Equipment.DUMBBELL, compound=False, name="Curl")


def _pull_up(reps: int, rating: int, weight: float = 0.0, name: str = "Pull Up") -> PerformanceSample:
    return _sample(weight, reps, rating, equipment=Equipment.BODYWEIGHT, compound=True, name=name)


def _events(*days: date, hour: int = 18) -> list[CompletionEvent]:
    return [CompletionEvent(timestamp=datetime(d.year, d.month, d.day, hour)) for d in days]


def _mwf(first_monday: date, weeks: int) -> list[date]:
    """Monday/Wednesday/Friday dates for consecutive weeks."""
    days = []
    for w in range(weeks):
        monday = first_monday + timedelta(weeks=w)
        days.extend([monday, monday + timedelta(days=2), monday + timedelta(days=4)])
    return days


def _vs(sets: int, reps: int, weight: float, name: str, groups: set[str], when: datetime) -> VolumeSample:
    return VolumeSample(
        sets=sets,
        reps=reps,
        weight=weight,
        exercise_name=name,
        muscle_groups=frozenset(groups),
        completed_at=when,
    )


def _entry(name: str, old_w: float, new_w: float, old_r: int, new_r: int, when: datetime) -> ProgressionHistoryEntry:
    return ProgressionHistoryEntry(
        exercise_name=name,
        old_weight=old_w,
        new_weight=new_w,
        old_reps=old_r,
        new_reps=new_r,
        created_at=when,
    )


MON = date(2024, 6, 3)  # Monday, ISO week 23


# ===========================================================================
# Numeric helpers
# ===========================================================================


class TestMetrics:
    def test_round_half_up_rounds_halves_up(self):
        assert round_half_up(2.5) == 3.0
        assert round_half_up(0.5) == 1.0
        assert round_half_up(-0.5) == 0.0

    def test_round_half_up_digits(self):
        # 2.25 × 10 = 22.5 → 23 → 2.3
        assert round_half_up(2.25, 1) == pytest.approx(2.3)
        assert round_half_up(1.234, 2) == pytest.approx(1.23)

    def test_percent_gain(self):
        # (75 − 60) / 60 × 100 = 25
        assert percent_gain(60.0, 75.0) == 25.0
        # (70 − 60) / 60 × 100 = 16.666… → 16.67
        assert percent_gain(60.0, 70.0) == pytest.approx(16.67)

    def test_mean_empty(self):
        assert mean([]) == 0.0


# ===========================================================================
# Week helper
# ===========================================================================


class TestWeeks:
    def test_week_number_matches_iso_calendar(self):
        d = date(2019, 12, 1)
        while d < date(2028, 2, 1):
            assert iso_week_number(d) == d.isocalendar()[1], d
            d += timedelta(days=1)

    def test_week_key_uses_calendar_year(self):
        # Monday 2024-12-30 belongs to ISO week 1 of 2025
        assert iso_week_number(date(2024, 12, 30)) == 1
        assert week_key(date(2024, 12, 30)) == "2024-W1"
        assert week_key(date(2025, 1, 2)) == "2025-W1"

    def test_week_key_accepts_datetime(self):
        assert week_key(datetime(2024, 6, 3, 23, 59)) == "2024-W23"

    def test_sunday_and_monday_starts(self):
        wednesday = date(2024, 6, 12)
        assert sunday_week_start(wednesday) == date(2024, 6, 9)
        assert monday_week_start(wednesday) == date(2024, 6, 10)

    def test_sunday_maps_differently(self):
        sunday = date(2024, 6, 16)
        assert sunday_week_start(sunday) == sunday
        # Monday-based week: Sunday closes the week that began on the 10th
        assert monday_week_start(sunday) == date(2024, 6, 10)

    def test_week_bucket(self):
        bucket = week_bucket(datetime(2024, 6, 12, 7, 30))
        assert bucket.week_number == 24
        assert bucket.week_start == date(2024, 6, 9)


# ===========================================================================
# Progression: classification and increments
# ===========================================================================


class TestClassification:
    @pytest.mark.parametrize("name", ["Pull Up", "pull-up", "PULL_UP", "Chin Up", "dip", "Push-Up Deficit"])
    def test_special_bodyweight_names(self, name):
        sample = _pull_up(8, 3, name=name)
        assert classify_scheme(sample, Goal.STRENGTH) is ProgressionScheme.BODYWEIGHT_REPS

    def test_normalize_exercise_name(self):
        assert normalize_exercise_name("  push--up_deficit ") == "PUSH UP DEFICIT"

    def test_special_name_needs_bodyweight_equipment(self):
        # Weighted dip on a dumbbell belt is a normal loaded lift
        sample = _sample(10.0, 8, 3, equipment=Equipment.DUMBBELL, name="Dip")
        assert classify_scheme(sample, Goal.STRENGTH) is ProgressionScheme.LOAD_ONLY

    def test_goal_table(self):
        compound = _sample(100.0, 5, 3)
        isolation = _curl()
        assert classify_scheme(compound, Goal.STRENGTH) is ProgressionScheme.LOAD_ONLY
        assert classify_scheme(isolation, Goal.STRENGTH) is ProgressionScheme.LOAD_ONLY
        assert classify_scheme(compound, Goal.HYPERTROPHY) is ProgressionScheme.LOAD_ONLY
        assert classify_scheme(isolation, Goal.HYPERTROPHY) is ProgressionScheme.DOUBLE_PROGRESSION

    def test_invalid_equipment_rejected(self):
        with pytest.raises(ValueError):
            _sample(10.0, 8, 3, equipment="KETTLEBELL")


class TestWeightIncrement:
    def test_adaptive_barbell_always_2_5(self):
        assert weight_increment(5.0, Equipment.BARBELL, ADAPTIVE) == 2.5
        assert weight_increment(200.0, Equipment.BARBELL, ADAPTIVE) == 2.5

    def test_adaptive_light_and_heavy(self):
        assert weight_increment(9.99, Equipment.DUMBBELL, ADAPTIVE) == 1.0
        assert weight_increment(10.0, Equipment.DUMBBELL, ADAPTIVE) == 2.0
        assert weight_increment(40.0, Equipment.CABLE, ADAPTIVE) == 2.0
        assert weight_increment(4.0, Equipment.MACHINE, ADAPTIVE) == 1.0

    def test_adaptive_ignores_user_values(self):
        settings = EquipmentIncrementSettings(barbell=5.0, machine=10.0, adaptive=True)
        assert weight_increment(100.0, Equipment.BARBELL, settings) == 2.5
        assert weight_increment(50.0, Equipment.MACHINE, settings) == 2.0

    def test_fixed_uses_user_values(self):
        settings = EquipmentIncrementSettings(barbell=5.0, dumbbell=1.5, cable=3.0, machine=10.0, adaptive=False)
        assert weight_increment(100.0, Equipment.BARBELL, settings) == 5.0
        assert weight_increment(4.0, Equipment.DUMBBELL, settings) == 1.5
        assert weight_increment(4.0, Equipment.CABLE, settings) == 3.0
        assert weight_increment(4.0, Equipment.MACHINE, settings) == 10.0

    def test_fixed_bodyweight_shares_dumbbell(self):
        settings = EquipmentIncrementSettings(dumbbell=1.25, adaptive=False)
        assert weight_increment(0.0, Equipment.BODYWEIGHT, settings) == 1.25

    def test_build_increment_settings_defaults(self):
        s = build_increment_settings()
        assert (s.barbell, s.dumbbell, s.cable, s.machine, s.adaptive) == (2.5, 2.0, 2.5, 5.0, True)

    def test_build_increment_settings_override(self):
        s = build_increment_settings(machine=7.5, adaptive=False)
        assert s.machine == 7.5
        assert s.adaptive is False
        assert s.barbell == 2.5


# ===========================================================================
# Progression: schemes
# ===========================================================================


class TestLoadOnlyProgression:
    def test_strength_barbell_rating_3(self):
        # 100 + 1 × 2.5
        result = compute_progression(_sample(100.0, 5, 3, sets=5), Goal.STRENGTH)
        assert result.new_weight == 102.5
        assert result.new_reps == 5
        assert result.deload is False

    @pytest.mark.parametrize(
        "rating,expected",
        [(1, 110.0), (2, 105.0), (3, 102.5), (4, 100.0), (5, 95.0)],
    )
    def test_strength_rating_table(self, rating, expected):
        # steps 4 / 2 / 1 / 0 / −2 increments of 2.5
        result = compute_progression(_sample(100.0, 5, rating), Goal.STRENGTH)
        assert result.new_weight == expected
        assert result.new_reps == 5

    def test_rating_5_is_deload(self):
        result = compute_progression(_sample(100.0, 5, 5), Goal.STRENGTH)
        assert result.deload is True

    def test_hypertrophy_compound_dumbbell(self):
        # weight ≥ 10 → increment 2; rating 2 → +2 × 2
        sample = _sample(20.0, 10, 2, equipment=Equipment.DUMBBELL, compound=True, name="DB Press")
        result = compute_progression(sample, Goal.HYPERTROPHY)
        assert result.new_weight == 24.0
        assert result.new_reps == 10

    def test_negative_weight_not_clamped(self):
        # 1 kg dumbbell: increment 1; rating 5 → 1 − 2 × 1 = −1
        sample = _sample(1.0, 12, 5, equipment=Equipment.DUMBBELL, name="Lateral Raise")
        result = compute_progression(sample, Goal.STRENGTH)
        assert result.new_weight == -1.0

    def test_fixed_increment_setting(self):
        settings = build_increment_settings(barbell=5.0, adaptive=False)
        result = compute_progression(_sample(100.0, 5, 3), Goal.STRENGTH, settings)
        assert result.new_weight == 105.0

    def test_reps_never_move_for_strength(self):
        for equipment in Equipment:
            if equipment is Equipment.BODYWEIGHT:
                continue
            for compound in (True, False):
                for rating in range(0, 7):
                    sample = _sample(30.0, 7, rating, equipment=equipment, compound=compound, name="Row")
                    assert compute_progression(sample, Goal.STRENGTH).new_reps == 7


class TestDoubleProgression:
    def test_marginal_volumes(self):
        # vol_w = 3×10×14 − 360 = 60; vol_r = 3×11×12 − 360 = 36
        vol_w, vol_r = marginal_volumes(_curl(), 2.0)
        assert vol_w == pytest.approx(60.0)
        assert vol_r == pytest.approx(36.0)

    def test_marginal_volumes_at_rep_cap(self):
        _, vol_r = marginal_volumes(_curl(reps=MAX_REPS), 2.0)
        assert vol_r == math.inf

    def test_rating_2_takes_larger_jump(self):
        # 60 > 36 → weight path
        result = compute_progression(_curl(rating=2), Goal.HYPERTROPHY)
        assert result.new_weight == 14.0
        assert result.new_reps == 10

    def test_rating_3_takes_smaller_jump(self):
        # 36 < 60 → rep path
        result = compute_progression(_curl(rating=3), Goal.HYPERTROPHY)
        assert result.new_weight == 12.0
        assert result.new_reps == 11

    def test_tie_goes_to_reps(self):
        # 20 kg × 10 reps, increment 2: vol_w = 3×10×2 = 60 = vol_r = 3×20
        for rating in (2, 3):
            result = compute_progression(_curl(weight=20.0, rating=rating), Goal.HYPERTROPHY)
            assert result.new_weight == 20.0
            assert result.new_reps == 11

    def test_rating_1_moves_both(self):
        result = compute_progression(_curl(rating=1), Goal.HYPERTROPHY)
        assert result.new_weight == 14.0
        assert result.new_reps == 11

    def test_rating_1_at_cap_moves_weight_only(self):
        result = compute_progression(_curl(reps=MAX_REPS, rating=1), Goal.HYPERTROPHY)
        assert result.new_weight == 14.0
        assert result.new_reps == MAX_REPS

    @pytest.mark.parametrize("rating", [2, 3])
    def test_at_cap_load_wins(self, rating):
        result = compute_progression(_curl(reps=MAX_REPS, rating=rating), Goal.HYPERTROPHY)
        assert result.new_weight == 14.0
        assert result.new_reps == MAX_REPS

    def test_rating_4_unchanged(self):
        result = compute_progression(_curl(rating=4), Goal.HYPERTROPHY)
        assert (result.new_weight, result.new_reps, result.deload) == (12.0, 10, False)

    def test_rating_5_drops_one_increment(self):
        result = compute_progression(_curl(rating=5), Goal.HYPERTROPHY)
        assert result.new_weight == 10.0
        assert result.new_reps == 10
        assert result.deload is True

    def test_light_load_uses_1kg(self):
        # 8 kg < 10 → increment 1
        result = compute_progression(_curl(weight=8.0, rating=1), Goal.HYPERTROPHY)
        assert result.new_weight == 9.0

    def test_never_both_change_except_rating_1(self):
        for weight in (4.0, 12.0, 20.0, 35.0):
            for reps in (6, 10, 15, MAX_REPS):
                inc = weight_increment(weight, Equipment.DUMBBELL, ADAPTIVE)
                for rating in (2, 3, 4, 5):
                    result = compute_progression(_curl(weight, reps, rating), Goal.HYPERTROPHY)
                    assert result.new_reps in (reps, reps + 1)
                    assert result.new_weight in (weight, weight + inc, weight - inc)
                    assert not (result.new_reps != reps and result.new_weight != weight)


class TestBodyweightProgression:
    def test_pull_up_rating_1(self):
        result = compute_progression(_pull_up(8, 1), Goal.HYPERTROPHY)
        assert result.new_weight == 0.0
        assert result.new_reps == 10

    @pytest.mark.parametrize("rating,expected", [(1, 10), (2, 9), (3, 9), (4, 8), (5, 6)])
    def test_rep_table(self, rating, expected):
        assert compute_progression(_pull_up(8, rating), Goal.STRENGTH).new_reps == expected

    def test_reps_clamped(self):
        assert compute_progression(_pull_up(19, 1), Goal.STRENGTH).new_reps == MAX_REPS
        assert compute_progression(_pull_up(2, 5), Goal.STRENGTH).new_reps == MIN_REPS

    def test_weight_pinned_to_zero(self):
        for goal in Goal:
            for rating in range(0, 7):
                result = compute_progression(_pull_up(8, rating, weight=15.0), goal)
                assert result.new_weight == 0.0
                assert MIN_REPS <= result.new_reps <= MAX_REPS

    def test_rating_5_deload(self):
        assert compute_progression(_pull_up(8, 5), Goal.STRENGTH).deload is True


class TestInvalidRating:
    @pytest.mark.parametrize("rating", [0, 6, -1, 99])
    def test_unchanged(self, rating):
        for sample, goal in (
            (_sample(100.0, 5, rating), Goal.STRENGTH),
            (_curl(rating=rating), Goal.HYPERTROPHY),
        ):
            result = compute_progression(sample, goal)
            assert result.new_weight == sample.weight
            assert result.new_reps == sample.reps
            assert result.deload is False

    def test_bodyweight_unchanged(self):
        result = compute_progression(_pull_up(8, 0), Goal.STRENGTH)
        assert (result.new_weight, result.new_reps) == (0.0, 8)

    def test_pure(self):
        sample = _curl(rating=2)
        assert compute_progression(sample, Goal.HYPERTROPHY) == compute_progression(sample, Goal.HYPERTROPHY)


class TestProgressionSummary:
    def test_averages_positive_changes_only(self):
        t0 = datetime(2024, 6, 3, 18)
        history = [
            _entry("Bench", 60.0, 62.5, 8, 8, t0),
            _entry("Bench", 62.5, 60.0, 8, 8, t0 + timedelta(days=2)),  # deload
            _entry("Curl", 20.0, 20.0, 10, 11, t0 + timedelta(days=4)),
            _entry("Curl", 20.0, 22.0, 11, 10, t0 + timedelta(days=1)),
        ]
        summary = summarize_progressions(history)
        assert summary.total_progressions == 4
        # (2.5 + 2.0) / 2
        assert summary.average_weight_increase == pytest.approx(2.25)
        assert summary.average_reps_increase == pytest.approx(1.0)
        assert summary.last_progression_date == t0 + timedelta(days=4)

    def test_empty(self):
        summary = summarize_progressions([])
        assert summary.total_progressions == 0
        assert summary.average_weight_increase == 0.0
        assert summary.last_progression_date is None


# ===========================================================================
# Streaks and consistency
# ===========================================================================


class TestCurrentWeeklyStreak:
    def test_four_full_weeks(self):
        # each week 3 ≥ ceil(3 × 0.75) = 3
        events = _events(*_mwf(MON, 4))
        assert current_weekly_streak(events, 3) == 4

    def test_stops_at_first_failing_week(self):
        days = _mwf(MON, 1) + [MON + timedelta(weeks=1)] + _mwf(MON + timedelta(weeks=2), 1)
        # newest week passes, middle week has 1 < 3
        assert current_weekly_streak(_events(*days), 3) == 1

    def test_newest_week_failing_gives_zero(self):
        days = _mwf(MON, 2) + [MON + timedelta(weeks=2)]
        assert current_weekly_streak(_events(*days), 3) == 0

    def test_threshold_rounds_up(self):
        # expected 2 → ceil(1.5) = 2; one workout is not enough
        assert current_weekly_streak(_events(MON), 2) == 0
        assert current_weekly_streak(_events(MON, MON + timedelta(days=2)), 2) == 1
        # expected 4 → ceil(3.0) = 3
        assert current_weekly_streak(_events(*_mwf(MON, 1)), 4) == 1

    def test_zero_target_or_no_events(self):
        assert current_weekly_streak(_events(*_mwf(MON, 2)), 0) == 0
        assert current_weekly_streak([], 3) == 0

    def test_order_independent(self):
        events = _events(*_mwf(MON, 3))
        assert current_weekly_streak(list(reversed(events)), 3) == 3

    def test_bounded_by_distinct_weeks(self):
        events = _events(*_mwf(MON, 5))
        distinct = len({week_key(e.timestamp) for e in events})
        assert current_weekly_streak(events, 1) <= distinct


class TestLongestStreak:
    def test_gap_too_large(self):
        # day 1 and day 10: 9-day gap
        assert longest_streak(_events(date(2024, 6, 1), date(2024, 6, 10))) == 1

    def test_mwf_chains(self):
        # gaps 2, 2, 3 (Fri → Mon) all ≤ 3
        assert longest_streak(_events(*_mwf(MON, 4))) == 12

    def test_fractional_days_floored(self):
        start = datetime(2024, 6, 3, 8, 0)
        events = [
            CompletionEvent(timestamp=start),
            CompletionEvent(timestamp=start + timedelta(days=3, hours=20)),
        ]
        assert longest_streak(events) == 2

    def test_four_days_breaks(self):
        assert longest_streak(_events(MON, MON + timedelta(days=4))) == 1

    def test_best_run_in_middle(self):
        days = [MON, MON + timedelta(days=10), MON + timedelta(days=11), MON + timedelta(days=13), MON + timedelta(days=30)]
        assert longest_streak(_events(*days)) == 3

    def test_empty(self):
        assert longest_streak([]) == 0

    def test_independent_of_weekly_streak(self):
        # one workout per week, 7 days apart: weekly streak 2, day-gap run 1
        events = _events(MON, MON + timedelta(weeks=1))
        assert current_weekly_streak(events, 1) == 2
        assert longest_streak(events) == 1


class TestConsistency:
    def test_full_weeks(self):
        assert consistency_score(_events(*_mwf(MON, 4)), 3) == 100

    def test_partial_week(self):
        # weeks: 3/3 = 1.0 and 1/3 → mean 0.6667 → 67
        days = _mwf(MON, 1) + [MON + timedelta(weeks=1)]
        assert consistency_score(_events(*days), 3) == 67

    def test_capped_at_target(self):
        days = [MON + timedelta(days=i) for i in range(5)]
        assert consistency_score(_events(*days), 3) == 100

    def test_zero_target_or_empty(self):
        assert consistency_score(_events(MON), 0) == 0
        assert consistency_score([], 3) == 0


class TestAverageAndWeekly:
    def test_average_per_week(self):
        # 12 workouts over 27 days = 3.857 weeks → 3.11 → 3.1
        avg = average_workouts_per_week(12, MON, datetime(2024, 6, 30))
        assert avg == pytest.approx(3.1)

    def test_average_at_least_one_week(self):
        assert average_workouts_per_week(3, MON, datetime(2024, 6, 5)) == 3.0

    def test_average_empty(self):
        assert average_workouts_per_week(0, MON, datetime(2024, 6, 30)) == 0.0

    def test_weekly_frequency(self):
        weekly = weekly_frequency(_events(*_mwf(MON, 4)))
        assert [w.week_number for w in weekly] == [23, 24, 25, 26]
        assert [w.workout_count for w in weekly] == [3, 3, 3, 3]
        assert weekly[0].week_start == date(2024, 6, 2)

    def test_weekly_frequency_merges_same_week_number(self):
        # 2023-06-05 and 2024-06-03 are both week 23
        weekly = weekly_frequency(_events(date(2023, 6, 5), date(2024, 6, 3)))
        assert len(weekly) == 1
        assert weekly[0].workout_count == 2
        assert weekly[0].week_start == date(2023, 6, 4)

    def test_frequency_stats_bundle(self):
        events = _events(*_mwf(MON, 4))
        stats = compute_frequency_stats(events, 3, MON, datetime(2024, 6, 30), bad_day_count=2)
        assert stats.current_streak == 4
        assert stats.longest_streak == 12
        assert stats.total_workouts == 14
        assert stats.bad_day_count == 2
        assert stats.consistency == 100
        assert len(stats.weekly_frequency) == 4


# ===========================================================================
# Volume
# ===========================================================================


class TestVolume:
    def _two_samples(self) -> list[VolumeSample]:
        return [
            _vs(3, 8, 60.0, "Bench Press", {"chest", "triceps"}, datetime(2024, 6, 3, 18)),
            _vs(3, 10, 12.0, "Curl", {"biceps"}, datetime(2024, 6, 5, 18)),
        ]

    def test_muscle_groups_over_count(self):
        groups = {g.muscle_group: g.volume for g in volume_by_muscle_group(self._two_samples())}
        assert groups == {"chest": 1440.0, "triceps": 1440.0, "biceps": 360.0}
        assert sum(groups.values()) == 3240.0

    def test_conservation(self):
        stats = aggregate_volume(self._two_samples())
        assert stats.total_volume == 1800.0
        assert sum(d.volume for d in stats.volume_by_date) == stats.total_volume
        assert sum(e.volume for e in stats.volume_by_exercise) == stats.total_volume
        assert sum(g.volume for g in stats.volume_by_muscle_group) > stats.total_volume

    def test_orderings(self):
        samples = self._two_samples() + [_vs(2, 5, 10.0, "Curl", set(), datetime(2024, 6, 1, 9))]
        stats = aggregate_volume(samples)
        assert [d.date for d in stats.volume_by_date] == ["2024-06-01", "2024-06-03", "2024-06-05"]
        assert [e.exercise for e in stats.volume_by_exercise] == ["Bench Press", "Curl"]
        assert stats.volume_by_exercise[1].volume == 460.0
        assert stats.workout_days == 3

    def test_untagged_sample_counts_in_total_only(self):
        stats = aggregate_volume([_vs(1, 10, 50.0, "Row", set(), datetime(2024, 6, 3))])
        assert stats.total_volume == 500.0
        assert stats.volume_by_muscle_group == []

    def test_weekly_volume(self):
        samples = self._two_samples() + [_vs(1, 10, 10.0, "Curl", {"biceps"}, datetime(2024, 6, 10, 9))]
        weekly = weekly_volume(samples)
        assert [(w.week_number, w.volume) for w in weekly] == [(23, 1800.0), (24, 100.0)]
        assert weekly[1].week_start == date(2024, 6, 9)

    def test_empty(self):
        stats = aggregate_volume([])
        assert stats.total_volume == 0
        assert stats.volume_by_date == []
        assert stats.weekly_data == []
        assert stats.workout_days == 0


# ===========================================================================
# Program statistics and time frames
# ===========================================================================


class TestProgramStatistics:
    def _history(self) -> list[ProgressionHistoryEntry]:
        t0 = datetime(2024, 6, 3, 18)
        return [
            _entry("Bench", 47.5, 50.0, 8, 8, t0),
            _entry("Bench", 50.0, 60.0, 8, 8, t0 + timedelta(days=14)),
            _entry("Curl", 9.0, 10.0, 10, 10, t0),
            _entry("Curl", 10.0, 12.5, 10, 10, t0 + timedelta(days=7)),
            _entry("Squat", 100.0, 100.0, 5, 5, t0),
            _entry("Pull Up", 0.0, 0.0, 8, 10, t0),
        ]

    def test_strength_gains(self):
        gains = {g.exercise: g.percent_gain for g in strength_gains(self._history())}
        # Bench 50 → 60 = 20 %, Curl 10 → 12.5 = 25 %; squat flat, pull-up bodyweight
        assert gains == {"Bench": 20.0, "Curl": 25.0}

    def test_gains_use_chronological_order(self):
        history = list(reversed(self._history()))
        gains = {g.exercise: (g.first_weight, g.latest_weight) for g in strength_gains(history)}
        assert gains["Bench"] == (50.0, 60.0)

    def test_program_statistics(self):
        program = ProgramInfo("Block A", Goal.HYPERTROPHY, date(2024, 6, 3), 3, total_workouts=12)
        completions = [
            datetime(2024, 6, 3, 8),
            datetime(2024, 6, 3, 19),
            datetime(2024, 6, 5, 8),
        ]
        samples = [
            _vs(3, 8, 60.0, "Bench", {"chest"}, datetime(2024, 6, 3, 18)),
            _vs(3, 10, 12.0, "Curl", {"biceps"}, datetime(2024, 6, 5, 18)),
        ]
        stats = program_statistics(program, completions, self._history(), samples)
        assert stats.days_active == 2
        # 3 / 12 × 100 = 25
        assert stats.completion_percentage == 25
        assert stats.average_percent_gain == 22.5
        assert stats.total_volume == 1800
        assert [g.exercise for g in stats.most_improved] == ["Curl", "Bench"]

    def test_most_improved_top_five(self):
        t0 = datetime(2024, 6, 3)
        history = []
        for i in range(7):
            history.append(_entry(f"Lift {i}", 10.0, 10.0, 8, 8, t0))
            history.append(_entry(f"Lift {i}", 10.0, 11.0 + i, 8, 8, t0 + timedelta(days=7)))
        program = ProgramInfo("P", Goal.STRENGTH, date(2024, 6, 3), 3)
        stats = program_statistics(program, [], history, [])
        assert len(stats.strength_gains) == 7
        assert [g.exercise for g in stats.most_improved] == [f"Lift {i}" for i in (6, 5, 4, 3, 2)]
        assert stats.completion_percentage == 0
        assert stats.days_active == 0


class TestTimeFrames:
    TODAY = date(2024, 6, 12)  # Wednesday
    START = date(2024, 5, 20)

    def test_week(self):
        assert date_range_for_timeframe("week", self.START, self.TODAY) == (date(2024, 6, 9), self.TODAY)

    def test_month(self):
        assert date_range_for_timeframe("month", self.START, self.TODAY) == (date(2024, 6, 1), self.TODAY)

    def test_program(self):
        assert date_range_for_timeframe("program", self.START, self.TODAY) == (self.START, self.TODAY)

    @pytest.mark.parametrize("tf", ["all", "custom"])
    def test_unfiltered(self, tf):
        assert date_range_for_timeframe(tf, self.START, self.TODAY) is None

    def test_unknown(self):
        with pytest.raises(ValueError):
            date_range_for_timeframe("year", self.START, self.TODAY)  # type: ignore[arg-type]
