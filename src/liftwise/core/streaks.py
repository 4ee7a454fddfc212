"""
Streak and consistency engine over workout completion events.

The caller decides which events count (e.g. whether bad days are included)
and supplies "now"; nothing here reads the clock.

Two streak notions are computed and they are independent:
- current streak: consecutive qualifying *weeks*, newest first
- longest streak: longest run of completions no more than 3 days apart
"""

import math
from datetime import date, datetime, timedelta
from typing import Sequence

from .config import LONGEST_STREAK_MAX_GAP_DAYS, WEEKLY_STREAK_THRESHOLD
from .metrics import mean, round_half_up
from .models import CompletionEvent, FrequencyStats, WeeklyFrequency
from .weeks import iso_week_number, monday_week_start, sunday_week_start, week_key


def consistency_score(events: Sequence[CompletionEvent], expected_per_week: int) -> int:
    """
    Percentage of the weekly target met, averaged over active weeks.

    week_score = min(1, count / expected_per_week)
    consistency = round(mean(week_score) × 100)

    Weeks with no completions have no entry and are not averaged in.

    Args:
        events: Completion events
        expected_per_week: Program target workouts per week

    Returns:
        0..100 (0 for no events or a zero target)
    """
    if not events or expected_per_week == 0:
        return 0

    counts: dict[str, int] = {}
    for event in events:
        key = week_key(event.timestamp)
        counts[key] = counts.get(key, 0) + 1

    scores = [min(1.0, count / expected_per_week) for count in counts.values()]
    return int(round_half_up(mean(scores) * 100))


def current_weekly_streak(
    events: Sequence[CompletionEvent],
    expected_per_week: int,
    threshold: float = WEEKLY_STREAK_THRESHOLD,
) -> int:
    """
    Consecutive weeks, newest first, with enough completions.

    A week passes when count ≥ ceil(expected_per_week × threshold). Weeks
    are ordered by their Monday start; a week with no completions has no
    entry, so the walk stops at the first recorded week that fails.

    Args:
        events: Completion events
        expected_per_week: Program target workouts per week
        threshold: Fraction of the target required (default 0.75)

    Returns:
        Number of passing weeks
    """
    if not events or expected_per_week == 0:
        return 0

    starts: dict[str, date] = {}
    counts: dict[str, int] = {}
    for event in events:
        key = week_key(event.timestamp)
        starts.setdefault(key, monday_week_start(event.timestamp))
        counts[key] = counts.get(key, 0) + 1

    required = math.ceil(expected_per_week * threshold)
    newest_first = sorted(counts, key=lambda k: starts[k], reverse=True)

    streak = 0
    for key in newest_first:
        if counts[key] < required:
            break
        streak += 1
    return streak


def longest_streak(
    events: Sequence[CompletionEvent],
    max_gap_days: int = LONGEST_STREAK_MAX_GAP_DAYS,
) -> int:
    """
    Longest run of completions with at most max_gap_days between neighbours.

    The gap is the whole number of elapsed days (fractions dropped), so two
    workouts 3 days 20 hours apart still chain.

    Args:
        events: Completion events in any order
        max_gap_days: Largest gap that keeps a run alive (default 3)

    Returns:
        Length of the longest run (0 for no events)
    """
    if not events:
        return 0

    timestamps = sorted(e.timestamp for e in events)
    best = 0
    run = 1
    for prev, curr in zip(timestamps, timestamps[1:]):
        gap_days = math.floor((curr - prev).total_seconds() / 86400)
        if gap_days <= max_gap_days:
            run += 1
        else:
            best = max(best, run)
            run = 1
    return max(best, run)


def average_workouts_per_week(
    event_count: int,
    program_start: date | datetime,
    now: datetime,
) -> float:
    """
    Completions per elapsed program week, to one decimal.

    weeks_elapsed = max(1, (now − program_start) / 7 days)

    Args:
        event_count: Number of completions
        program_start: Program start (a date means midnight of that day)
        now: Reference time supplied by the caller

    Returns:
        Average per week (0.0 for no completions)
    """
    if event_count == 0:
        return 0.0

    if not isinstance(program_start, datetime):
        program_start = datetime.combine(program_start, datetime.min.time(), tzinfo=now.tzinfo)
    weeks_elapsed = max(1.0, (now - program_start) / timedelta(weeks=1))
    return round_half_up(event_count / weeks_elapsed, 1)


def weekly_frequency(events: Sequence[CompletionEvent]) -> list[WeeklyFrequency]:
    """
    Completion count per ISO week number, ascending.

    week_start is the Sunday of the first event seen for that week number.

    Args:
        events: Completion events

    Returns:
        List of WeeklyFrequency sorted by week number
    """
    weeks: dict[int, WeeklyFrequency] = {}
    for event in events:
        number = iso_week_number(event.timestamp)
        if number not in weeks:
            weeks[number] = WeeklyFrequency(
                week_start=sunday_week_start(event.timestamp),
                workout_count=0,
                week_number=number,
            )
        weeks[number].workout_count += 1
    return sorted(weeks.values(), key=lambda w: w.week_number)


def compute_frequency_stats(
    events: Sequence[CompletionEvent],
    expected_per_week: int,
    program_start: date | datetime,
    now: datetime,
    bad_day_count: int = 0,
) -> FrequencyStats:
    """
    Bundle every streak/frequency figure for one set of completions.

    bad_day_count is reported as-is and added to total_workouts; the caller
    decides whether the bad days are also part of *events*.

    Args:
        events: Completion events (already filtered by the caller)
        expected_per_week: Program target workouts per week
        program_start: Program start date
        now: Reference time supplied by the caller
        bad_day_count: Bad-day completions in the same range

    Returns:
        FrequencyStats
    """
    return FrequencyStats(
        current_streak=current_weekly_streak(events, expected_per_week),
        longest_streak=longest_streak(events),
        total_workouts=len(events) + bad_day_count,
        avg_workouts_per_week=average_workouts_per_week(len(events), program_start, now),
        consistency=consistency_score(events, expected_per_week),
        weekly_frequency=weekly_frequency(events),
        bad_day_count=bad_day_count,
    )
