"""
Week arithmetic shared by the streak and volume engines.

Two conventions coexist:

- Week *numbers* are ISO 8601-style: the date is moved to the Thursday of
  its Monday-based week and counted from 1 January of that Thursday's year.
- Week *starts* are display anchors: Sunday for frequency/volume charts,
  Monday for the weekly streak.

A week key pairs the calendar year of the date (not the ISO year) with the
week number, so 2024-12-30 (ISO week 1 of 2025) keys as "2024-W1".
"""

import math
from datetime import date, datetime, timedelta

from .models import WeekBucket


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def iso_week_number(value: date | datetime) -> int:
    """
    ISO-style week number of a date.

    thursday = d + (4 − isoweekday(d)) days
    week = ceil(((thursday − Jan 1 of thursday.year) in days + 1) / 7)

    Args:
        value: Date or datetime (its local calendar date is used)

    Returns:
        Week number, 1..53
    """
    d = _as_date(value)
    thursday = d + timedelta(days=4 - d.isoweekday())
    year_start = date(thursday.year, 1, 1)
    return math.ceil(((thursday - year_start).days + 1) / 7)


def week_key(value: date | datetime) -> str:
    """Return the "{year}-W{week}" grouping key for a date."""
    d = _as_date(value)
    return f"{d.year}-W{iso_week_number(d)}"


def sunday_week_start(value: date | datetime) -> date:
    """Sunday on or before the date (Sunday maps to itself)."""
    d = _as_date(value)
    days_since_sunday = d.isoweekday() % 7
    return d - timedelta(days=days_since_sunday)


def monday_week_start(value: date | datetime) -> date:
    """Monday on or before the date (Sunday maps back six days)."""
    d = _as_date(value)
    return d - timedelta(days=d.weekday())


def week_bucket(value: date | datetime) -> WeekBucket:
    """Week number plus Sunday display start for a date."""
    return WeekBucket(
        week_number=iso_week_number(value),
        week_start=sunday_week_start(value),
    )
