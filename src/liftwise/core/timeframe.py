"""
Date ranges for the stats time frames.

  week     Sunday of the current week → today
  month    first day of the current month → today
  program  program start date → today
  all      no date filter
  custom   caller supplies start/end explicitly

"today" is always passed in so results do not depend on the clock.
"""

from datetime import date
from typing import Literal

from .weeks import sunday_week_start

TimeFrame = Literal["week", "month", "program", "all", "custom"]
TIME_FRAMES: tuple[str, ...] = ("week", "month", "program", "all", "custom")


def date_range_for_timeframe(
    timeframe: TimeFrame,
    program_start: date,
    today: date,
) -> tuple[date, date] | None:
    """
    Resolve a named time frame to an inclusive (start, end) date pair.

    Args:
        timeframe: One of TIME_FRAMES
        program_start: Start date of the program
        today: Reference date supplied by the caller

    Returns:
        (start, end), or None when no date filter applies ("all", "custom")

    Raises:
        ValueError: If timeframe is not recognised
    """
    if timeframe == "week":
        return sunday_week_start(today), today
    if timeframe == "month":
        return today.replace(day=1), today
    if timeframe == "program":
        return program_start, today
    if timeframe in ("all", "custom"):
        return None
    raise ValueError(f"Invalid timeframe: {timeframe}. Must be one of {TIME_FRAMES}")
