"""
ASCII charts for the terminal.

Horizontal bar charts only; the analytics engine hands over finished
series, so this module never groups or sums anything itself.
"""

from .models import MuscleGroupVolume, WeeklyFrequency, WeeklyVolume


def create_simple_bar_chart(
    labels: list[str],
    values: list[float],
    width: int = 40,
    title: str = "",
    value_format: str = ".1f",
) -> str:
    """
    Create a simple horizontal bar chart.

    Args:
        labels: Labels for each bar
        values: Values for each bar
        width: Maximum bar width
        title: Chart title
        value_format: Format spec for the value printed after each bar

    Returns:
        ASCII bar chart string
    """
    if not values:
        return "No data to display."

    max_val = max(values)
    max_label_len = max(len(l) for l in labels) if labels else 0

    lines = []

    if title:
        lines.append(title)
        lines.append("─" * (max_label_len + width + 5))

    for label, value in zip(labels, values):
        bar_len = int((value / max_val) * width) if max_val > 0 else 0
        bar = "█" * bar_len
        lines.append(f"{label:>{max_label_len}} │{bar} {value:{value_format}}")

    return "\n".join(lines)


def _week_label(week_number: int, week_start) -> str:
    return f"W{week_number:02d} {week_start.isoformat()}"


def create_weekly_volume_chart(weekly: list[WeeklyVolume], width: int = 40) -> str:
    """Bar chart of volume (kg) per week."""
    if not weekly:
        return "No volume recorded."
    labels = [_week_label(w.week_number, w.week_start) for w in weekly]
    values = [w.volume for w in weekly]
    return create_simple_bar_chart(labels, values, width=width, title="Weekly Volume (kg)")


def create_weekly_frequency_chart(weekly: list[WeeklyFrequency], width: int = 20) -> str:
    """Bar chart of workouts per week."""
    if not weekly:
        return "No workouts recorded."
    labels = [_week_label(w.week_number, w.week_start) for w in weekly]
    values = [float(w.workout_count) for w in weekly]
    return create_simple_bar_chart(
        labels, values, width=width, title="Workouts per Week", value_format=".0f"
    )


def create_muscle_group_chart(groups: list[MuscleGroupVolume], width: int = 40) -> str:
    """Bar chart of volume per muscle group, largest first."""
    if not groups:
        return "No muscle groups recorded."
    return create_simple_bar_chart(
        [g.muscle_group for g in groups],
        [g.volume for g in groups],
        width=width,
        title="Volume by Muscle Group (kg)",
    )
