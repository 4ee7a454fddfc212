"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of progression and analytics data.
"""

from rich.console import Console
from rich.table import Table

from ..core.ascii_plot import (
    create_muscle_group_chart,
    create_weekly_frequency_chart,
    create_weekly_volume_chart,
)
from ..core.models import (
    Baseline,
    FrequencyStats,
    PerformanceSample,
    ProgramStatistics,
    ProgressionHistoryEntry,
    ProgressionResult,
    ProgressionSummary,
    VolumeStats,
)

console = Console()


def _fmt_kg(value: float) -> str:
    return f"{value:g} kg"


def format_progression(sample: PerformanceSample, result: ProgressionResult) -> str:
    """
    Format a computed progression as an old → new line.

    Args:
        sample: Rated performance
        result: Computed next target

    Returns:
        Formatted string
    """
    parts = [f"[bold]{sample.exercise_name}[/bold] (rating {sample.rating})"]
    if result.new_weight != sample.weight:
        parts.append(f"weight {_fmt_kg(sample.weight)} → [cyan]{_fmt_kg(result.new_weight)}[/cyan]")
    else:
        parts.append(f"weight {_fmt_kg(sample.weight)}")
    if result.new_reps != sample.reps:
        parts.append(f"reps {sample.reps} → [cyan]{result.new_reps}[/cyan]")
    else:
        parts.append(f"reps {sample.reps}")
    line = "  ".join(parts)
    if result.deload:
        line += "  [yellow](deload)[/yellow]"
    return line


def print_progression(sample: PerformanceSample, result: ProgressionResult) -> None:
    """Print a computed progression."""
    console.print(format_progression(sample, result))


def format_progression_table(entries: list[ProgressionHistoryEntry]) -> Table:
    """
    Create a Rich table displaying progression history.

    Args:
        entries: Entries to display, oldest first

    Returns:
        Rich Table object
    """
    table = Table(title="Progression History")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Exercise", style="magenta")
    table.add_column("Weight", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Reason", style="dim")

    for i, entry in enumerate(entries, 1):
        table.add_row(
            str(i),
            entry.created_at.date().isoformat(),
            entry.exercise_name,
            f"{entry.old_weight:g} → {entry.new_weight:g}",
            f"{entry.old_reps} → {entry.new_reps}",
            entry.reason,
        )

    return table


def format_progression_summary(summary: ProgressionSummary) -> str:
    """Format a progression summary as a text block."""
    last = summary.last_progression_date.date().isoformat() if summary.last_progression_date else "-"
    return "\n".join([
        "Summary",
        f"- Progressions: {summary.total_progressions}",
        f"- Avg weight increase: {summary.average_weight_increase:.2f} kg",
        f"- Avg reps increase: {summary.average_reps_increase:.2f}",
        f"- Last progression: {last}",
    ])


def print_progression_history(entries: list[ProgressionHistoryEntry], summary: ProgressionSummary) -> None:
    """
    Print progression history with its summary.

    Args:
        entries: Entries to display
        summary: Summary of the same entries
    """
    if not entries:
        console.print("[yellow]No progressions recorded yet.[/yellow]")
        return

    console.print(format_progression_table(entries))
    console.print()
    console.print(format_progression_summary(summary))


def format_baseline(exercise_name: str, baseline: Baseline) -> str:
    """Format the stored target for one exercise."""
    return f"Current target for {exercise_name}: {baseline.sets} × {baseline.reps} @ {_fmt_kg(baseline.weight)}"


def print_baseline(exercise_name: str, baseline: Baseline) -> None:
    console.print()
    console.print(f"[bold]{format_baseline(exercise_name, baseline)}[/bold]")


def format_frequency_display(stats: FrequencyStats) -> str:
    """Format frequency statistics as a text block."""
    return "\n".join([
        "Workout frequency",
        f"- Current streak: {stats.current_streak} week(s)",
        f"- Longest streak: {stats.longest_streak} workout(s)",
        f"- Total workouts: {stats.total_workouts}",
        f"- Avg per week: {stats.avg_workouts_per_week}",
        f"- Consistency: {stats.consistency}%",
        f"- Bad days: {stats.bad_day_count}",
    ])


def print_frequency(stats: FrequencyStats) -> None:
    """Print frequency statistics and a weekly chart."""
    console.print()
    console.print(format_frequency_display(stats))
    console.print()
    console.print(create_weekly_frequency_chart(stats.weekly_frequency))
    console.print()


def print_volume(stats: VolumeStats) -> None:
    """
    Print volume statistics.

    Args:
        stats: Aggregated volume
    """
    if not stats.volume_by_date:
        console.print("[yellow]No exercises recorded in this period.[/yellow]")
        return

    console.print()
    console.print(
        f"Total volume: [bold]{stats.total_volume:,.1f} kg[/bold] over {stats.workout_days} workout day(s)"
    )
    console.print()
    console.print(create_weekly_volume_chart(stats.weekly_data))
    console.print()
    console.print(create_muscle_group_chart(stats.volume_by_muscle_group))
    console.print()

    table = Table(title="Volume by Exercise")
    table.add_column("Exercise", style="magenta")
    table.add_column("Volume (kg)", justify="right")
    for item in stats.volume_by_exercise:
        table.add_row(item.exercise, f"{item.volume:,.1f}")
    console.print(table)


def print_program_statistics(stats: ProgramStatistics) -> None:
    """Print whole-program statistics."""
    program = stats.program
    console.print()
    console.print(f"[bold cyan]{program.name}[/bold cyan]  ({program.goal.value}, {program.status})")
    console.print(f"- Started: {program.start_date.isoformat()}")
    console.print(f"- Days active: {stats.days_active}")
    console.print(f"- Completion: {stats.completion_percentage}%")
    console.print(f"- Total volume: {stats.total_volume:,} kg")
    console.print(f"- Avg strength gain: {stats.average_percent_gain:.2f}%")

    if stats.most_improved:
        console.print()
        table = Table(title="Most Improved")
        table.add_column("Exercise", style="magenta")
        table.add_column("First", justify="right")
        table.add_column("Latest", justify="right")
        table.add_column("Gain", justify="right", style="bold green")
        for gain in stats.most_improved:
            table.add_row(
                gain.exercise,
                _fmt_kg(gain.first_weight),
                _fmt_kg(gain.latest_weight),
                f"{gain.percent_gain:.2f}%",
            )
        console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")
