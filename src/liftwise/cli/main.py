"""
CLI entry point using Typer.

Provides commands for progression and analytics:
- init: Create the program
- rate / preview: Record a rated exercise, or preview its progression
- complete: Record a finished workout
- frequency / volume / stats: Analytics over a time frame
- history: Progression history and summary
- settings: Weight increment settings
"""

from .app import app
from .commands import progression, settings, stats, workouts  # noqa: F401  registers commands

if __name__ == "__main__":
    app()
