"""Program and settings commands: init, settings."""

import json
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.engine.config_loader import get_settings_path, load_increment_settings, save_user_settings
from ...core.models import EquipmentIncrementSettings, ProgramInfo
from ...io.serializers import (
    ValidationError,
    parse_date,
    validate_goal,
    validate_increment,
    validate_increment_settings,
    validate_non_negative,
)
from .. import views
from ..app import DataDirOption, JsonOption, app, get_store


@app.command()
def init(
    name: Annotated[str, typer.Option("--name", "-n", help="Program name")] = "My Program",
    goal: Annotated[
        str,
        typer.Option("--goal", "-g", help="STRENGTH or HYPERTROPHY"),
    ] = "HYPERTROPHY",
    start_date: Annotated[
        Optional[str],
        typer.Option("--start-date", help="Program start (YYYY-MM-DD, default: today)"),
    ] = None,
    per_week: Annotated[
        int,
        typer.Option("--per-week", "-w", help="Planned workouts per week"),
    ] = 3,
    total_workouts: Annotated[
        int,
        typer.Option("--total-workouts", help="Planned workouts in the whole program (0 = open-ended)"),
    ] = 0,
    data_dir: DataDirOption = None,
) -> None:
    """
    Create (or update) the program in the data directory.

    Recorded exercises, completions and progressions are kept when the
    program already exists; only its metadata is rewritten.
    """
    store = get_store(data_dir)

    try:
        program = ProgramInfo(
            name=name,
            goal=validate_goal(goal),
            start_date=parse_date(start_date) if start_date else datetime.now().date(),
            expected_per_week=int(validate_non_negative(per_week, "per-week")),
            total_workouts=int(validate_non_negative(total_workouts, "total-workouts")),
        )
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    existed = store.exists()
    store.init(program)

    verb = "Updated" if existed else "Created"
    views.print_success(f"{verb} program '{program.name}' in {store.data_dir}")
    views.print_info(
        f"Goal {program.goal.value}, {program.expected_per_week} workout(s)/week, "
        f"starting {program.start_date.isoformat()}"
    )


@app.command()
def settings(
    barbell: Annotated[Optional[float], typer.Option("--barbell", help="Barbell increment (kg)")] = None,
    dumbbell: Annotated[Optional[float], typer.Option("--dumbbell", help="Dumbbell increment (kg)")] = None,
    cable: Annotated[Optional[float], typer.Option("--cable", help="Cable increment (kg)")] = None,
    machine: Annotated[Optional[float], typer.Option("--machine", help="Machine increment (kg)")] = None,
    adaptive: Annotated[
        Optional[bool],
        typer.Option("--adaptive/--fixed", help="Use adaptive increments or the fixed ones above"),
    ] = None,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show or update weight increment settings.

    With no options the current settings are shown.
    """
    store = get_store(data_dir)
    current = load_increment_settings(store.data_dir)

    changes = {
        "barbell": barbell,
        "dumbbell": dumbbell,
        "cable": cable,
        "machine": machine,
    }
    updating = adaptive is not None or any(v is not None for v in changes.values())

    if updating:
        try:
            for key, value in changes.items():
                if value is not None:
                    validate_increment(value, f"{key} increment")
            current = validate_increment_settings(
                EquipmentIncrementSettings(
                    barbell=barbell if barbell is not None else current.barbell,
                    dumbbell=dumbbell if dumbbell is not None else current.dumbbell,
                    cable=cable if cable is not None else current.cable,
                    machine=machine if machine is not None else current.machine,
                    adaptive=adaptive if adaptive is not None else current.adaptive,
                )
            )
        except ValidationError as e:
            views.print_error(str(e))
            raise typer.Exit(1)
        path = save_user_settings(current, store.data_dir)
    else:
        path = get_settings_path(store.data_dir)

    if json_out:
        print(json.dumps({
            "adaptive": current.adaptive,
            "increments": {
                "barbell": current.barbell,
                "dumbbell": current.dumbbell,
                "cable": current.cable,
                "machine": current.machine,
            },
        }, indent=2))
        return

    if updating:
        views.print_success(f"Saved settings to {path}")
    mode = "adaptive" if current.adaptive else "fixed"
    views.console.print(f"Increments ({mode}):")
    views.console.print(f"- Barbell:  {current.barbell:g} kg")
    views.console.print(f"- Dumbbell: {current.dumbbell:g} kg (also bodyweight)")
    views.console.print(f"- Cable:    {current.cable:g} kg")
    views.console.print(f"- Machine:  {current.machine:g} kg")
    if current.adaptive:
        views.print_info("Adaptive mode ignores the fixed increments; use --fixed to apply them.")
