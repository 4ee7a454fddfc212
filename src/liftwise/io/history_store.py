"""
JSONL-based storage for a program's training records.

Handles reading, writing, and filtering the files the analytics engine is
fed from. One data directory holds one program:

    program.json        program metadata (goal, start date, weekly target)
    exercises.jsonl     completed exercises, one JSON object per line
    completions.jsonl   workout completions
    progression.jsonl   applied progressions
    baselines.json      current target per exercise

Filtering by date range and bad days happens here, on the caller side;
the engine never filters.
"""

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, TypeVar

from ..core.engine.config_loader import get_data_dir
from ..core.models import (
    Baseline,
    CompletedExercise,
    CompletionEvent,
    ProgramInfo,
    ProgressionHistoryEntry,
)
from .serializers import (
    ValidationError,
    baseline_to_dict,
    completed_exercise_to_dict,
    completion_to_dict,
    dict_to_baseline,
    dict_to_completed_exercise,
    dict_to_completion,
    dict_to_program,
    dict_to_progression_entry,
    program_to_dict,
    progression_entry_to_dict,
    to_json_line,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DateRange = tuple[date, date] | None


def _in_range(moment: datetime, date_range: DateRange) -> bool:
    if date_range is None:
        return True
    start, end = date_range
    return start <= moment.date() <= end


class HistoryStore:
    """
    Manages one program's records stored as JSON / JSONL files.

    Record files are append-only; readers return records sorted by time.
    """

    def __init__(self, data_dir: str | Path):
        """
        Initialize the store.

        Args:
            data_dir: Directory holding the program files
        """
        self.data_dir = Path(data_dir)
        self.program_path = self.data_dir / "program.json"
        self.exercises_path = self.data_dir / "exercises.jsonl"
        self.completions_path = self.data_dir / "completions.jsonl"
        self.progression_path = self.data_dir / "progression.jsonl"
        self.baselines_path = self.data_dir / "baselines.json"

    def exists(self) -> bool:
        """Check if a program has been initialised here."""
        return self.program_path.exists()

    def init(self, program: ProgramInfo) -> None:
        """
        Create the data directory, write program.json and empty record files.

        Existing record files are kept, so re-running init only updates the
        program metadata.
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.save_program(program)
        for path in (self.exercises_path, self.completions_path, self.progression_path):
            if not path.exists():
                path.touch()
        logger.info("Initialised program %r in %s", program.name, self.data_dir)

    # ------------------------------------------------------------------
    # Program
    # ------------------------------------------------------------------

    def load_program(self) -> ProgramInfo:
        """
        Load program metadata.

        Raises:
            FileNotFoundError: If the program has not been initialised
            ValidationError: If program.json is invalid
        """
        if not self.program_path.exists():
            raise FileNotFoundError(
                f"Program not found: {self.program_path}. Run 'init' first."
            )
        try:
            with open(self.program_path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing {self.program_path}: {e}") from e
        return dict_to_program(data)

    def save_program(self, program: ProgramInfo) -> None:
        """Write program metadata to program.json."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with open(self.program_path, "w") as f:
            json.dump(program_to_dict(program), f, indent=2)

    # ------------------------------------------------------------------
    # JSONL plumbing
    # ------------------------------------------------------------------

    def _require_program(self) -> None:
        if not self.exists():
            raise FileNotFoundError(
                f"Program not found: {self.program_path}. Run 'init' first."
            )

    def _read_jsonl(self, path: Path, parse: Callable[[dict[str, Any]], T]) -> list[T]:
        self._require_program()
        if not path.exists():
            return []

        records: list[T] = []
        with open(path, "r") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(parse(json.loads(line)))
                except (json.JSONDecodeError, ValidationError) as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {path}: {e}"
                    ) from e
        logger.debug("Loaded %d records from %s", len(records), path.name)
        return records

    def _append_jsonl(self, path: Path, data: dict[str, Any]) -> None:
        self._require_program()
        with open(path, "a") as f:
            f.write(to_json_line(data) + "\n")

    # ------------------------------------------------------------------
    # Completed exercises
    # ------------------------------------------------------------------

    def append_exercise(self, record: CompletedExercise) -> None:
        """Append a completed exercise."""
        self._append_jsonl(self.exercises_path, completed_exercise_to_dict(record))

    def load_exercises(
        self,
        date_range: DateRange = None,
        exclude_bad_days: bool = True,
        exercise_name: str | None = None,
        muscle_group: str | None = None,
    ) -> list[CompletedExercise]:
        """
        Load completed exercises, optionally filtered.

        Args:
            date_range: Inclusive (start, end) dates, or None for all
            exclude_bad_days: Drop records logged on a bad day
            exercise_name: Keep only this exercise (case-insensitive)
            muscle_group: Keep only exercises tagged with this group

        Returns:
            Records sorted by completion time
        """
        records = self._read_jsonl(self.exercises_path, dict_to_completed_exercise)
        wanted_name = exercise_name.lower() if exercise_name else None
        result = [
            r for r in records
            if _in_range(r.completed_at, date_range)
            and not (exclude_bad_days and r.is_bad_day)
            and (wanted_name is None or r.exercise_name.lower() == wanted_name)
            and (muscle_group is None or muscle_group in r.muscle_groups)
        ]
        result.sort(key=lambda r: r.completed_at)
        return result

    # ------------------------------------------------------------------
    # Workout completions
    # ------------------------------------------------------------------

    def append_completion(self, event: CompletionEvent) -> None:
        """Append a workout completion."""
        self._append_jsonl(self.completions_path, completion_to_dict(event))

    def load_completions(
        self,
        date_range: DateRange = None,
        exclude_bad_days: bool = True,
    ) -> list[CompletionEvent]:
        """
        Load workout completions, optionally filtered.

        Returns:
            Events sorted by timestamp
        """
        events = self._read_jsonl(self.completions_path, dict_to_completion)
        result = [
            e for e in events
            if _in_range(e.timestamp, date_range)
            and not (exclude_bad_days and e.is_bad_day)
        ]
        result.sort(key=lambda e: e.timestamp)
        return result

    def bad_day_count(self, date_range: DateRange = None) -> int:
        """Number of bad-day completions in the range."""
        events = self._read_jsonl(self.completions_path, dict_to_completion)
        return sum(1 for e in events if e.is_bad_day and _in_range(e.timestamp, date_range))

    # ------------------------------------------------------------------
    # Progression history and baselines
    # ------------------------------------------------------------------

    def append_progression(self, entry: ProgressionHistoryEntry) -> None:
        """Append an applied progression."""
        self._append_jsonl(self.progression_path, progression_entry_to_dict(entry))

    def load_progressions(self, exercise_name: str | None = None) -> list[ProgressionHistoryEntry]:
        """
        Load progression history, oldest first.

        Args:
            exercise_name: Keep only this exercise (case-insensitive)
        """
        entries = self._read_jsonl(self.progression_path, dict_to_progression_entry)
        if exercise_name is not None:
            wanted = exercise_name.lower()
            entries = [e for e in entries if e.exercise_name.lower() == wanted]
        entries.sort(key=lambda e: e.created_at)
        return entries

    def load_baselines(self) -> dict[str, Baseline]:
        """
        Load the current baseline per exercise.

        Raises:
            ValidationError: If baselines.json is invalid
        """
        self._require_program()
        if not self.baselines_path.exists():
            return {}
        try:
            with open(self.baselines_path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing {self.baselines_path}: {e}") from e
        return {name: dict_to_baseline(b) for name, b in data.items()}

    def upsert_baseline(self, exercise_name: str, baseline: Baseline) -> None:
        """Set the baseline for an exercise, replacing any previous one."""
        baselines = self.load_baselines()
        baselines[exercise_name] = baseline
        with open(self.baselines_path, "w") as f:
            json.dump({k: baseline_to_dict(v) for k, v in baselines.items()}, f, indent=2)


def get_default_store() -> HistoryStore:
    """
    Get a HistoryStore in the default data directory.

    Returns:
        HistoryStore instance
    """
    return HistoryStore(get_data_dir())
