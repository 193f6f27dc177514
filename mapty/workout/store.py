"""In-memory ordered collection of workout records."""

from __future__ import annotations

from collections.abc import Iterable

from mapty.workout.model import WorkoutRecord


class NotFound(LookupError):
    """Raised when no record carries the requested id."""


class WorkoutStore:
    def __init__(self, records: Iterable[WorkoutRecord] = ()) -> None:
        self._records: list[WorkoutRecord] = list(records)

    def append(self, record: WorkoutRecord) -> None:
        self._records.append(record)

    def all(self) -> tuple[WorkoutRecord, ...]:
        return tuple(self._records)

    def find_by_id(self, workout_id: str) -> WorkoutRecord:
        for record in self._records:
            if record.id == workout_id:
                return record
        raise NotFound(workout_id)

    def replace_all(self, records: Iterable[WorkoutRecord]) -> None:
        self._records = list(records)

    def __len__(self) -> int:
        return len(self._records)
