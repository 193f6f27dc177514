from __future__ import annotations

from datetime import datetime, timezone

import pytest

from mapty.workout.factory import WorkoutFactory
from mapty.workout.store import NotFound, WorkoutStore


def _records() -> list:
    counter = iter(range(1000))
    factory = WorkoutFactory(
        clock=lambda: datetime(2026, 5, 2, tzinfo=timezone.utc),
        id_factory=lambda: f"w{next(counter)}",
    )
    return [
        factory.create("running", (40.7, -74.0), 5, 24, 178),
        factory.create("cycling", (40.8, -73.9), 27, 95, 523),
        factory.create("running", (40.6, -74.1), 10, 52, 172),
    ]


def test_append_preserves_insertion_order() -> None:
    store = WorkoutStore()
    records = _records()
    for record in records:
        store.append(record)

    assert store.all() == tuple(records)
    assert len(store) == 3


def test_all_returns_a_snapshot() -> None:
    store = WorkoutStore(_records())
    view = store.all()

    assert isinstance(view, tuple)
    store.replace_all(())
    assert len(view) == 3
    assert store.all() == ()


def test_find_by_id_returns_exact_record() -> None:
    records = _records()
    store = WorkoutStore(records)

    for record in records:
        assert store.find_by_id(record.id) is record


def test_find_by_id_missing_raises_not_found() -> None:
    store = WorkoutStore(_records())

    with pytest.raises(NotFound):
        store.find_by_id("nope")
    with pytest.raises(LookupError):
        WorkoutStore().find_by_id("w0")


def test_replace_all_discards_previous_contents() -> None:
    records = _records()
    store = WorkoutStore(records[:1])

    store.replace_all(records[1:])

    assert [r.id for r in store.all()] == ["w1", "w2"]
