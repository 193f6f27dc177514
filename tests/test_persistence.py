from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

from mapty.workout.byte_store import FileByteStore, MappingByteStore
from mapty.workout.factory import WorkoutFactory
from mapty.workout.model import Cycling, Running
from mapty.workout.persistence import (
    CorruptPersistedState,
    PersistenceUnavailable,
    WorkoutPersistence,
    dumps_records,
    loads_records,
)
from mapty.workout.store import WorkoutStore


def _factory() -> WorkoutFactory:
    counter = iter(range(1000))
    return WorkoutFactory(
        clock=lambda: datetime(2026, 4, 14, 9, 30, 12, 345678, tzinfo=timezone(timedelta(hours=2))),
        id_factory=lambda: f"id-{next(counter)}",
    )


def _store() -> WorkoutStore:
    factory = _factory()
    store = WorkoutStore()
    store.append(factory.create("running", (40.7, -74.0), 5, 24, 178))
    store.append(factory.create("cycling", (40.71, -74.02), 27, 95, 523))
    return store


def test_save_then_load_restores_variants_and_metrics() -> None:
    store = _store()
    backing: dict[str, str] = {}
    persistence = WorkoutPersistence(MappingByteStore(backing))

    assert persistence.save(store.all()) is None

    restored = WorkoutStore()
    result = WorkoutPersistence(MappingByteStore(backing)).load()
    restored.replace_all(result.records)

    assert result.error is None
    assert len(restored.all()) == 2
    first, second = restored.all()
    assert isinstance(first, Running)
    assert isinstance(second, Cycling)
    assert first.pace_min_per_km == store.all()[0].pace_min_per_km
    assert second.speed_km_per_h == store.all()[1].speed_km_per_h
    assert restored.all() == store.all()


def test_saving_twice_is_idempotent() -> None:
    store = _store()
    backing: dict[str, str] = {}
    persistence = WorkoutPersistence(MappingByteStore(backing))

    persistence.save(store.all())
    first_blob = backing["workouts"]
    first = persistence.load().records
    persistence.save(store.all())

    assert backing["workouts"] == first_blob
    assert persistence.load().records == first == store.all()


def test_persisted_layout_is_flat_tagged_objects() -> None:
    data = json.loads(dumps_records(_store().all()))

    assert [item["type"] for item in data] == ["running", "cycling"]
    assert data[0]["coordinates"] == [40.7, -74.0]
    assert data[0]["paceMinPerKm"] == 4.8
    assert data[0]["cadenceSpm"] == 178
    assert data[0]["description"] == "Running on April 14"
    assert data[0]["createdAt"].startswith("2026-04-14T09:30:12")
    assert "speedKmPerH" in data[1]
    assert "elevationGainM" in data[1]
    assert "cadenceSpm" not in data[1]


def test_load_restores_stored_derived_values_without_recomputing() -> None:
    blob = json.loads(dumps_records(_store().all()))
    blob[0]["paceMinPerKm"] = 5.5
    blob[0]["description"] = "Morning run"

    records = loads_records(json.dumps(blob))

    assert records[0].pace_min_per_km == 5.5
    assert records[0].description == "Morning run"


def test_missing_key_loads_empty_without_error() -> None:
    result = WorkoutPersistence(MappingByteStore({})).load()

    assert result.records == ()
    assert result.error is None


def test_corrupt_blob_loads_empty_and_reports() -> None:
    persistence = WorkoutPersistence(MappingByteStore({"workouts": "{not json"}))

    result = persistence.load()

    assert result.records == ()
    assert isinstance(result.error, CorruptPersistedState)


def test_structurally_invalid_records_discard_whole_collection() -> None:
    good = json.loads(dumps_records(_store().all()))
    cases = [
        {"type": "running"},
        [{**good[0], "type": "swimming"}, good[1]],
        [good[0], {**good[1], "speedKmPerH": "fast"}],
        [{**good[0], "distanceKm": 0}],
        [{**good[0], "cadenceSpm": 170.5}],
        [{**good[0], "coordinates": [40.7]}],
        [{**good[0], "createdAt": "yesterday"}],
        [good[0], "not an object"],
    ]
    for case in cases:
        persistence = WorkoutPersistence(MappingByteStore({"workouts": json.dumps(case)}))
        result = persistence.load()
        assert result.records == ()
        assert isinstance(result.error, CorruptPersistedState)


def test_unavailable_store_is_reported_not_raised() -> None:
    persistence = WorkoutPersistence(MappingByteStore(None))

    assert isinstance(persistence.save(_store().all()), PersistenceUnavailable)
    assert isinstance(persistence.clear(), PersistenceUnavailable)
    result = persistence.load()
    assert result.records == ()
    assert isinstance(result.error, PersistenceUnavailable)


def test_clear_removes_blob() -> None:
    backing: dict[str, str] = {}
    persistence = WorkoutPersistence(MappingByteStore(backing), key="mapty")
    persistence.save(_store().all())
    assert "mapty" in backing

    assert persistence.clear() is None
    assert "mapty" not in backing
    assert persistence.load().records == ()


def test_non_utf8_file_is_reported_as_corrupt(tmp_path: Path) -> None:
    (tmp_path / "workouts.json").write_bytes(b"\xff\xfe\x00garbage")

    result = WorkoutPersistence(FileByteStore(tmp_path)).load()

    assert result.records == ()
    assert isinstance(result.error, CorruptPersistedState)


def test_number_too_large_for_float_is_reported_as_corrupt() -> None:
    item = json.loads(dumps_records(_store().all()))[0]
    blob = json.dumps([item]).replace('"distanceKm": 5.0', '"distanceKm": ' + "9" * 400)
    assert "9" * 400 in blob

    result = WorkoutPersistence(MappingByteStore({"workouts": blob})).load()

    assert result.records == ()
    assert isinstance(result.error, CorruptPersistedState)


def test_deeply_nested_blob_is_reported_as_corrupt() -> None:
    result = WorkoutPersistence(MappingByteStore({"workouts": "[" * 100000})).load()

    assert result.records == ()
    assert isinstance(result.error, CorruptPersistedState)


def test_serialized_blob_never_contains_non_json_numbers() -> None:
    record = _factory().create("cycling", (1.0, 2.0), 42, 60, 0)
    broken = Cycling(**{**record.__dict__, "speed_km_per_h": float("inf")})
    backing: dict[str, str] = {}

    error = WorkoutPersistence(MappingByteStore(backing)).save([broken])

    assert isinstance(error, PersistenceUnavailable)
    assert backing == {}
