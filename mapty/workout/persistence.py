"""Serialization of the workout store to a single JSON blob."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from mapty.workout.byte_store import ByteStore
from mapty.workout.model import Cycling, Running, WorkoutRecord

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "workouts"


class PersistenceError(RuntimeError):
    """Base class for non-fatal persistence conditions."""


class PersistenceUnavailable(PersistenceError):
    """The byte store could not be read or written."""


class CorruptPersistedState(PersistenceError):
    """The persisted blob could not be turned back into workout records."""


@dataclass(frozen=True)
class LoadResult:
    records: tuple[WorkoutRecord, ...]
    error: PersistenceError | None = None


def _record_to_dict(record: WorkoutRecord) -> dict[str, Any]:
    item: dict[str, Any] = {
        "type": record.kind,
        "id": record.id,
        "createdAt": record.created_at.isoformat(),
        "coordinates": [record.coordinates[0], record.coordinates[1]],
        "distanceKm": record.distance_km,
        "durationMin": record.duration_min,
        "description": record.description,
    }
    if isinstance(record, Running):
        item["cadenceSpm"] = record.cadence_spm
        item["paceMinPerKm"] = record.pace_min_per_km
    else:
        item["elevationGainM"] = record.elevation_gain_m
        item["speedKmPerH"] = record.speed_km_per_h
    return item


def dumps_records(records: Iterable[WorkoutRecord]) -> str:
    return json.dumps([_record_to_dict(r) for r in records], ensure_ascii=True, allow_nan=False)


def _str_field(raw: dict[str, Any], name: str, index: int) -> str:
    value = raw.get(name)
    if not isinstance(value, str):
        raise CorruptPersistedState(f"Workout {index + 1}: field '{name}' must be a string")
    return value


def _number(value: Any, label: str, index: int) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CorruptPersistedState(f"Workout {index + 1}: {label} must be a number")
    try:
        number = float(value)
    except OverflowError as exc:
        raise CorruptPersistedState(f"Workout {index + 1}: {label} out of range") from exc
    if not math.isfinite(number):
        raise CorruptPersistedState(f"Workout {index + 1}: {label} must be a number")
    return number


def _num_field(raw: dict[str, Any], name: str, index: int, *, minimum: float | None = None) -> float:
    value = _number(raw.get(name), f"field '{name}'", index)
    if minimum is not None and value < minimum:
        raise CorruptPersistedState(f"Workout {index + 1}: field '{name}' out of range")
    return value


def _positive_field(raw: dict[str, Any], name: str, index: int) -> float:
    value = _num_field(raw, name, index)
    if value <= 0:
        raise CorruptPersistedState(f"Workout {index + 1}: field '{name}' must be positive")
    return value


def _record_from_dict(raw: Any, index: int) -> WorkoutRecord:
    if not isinstance(raw, dict):
        raise CorruptPersistedState(f"Workout {index + 1}: must be an object")

    kind = raw.get("type")
    if kind not in ("running", "cycling"):
        raise CorruptPersistedState(f"Workout {index + 1}: unknown type {kind!r}")

    try:
        created_at = datetime.fromisoformat(_str_field(raw, "createdAt", index))
    except ValueError as exc:
        raise CorruptPersistedState(f"Workout {index + 1}: invalid createdAt") from exc

    coords_obj = raw.get("coordinates")
    if not isinstance(coords_obj, list) or len(coords_obj) != 2:
        raise CorruptPersistedState(f"Workout {index + 1}: coordinates must be a pair")
    lat = _number(coords_obj[0], "latitude", index)
    lng = _number(coords_obj[1], "longitude", index)
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        raise CorruptPersistedState(f"Workout {index + 1}: coordinates out of range")

    common: dict[str, Any] = {
        "id": _str_field(raw, "id", index),
        "created_at": created_at,
        "coordinates": (lat, lng),
        "distance_km": _positive_field(raw, "distanceKm", index),
        "duration_min": _positive_field(raw, "durationMin", index),
        "description": _str_field(raw, "description", index),
    }

    if kind == "running":
        cadence = raw.get("cadenceSpm")
        if isinstance(cadence, bool) or not isinstance(cadence, int) or cadence <= 0:
            raise CorruptPersistedState(
                f"Workout {index + 1}: field 'cadenceSpm' must be a positive integer"
            )
        return Running(
            **common,
            cadence_spm=cadence,
            pace_min_per_km=_positive_field(raw, "paceMinPerKm", index),
        )
    return Cycling(
        **common,
        elevation_gain_m=_num_field(raw, "elevationGainM", index, minimum=0),
        speed_km_per_h=_positive_field(raw, "speedKmPerH", index),
    )


def loads_records(text: str) -> list[WorkoutRecord]:
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise CorruptPersistedState(f"Invalid JSON: {exc}") from exc
    except RecursionError as exc:
        raise CorruptPersistedState("Persisted workouts are nested too deeply") from exc

    if not isinstance(data, list):
        raise CorruptPersistedState("Persisted workouts must be a JSON array")

    return [_record_from_dict(raw, i) for i, raw in enumerate(data)]


class WorkoutPersistence:
    def __init__(self, byte_store: ByteStore, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._byte_store = byte_store
        self.key = key

    def save(self, records: Iterable[WorkoutRecord]) -> PersistenceUnavailable | None:
        try:
            blob = dumps_records(records)
        except ValueError as exc:
            logger.warning("Could not serialize workouts: %s", exc)
            return PersistenceUnavailable(str(exc))
        try:
            self._byte_store.set(self.key, blob)
        except OSError as exc:
            logger.warning("Could not persist workouts under %r: %s", self.key, exc)
            return PersistenceUnavailable(str(exc))
        return None

    def load(self) -> LoadResult:
        try:
            blob = self._byte_store.get(self.key)
        except OSError as exc:
            logger.warning("Could not read persisted workouts: %s", exc)
            return LoadResult(records=(), error=PersistenceUnavailable(str(exc)))
        except UnicodeDecodeError as exc:
            logger.warning("Discarding persisted workouts: %s", exc)
            return LoadResult(records=(), error=CorruptPersistedState(f"Invalid encoding: {exc}"))

        if blob is None:
            return LoadResult(records=())

        try:
            records = loads_records(blob)
        except CorruptPersistedState as exc:
            logger.warning("Discarding persisted workouts: %s", exc)
            return LoadResult(records=(), error=exc)
        logger.info("Loaded %d persisted workouts", len(records))
        return LoadResult(records=tuple(records))

    def clear(self) -> PersistenceUnavailable | None:
        try:
            self._byte_store.remove(self.key)
        except OSError as exc:
            logger.warning("Could not clear persisted workouts: %s", exc)
            return PersistenceUnavailable(str(exc))
        return None
