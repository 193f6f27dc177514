"""Validated construction of workout records from raw input."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any
from uuid import uuid4

from mapty.workout.model import (
    WORKOUT_KINDS,
    Coordinates,
    Cycling,
    Running,
    WorkoutRecord,
    compute_pace,
    compute_speed,
    describe,
)

logger = logging.getLogger(__name__)

INVALID_INPUT_MESSAGE = "Inputs have to be positive numbers!"


class ValidationError(ValueError):
    """Raised when workout input is rejected before a record is built."""

    def __init__(self, fields: tuple[str, ...]) -> None:
        self.fields = fields
        super().__init__(f"{INVALID_INPUT_MESSAGE} ({', '.join(fields)})")


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _new_id() -> str:
    return uuid4().hex


def _parse_number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _parse_coordinates(coordinates: Any) -> Coordinates | None:
    if not isinstance(coordinates, (tuple, list)) or len(coordinates) != 2:
        return None
    lat = _parse_number(coordinates[0])
    lng = _parse_number(coordinates[1])
    if lat is None or lng is None:
        return None
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        return None
    return (lat, lng)


class WorkoutFactory:
    def __init__(
        self,
        clock: Callable[[], datetime] = _local_now,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._clock = clock
        self._id_factory = id_factory

    def create(
        self,
        kind: str,
        coordinates: Any,
        distance_km: Any,
        duration_min: Any,
        extra: Any,
    ) -> WorkoutRecord:
        bad: list[str] = []
        if kind not in WORKOUT_KINDS:
            bad.append("type")

        coords = _parse_coordinates(coordinates)
        if coords is None:
            bad.append("coordinates")

        distance = _parse_number(distance_km)
        if distance is None or distance <= 0:
            bad.append("distance")

        duration = _parse_number(duration_min)
        if duration is None or duration <= 0:
            bad.append("duration")

        extra_value = _parse_number(extra)
        if kind == "cycling":
            if extra_value is None or extra_value < 0:
                bad.append("elevation")
        elif extra_value is None or extra_value <= 0 or not extra_value.is_integer():
            bad.append("cadence")

        if bad:
            raise ValidationError(tuple(bad))

        assert coords is not None and distance is not None and duration is not None
        assert extra_value is not None
        if kind == "running":
            metric = compute_pace(distance, duration)
        else:
            metric = compute_speed(distance, duration)
        if not math.isfinite(metric) or metric <= 0:
            raise ValidationError(("distance", "duration"))

        created_at = self._clock()
        description = describe(kind, created_at)
        record: WorkoutRecord
        if kind == "running":
            record = Running(
                id=self._id_factory(),
                created_at=created_at,
                coordinates=coords,
                distance_km=distance,
                duration_min=duration,
                description=description,
                cadence_spm=int(extra_value),
                pace_min_per_km=metric,
            )
        else:
            record = Cycling(
                id=self._id_factory(),
                created_at=created_at,
                coordinates=coords,
                distance_km=distance,
                duration_min=duration,
                description=description,
                elevation_gain_m=extra_value,
                speed_km_per_h=metric,
            )
        logger.debug("Created %s workout %s at %s", record.kind, record.id, coords)
        return record

    def create_from_fields(
        self, coordinates: Any, fields: Mapping[str, Any]
    ) -> WorkoutRecord:
        kind = str(fields.get("type", "running"))
        extra_key = "elevation" if kind == "cycling" else "cadence"
        return self.create(
            kind,
            coordinates,
            fields.get("distance"),
            fields.get("duration"),
            fields.get(extra_key),
        )
