"""Workout domain models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Union

WorkoutKind = Literal["running", "cycling"]
Coordinates = tuple[float, float]

WORKOUT_KINDS: tuple[WorkoutKind, ...] = ("running", "cycling")

# strftime("%B") would follow the process locale.
MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_MARKER_ICONS: dict[str, str] = {
    "running": "🏃‍♂️",
    "cycling": "🚴‍♀️",
}


def describe(kind: str, created_at: datetime) -> str:
    return f"{kind.capitalize()} on {MONTHS[created_at.month - 1]} {created_at.day}"


def compute_pace(distance_km: float, duration_min: float) -> float:
    """Minutes per kilometre."""
    return duration_min / distance_km


def compute_speed(distance_km: float, duration_min: float) -> float:
    """Kilometres per hour."""
    return distance_km / (duration_min / 60)


@dataclass(frozen=True)
class Running:
    id: str
    created_at: datetime
    coordinates: Coordinates
    distance_km: float
    duration_min: float
    description: str
    cadence_spm: int
    pace_min_per_km: float
    kind: Literal["running"] = "running"

    @property
    def marker_label(self) -> str:
        return f"{_MARKER_ICONS[self.kind]} {self.description}"

    @property
    def popup_class(self) -> str:
        return f"{self.kind}-popup"


@dataclass(frozen=True)
class Cycling:
    id: str
    created_at: datetime
    coordinates: Coordinates
    distance_km: float
    duration_min: float
    description: str
    elevation_gain_m: float
    speed_km_per_h: float
    kind: Literal["cycling"] = "cycling"

    @property
    def marker_label(self) -> str:
        return f"{_MARKER_ICONS[self.kind]} {self.description}"

    @property
    def popup_class(self) -> str:
        return f"{self.kind}-popup"


WorkoutRecord = Union[Running, Cycling]
