"""Interfaces of the outside world the session controller drives."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, Protocol

from mapty.workout.model import Coordinates, WorkoutRecord

NotifyLevel = Literal["info", "warning", "negative"]


class LocationUnavailable(RuntimeError):
    """Raised when the current position cannot be determined."""


class LocationProvider(Protocol):
    async def request_current_position(self) -> Coordinates: ...


class MapView(Protocol):
    def center_on(self, coords: Coordinates, zoom: int) -> None: ...

    def place_marker(self, coords: Coordinates, label: str, style_class: str) -> None: ...

    def pan_to(self, coords: Coordinates, zoom: int, animate: bool) -> None: ...

    def clear_markers(self) -> None: ...


class WorkoutForm(Protocol):
    def read_fields(self) -> Mapping[str, Any]: ...

    def show(self) -> None: ...

    def hide_and_clear(self) -> None: ...

    def show_fields_for(self, kind: str) -> None: ...


class WorkoutList(Protocol):
    def render_item(self, record: WorkoutRecord) -> None: ...

    def clear(self) -> None: ...


class Notifier(Protocol):
    def notify(self, message: str, level: NotifyLevel = "info") -> None: ...


@dataclass(frozen=True)
class Collaborators:
    location: LocationProvider
    map_view: MapView
    form: WorkoutForm
    workout_list: WorkoutList
    notifier: Notifier
