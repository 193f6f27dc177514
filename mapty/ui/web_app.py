"""NiceGUI web UI for the Mapty workout tracker."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from nicegui import events, ui

from mapty.core.collaborators import Collaborators, LocationUnavailable, NotifyLevel
from mapty.core.config import AppConfig
from mapty.core.session import SessionController
from mapty.workout.byte_store import FileByteStore
from mapty.workout.model import Coordinates, Running, WorkoutRecord
from mapty.workout.persistence import WorkoutPersistence

logger = logging.getLogger(__name__)

POPUP_OPTIONS: dict[str, Any] = {
    "maxWidth": 250,
    "minWidth": 100,
    "autoClose": False,
    "closeOnClick": False,
}
PAN_DURATION_SEC = 1

_GEOLOCATION_JS = """
return await new Promise((resolve) => {
  if (!navigator.geolocation) {
    resolve(null);
    return;
  }
  navigator.geolocation.getCurrentPosition(
    (position) => resolve([position.coords.latitude, position.coords.longitude]),
    () => resolve(null),
  );
});
"""

_STYLE = """
<style>
  :root {
    --mp-brand-1: #ffb545;
    --mp-brand-2: #00c46a;
    --mp-dark-1: #2d3439;
    --mp-dark-2: #42484d;
    --mp-light: #ececec;
  }
  body {
    background: var(--mp-dark-1);
    color: var(--mp-light);
    font-family: "Manrope", Arial, sans-serif;
  }
  .mp-sidebar {
    background: var(--mp-dark-1);
    width: 34rem;
    max-width: 45vw;
    overflow-y: auto;
  }
  .mp-card {
    background: var(--mp-dark-2);
    border-radius: 6px;
  }
  .mp-workout--running { border-left: 5px solid var(--mp-brand-2); }
  .mp-workout--cycling { border-left: 5px solid var(--mp-brand-1); }
  .leaflet-popup .leaflet-popup-content-wrapper {
    background: var(--mp-dark-1);
    color: var(--mp-light);
    border-radius: 5px;
  }
  .running-popup .leaflet-popup-content-wrapper { border-left: 5px solid var(--mp-brand-2); }
  .cycling-popup .leaflet-popup-content-wrapper { border-left: 5px solid var(--mp-brand-1); }
</style>
"""


def _fmt_number(value: float, digits: int = 1) -> str:
    if float(value).is_integer():
        return f"{int(value)}"
    return f"{value:.{digits}f}"


def workout_details(record: WorkoutRecord) -> list[tuple[str, str, str]]:
    """Icon, value and unit triples shown for a workout list entry."""
    if isinstance(record, Running):
        return [
            ("🏃‍♂️", _fmt_number(record.distance_km, 2), "km"),
            ("⏱", _fmt_number(record.duration_min), "min"),
            ("⚡️", f"{record.pace_min_per_km:.1f}", "min/km"),
            ("🦶🏼", f"{record.cadence_spm:d}", "spm"),
        ]
    return [
        ("🚴‍♀️", _fmt_number(record.distance_km, 2), "km"),
        ("⏱", _fmt_number(record.duration_min), "min"),
        ("⚡️", f"{record.speed_km_per_h:.1f}", "km/h"),
        ("⛰", _fmt_number(record.elevation_gain_m), "m"),
    ]


class BrowserLocation:
    def __init__(self, timeout_sec: float) -> None:
        self._timeout_sec = timeout_sec

    async def request_current_position(self) -> Coordinates:
        try:
            result = await ui.run_javascript(_GEOLOCATION_JS, timeout=self._timeout_sec)
        except TimeoutError as exc:
            raise LocationUnavailable("Browser did not report a position in time") from exc
        if not isinstance(result, list) or len(result) != 2:
            raise LocationUnavailable("Geolocation refused or not supported by the browser")
        return (float(result[0]), float(result[1]))


class LeafletMapView:
    def __init__(
        self,
        container: ui.element,
        config: AppConfig,
        on_pick: Callable[[Coordinates], None],
    ) -> None:
        self._container = container
        self._config = config
        self._on_pick = on_pick
        self._map: ui.leaflet | None = None
        self._markers: list[Any] = []

    def center_on(self, coords: Coordinates, zoom: int) -> None:
        if self._map is not None:
            self._map.set_center(coords)
            self._map.set_zoom(zoom)
            return
        with self._container:
            self._map = ui.leaflet(center=coords, zoom=zoom).classes("w-full h-full")
        self._map.clear_layers()
        self._map.tile_layer(
            url_template=self._config.tile_url,
            options={"attribution": self._config.tile_attribution},
        )
        self._map.on("map-click", self._handle_click)

    def _handle_click(self, e: events.GenericEventArguments) -> None:
        latlng = e.args.get("latlng") or {}
        try:
            coords = (float(latlng["lat"]), float(latlng["lng"]))
        except (KeyError, TypeError, ValueError):
            logger.debug("Ignoring map click without coordinates: %r", e.args)
            return
        self._on_pick(coords)

    def place_marker(self, coords: Coordinates, label: str, style_class: str) -> None:
        if self._map is None:
            return
        marker = self._map.marker(latlng=coords)
        marker.run_method("bindPopup", label, {**POPUP_OPTIONS, "className": style_class})
        marker.run_method("openPopup")
        self._markers.append(marker)

    def pan_to(self, coords: Coordinates, zoom: int, animate: bool) -> None:
        if self._map is None:
            return
        self._map.run_map_method(
            "setView",
            list(coords),
            zoom,
            {"animate": animate, "pan": {"duration": PAN_DURATION_SEC}},
        )

    def clear_markers(self) -> None:
        if self._map is None:
            return
        for marker in self._markers:
            self._map.remove_layer(marker)
        self._markers.clear()


class WebWorkoutForm:
    def __init__(
        self,
        on_submit: Callable[[], Any],
        on_type_changed: Callable[[str], Any],
    ) -> None:
        with ui.card().classes("w-full mp-card") as self._card:
            with ui.grid(columns=2).classes("w-full gap-2"):
                self._type = ui.select(
                    {"running": "Running", "cycling": "Cycling"},
                    value="running",
                    label="Type",
                    on_change=lambda e: on_type_changed(str(e.value)),
                )
                self._distance = ui.number("Distance", placeholder="km")
                self._duration = ui.number("Duration", placeholder="min")
                self._cadence = ui.number("Cadence", placeholder="step/min")
                self._elevation = ui.number("Elev Gain", placeholder="meters")
            ui.button("OK", on_click=on_submit).props("color=positive")
        for field in (self._distance, self._duration, self._cadence, self._elevation):
            field.on("keydown.enter", on_submit)
        self._elevation.set_visibility(False)
        self._card.set_visibility(False)

    def read_fields(self) -> Mapping[str, Any]:
        return {
            "type": self._type.value,
            "distance": self._distance.value,
            "duration": self._duration.value,
            "cadence": self._cadence.value,
            "elevation": self._elevation.value,
        }

    def show(self) -> None:
        self._card.set_visibility(True)
        self._distance.run_method("focus")

    def hide_and_clear(self) -> None:
        for field in (self._distance, self._duration, self._cadence, self._elevation):
            field.value = None
        self._card.set_visibility(False)

    def show_fields_for(self, kind: str) -> None:
        self._cadence.set_visibility(kind != "cycling")
        self._elevation.set_visibility(kind == "cycling")


class WebWorkoutList:
    def __init__(self, on_click: Callable[[str], Any]) -> None:
        self._on_click = on_click
        self._column = ui.column().classes("w-full gap-2")

    def render_item(self, record: WorkoutRecord) -> None:
        with self._column:
            with ui.card().classes(
                f"w-full cursor-pointer mp-card mp-workout--{record.kind}"
            ) as card:
                ui.label(record.description).classes("text-base font-semibold")
                with ui.row().classes("w-full gap-4"):
                    for icon, value, unit in workout_details(record):
                        ui.label(f"{icon} {value} {unit}").classes("text-sm")
        # newest first, like the form it sits under
        card.move(self._column, target_index=0)

        def on_pick(workout_id: str = record.id) -> None:
            self._on_click(workout_id)

        card.on("click", on_pick)

    def clear(self) -> None:
        self._column.clear()


class WebNotifier:
    def notify(self, message: str, level: NotifyLevel = "info") -> None:
        ui.notify(message, type=level)


def run_web_ui(config: AppConfig) -> int:
    byte_store = FileByteStore(config.storage_dir)

    @ui.page("/")
    async def index() -> None:
        ui.add_head_html(_STYLE)

        async def on_reset() -> None:
            await controller.reset()

        with ui.row().classes("w-full h-screen no-wrap gap-0"):
            with ui.column().classes("mp-sidebar h-full p-6 gap-4"):
                ui.label("🗺 Mapty").classes("text-2xl font-bold")
                form = WebWorkoutForm(
                    on_submit=lambda: controller.on_submit(),
                    on_type_changed=lambda kind: controller.on_type_changed(kind),
                )
                workout_list = WebWorkoutList(
                    on_click=lambda workout_id: controller.on_item_click(workout_id)
                )
                ui.button("Reset workouts", on_click=on_reset).props("outline color=negative")
            map_container = ui.column().classes("h-full grow")

        map_view = LeafletMapView(
            map_container,
            config,
            on_pick=lambda coords: controller.on_location_picked(coords),
        )
        controller = SessionController(
            config,
            Collaborators(
                location=BrowserLocation(config.location_timeout_sec),
                map_view=map_view,
                form=form,
                workout_list=workout_list,
                notifier=WebNotifier(),
            ),
            WorkoutPersistence(byte_store, key=config.storage_key),
        )

        await ui.context.client.connected()
        await controller.start()

    ui.run(host=config.web_host, port=config.web_port, reload=False, title="Mapty")
    return 0
