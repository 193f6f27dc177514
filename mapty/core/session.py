"""Session controller tying the workout core to map, form and list collaborators."""

from __future__ import annotations

import enum
import logging

from mapty.core.collaborators import Collaborators, LocationUnavailable
from mapty.core.config import AppConfig
from mapty.workout.factory import ValidationError, WorkoutFactory
from mapty.workout.model import Coordinates, WorkoutRecord
from mapty.workout.persistence import CorruptPersistedState, WorkoutPersistence
from mapty.workout.store import NotFound, WorkoutStore

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    INITIALIZING = "initializing"
    AWAITING_LOCATION = "awaiting_location"
    MAP_READY = "map_ready"
    AWAITING_INPUT = "awaiting_input"
    FORM_OPEN = "form_open"


class SessionController:
    def __init__(
        self,
        config: AppConfig,
        collaborators: Collaborators,
        persistence: WorkoutPersistence,
        factory: WorkoutFactory | None = None,
    ) -> None:
        self._config = config
        self._ui = collaborators
        self._persistence = persistence
        self._factory = factory or WorkoutFactory()
        self._store = WorkoutStore()
        self._state = SessionState.INITIALIZING
        self._map_ready = False
        self._pending_coords: Coordinates | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def map_ready(self) -> bool:
        return self._map_ready

    @property
    def workouts(self) -> tuple[WorkoutRecord, ...]:
        return self._store.all()

    async def start(self) -> None:
        self._state = SessionState.AWAITING_LOCATION
        try:
            center = await self._ui.location.request_current_position()
        except LocationUnavailable as exc:
            logger.warning("Location unavailable: %s", exc)
            self._ui.notifier.notify("Could not get your position", "warning")
            self._state = SessionState.INITIALIZING
            return

        logger.debug("https://www.google.com/maps/@%s,%s", center[0], center[1])
        self._ui.map_view.center_on(center, self._config.map_zoom)
        self._map_ready = True
        self._state = SessionState.MAP_READY

        result = self._persistence.load()
        if isinstance(result.error, CorruptPersistedState):
            self._ui.notifier.notify("Saved workouts were unreadable and have been discarded", "warning")
        elif result.error is not None:
            self._ui.notifier.notify("Storage unavailable, workouts will not be saved", "warning")

        self._store.replace_all(result.records)
        for record in self._store.all():
            self._render(record)

    def on_location_picked(self, coords: Coordinates) -> None:
        if not self._map_ready:
            return
        self._pending_coords = coords
        self._ui.form.show()
        self._state = SessionState.FORM_OPEN

    def on_type_changed(self, kind: str) -> None:
        self._ui.form.show_fields_for(kind)

    def on_submit(self) -> WorkoutRecord | None:
        if self._state is not SessionState.FORM_OPEN or self._pending_coords is None:
            logger.debug("Ignoring submit in state %s", self._state.value)
            return None

        fields = self._ui.form.read_fields()
        try:
            record = self._factory.create_from_fields(self._pending_coords, fields)
        except ValidationError as exc:
            logger.info("Rejected workout input: %s", ", ".join(exc.fields))
            self._ui.notifier.notify(str(exc), "negative")
            return None

        self._store.append(record)
        self._render(record)
        if self._persistence.save(self._store.all()) is not None:
            self._ui.notifier.notify("Storage unavailable, workout kept for this session only", "warning")

        self._ui.form.hide_and_clear()
        self._pending_coords = None
        self._state = SessionState.AWAITING_INPUT
        return record

    def on_item_click(self, workout_id: str) -> None:
        if not self._map_ready:
            return
        try:
            record = self._store.find_by_id(workout_id)
        except NotFound:
            logger.debug("No workout with id %s", workout_id)
            return
        self._ui.map_view.pan_to(record.coordinates, self._config.map_zoom, animate=True)

    async def reset(self) -> None:
        if self._persistence.clear() is not None:
            self._ui.notifier.notify("Could not clear saved workouts", "warning")
        self._store.replace_all(())
        self._ui.map_view.clear_markers()
        self._ui.workout_list.clear()
        self._ui.form.hide_and_clear()
        self._pending_coords = None
        self._map_ready = False
        self._state = SessionState.INITIALIZING
        await self.start()

    def _render(self, record: WorkoutRecord) -> None:
        self._ui.map_view.place_marker(record.coordinates, record.marker_label, record.popup_class)
        self._ui.workout_list.render_item(record)
