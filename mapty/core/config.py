"""Application configuration passed explicitly to the session and UI."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from mapty.workout.byte_store import default_storage_dir
from mapty.workout.persistence import DEFAULT_STORAGE_KEY

DEFAULT_TILE_URL = "https://tile.openstreetmap.fr/hot/{z}/{x}/{y}.png"
DEFAULT_TILE_ATTRIBUTION = (
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'
)


@dataclass(frozen=True)
class AppConfig:
    storage_dir: Path = field(default_factory=default_storage_dir)
    storage_key: str = DEFAULT_STORAGE_KEY
    map_zoom: int = 13
    tile_url: str = DEFAULT_TILE_URL
    tile_attribution: str = DEFAULT_TILE_ATTRIBUTION
    location_timeout_sec: float = 30.0
    web_host: str = "127.0.0.1"
    web_port: int = 8088
