"""Key-value string stores backing workout persistence."""

from __future__ import annotations

import re
from collections.abc import MutableMapping
from pathlib import Path
from typing import Protocol


def default_storage_dir() -> Path:
    return Path.home() / ".mapty"


class ByteStoreUnavailable(OSError):
    """Raised when the backing store cannot be used at all."""


class ByteStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


def _key_filename(key: str) -> str:
    s = re.sub(r"[^a-zA-Z0-9_.-]+", "-", key.strip()).strip("-.")
    if not s:
        raise ValueError(f"Invalid storage key {key!r}")
    return f"{s}.json"


class FileByteStore:
    """One UTF-8 file per key under a directory."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = root or default_storage_dir()

    def _path(self, key: str) -> Path:
        return self.root / _key_filename(key)

    def get(self, key: str) -> str | None:
        target = self._path(key)
        if not target.exists():
            return None
        return target.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        target = self._path(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_suffix(".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(target)

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class MappingByteStore:
    """Adapts a mutable mapping (a dict, NiceGUI ``app.storage``) to a byte store.

    Passing ``None`` models storage that is unavailable in this environment.
    """

    def __init__(self, mapping: MutableMapping[str, str] | None) -> None:
        self._mapping = mapping

    def _require(self) -> MutableMapping[str, str]:
        if self._mapping is None:
            raise ByteStoreUnavailable("Key-value storage is not available")
        return self._mapping

    def get(self, key: str) -> str | None:
        value = self._require().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        self._require()[key] = value

    def remove(self, key: str) -> None:
        self._require().pop(key, None)
