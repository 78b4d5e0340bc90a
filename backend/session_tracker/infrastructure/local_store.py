"""Local Session Store — the whole entry list as one JSON value under a fixed key.

Invariants:
    - load() never raises: absent, unparseable, undecodable or non-list payloads yield []
    - save() overwrites the full list; failures are logged and swallowed
      unless the caller asks for them (raise_on_error=True)
    - load() after save(entries) returns a list equal to entries
    - No versioning or migration: missing fields read as None, unknown fields dropped

Design Decisions:
    - KeyValueStorage protocol underneath: a file per key on disk, a dict in tests
"""

import json
import logging
import os
from pathlib import Path

from session_tracker.core.errors import StorageReadError, StorageWriteError
from session_tracker.core.repository_protocols import KeyValueStorage
from session_tracker.core.session_entry import SessionEntry

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "session-tracker.sessions"


class FileKeyValueStorage:
    """One UTF-8 file per key under root_dir."""

    def __init__(self, root_dir: str | os.PathLike):
        self._root = Path(root_dir)

    def _path(self, key: str) -> Path:
        return self._root / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        self._root.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, encoding="utf-8")
        os.replace(tmp, path)


class MemoryKeyValueStorage:
    """Dict-backed storage for tests and ephemeral runs."""

    def __init__(self, items: dict[str, str] | None = None):
        self.items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class LocalSessionStore:
    """Persists session entries as a single JSON list."""

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_STORAGE_KEY):
        self._storage = storage
        self._key = key

    def load(self) -> list[SessionEntry]:
        try:
            return self._read()
        except StorageReadError as e:
            logger.warning(e.message, extra={"error_code": e.code})
            return []

    def _read(self) -> list[SessionEntry]:
        try:
            raw = self._storage.get_item(self._key)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(str(e)) from e
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise StorageReadError(f"payload is not valid JSON ({e})") from e
        if not isinstance(data, list):
            raise StorageReadError(
                f"payload is {type(data).__name__}, expected list",
            )
        entries = []
        for item in data:
            if not isinstance(item, dict):
                logger.warning("Skipping non-object session entry")
                continue
            entries.append(SessionEntry.from_dict(item))
        return entries

    def save(
        self, entries: list[SessionEntry], *, raise_on_error: bool = False,
    ) -> None:
        try:
            payload = json.dumps([e.to_dict() for e in entries])
            self._storage.set_item(self._key, payload)
        except (OSError, TypeError, ValueError) as e:
            error = StorageWriteError(str(e))
            logger.error(
                error.message,
                extra={"error_code": error.code, "entry_count": len(entries)},
            )
            if raise_on_error:
                raise error from e
