"""Session Services — map entries onto a store and own the identity precondition.

Invariants:
    - Remote: require_session() runs before any store call; no identity -> AuthRequiredError
    - Remote ids come from the store; local ids are UUID4 strings generated here
    - Every create validates the entry first; a validation failure performs no IO
    - Local create prepends the new entry (newest first) and saves with raise_on_error
    - Deleting an id that names no row (unknown, foreign or malformed) is a no-op

Design Decisions:
    - Identity is an explicit argument on every call, never read from a global
    - Both variants expose the same async interface (EntryService) so the
      workflow and the API do not care which one they drive
"""

import logging
import uuid
from dataclasses import replace

from session_tracker.config import Settings
from session_tracker.core.domain_types import Identity, OwnerId, SessionId, TaskId
from session_tracker.core.enforce_entry import ensure_valid
from session_tracker.core.entry_mapping import to_entry, to_row
from session_tracker.core.errors import AuthRequiredError, UpdateError
from session_tracker.core.repository_protocols import (
    EntryService, LocalEntryStore, RemoteSessionStore,
)
from session_tracker.core.session_entry import SessionEntry
from session_tracker.core.session_rows import TaskRow
from session_tracker.infrastructure.database import DatabaseSessionManager
from session_tracker.infrastructure.local_store import (
    FileKeyValueStorage, LocalSessionStore,
)
from session_tracker.infrastructure.remote_store import SqlSessionStore

logger = logging.getLogger(__name__)


def require_session(identity: Identity | None) -> OwnerId:
    """Owner id of the authenticated identity, or AuthRequiredError."""
    if identity is None:
        raise AuthRequiredError()
    return OwnerId(identity.id)


def _parse_uuid(value: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class RemoteSessionService:
    """Entries persisted as session rows owned by the calling identity."""

    requires_identity = True

    def __init__(self, store: RemoteSessionStore):
        self._store = store

    async def list_entries(self, identity: Identity | None) -> list[SessionEntry]:
        owner_id = require_session(identity)
        rows = await self._store.fetch_all(owner_id)
        return [to_entry(row) for row in rows]

    async def create_entry(
        self, entry: SessionEntry, identity: Identity | None,
    ) -> SessionEntry:
        owner_id = require_session(identity)
        ensure_valid(entry)
        created = await self._store.create(to_row(entry, owner_id), [])
        return to_entry(created)

    async def delete_entry(self, entry_id: str, identity: Identity | None) -> None:
        owner_id = require_session(identity)
        session_id = _parse_uuid(entry_id)
        if session_id is None:
            logger.info("Delete of unknown session id ignored", extra={"session_id": entry_id})
            return
        await self._store.delete(owner_id, SessionId(session_id))

    async def set_task_completed(
        self, task_id: str, completed: bool, identity: Identity | None,
    ) -> TaskRow:
        owner_id = require_session(identity)
        parsed = _parse_uuid(task_id)
        if parsed is None:
            raise UpdateError(f"invalid task id {task_id!r}", not_found=True)
        return await self._store.update_task_completed(
            owner_id, TaskId(parsed), completed,
        )


class LocalSessionService:
    """Entries kept in one local JSON list; identity is ignored."""

    requires_identity = False

    def __init__(self, store: LocalEntryStore):
        self._store = store

    async def list_entries(self, identity: Identity | None = None) -> list[SessionEntry]:
        return self._store.load()

    async def create_entry(
        self, entry: SessionEntry, identity: Identity | None = None,
    ) -> SessionEntry:
        ensure_valid(entry)
        created = replace(entry, id=str(uuid.uuid4()))
        self._store.save([created, *self._store.load()], raise_on_error=True)
        logger.info("Session created", extra={"session_id": created.id})
        return created

    async def delete_entry(self, entry_id: str, identity: Identity | None = None) -> None:
        remaining = [e for e in self._store.load() if e.id != entry_id]
        self._store.save(remaining)


def build_entry_service(
    settings: Settings, db: DatabaseSessionManager | None = None,
) -> EntryService:
    """Service variant selected by settings.storage_backend."""
    if settings.storage_backend == "local":
        storage = FileKeyValueStorage(settings.local_storage_dir)
        return LocalSessionService(
            LocalSessionStore(storage, settings.local_storage_key),
        )
    if db is None:
        raise RuntimeError("Remote storage backend requires a database")
    return RemoteSessionService(SqlSessionStore(db))
