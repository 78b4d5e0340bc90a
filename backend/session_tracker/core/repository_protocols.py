"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Local store is synchronous (small file IO); remote store and services
      are async because their implementations talk to a database
"""

from typing import Callable, Protocol

from session_tracker.core.domain_types import Identity, OwnerId, SessionId, TaskId
from session_tracker.core.session_entry import SessionEntry
from session_tracker.core.session_rows import (
    NewSession, NewTask, SessionWithTasks, TaskRow,
)

IdentityListener = Callable[[Identity | None], None]
Unsubscribe = Callable[[], None]


class KeyValueStorage(Protocol):
    """String key-value storage backing the local session store."""
    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...


class LocalEntryStore(Protocol):
    """Contract for the local (single JSON list) session store."""
    def load(self) -> list[SessionEntry]: ...
    def save(
        self, entries: list[SessionEntry], *, raise_on_error: bool = False,
    ) -> None: ...


class RemoteSessionStore(Protocol):
    """Contract for the two-table remote store — every call scoped to an owner."""
    async def fetch_all(self, owner_id: OwnerId) -> list[SessionWithTasks]: ...
    async def create(
        self, session: NewSession, tasks: list[NewTask],
    ) -> SessionWithTasks: ...
    async def update_task_completed(
        self, owner_id: OwnerId, task_id: TaskId, completed: bool,
    ) -> TaskRow: ...
    async def delete(self, owner_id: OwnerId, session_id: SessionId) -> None: ...


class IdentityProvider(Protocol):
    """External identity collaborator — only the identity id is read."""
    def get_current_identity(self) -> Identity | None: ...
    def subscribe(self, on_change: IdentityListener) -> Unsubscribe: ...
    def sign_out(self) -> None: ...


class EntryService(Protocol):
    """What the entry workflow needs from a session service variant."""
    requires_identity: bool

    async def list_entries(self, identity: Identity | None) -> list[SessionEntry]: ...
    async def create_entry(
        self, entry: SessionEntry, identity: Identity | None,
    ) -> SessionEntry: ...
    async def delete_entry(self, entry_id: str, identity: Identity | None) -> None: ...
