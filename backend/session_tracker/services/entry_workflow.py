"""Entry Workflow — draft, list and error state behind the session entry form.

States: UNINITIALIZED -> LOADING -> UNAUTHENTICATED | READY. Identity changes
re-run the transition from any state.

Invariants:
    - UNAUTHENTICATED means an empty list and no store call was made
    - A failed validation sets error and performs no IO
    - A successful save is always followed by a full reload before entries change;
      the list is never an optimistic projection of an in-flight write
    - A failed save keeps the draft untouched
    - busy is True exactly while a save or delete is in flight
    - A reload superseded by a later identity change is discarded

Design Decisions:
    - Identity read from the provider at call time and passed to the service
    - Provider callbacks are synchronous; they schedule the reload on the running loop
    - Errors from the service are shown (error) and logged, never re-raised:
      the workflow is the presentation boundary
"""

import asyncio
import logging
from dataclasses import replace
from datetime import date
from enum import Enum
from typing import Callable

from session_tracker.core.domain_types import EnergyAfter, Identity, SessionType
from session_tracker.core.enforce_entry import validate_entry
from session_tracker.core.entry_display import display_row, sort_for_display
from session_tracker.core.errors import SessionTrackerError
from session_tracker.core.repository_protocols import (
    EntryService, IdentityProvider, Unsubscribe,
)
from session_tracker.core.session_entry import (
    SessionEntry, apply_field_input, apply_session_type, new_draft,
)

logger = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    READY = "ready"


class EntryWorkflow:
    """Drives one user's entry form and list against a session service."""

    def __init__(
        self,
        service: EntryService,
        identity_provider: IdentityProvider | None = None,
        today: Callable[[], date] = date.today,
    ):
        self._service = service
        self._provider = identity_provider
        self._today = today
        self._unsubscribe: Unsubscribe | None = None
        self._pending: set[asyncio.Task] = set()
        self._transition = 0

        self.state = WorkflowState.UNINITIALIZED
        self.entries: list[SessionEntry] = []
        self.draft: SessionEntry = new_draft(today())
        self.error: str | None = None
        self.busy = False

    @property
    def identity(self) -> Identity | None:
        return self._provider.get_current_identity() if self._provider else None

    # ─── Lifecycle ───────────────────────────────────────────────

    async def mount(self) -> None:
        if self._provider and self._unsubscribe is None:
            self._unsubscribe = self._provider.subscribe(self._on_identity_change)
        await self.handle_identity_change(self.identity)

    def unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_identity_change(self, identity: Identity | None) -> None:
        task = asyncio.get_running_loop().create_task(
            self.handle_identity_change(identity),
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def wait_idle(self) -> None:
        """Wait for reloads scheduled by identity notifications."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def handle_identity_change(self, identity: Identity | None) -> None:
        self._transition += 1
        transition = self._transition
        self.state = WorkflowState.LOADING
        self.error = None
        if self._service.requires_identity and identity is None:
            self.entries = []
            self.state = WorkflowState.UNAUTHENTICATED
            return
        await self._reload(identity, transition)
        if transition == self._transition:
            self.state = WorkflowState.READY

    async def _reload(self, identity: Identity | None, transition: int) -> None:
        """Replace entries unless an identity change has superseded transition."""
        try:
            entries = await self._service.list_entries(identity)
        except SessionTrackerError as e:
            if transition != self._transition:
                return
            logger.error(
                f"Failed to load sessions: {e.message}",
                extra={"error_code": e.code},
            )
            self.entries = []
            self.error = e.message
        else:
            if transition == self._transition:
                self.entries = entries

    # ─── Draft editing ───────────────────────────────────────────

    def update_field(self, name: str, value: str) -> None:
        self.draft = apply_field_input(self.draft, name, value)

    def change_type(self, session_type: SessionType) -> None:
        self.draft = apply_session_type(self.draft, session_type)

    def change_energy(self, energy_after: EnergyAfter) -> None:
        self.draft = replace(self.draft, energy_after=energy_after)

    # ─── Actions ─────────────────────────────────────────────────

    async def save(self) -> bool:
        """Validate, persist, reload, reset the draft. Returns True on success."""
        self.error = None
        invalid = validate_entry(self.draft)
        if invalid:
            self.error = invalid["message"]
            return False

        self.busy = True
        identity = self.identity
        transition = self._transition
        try:
            await self._service.create_entry(self.draft, identity)
        except SessionTrackerError as e:
            logger.error(
                f"Failed to save session: {e.message}",
                extra={"error_code": e.code},
            )
            self.error = e.message
            return False
        else:
            await self._reload(identity, transition)
            self.draft = new_draft(self._today())
            return True
        finally:
            self.busy = False

    async def delete(self, entry_id: str) -> None:
        self.error = None
        self.busy = True
        identity = self.identity
        transition = self._transition
        try:
            await self._service.delete_entry(entry_id, identity)
        except SessionTrackerError as e:
            logger.error(
                f"Failed to delete session: {e.message}",
                extra={"session_id": entry_id, "error_code": e.code},
            )
            self.error = e.message
        else:
            if self._service.requires_identity:
                await self._reload(identity, transition)
            else:
                self.entries = [e for e in self.entries if e.id != entry_id]
        finally:
            self.busy = False

    # ─── View ────────────────────────────────────────────────────

    def display_rows(self) -> list[dict]:
        return [display_row(e) for e in sort_for_display(self.entries)]
