"""Session Entry Routes — list, create and delete entries; toggle task completion.

Invariants:
    - Routes only translate HTTP <-> service calls; all rules live in services/core
    - Service errors propagate to the global SessionTrackerError handler
    - Entries are listed newest first (session_date desc, created_at desc)
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from session_tracker.api.dependencies import get_entry_service, get_identity
from session_tracker.core.domain_types import Identity
from session_tracker.core.errors import UpdateError
from session_tracker.core.repository_protocols import EntryService
from session_tracker.schemas.session_entry import (
    SessionEntryCreate, SessionEntryResponse, TaskCompletedUpdate, TaskResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["sessions"])


@router.get("/sessions", response_model=list[SessionEntryResponse])
async def list_sessions(
    identity: Identity | None = Depends(get_identity),
    service: EntryService = Depends(get_entry_service),
):
    """List the caller's session entries."""
    entries = await service.list_entries(identity)
    return [SessionEntryResponse.from_entry(e) for e in entries]


@router.post(
    "/sessions", response_model=SessionEntryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_session(
    body: SessionEntryCreate,
    identity: Identity | None = Depends(get_identity),
    service: EntryService = Depends(get_entry_service),
):
    """Record a new session entry."""
    created = await service.create_entry(body.to_entry(), identity)
    return SessionEntryResponse.from_entry(created)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: str,
    identity: Identity | None = Depends(get_identity),
    service: EntryService = Depends(get_entry_service),
):
    """Delete an entry (and its tasks). Unknown ids are a no-op."""
    await service.delete_entry(session_id, identity)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    body: TaskCompletedUpdate,
    identity: Identity | None = Depends(get_identity),
    service: EntryService = Depends(get_entry_service),
):
    """Set a task's completed flag (remote storage only)."""
    set_task_completed = getattr(service, "set_task_completed", None)
    if set_task_completed is None:
        raise UpdateError("tasks are not stored by the local backend", not_found=True)
    task = await set_task_completed(task_id, body.completed, identity)
    return TaskResponse.from_row(task)
