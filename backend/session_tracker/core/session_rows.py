"""Session Rows — the remote two-table shape of a session entry.

Invariants:
    - SessionRow.user_id is never empty once persisted
    - SessionWithTasks.tasks is ordered by sort_order ascending, nulls last
    - NewSession/NewTask are the insert payloads: no id, no created_at
      (and no session_id for tasks) — the store assigns those
"""

from dataclasses import dataclass, field
from datetime import date, datetime

from session_tracker.core.domain_types import (
    EnergyAfter, OwnerId, SessionId, SessionType, TaskId,
)


@dataclass(frozen=True)
class NewSession:
    session_date: date
    session_type: SessionType
    planned_minutes: int | float
    actual_minutes: int | float
    energy_after: EnergyAfter
    notes: str | None
    user_id: OwnerId


@dataclass(frozen=True)
class NewTask:
    task_name: str
    user_id: OwnerId
    sort_order: int | None = None
    planned_minutes: int | None = None
    completed: bool = False


@dataclass(frozen=True)
class TaskRow:
    id: TaskId
    session_id: SessionId
    task_name: str
    sort_order: int | None
    planned_minutes: int | None
    completed: bool
    created_at: datetime
    user_id: OwnerId


@dataclass(frozen=True)
class SessionRow:
    id: SessionId
    session_date: date
    session_type: SessionType
    planned_minutes: int | float
    actual_minutes: int | float
    energy_after: EnergyAfter
    notes: str | None
    created_at: datetime
    user_id: OwnerId


@dataclass(frozen=True)
class SessionWithTasks(SessionRow):
    """Session row composed with its ordered child tasks."""
    tasks: list[TaskRow] = field(default_factory=list)
