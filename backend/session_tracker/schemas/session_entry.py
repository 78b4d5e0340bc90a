"""Session Entry Schemas — Pydantic models for the entry and task endpoints.

Invariants:
    - Field aliases match the persisted camelCase names (sessionType, actualMinutes, ...)
    - actual_minutes may be null in a request: the validation policy, not
      pydantic, rejects it with the same message the form shows
    - tasks_completed and notes are optional; notes defaults to ''
"""

from datetime import date as date_type, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from session_tracker.core.domain_types import EnergyAfter, SessionType, default_planned_for
from session_tracker.core.session_entry import SessionEntry
from session_tracker.core.session_rows import TaskRow


class SessionEntryCreate(BaseModel):
    """New entry submitted by the form."""
    model_config = ConfigDict(populate_by_name=True)

    date: str = Field(default_factory=lambda: date_type.today().isoformat())
    session_type: SessionType = Field(SessionType.GREEN, alias="sessionType")
    planned_minutes: int | float | None = Field(None, alias="plannedMinutes")
    actual_minutes: int | float | None = Field(None, alias="actualMinutes")
    tasks_completed: int | None = Field(None, alias="tasksCompleted")
    energy_after: EnergyAfter = Field(EnergyAfter.SAME, alias="energyAfter")
    notes: str = ""

    def to_entry(self) -> SessionEntry:
        planned = self.planned_minutes
        if planned is None:
            planned = default_planned_for(self.session_type)
        return SessionEntry(
            id="",
            date=self.date,
            session_type=self.session_type,
            planned_minutes=planned,
            actual_minutes=self.actual_minutes,
            tasks_completed=self.tasks_completed,
            energy_after=self.energy_after,
            notes=self.notes,
        )


class SessionEntryResponse(BaseModel):
    """Entry as listed to the client."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    date: str | None
    session_type: str | None = Field(alias="sessionType")
    planned_minutes: int | float | None = Field(alias="plannedMinutes")
    actual_minutes: int | float | None = Field(alias="actualMinutes")
    tasks_completed: int | float | None = Field(alias="tasksCompleted")
    energy_after: str | None = Field(alias="energyAfter")
    notes: str

    @classmethod
    def from_entry(cls, entry: SessionEntry) -> "SessionEntryResponse":
        return cls.model_validate(entry.to_dict() | {"notes": entry.notes or ""})


class TaskCompletedUpdate(BaseModel):
    completed: bool


class TaskResponse(BaseModel):
    id: UUID
    session_id: UUID
    task_name: str
    sort_order: int | None
    planned_minutes: int | None
    completed: bool
    created_at: datetime
    user_id: str

    @classmethod
    def from_row(cls, row: TaskRow) -> "TaskResponse":
        return cls(
            id=row.id,
            session_id=row.session_id,
            task_name=row.task_name,
            sort_order=row.sort_order,
            planned_minutes=row.planned_minutes,
            completed=row.completed,
            created_at=row.created_at,
            user_id=row.user_id,
        )
