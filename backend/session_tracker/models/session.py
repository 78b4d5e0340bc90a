"""Focus Session ORM — one row per recorded session (table `sessions`).

Invariants:
    - id is UUID primary key generated on insert
    - user_id is non-nullable: no session row without an owner
    - created_at assigned at insert time, used as the ordering tie-breaker
    - Deleting a session deletes its tasks (FK ON DELETE CASCADE)

Design Decisions:
    - session_type/energy_after stored as their string values (String columns),
      converted to enums at the store boundary
    - No relationship() to tasks: tasks are loaded by one batched query in the store
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, Index, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from session_tracker.db.base import Base


class FocusSession(Base):
    """A focus session owned by one user."""
    __tablename__ = "sessions"
    __table_args__ = (
        Index("ix_sessions_user_date", "user_id", "session_date", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    session_date: Mapped[date] = mapped_column(Date, nullable=False)
    session_type: Mapped[str] = mapped_column(String(10), nullable=False)
    planned_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    actual_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    energy_after: Mapped[str] = mapped_column(String(10), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
