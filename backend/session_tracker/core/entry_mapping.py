"""Entry Mapping — flat SessionEntry <-> remote session row.

Invariants:
    - to_entry never derives tasks_completed from tasks: it is always None
    - notes: None in storage <-> '' in the entry
    - to_row drops tasks_completed (not represented remotely)
    - Both functions are PURE

Design Decisions:
    - tasks_completed is write-only from the form. The asymmetry is kept
      as-is; reconstructing it from task rows would change observable behavior
"""

from datetime import date

from session_tracker.core.domain_types import EnergyAfter, OwnerId, SessionType
from session_tracker.core.errors import CreateError
from session_tracker.core.session_entry import SessionEntry
from session_tracker.core.session_rows import NewSession, SessionWithTasks


def to_entry(row: SessionWithTasks) -> SessionEntry:
    """Flatten a fetched session (with tasks) into the UI shape."""
    return SessionEntry(
        id=str(row.id),
        date=row.session_date.isoformat(),
        session_type=row.session_type,
        planned_minutes=row.planned_minutes,
        actual_minutes=row.actual_minutes,
        tasks_completed=None,
        energy_after=row.energy_after,
        notes=row.notes or "",
    )


def to_row(entry: SessionEntry, owner_id: OwnerId) -> NewSession:
    """Build the session insert payload for an owner."""
    try:
        session_date = date.fromisoformat(entry.date)
    except (TypeError, ValueError) as e:
        raise CreateError(f"invalid session_date {entry.date!r}: {e}") from e
    return NewSession(
        session_date=session_date,
        session_type=SessionType(entry.session_type),
        planned_minutes=entry.planned_minutes,
        actual_minutes=entry.actual_minutes,
        energy_after=EnergyAfter(entry.energy_after),
        notes=entry.notes or None,
        user_id=owner_id,
    )
