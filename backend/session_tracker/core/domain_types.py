"""Domain Types — tiers, energy ratings, identity and row id types.

Invariants:
    - SessionType is ordered Green < Yellow < Red (intensity)
    - DEFAULT_PLANNED_MINUTES covers every SessionType
    - OwnerId is opaque: only equality is meaningful

Design Decisions:
    - str Enums: serialize to JSON and to DB String columns without custom encoders
    - NewType over wrapper classes: zero runtime cost, full type-checker support
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

SessionId = NewType("SessionId", UUID)
TaskId = NewType("TaskId", UUID)
OwnerId = NewType("OwnerId", str)
EntryId = NewType("EntryId", str)


@dataclass(frozen=True)
class Identity:
    """Authenticated user as furnished by the identity provider."""
    id: str
    email: str | None = None


# ─── Enums ───────────────────────────────────────────────────────

class SessionType(str, Enum):
    """Color-coded intensity tier of a focus session."""
    GREEN = "Green"
    YELLOW = "Yellow"
    RED = "Red"


class EnergyAfter(str, Enum):
    """Self-reported energy level after the session."""
    BETTER = "Better"
    SAME = "Same"
    WORSE = "Worse"


DEFAULT_PLANNED_MINUTES: dict[SessionType, int] = {
    SessionType.GREEN: 90,
    SessionType.YELLOW: 45,
    SessionType.RED: 15,
}


def default_planned_for(session_type: SessionType | str) -> int:
    """Planned minutes a new entry of this tier starts with."""
    return DEFAULT_PLANNED_MINUTES[SessionType(session_type)]
