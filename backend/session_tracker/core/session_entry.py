"""Session Entry — the flat, user-facing unit and its draft/input rules.

Invariants:
    - id is '' on a draft and assigned exactly once at creation
    - planned_minutes of a fresh draft equals the tier default
    - Numeric form input '' parses to NaN, except tasks_completed which parses to None
    - to_dict/from_dict use the persisted camelCase field names

Design Decisions:
    - session_type/energy_after keep unrecognized raw values instead of raising:
      the validation policy is the single place that rejects them
    - NaN is written as null in the persisted payload (JSON has no NaN)
"""

import math
from dataclasses import dataclass, replace
from datetime import date
from typing import Any

from session_tracker.core.domain_types import (
    EnergyAfter, SessionType, default_planned_for,
)

Number = int | float

_FIELD_NAMES: dict[str, str] = {
    "id": "id",
    "date": "date",
    "session_type": "sessionType",
    "planned_minutes": "plannedMinutes",
    "actual_minutes": "actualMinutes",
    "tasks_completed": "tasksCompleted",
    "energy_after": "energyAfter",
    "notes": "notes",
}

MINUTE_FIELDS = ("plannedMinutes", "actualMinutes")


@dataclass
class SessionEntry:
    """One recorded focus session as shown in the list and edited in the form."""
    id: str
    date: str
    session_type: SessionType | str | None
    planned_minutes: Number | None
    actual_minutes: Number | None
    tasks_completed: Number | None
    energy_after: EnergyAfter | str | None
    notes: str | None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the persisted field names."""
        data: dict[str, Any] = {}
        for attr, key in _FIELD_NAMES.items():
            value = getattr(self, attr)
            if isinstance(value, (SessionType, EnergyAfter)):
                value = value.value
            elif isinstance(value, float) and math.isnan(value):
                value = None
            data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionEntry":
        """Deserialize; missing fields read as None, unknown fields are dropped."""
        values = {attr: data.get(key) for attr, key in _FIELD_NAMES.items()}
        values["session_type"] = _coerce_enum(SessionType, values["session_type"])
        values["energy_after"] = _coerce_enum(EnergyAfter, values["energy_after"])
        return cls(**values)


def _coerce_enum(enum_cls, value):
    try:
        return enum_cls(value)
    except ValueError:
        return value


def new_draft(today: date | None = None) -> SessionEntry:
    """Fresh form state: today, Green, tier default, zero actual, Same energy."""
    today = today or date.today()
    return SessionEntry(
        id="",
        date=today.isoformat(),
        session_type=SessionType.GREEN,
        planned_minutes=default_planned_for(SessionType.GREEN),
        actual_minutes=0,
        tasks_completed=None,
        energy_after=EnergyAfter.SAME,
        notes="",
    )


def parse_minutes(raw: str) -> Number:
    """Parse a numeric form value. Blank or non-numeric text yields NaN."""
    if raw.strip() == "":
        return math.nan
    try:
        number = float(raw)
    except ValueError:
        return math.nan
    return int(number) if number.is_integer() else number


def parse_tasks_completed(raw: str) -> Number | None:
    if raw == "":
        return None
    return parse_minutes(raw)


def apply_field_input(entry: SessionEntry, name: str, raw: str) -> SessionEntry:
    """Return a copy of the draft with one form field applied.

    Unknown field names leave the draft unchanged.
    """
    if name in MINUTE_FIELDS:
        attr = "planned_minutes" if name == "plannedMinutes" else "actual_minutes"
        return replace(entry, **{attr: parse_minutes(raw)})
    if name == "tasksCompleted":
        return replace(entry, tasks_completed=parse_tasks_completed(raw))
    if name in ("date", "notes"):
        return replace(entry, **{name: raw})
    return entry


def apply_session_type(entry: SessionEntry, session_type: SessionType) -> SessionEntry:
    """Switch tier and reset planned minutes to its default (manual edits discarded)."""
    return replace(
        entry,
        session_type=session_type,
        planned_minutes=default_planned_for(session_type),
    )


def is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)
