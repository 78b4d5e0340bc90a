"""Entry Validation — presence checks applied before every save.

Invariants:
    - All functions are PURE: no IO, no async, no side effects
    - Return error dict on violation, None on success
    - validate_entry chains the checks in fixed order — first error wins
    - No range checks: zero and negative minutes are accepted

Design Decisions:
    - Return dicts (not exceptions): callers decide whether to raise
      (services) or only display (workflow), same shape either way
"""

from session_tracker.core.domain_types import EnergyAfter, SessionType
from session_tracker.core.errors import EntryValidationError
from session_tracker.core.session_entry import SessionEntry, is_number

_SESSION_TYPES = tuple(t.value for t in SessionType)
_ENERGY_LEVELS = tuple(e.value for e in EnergyAfter)


def _error(field: str, message: str) -> dict:
    return {
        "status": "error",
        "error_code": "VALIDATION_ERROR",
        "field": field,
        "message": message,
    }


def check_session_type(entry: SessionEntry) -> dict | None:
    """Rule 1: session type must be one of the three tiers."""
    if entry.session_type not in _SESSION_TYPES:
        return _error("sessionType", "Session type is required")
    return None


def check_energy_after(entry: SessionEntry) -> dict | None:
    """Rule 2: energy rating must be one of the three levels."""
    if entry.energy_after not in _ENERGY_LEVELS:
        return _error("energyAfter", "Energy after is required")
    return None


def check_actual_minutes(entry: SessionEntry) -> dict | None:
    """Rule 3: actual minutes must be present and not NaN."""
    if not is_number(entry.actual_minutes):
        return _error("actualMinutes", "Actual minutes is required")
    return None


def validate_entry(entry: SessionEntry) -> dict | None:
    """Run all checks in order. Returns first error or None."""
    for check in (check_session_type, check_energy_after, check_actual_minutes):
        error = check(entry)
        if error:
            return error
    return None


def ensure_valid(entry: SessionEntry) -> None:
    """Raise EntryValidationError for the first failing rule."""
    error = validate_entry(entry)
    if error:
        raise EntryValidationError(error["message"], error["field"])
