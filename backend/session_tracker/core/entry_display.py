"""Entry list projection for display: newest date first, blanks shown as '-'."""

from session_tracker.core.session_entry import SessionEntry


def sort_for_display(entries: list[SessionEntry]) -> list[SessionEntry]:
    # ISO dates sort correctly as strings; sorted() is stable for equal dates
    return sorted(entries, key=lambda e: e.date or "", reverse=True)


def display_row(entry: SessionEntry) -> dict:
    return {
        "id": entry.id,
        "date": entry.date,
        "type": _label(entry.session_type),
        "planned": entry.planned_minutes,
        "actual": entry.actual_minutes,
        "tasks": "-" if entry.tasks_completed is None else entry.tasks_completed,
        "energy": _label(entry.energy_after),
        "notes": entry.notes or "-",
    }


def _label(value) -> str:
    return getattr(value, "value", value) or "-"
