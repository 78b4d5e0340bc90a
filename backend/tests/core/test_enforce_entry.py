"""Entry Validation — presence checks and their fixed order.

Tests cover:
    - each rule reports its own field and message
    - validate_entry returns the first failing rule only
    - zero and negative minutes are accepted (no range checks)
    - ensure_valid raises EntryValidationError
"""

import math
from dataclasses import replace

import pytest

from session_tracker.core.enforce_entry import (
    check_actual_minutes,
    check_energy_after,
    check_session_type,
    ensure_valid,
    validate_entry,
)
from session_tracker.core.errors import EntryValidationError
from session_tracker.core.session_entry import new_draft


def test_valid_draft_passes():
    assert validate_entry(new_draft()) is None


def test_unknown_session_type_rejected():
    error = check_session_type(replace(new_draft(), session_type="Blue"))
    assert error["field"] == "sessionType"
    assert error["message"] == "Session type is required"


def test_missing_energy_rejected():
    error = check_energy_after(replace(new_draft(), energy_after=None))
    assert error["message"] == "Energy after is required"


@pytest.mark.parametrize("value", [None, math.nan, "10"])
def test_actual_minutes_must_be_a_number(value):
    error = check_actual_minutes(replace(new_draft(), actual_minutes=value))
    assert error["message"] == "Actual minutes is required"


@pytest.mark.parametrize("value", [0, -15, 0.5])
def test_no_range_checks_on_actual_minutes(value):
    assert validate_entry(replace(new_draft(), actual_minutes=value)) is None


def test_first_failing_rule_wins():
    draft = replace(
        new_draft(), session_type=None, energy_after=None, actual_minutes=math.nan,
    )
    assert validate_entry(draft)["field"] == "sessionType"
    draft = replace(draft, session_type="Red")
    assert validate_entry(draft)["field"] == "energyAfter"
    draft = replace(draft, energy_after="Worse")
    assert validate_entry(draft)["field"] == "actualMinutes"


def test_ensure_valid_raises_validation_error():
    with pytest.raises(EntryValidationError) as exc_info:
        ensure_valid(replace(new_draft(), actual_minutes=math.nan))
    assert exc_info.value.field == "actualMinutes"
    assert exc_info.value.http_status == 400
