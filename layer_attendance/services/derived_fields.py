"""
Lateness / overtime / total-worked minutes.

Each derived field exists only while both of its inputs parse as a time of
day. All arithmetic is same-day minutes since midnight, clamped at zero.
"""

from __future__ import annotations

from layer_attendance.schemas.attendance import ShiftRecord
from layer_attendance.services.schedule_parser import TIME_TOKEN_RE, is_time_token

# derived field -> (start, end, fields whose edit triggers it)
_RULES: dict[str, tuple[str, str, frozenset[str]]] = {
    "late_minutes": ("scheduled_in", "actual_in", frozenset({"scheduled_in", "actual_in"})),
    "overtime_minutes": ("scheduled_out", "actual_out", frozenset({"scheduled_out", "actual_out"})),
    "total_minutes": ("actual_in", "actual_out", frozenset({"actual_in", "actual_out"})),
}


def parse_minutes(value: str | None) -> int | None:
    """``"9"`` -> 540, ``"14:30"`` -> 870, anything else -> ``None``."""
    if not value:
        return None
    value = value.strip()
    if not is_time_token(value):
        return None
    m = TIME_TOKEN_RE.match(value)
    return int(m.group("hour")) * 60 + int(m.group("minute") or 0)


def diff_minutes(start: str | None, end: str | None) -> str:
    a, b = parse_minutes(start), parse_minutes(end)
    if a is None or b is None:
        return ""
    return str(max(0, b - a))


def recompute(record: ShiftRecord, changed_field: str) -> ShiftRecord:
    """Return a copy of ``record`` with the fields depending on ``changed_field`` re-derived."""
    updates = {
        derived: diff_minutes(getattr(record, start), getattr(record, end))
        for derived, (start, end, triggers) in _RULES.items()
        if changed_field in triggers
    }
    if not updates:
        return record
    return record.model_copy(update=updates)


def recompute_all(record: ShiftRecord) -> ShiftRecord:
    return record.model_copy(
        update={
            derived: diff_minutes(getattr(record, start), getattr(record, end))
            for derived, (start, end, _) in _RULES.items()
        }
    )


def apply_edit(record: ShiftRecord, field: str, value: str) -> ShiftRecord:
    """Grid cell edit: set one field, then recompute whatever depends on it."""
    return recompute(record.model_copy(update={field: value}), field)
