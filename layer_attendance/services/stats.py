"""
Per-person weekly / monthly totals for the dashboard.

Only closed numbers are summed: an empty derived field counts as zero.
"""

from __future__ import annotations

import calendar
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Sequence

from layer_attendance.schemas.attendance import ShiftRecord


@dataclass(frozen=True)
class PersonStat:
    name: str
    shifts: int
    late_minutes: int
    overtime_minutes: int
    total_minutes: int


def week_range(today: date) -> tuple[date, date]:
    """Monday..Sunday of the week containing ``today``."""
    monday = today - timedelta(days=today.weekday())
    return monday, monday + timedelta(days=6)


def month_range(today: date) -> tuple[date, date]:
    _, days_in_month = calendar.monthrange(today.year, today.month)
    return today.replace(day=1), today.replace(day=days_in_month)


def _to_date(value: str) -> date | None:
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError):
        return None


def _safe_int(value: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def rows_in_range(records: Iterable[ShiftRecord], start: date, end: date) -> list[ShiftRecord]:
    out = []
    for r in records:
        d = _to_date(r.date)
        if d is not None and start <= d <= end:
            out.append(r)
    return out


def summarize_by_person(records: Sequence[ShiftRecord]) -> list[PersonStat]:
    totals: dict[str, list[int]] = defaultdict(lambda: [0, 0, 0, 0])
    for r in records:
        if not r.name:
            continue
        t = totals[r.name]
        t[0] += 1
        t[1] += _safe_int(r.late_minutes)
        t[2] += _safe_int(r.overtime_minutes)
        t[3] += _safe_int(r.total_minutes)

    return [
        PersonStat(name=name, shifts=t[0], late_minutes=t[1], overtime_minutes=t[2], total_minutes=t[3])
        for name, t in sorted(totals.items())
    ]


def format_minutes(minutes: int) -> str:
    """570 -> ``"9시간 30분"``; under an hour -> ``"45분"``."""
    hours, mins = divmod(max(0, minutes), 60)
    if hours == 0:
        return f"{mins}분"
    return f"{hours}시간 {mins}분"
