"""
Dashboard statistics, autocomplete options and health check.

Stats are computed from one full read of the row store and aggregated in
Python; the sheet is small enough that per-period SQL is not worth it.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from layer_attendance.api.v1.deps import get_db, get_store
from layer_attendance.core.config import settings
from layer_attendance.crud.attendance_log import AttendanceLogStore
from layer_attendance.schemas.attendance import (
    AttendanceLogRead,
    HealthResponse,
    OptionsResponse,
    PersonStatRead,
    StatsResponse,
)
from layer_attendance.services.stats import (
    format_minutes,
    month_range,
    rows_in_range,
    summarize_by_person,
    week_range,
)

router = APIRouter(tags=["reports"])
logger = logging.getLogger(__name__)


# ── Weekly / monthly stats ──────────────────────────────────────────
@router.get("/reports/stats", response_model=StatsResponse)
async def person_stats(
    period: Literal["weekly", "monthly"] = "weekly",
    today: date | None = Query(default=None),
    store: AttendanceLogStore = Depends(get_store),
) -> StatsResponse:
    """Per-person lateness / overtime / worked minutes for this week or month."""
    today = today or date.today()
    start, end = week_range(today) if period == "weekly" else month_range(today)

    records = [AttendanceLogRead.model_validate(r) for r in await store.list_all()]
    in_period = rows_in_range(records, start, end)
    today_rows = [r for r in records if r.date == today.isoformat()]

    persons = [
        PersonStatRead(
            name=p.name,
            shifts=p.shifts,
            late_minutes=p.late_minutes,
            overtime_minutes=p.overtime_minutes,
            total_minutes=p.total_minutes,
            late_display=format_minutes(p.late_minutes),
            overtime_display=format_minutes(p.overtime_minutes),
            total_display=format_minutes(p.total_minutes),
        )
        for p in summarize_by_person(in_period)
    ]

    return StatsResponse(
        period=period,
        start=start.isoformat(),
        end=end.isoformat(),
        total_rows=len(in_period),
        today_rows=today_rows,
        persons=persons,
    )


# ── Autocomplete options ────────────────────────────────────────────
@router.get("/options", response_model=OptionsResponse)
async def grid_options() -> OptionsResponse:
    """Branch / name suggestions for the input grid dropdowns."""
    return OptionsResponse(branches=settings.BRANCH_OPTIONS, names=settings.NAME_OPTIONS)


# ── Health ──────────────────────────────────────────────────────────
@router.get("/health", response_model=HealthResponse)
async def health(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Public health check — row store connectivity."""
    result = HealthResponse(db=False)

    try:
        await db.execute(select(1))
        result.db = True
    except Exception as e:
        logger.error("Health check DB failure: %s", e)

    return result
