"""
Input-grid endpoints.

The frontend posts pasted schedule text here, shows the returned records in
an editable grid and calls back after every cell edit. Nothing is saved;
the finished grid is sent to ``POST /attendance``.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from layer_attendance.core.config import settings
from layer_attendance.schemas.attendance import (
    EditRequest,
    ParseRequest,
    RecomputeRequest,
    ShiftRecord,
)
from layer_attendance.services.derived_fields import apply_edit, recompute
from layer_attendance.services.schedule_parser import parse_schedule

router = APIRouter(prefix="/schedule", tags=["schedule"])
logger = logging.getLogger(__name__)


@router.post("/parse", response_model=list[ShiftRecord])
async def parse_text(body: ParseRequest) -> list[ShiftRecord]:
    """Parse pasted schedule text into unsaved shift records."""
    records = parse_schedule(body.text, body.date, ignore_keywords=settings.PARSER_IGNORE_KEYWORDS)
    logger.info("Parsed %d records for %s", len(records), body.date)
    return records


@router.post("/recompute", response_model=ShiftRecord)
async def recompute_record(body: RecomputeRequest) -> ShiftRecord:
    """Re-derive lateness / overtime / total after ``changed_field`` was edited."""
    return recompute(body.record, body.changed_field)


@router.post("/edit", response_model=ShiftRecord)
async def edit_cell(body: EditRequest) -> ShiftRecord:
    """Set one cell and return the record with its derived fields updated."""
    return apply_edit(body.record, body.field, body.value)
