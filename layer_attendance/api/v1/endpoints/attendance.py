"""
Attendance row store endpoints.

- GET lists rows newest date first, optionally filtered by date / name.
- POST accepts one record or a list (the whole input grid at once).
- PUT / DELETE address a row by the row id returned from GET / POST.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from layer_attendance.api.v1.deps import get_store
from layer_attendance.crud.attendance_log import AttendanceLogStore
from layer_attendance.models.attendance_log import AttendanceLog
from layer_attendance.schemas.attendance import (
    AppendResponse,
    AttendanceLogRead,
    DeleteResponse,
    MEMO_MAX_LENGTH,
    MemoTagUpdate,
    ShiftRecord,
    ShiftRecordCreate,
    ShiftRecordUpdate,
)
from layer_attendance.services.memo_tags import set_tag

router = APIRouter(prefix="/attendance", tags=["attendance"])
logger = logging.getLogger(__name__)


async def _get_or_404(store: AttendanceLogStore, row_id: int) -> AttendanceLog:
    row = await store.get(row_id)
    if row is None:
        raise HTTPException(status_code=404, detail=f"Row {row_id} not found")
    return row


@router.get("", response_model=list[AttendanceLogRead])
async def list_rows(
    date: str | None = Query(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$"),
    name: str | None = None,
    store: AttendanceLogStore = Depends(get_store),
) -> list[AttendanceLog]:
    return await store.list_all(date=date, name=name)


@router.post(
    "",
    response_model=AttendanceLogRead | AppendResponse,
    status_code=201,
)
async def append_rows(
    body: ShiftRecordCreate | list[ShiftRecordCreate],
    response: Response,
    store: AttendanceLogStore = Depends(get_store),
) -> AttendanceLogRead | AppendResponse:
    """Append one row, or a whole batch in a single transaction."""
    if isinstance(body, list):
        if not body:
            response.status_code = 200
            return AppendResponse(success=True, added=0, message="No data to add")
        rows = await store.append_many([ShiftRecord(**r.model_dump()) for r in body])
        return AppendResponse(success=True, added=len(rows), message=f"{len(rows)} rows added")

    row = await store.append_one(ShiftRecord(**body.model_dump()))
    return AttendanceLogRead.model_validate(row)


@router.get("/{row_id}", response_model=AttendanceLogRead)
async def get_row(
    row_id: int,
    store: AttendanceLogStore = Depends(get_store),
) -> AttendanceLog:
    return await _get_or_404(store, row_id)


@router.put("/{row_id}", response_model=AttendanceLogRead)
async def update_row(
    row_id: int,
    body: ShiftRecordUpdate,
    store: AttendanceLogStore = Depends(get_store),
) -> AttendanceLog:
    row = await store.update(row_id, body.model_dump(exclude_unset=True, exclude_none=True))
    if row is None:
        raise HTTPException(status_code=404, detail=f"Row {row_id} not found")
    return row


@router.put("/{row_id}/memo", response_model=AttendanceLogRead)
async def update_memo_tag(
    row_id: int,
    body: MemoTagUpdate,
    store: AttendanceLogStore = Depends(get_store),
) -> AttendanceLog:
    """Rewrite the part / rental tag inside the memo, keeping the rest of it."""
    row = await _get_or_404(store, row_id)
    memo = set_tag(row.memo, body.kind, body.value.strip())
    if memo == row.memo:
        return row
    if len(memo) > MEMO_MAX_LENGTH:
        raise HTTPException(status_code=422, detail=f"Memo would exceed {MEMO_MAX_LENGTH} characters")
    return await store.update(row_id, {"memo": memo})


@router.delete("/{row_id}", response_model=DeleteResponse)
async def delete_row(
    row_id: int,
    store: AttendanceLogStore = Depends(get_store),
) -> DeleteResponse:
    if not await store.delete(row_id):
        raise HTTPException(status_code=404, detail=f"Row {row_id} not found")
    return DeleteResponse(success=True, message=f"Row {row_id} deleted successfully")
