"""
Row store for attendance logs.

List / append / update-by-row-id / delete-by-row-id over the
``attendance_logs`` table. Every mutation either commits completely or is
rolled back before the database error is re-raised.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from layer_attendance.models.attendance_log import AttendanceLog
from layer_attendance.schemas.attendance import DERIVED_FIELDS, TIME_FIELDS, ShiftRecord
from layer_attendance.services.derived_fields import recompute, recompute_all

logger = logging.getLogger(__name__)

_COLUMNS = ("date", "branch", "name", *TIME_FIELDS, *DERIVED_FIELDS, "memo")


def _to_row(record: ShiftRecord) -> AttendanceLog:
    record = recompute_all(record)
    return AttendanceLog(**{c: getattr(record, c) for c in _COLUMNS})


class AttendanceLogStore:
    def __init__(self, session: AsyncSession):
        self._db = session

    async def list_all(self, *, date: str | None = None, name: str | None = None) -> list[AttendanceLog]:
        query = select(AttendanceLog).order_by(AttendanceLog.date.desc(), AttendanceLog.row_id)
        if date:
            query = query.where(AttendanceLog.date == date)
        if name:
            # Escape SQL LIKE metacharacters to prevent wildcard injection
            safe_name = name.replace("%", r"\%").replace("_", r"\_")
            query = query.where(AttendanceLog.name.ilike(f"%{safe_name}%", escape="\\"))
        result = await self._db.execute(query)
        return list(result.scalars().all())

    async def get(self, row_id: int) -> AttendanceLog | None:
        result = await self._db.execute(select(AttendanceLog).where(AttendanceLog.row_id == row_id))
        return result.scalar_one_or_none()

    async def _commit(self) -> None:
        try:
            await self._db.commit()
        except SQLAlchemyError:
            await self._db.rollback()
            raise

    async def append_one(self, record: ShiftRecord) -> AttendanceLog:
        row = _to_row(record)
        self._db.add(row)
        await self._commit()
        await self._db.refresh(row)
        logger.info("Appended row %d (%s %s %s)", row.row_id, row.date, row.branch, row.name)
        return row

    async def append_many(self, records: Sequence[ShiftRecord]) -> list[AttendanceLog]:
        rows = [_to_row(r) for r in records]
        self._db.add_all(rows)
        await self._commit()
        logger.info("Appended %d rows", len(rows))
        return rows

    async def update(self, row_id: int, fields: dict[str, Any]) -> AttendanceLog | None:
        """Apply a partial update; a changed time field re-derives what depends on it."""
        row = await self.get(row_id)
        if row is None:
            return None

        before = ShiftRecord.model_validate(row)
        record = before.model_copy(update={k: v for k, v in fields.items() if k in _COLUMNS})
        for field in TIME_FIELDS:
            if getattr(record, field) != getattr(before, field):
                record = recompute(record, field)

        for column in _COLUMNS:
            setattr(row, column, getattr(record, column))

        await self._commit()
        await self._db.refresh(row)
        logger.info("Updated row %d", row_id)
        return row

    async def delete(self, row_id: int) -> bool:
        row = await self.get(row_id)
        if row is None:
            return False
        await self._db.delete(row)
        await self._commit()
        logger.info("Deleted row %d", row_id)
        return True
