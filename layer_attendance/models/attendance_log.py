"""
AttendanceLog model — one row of the attendance sheet.

Columns mirror ``ShiftRecord`` one-to-one and are all plain strings, the
way the attendance sheet has always held them. The integer primary key is the
row id handed back to the frontend for update / delete.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, Integer, String

from layer_attendance.db.base import Base


class AttendanceLog(Base):
    __tablename__ = "attendance_logs"
    __table_args__ = (Index("ix_attendance_logs_date_name", "date", "name"),)

    row_id: int = Column("id", Integer, primary_key=True, index=True)  # type: ignore[assignment]
    date: str = Column(String(10), nullable=False, index=True)  # type: ignore[assignment]  # YYYY-MM-DD
    branch: str = Column(String(100), nullable=False, default="")  # type: ignore[assignment]
    name: str = Column(String(100), nullable=False, default="")  # type: ignore[assignment]
    scheduled_in: str = Column(String(20), nullable=False, default="")  # type: ignore[assignment]
    actual_in: str = Column(String(20), nullable=False, default="")  # type: ignore[assignment]
    scheduled_out: str = Column(String(20), nullable=False, default="")  # type: ignore[assignment]
    actual_out: str = Column(String(20), nullable=False, default="")  # type: ignore[assignment]
    late_minutes: str = Column(String(10), nullable=False, default="")  # type: ignore[assignment]
    overtime_minutes: str = Column(String(10), nullable=False, default="")  # type: ignore[assignment]
    total_minutes: str = Column(String(10), nullable=False, default="")  # type: ignore[assignment]
    memo: str = Column(String(500), nullable=False, default="")  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
