"""Pydantic schemas for shift records, the input grid and the row store."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

TIME_FIELDS = ("scheduled_in", "actual_in", "scheduled_out", "actual_out")
DERIVED_FIELDS = ("late_minutes", "overtime_minutes", "total_minutes")
EDITABLE_FIELDS = ("date", "branch", "name", *TIME_FIELDS, *DERIVED_FIELDS, "memo")

# Column widths of attendance_logs
_LABEL_MAX = 100
_TIME_MAX = 20
_MINUTES_MAX = 10
MEMO_MAX_LENGTH = 500


def _check_iso_date(v: str) -> str:
    v = v.strip()
    if not _DATE_RE.match(v):
        raise ValueError("Date must be in YYYY-MM-DD format")
    try:
        datetime.strptime(v, "%Y-%m-%d")
    except ValueError:
        raise ValueError(f"Invalid calendar date: {v}") from None
    return v


def _check_field_name(v: str) -> str:
    if v not in EDITABLE_FIELDS:
        raise ValueError(f"Field must be one of: {', '.join(EDITABLE_FIELDS)}")
    return v


# ── Shift record ────────────────────────────────────────────────────
class ShiftRecord(BaseModel):
    """One person's single shift on one date.

    Time and derived fields are kept as strings, the way the row store holds
    them: ``""`` means "no value" and stays distinct from ``"0"``.
    """

    date: str = ""
    branch: str = ""
    name: str = ""
    scheduled_in: str = ""
    actual_in: str = ""
    scheduled_out: str = ""
    actual_out: str = ""
    late_minutes: str = ""
    overtime_minutes: str = ""
    total_minutes: str = ""
    memo: str = ""
    row_id: int | None = None  # assigned by the row store

    model_config = {"from_attributes": True}


class ShiftRecordCreate(BaseModel):
    date: str
    branch: str = Field(default="", max_length=_LABEL_MAX)
    name: str = Field(default="", max_length=_LABEL_MAX)
    scheduled_in: str = Field(default="", max_length=_TIME_MAX)
    actual_in: str = Field(default="", max_length=_TIME_MAX)
    scheduled_out: str = Field(default="", max_length=_TIME_MAX)
    actual_out: str = Field(default="", max_length=_TIME_MAX)
    late_minutes: str = Field(default="", max_length=_MINUTES_MAX)
    overtime_minutes: str = Field(default="", max_length=_MINUTES_MAX)
    total_minutes: str = Field(default="", max_length=_MINUTES_MAX)
    memo: str = Field(default="", max_length=MEMO_MAX_LENGTH)

    @field_validator("date")
    @classmethod
    def _date(cls, v: str) -> str:
        return _check_iso_date(v)


class ShiftRecordUpdate(BaseModel):
    date: str | None = None
    branch: str | None = Field(default=None, max_length=_LABEL_MAX)
    name: str | None = Field(default=None, max_length=_LABEL_MAX)
    scheduled_in: str | None = Field(default=None, max_length=_TIME_MAX)
    actual_in: str | None = Field(default=None, max_length=_TIME_MAX)
    scheduled_out: str | None = Field(default=None, max_length=_TIME_MAX)
    actual_out: str | None = Field(default=None, max_length=_TIME_MAX)
    late_minutes: str | None = Field(default=None, max_length=_MINUTES_MAX)
    overtime_minutes: str | None = Field(default=None, max_length=_MINUTES_MAX)
    total_minutes: str | None = Field(default=None, max_length=_MINUTES_MAX)
    memo: str | None = Field(default=None, max_length=MEMO_MAX_LENGTH)

    @field_validator("date")
    @classmethod
    def _date(cls, v: str | None) -> str | None:
        return _check_iso_date(v) if v is not None else v


class AttendanceLogRead(ShiftRecord):
    row_id: int
    created_at: datetime | None = None


# ── Input grid ──────────────────────────────────────────────────────
class ParseRequest(BaseModel):
    text: str
    date: str

    @field_validator("date")
    @classmethod
    def _date(cls, v: str) -> str:
        return _check_iso_date(v)


class RecomputeRequest(BaseModel):
    record: ShiftRecord
    changed_field: str

    @field_validator("changed_field")
    @classmethod
    def _field(cls, v: str) -> str:
        return _check_field_name(v)


class EditRequest(BaseModel):
    record: ShiftRecord
    field: str
    value: str = ""

    @field_validator("field")
    @classmethod
    def _field(cls, v: str) -> str:
        return _check_field_name(v)


# ── Memo tags ───────────────────────────────────────────────────────
class MemoTagUpdate(BaseModel):
    kind: Literal["part", "rental"]
    value: str = Field(default="", max_length=_LABEL_MAX)


# ── Responses ───────────────────────────────────────────────────────
class AppendResponse(BaseModel):
    success: bool
    added: int
    message: str


class DeleteResponse(BaseModel):
    success: bool
    message: str


class OptionsResponse(BaseModel):
    branches: list[str]
    names: list[str]


class HealthResponse(BaseModel):
    db: bool


# ── Statistics ──────────────────────────────────────────────────────
class PersonStatRead(BaseModel):
    name: str
    shifts: int
    late_minutes: int
    overtime_minutes: int
    total_minutes: int
    late_display: str
    overtime_display: str
    total_display: str


class StatsResponse(BaseModel):
    period: Literal["weekly", "monthly"]
    start: str
    end: str
    total_rows: int
    today_rows: list[AttendanceLogRead] = Field(default_factory=list)
    persons: list[PersonStatRead]
