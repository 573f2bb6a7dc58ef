"""
FastAPI dependencies — database session and row store.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from layer_attendance.crud.attendance_log import AttendanceLogStore
from layer_attendance.db.session import async_session_factory


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Row store ───────────────────────────────────────────────────────
async def get_store(db: AsyncSession = Depends(get_db)) -> AttendanceLogStore:
    return AttendanceLogStore(db)
