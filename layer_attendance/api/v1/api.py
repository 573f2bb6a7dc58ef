"""
V1 API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from layer_attendance.api.v1.endpoints import attendance, reports, schedule

api_router = APIRouter()

# Parse / recompute for the input grid
api_router.include_router(schedule.router)

# Row store CRUD + memo tags
api_router.include_router(attendance.router)

# Stats, options, health
api_router.include_router(reports.router)
