"""API v1 router aggregator.

All v1 endpoint routers are included here.
"""

from fastapi import APIRouter

from hireconnect.api.v1 import progress, staff_progress

router = APIRouter()

router.include_router(
    progress.router, prefix="/progress/{pipeline}", tags=["progress"]
)
router.include_router(
    staff_progress.router,
    prefix="/staff/progress/{pipeline}/subjects/{subject_id}",
    tags=["staff"],
)
