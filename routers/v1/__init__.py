"""API v1 router aggregation."""

from fastapi import APIRouter

from routers.v1.employees import router as employees_router

# Create v1 API router
router = APIRouter(prefix="/v1")

# Include sub-routers
router.include_router(
    employees_router,
    prefix="/employees",
    tags=["Employees"],
)
