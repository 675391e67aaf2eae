"""FastAPI application entry point.

Org Chart Service - An internal service that maintains the employee
reporting hierarchy: who may manage whom, drag-and-drop reassignment of
managers, and read-only org chart projections.
"""

import logging
import sys
import threading

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import settings
from routers.v1 import router as v1_router
from schemas.employee import ErrorResponse
from services.exceptions import HierarchyError
from services.hierarchy_cache import HierarchyCache

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ],
)

logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title="Org Chart Service",
    description="""
    Internal service for managing the employee reporting hierarchy.

    ## Features

    - Full org chart, subtree and root-to-employee path views
    - Drag-and-drop manager reassignment with hierarchy checks:
        - Managers must outrank their reports (levels L1-L5)
        - No reporting cycles
        - Exactly one root employee
        - Role-based permission to move employees
    - Headcount statistics by department, level and status

    ## Authentication

    All endpoints require Azure AD Bearer token authentication.
    Include the token in the Authorization header:
    ```
    Authorization: Bearer <token>
    ```
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# Shared by every request in this process: read projections and the
# lock serializing hierarchy writes.
app.state.hierarchy_cache = HierarchyCache(ttl_seconds=settings.hierarchy_cache_ttl_seconds)
app.state.write_lock = threading.Lock()

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HierarchyError)
async def hierarchy_error_handler(request: Request, exc: HierarchyError) -> JSONResponse:
    """Map hierarchy rule violations to their HTTP status."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(detail=exc.message, error_code=exc.error_code).model_dump(),
    )


@app.get(
    "/health",
    tags=["Health"],
    summary="Health Check",
    description="Check if the service is running.",
)
async def health_check() -> dict:
    """Return service health status."""
    return {
        "status": "healthy",
        "service": "org-chart-service",
        "version": "1.0.0",
    }


# Include API routers
app.include_router(
    v1_router,
    prefix="/api",
)

logger.info("Org Chart Service initialized")
