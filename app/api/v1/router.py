from fastapi import APIRouter

from app.api.v1.endpoints import (
    # Quality Control Inspection
    inspection,
)


# Create main API router
api_router = APIRouter(prefix="/api/v1")

# ==================== Quality Control Inspection ====================
api_router.include_router(
    inspection.router,
    prefix="/inspection",
    tags=["QC Inspection"]
)
