"""API routes and controllers for Handpicked"""

from fastapi import APIRouter

from .channels import router as channels_router
from .health import router as health_router
from .highlights import router as highlights_router
from .schedule_items import router as schedule_items_router

# Create the main API router
api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["Health"])
api_router.include_router(channels_router, tags=["Channels"])
api_router.include_router(schedule_items_router, tags=["Schedule Items"])
api_router.include_router(highlights_router, tags=["Highlights"])

__all__ = ["api_router"]
