"""Health check API endpoint for Handpicked"""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter

from ..database import get_pool_stats
from handpicked import __version__

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check() -> dict[str, Any]:
    """Service status."""
    return {
        "status": "ok",
        "version": __version__,
        "time_utc": datetime.now(timezone.utc).isoformat(),
        "database": get_pool_stats(),
    }
