"""Schedule item API endpoints - playback failure reports and manual toggles"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..api.schemas import (
    DisableScheduleItemRequest,
    DisableScheduleItemResponse,
    ScheduleItemDetailResponse,
)
from ..database import get_db
from ..database.models import ChannelScheduleItem, utcnow
from ..playout import (
    PlaybackFailureError,
    build_disable_values,
    validate_failure_report,
    validate_schedule_item_id,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schedule", tags=["Schedule Items"])


@router.post("/disable", response_model=DisableScheduleItemResponse)
async def disable_schedule_item(
    report: DisableScheduleItemRequest,
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Disable a schedule item whose video failed to play.

    Called by viewers' players, so only error codes meaning the video
    itself is unavailable are accepted.
    """
    try:
        item_id = validate_schedule_item_id(report.schedule_item_id)
        error_code = validate_failure_report(report.error_code)
    except PlaybackFailureError as e:
        raise HTTPException(status_code=400, detail=str(e))

    item = await db.get(ChannelScheduleItem, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Schedule item not found")

    values = build_disable_values(error_code, report.error_message, utcnow())
    for column, value in values.items():
        setattr(item, column, value)

    await db.commit()

    logger.warning(
        f"Disabled schedule item {item.id} ({item.youtube_video_id}) of channel "
        f"{item.channel_id}: {values['last_error_message']}"
    )
    return DisableScheduleItemResponse(success=True, message="Video disabled successfully")


@router.post("/{item_id}/toggle-disabled", response_model=ScheduleItemDetailResponse)
async def toggle_schedule_item_disabled(item_id: int, db: AsyncSession = Depends(get_db)) -> Any:
    """Manually disable or re-enable a schedule item."""
    item = await db.get(ChannelScheduleItem, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Schedule item not found")

    item.is_disabled = not item.is_disabled
    await db.commit()

    logger.info(f"Schedule item {item_id} {'disabled' if item.is_disabled else 'enabled'}")
    return ScheduleItemDetailResponse.model_validate(item)
