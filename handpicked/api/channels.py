"""Channel playback API endpoints"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..api.schemas import PlaybackStateResponse, ScheduleItemResponse, TimelineResponse
from ..database import get_db
from ..database.models import Channel, ChannelScheduleItem, ChannelTimeline, utcnow
from ..playout import (
    ScheduleItem,
    calculate_playback_state,
    next_playable,
)
from ..playout.state import ChannelTimeline as TimelineAnchor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/channels", tags=["Channels"])


async def _get_channel_or_404(db: AsyncSession, channel_id: int) -> Channel:
    channel = await db.get(Channel, channel_id)
    if not channel:
        raise HTTPException(status_code=404, detail="Channel not found")
    return channel


def _item_response(item: ScheduleItem) -> ScheduleItemResponse:
    return ScheduleItemResponse(
        id=item.id,
        channel_id=item.channel_id,
        position=item.position,
        youtube_video_id=item.youtube_video_id,
        title=item.title,
        duration_seconds=item.duration_seconds,
        is_disabled=item.is_disabled,
    )


@router.get("/{channel_id}/playback", response_model=PlaybackStateResponse)
async def get_channel_playback(channel_id: int, db: AsyncSession = Depends(get_db)) -> Any:
    """Get what a channel is playing right now.

    Every caller at the same instant gets the same item and offset.

    Returns:
        PlaybackStateResponse: playing=False when the channel has nothing playable
    """
    await _get_channel_or_404(db, channel_id)

    timeline = await db.get(ChannelTimeline, channel_id)
    if not timeline:
        raise HTTPException(status_code=404, detail="Channel timeline not found")

    stmt = (
        select(ChannelScheduleItem)
        .where(ChannelScheduleItem.channel_id == channel_id)
        .order_by(ChannelScheduleItem.position)
    )
    result = await db.execute(stmt)
    schedule = [ScheduleItem.from_model(row) for row in result.scalars().all()]

    now = utcnow()
    state = calculate_playback_state(schedule, TimelineAnchor.from_model(timeline), now)

    if state is None:
        return PlaybackStateResponse(channel_id=channel_id, playing=False, server_time=now)

    upcoming = next_playable(schedule, state.current_item_index)

    return PlaybackStateResponse(
        channel_id=channel_id,
        playing=True,
        server_time=now,
        current_item=_item_response(state.current_item),
        current_item_index=state.current_item_index,
        offset_seconds=state.offset_seconds,
        total_duration_seconds=state.total_duration_seconds,
        seconds_until_next=state.seconds_remaining,
        next_item=_item_response(upcoming.item) if upcoming else None,
        next_item_index=upcoming.index if upcoming else None,
    )


@router.post("/{channel_id}/timeline/reset", response_model=TimelineResponse)
async def reset_channel_timeline(channel_id: int, db: AsyncSession = Depends(get_db)) -> Any:
    """Restart a channel loop from its first item now."""
    await _get_channel_or_404(db, channel_id)

    timeline = await db.get(ChannelTimeline, channel_id)
    now = utcnow()
    if timeline is None:
        timeline = ChannelTimeline(channel_id=channel_id, start_time=now)
        db.add(timeline)
    else:
        timeline.start_time = now

    await db.commit()

    logger.info(f"Reset timeline of channel {channel_id} to {now.isoformat()}")
    return TimelineResponse(channel_id=channel_id, start_time=now)
