"""Pydantic schemas for API requests and responses"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# Schedule Schemas
class ScheduleItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    channel_id: int
    position: int
    youtube_video_id: str
    title: Optional[str] = None
    duration_seconds: int
    is_disabled: bool = False


class ScheduleItemDetailResponse(ScheduleItemResponse):
    last_error_code: Optional[int] = None
    last_error_message: Optional[str] = None
    last_checked_at: Optional[datetime] = None


class DisableScheduleItemRequest(BaseModel):
    """Playback failure report sent by a viewer's player."""
    model_config = ConfigDict(populate_by_name=True)

    # Validated by the endpoint so bad ids and codes give 400 rather than 422
    schedule_item_id: Any = Field(default=None, alias="scheduleItemId")
    error_code: Any = Field(default=None, alias="errorCode")
    error_message: Optional[str] = Field(default=None, alias="errorMessage")


class DisableScheduleItemResponse(BaseModel):
    success: bool
    message: str


# Playback Schemas
class PlaybackStateResponse(BaseModel):
    channel_id: int
    playing: bool
    server_time: datetime
    current_item: Optional[ScheduleItemResponse] = None
    current_item_index: Optional[int] = None
    offset_seconds: Optional[int] = None
    total_duration_seconds: int = 0
    seconds_until_next: Optional[int] = None
    next_item: Optional[ScheduleItemResponse] = None
    next_item_index: Optional[int] = None


class TimelineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    channel_id: int
    start_time: datetime


# Highlight Schemas
class HighlightChannelResponse(BaseModel):
    channel_id: int
    slug: Optional[str] = None
    title: Optional[str] = None
    highlight_order: Optional[int] = None


class HighlightOperationResponse(BaseModel):
    outcome: str
    channel_id: int
    highlight_order: Optional[int] = None
    warnings: list[str] = Field(default_factory=list)
