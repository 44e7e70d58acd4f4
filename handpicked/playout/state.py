"""
Playback state calculation.

Every viewer of a channel computes the same state from the same inputs:

    position = (now - start_time) mod total_duration

so all viewers see the same video at the same offset no matter when they
tuned in. Nothing here reads the clock; ``now`` is always supplied.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from handpicked.playout.schedule_math import locate, playable_indices, total_duration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleItem:
    """One video in a channel loop."""

    id: int
    channel_id: int
    position: int
    youtube_video_id: str
    duration_seconds: int
    title: Optional[str] = None
    is_disabled: bool = False

    @classmethod
    def from_model(cls, row: Any) -> "ScheduleItem":
        """Build from a ChannelScheduleItem row (or anything with the same attributes)."""
        return cls(
            id=row.id,
            channel_id=row.channel_id,
            position=row.position,
            youtube_video_id=row.youtube_video_id,
            duration_seconds=row.duration_seconds,
            title=row.title,
            is_disabled=bool(row.is_disabled),
        )


@dataclass(frozen=True)
class ChannelTimeline:
    """Loop anchor of a channel."""

    channel_id: int
    start_time: datetime

    @classmethod
    def from_model(cls, row: Any) -> "ChannelTimeline":
        return cls(channel_id=row.channel_id, start_time=row.start_time)


@dataclass(frozen=True)
class PlaybackState:
    """
    What a channel is playing at one instant.

    Derived on demand, never stored.

    Attributes:
        channel_id: Channel being watched
        current_item: Item on air
        current_item_index: Index of current_item in the full schedule
            (disabled items included), not in the playable subset
        offset_seconds: Seconds into current_item, 0 <= offset < duration
        total_duration_seconds: Length of one loop over playable items
    """

    channel_id: int
    current_item: ScheduleItem
    current_item_index: int
    offset_seconds: int
    total_duration_seconds: int

    @property
    def seconds_remaining(self) -> int:
        """Seconds until the current item ends."""
        return time_until_next_item(self.current_item, self.offset_seconds)


def _as_utc(value: datetime) -> datetime:
    """Naive datetimes are treated as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def elapsed_seconds(start_time: datetime, now: datetime) -> int:
    """Whole seconds from the loop anchor to ``now`` (negative before the anchor)."""
    return math.floor((_as_utc(now) - _as_utc(start_time)).total_seconds())


def calculate_playback_state(
    schedule: Sequence[ScheduleItem],
    timeline: ChannelTimeline,
    now: datetime,
) -> Optional[PlaybackState]:
    """
    Calculate what a channel is playing at ``now``.

    Args:
        schedule: Items in position order, disabled items included
        timeline: Loop anchor of the channel
        now: Instant to evaluate

    Returns:
        PlaybackState, or None when the channel has nothing playable.
    """
    indices = playable_indices(schedule)
    total = total_duration(schedule)
    if not indices or total <= 0:
        logger.debug(f"Channel {timeline.channel_id} has no playable items")
        return None

    elapsed = elapsed_seconds(timeline.start_time, now)

    if elapsed < 0:
        # Loop starts in the future: hold the first item at its beginning
        first = indices[0]
        return PlaybackState(
            channel_id=timeline.channel_id,
            current_item=schedule[first],
            current_item_index=first,
            offset_seconds=0,
            total_duration_seconds=total,
        )

    active = locate(schedule, elapsed % total)
    return PlaybackState(
        channel_id=timeline.channel_id,
        current_item=active.item,
        current_item_index=active.index,
        offset_seconds=active.offset_seconds,
        total_duration_seconds=total,
    )


def time_until_next_item(item: ScheduleItem, offset_seconds: int) -> int:
    """Seconds left in ``item`` when it is ``offset_seconds`` in."""
    return item.duration_seconds - offset_seconds
