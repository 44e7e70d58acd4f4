"""
Handpicked Playout Engine

Wall-clock synchronized channel loops.

Features:
- Loop duration and active-item lookup over a schedule with disabled items
- Playback state (item + offset) for any instant
- Next playable item with wraparound
- Playback failure reports that disable unavailable videos
"""

from handpicked.playout.failures import (
    PlaybackFailureError,
    build_disable_values,
    validate_failure_report,
    validate_schedule_item_id,
)
from handpicked.playout.next_item import ScheduleSlot, next_playable
from handpicked.playout.schedule_math import (
    ActiveItem,
    is_playable,
    locate,
    playable_indices,
    total_duration,
)
from handpicked.playout.state import (
    ChannelTimeline,
    PlaybackState,
    ScheduleItem,
    calculate_playback_state,
    elapsed_seconds,
    time_until_next_item,
)

__all__ = [
    # Schedule math
    "ActiveItem",
    "is_playable",
    "locate",
    "playable_indices",
    "total_duration",
    # State
    "ChannelTimeline",
    "PlaybackState",
    "ScheduleItem",
    "calculate_playback_state",
    "elapsed_seconds",
    "time_until_next_item",
    # Next item
    "ScheduleSlot",
    "next_playable",
    # Failures
    "PlaybackFailureError",
    "build_disable_values",
    "validate_failure_report",
    "validate_schedule_item_id",
]
