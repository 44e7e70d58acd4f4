"""
Handpicked Database Models

SQLAlchemy models for:
- Channels, including highlight ranking
- Channel timelines (loop anchors)
- Channel schedules (ordered videos)
"""

from handpicked.database.models.base import Base, TimestampMixin, utcnow
from handpicked.database.models.channel import Channel, ChannelTimeline
from handpicked.database.models.schedule import ChannelScheduleItem

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "utcnow",
    # Channel
    "Channel",
    "ChannelTimeline",
    # Schedule
    "ChannelScheduleItem",
]
