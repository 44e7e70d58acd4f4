"""
Handpicked Database Module

Provides SQLAlchemy models and connection utilities.
"""

from handpicked.database.connection import (
    close_db,
    get_db,
    get_pool_stats,
    get_session,
    get_sync_session,
    init_db,
    init_sync_db,
)
from handpicked.database.models import (
    Base,
    Channel,
    ChannelScheduleItem,
    ChannelTimeline,
)

__all__ = [
    # Connection
    "close_db",
    "get_db",
    "get_pool_stats",
    "get_session",
    "get_sync_session",
    "init_db",
    "init_sync_db",
    # Models
    "Base",
    "Channel",
    "ChannelScheduleItem",
    "ChannelTimeline",
]
