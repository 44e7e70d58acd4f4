"""
Test Fixtures

Shared test data factories.
"""

from .factories import (
    ChannelFactory,
    ScheduleItemFactory,
    create_channel_with_schedule,
)

__all__ = [
    "ChannelFactory",
    "ScheduleItemFactory",
    "create_channel_with_schedule",
]
