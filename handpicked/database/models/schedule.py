"""
Schedule Database Models

Defines ChannelScheduleItem, one video entry in a channel loop.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from handpicked.database.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from handpicked.database.models.channel import Channel


class ChannelScheduleItem(Base, TimestampMixin):
    """
    Video entry within a channel schedule.

    Disabled items are skipped by playback but kept for re-enabling and audit.
    """

    __tablename__ = "channel_schedules"
    __table_args__ = (
        UniqueConstraint("channel_id", "position", name="uq_channel_schedules_position"),
        CheckConstraint("duration_seconds > 0", name="ck_channel_schedules_duration"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    channel_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("channels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Base order within the channel
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    youtube_video_id: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    duration_seconds: Mapped[int] = mapped_column(Integer, nullable=False)

    is_disabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Last playback failure reported by a viewer's player
    last_error_code: Mapped[int | None] = mapped_column(Integer, nullable=True)
    last_error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_checked_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    channel: Mapped["Channel"] = relationship("Channel", back_populates="schedule_items")

    def __repr__(self) -> str:
        return f"<ChannelScheduleItem {self.position}: {self.youtube_video_id}>"
