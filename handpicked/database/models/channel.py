"""
Channel Database Models

Defines Channel and ChannelTimeline.
A channel loops its schedule forever, measured from the timeline anchor.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from handpicked.database.models.base import Base, TimestampMixin, utcnow

if TYPE_CHECKING:
    from handpicked.database.models.schedule import ChannelScheduleItem


class Channel(Base, TimestampMixin):
    """
    Channel model representing an always-on curated video loop.

    Highlight fields:
        is_highlight: channel is featured
        highlight_order: dense 0-based rank among featured channels,
            NULL whenever is_highlight is False
    """

    __tablename__ = "channels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # URL-friendly unique identifier
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_public: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Featured placement
    is_highlight: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    highlight_order: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)

    # Relationships
    schedule_items: Mapped[list["ChannelScheduleItem"]] = relationship(
        "ChannelScheduleItem",
        back_populates="channel",
        cascade="all, delete-orphan",
        order_by="ChannelScheduleItem.position",
    )
    timeline: Mapped[Optional["ChannelTimeline"]] = relationship(
        "ChannelTimeline",
        back_populates="channel",
        cascade="all, delete-orphan",
        uselist=False,
    )

    def __repr__(self) -> str:
        return f"<Channel {self.slug}: {self.title}>"


class ChannelTimeline(Base):
    """
    Loop anchor for a channel.

    start_time is the instant the loop is considered to have started.
    Created with the channel; an admin reset moves it to "now".
    """

    __tablename__ = "channel_timelines"

    channel_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("channels.id", ondelete="CASCADE"),
        primary_key=True,
    )
    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    channel: Mapped["Channel"] = relationship("Channel", back_populates="timeline")

    def __repr__(self) -> str:
        return f"<ChannelTimeline channel={self.channel_id} start={self.start_time}>"
