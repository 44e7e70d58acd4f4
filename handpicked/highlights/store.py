"""
Storage access for highlight ranking.

Every mutation is a batch of HighlightUpdate objects applied in one
transaction. Each update names the row state it expects; if any row has
moved on (another admin promoted, demoted or swapped in between), nothing
is written and OrderConflictError is raised.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from handpicked.database.models import Channel

logger = logging.getLogger(__name__)


class HighlightStoreError(Exception):
    """Error reading or writing highlight state."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


class OrderConflictError(HighlightStoreError):
    """A precondition of a highlight update no longer holds."""


@dataclass(frozen=True)
class HighlightSlot:
    """Highlight fields of one channel."""

    channel_id: int
    is_highlight: bool
    highlight_order: Optional[int]
    title: Optional[str] = None
    slug: Optional[str] = None


@dataclass(frozen=True)
class HighlightUpdate:
    """
    Conditional write of a channel's highlight fields.

    The write applies only if the row still has ``expected_highlight`` /
    ``expected_order``.
    """

    channel_id: int
    is_highlight: bool
    highlight_order: Optional[int]
    expected_highlight: bool
    expected_order: Optional[int]


class HighlightStore(ABC):
    """Read/write interface to the channel collection used for ranking."""

    @abstractmethod
    async def get_slot(self, channel_id: int) -> Optional[HighlightSlot]:
        """Highlight fields of a channel, or None if it does not exist."""

    @abstractmethod
    async def get_max_order(self) -> Optional[int]:
        """Largest highlight_order among highlighted channels, or None."""

    @abstractmethod
    async def find_by_order(self, order: int) -> Optional[HighlightSlot]:
        """Highlighted channel holding ``order``, or None."""

    @abstractmethod
    async def list_highlighted(self) -> List[HighlightSlot]:
        """Highlighted channels sorted by highlight_order."""

    @abstractmethod
    async def list_candidates(self) -> List[HighlightSlot]:
        """Public channels that are not highlighted, sorted by title."""

    @abstractmethod
    async def apply(self, updates: Sequence[HighlightUpdate]) -> None:
        """
        Apply all updates atomically.

        Raises:
            OrderConflictError: A precondition failed; nothing was written.
            HighlightStoreError: The store failed; nothing was written.
        """


def _to_slot(channel: Channel) -> HighlightSlot:
    return HighlightSlot(
        channel_id=channel.id,
        is_highlight=channel.is_highlight,
        highlight_order=channel.highlight_order,
        title=channel.title,
        slug=channel.slug,
    )


class SQLAlchemyHighlightStore(HighlightStore):
    """HighlightStore backed by the channels table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_slot(self, channel_id: int) -> Optional[HighlightSlot]:
        try:
            channel = await self.session.get(Channel, channel_id, populate_existing=True)
        except SQLAlchemyError as e:
            raise HighlightStoreError(f"Failed to read channel {channel_id}", e) from e
        return _to_slot(channel) if channel else None

    async def get_max_order(self) -> Optional[int]:
        stmt = select(func.max(Channel.highlight_order)).where(Channel.is_highlight.is_(True))
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise HighlightStoreError("Failed to read max highlight order", e) from e
        return result.scalar_one_or_none()

    async def find_by_order(self, order: int) -> Optional[HighlightSlot]:
        stmt = (
            select(Channel)
            .where(Channel.is_highlight.is_(True), Channel.highlight_order == order)
            .order_by(Channel.id)
            .limit(1)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise HighlightStoreError(f"Failed to read channel at order {order}", e) from e
        channel = result.scalar_one_or_none()
        return _to_slot(channel) if channel else None

    async def list_highlighted(self) -> List[HighlightSlot]:
        stmt = (
            select(Channel)
            .where(Channel.is_highlight.is_(True))
            .order_by(Channel.highlight_order, Channel.id)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise HighlightStoreError("Failed to list highlighted channels", e) from e
        return [_to_slot(channel) for channel in result.scalars().all()]

    async def list_candidates(self) -> List[HighlightSlot]:
        stmt = (
            select(Channel)
            .where(Channel.is_highlight.is_(False), Channel.is_public.is_(True))
            .order_by(Channel.title, Channel.id)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise HighlightStoreError("Failed to list highlight candidates", e) from e
        return [_to_slot(channel) for channel in result.scalars().all()]

    async def apply(self, updates: Sequence[HighlightUpdate]) -> None:
        if not updates:
            return

        try:
            channels = await self._check_preconditions(updates)
            for update in updates:
                channel = channels[update.channel_id]
                channel.is_highlight = update.is_highlight
                channel.highlight_order = update.highlight_order
            await self.session.commit()
        except OrderConflictError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise HighlightStoreError("Failed to write highlight order", e) from e

        logger.debug(
            "Applied highlight updates: "
            + ", ".join(f"{u.channel_id}->{u.highlight_order}" for u in updates)
        )

    async def _check_preconditions(self, updates: Sequence[HighlightUpdate]) -> dict[int, Channel]:
        """Lock the affected rows and verify every expected value."""
        ids = [update.channel_id for update in updates]
        stmt = (
            select(Channel)
            .where(Channel.id.in_(ids))
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        channels = {channel.id: channel for channel in result.scalars().all()}

        for update in updates:
            channel = channels.get(update.channel_id)
            if channel is None:
                raise OrderConflictError(f"Channel {update.channel_id} no longer exists")
            if (
                channel.is_highlight != update.expected_highlight
                or channel.highlight_order != update.expected_order
            ):
                raise OrderConflictError(
                    f"Channel {update.channel_id} changed concurrently "
                    f"(expected highlight={update.expected_highlight} order={update.expected_order}, "
                    f"found highlight={channel.is_highlight} order={channel.highlight_order})"
                )

        # Orders claimed by this batch must not be held by anyone outside it
        targets = [u.highlight_order for u in updates if u.is_highlight and u.highlight_order is not None]
        if targets:
            stmt = select(Channel.id, Channel.highlight_order).where(
                Channel.is_highlight.is_(True),
                Channel.highlight_order.in_(targets),
                Channel.id.not_in(ids),
            )
            taken = (await self.session.execute(stmt)).first()
            if taken is not None:
                raise OrderConflictError(
                    f"Highlight order {taken.highlight_order} is already held by channel {taken.id}"
                )

        return channels
