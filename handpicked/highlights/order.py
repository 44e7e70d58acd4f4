"""
Highlight order maintenance.

Keeps highlight_order over highlighted channels dense (0..N-1, no gaps,
no duplicates):

- promote appends at the end
- demote removes and shifts every later channel up by one
- swap exchanges a channel with its neighbour

Each operation reads the current ranking, then applies one conditional
batch through the HighlightStore. Inconsistencies are reported, never
repaired.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from handpicked.highlights.store import (
    HighlightSlot,
    HighlightStore,
    HighlightStoreError,
    HighlightUpdate,
    OrderConflictError,
)

logger = logging.getLogger(__name__)


class SwapDirection(str, Enum):
    """Direction of a single-step move."""

    UP = "up"  # towards order 0
    DOWN = "down"


class HighlightOutcome(str, Enum):
    """How a highlight operation ended."""

    APPLIED = "applied"
    DECLINED = "declined"  # nothing to do (boundary, already highlighted)
    FAILED = "failed"  # inconsistency, conflict or store error


class FailureKind(str, Enum):
    """Why a highlight operation failed."""

    NOT_FOUND = "not_found"
    INCONSISTENT = "inconsistent"
    CONFLICT = "conflict"
    STORE_ERROR = "store_error"


@dataclass
class HighlightResult:
    """Result of a highlight operation."""

    outcome: HighlightOutcome
    channel_id: int
    highlight_order: Optional[int] = None
    error: Optional[str] = None
    failure_kind: Optional[FailureKind] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.outcome == HighlightOutcome.APPLIED

    @classmethod
    def applied(
        cls,
        channel_id: int,
        highlight_order: Optional[int],
        warnings: Optional[List[str]] = None,
    ) -> "HighlightResult":
        """Create applied result."""
        return cls(
            outcome=HighlightOutcome.APPLIED,
            channel_id=channel_id,
            highlight_order=highlight_order,
            warnings=warnings or [],
        )

    @classmethod
    def declined(cls, channel_id: int, reason: str, highlight_order: Optional[int] = None) -> "HighlightResult":
        """Create declined result."""
        return cls(
            outcome=HighlightOutcome.DECLINED,
            channel_id=channel_id,
            highlight_order=highlight_order,
            error=reason,
        )

    @classmethod
    def failure(cls, channel_id: int, error: str, kind: FailureKind) -> "HighlightResult":
        """Create failure result."""
        return cls(
            outcome=HighlightOutcome.FAILED,
            channel_id=channel_id,
            error=error,
            failure_kind=kind,
        )


class HighlightOrderMaintainer:
    """
    Promote, demote and reorder highlighted channels.

    Holds no state between calls; every operation works against the store.

    Usage:
        maintainer = HighlightOrderMaintainer(SQLAlchemyHighlightStore(session))
        result = await maintainer.promote(channel_id)
        if not result.success:
            ...
    """

    def __init__(self, store: HighlightStore):
        self.store = store

    async def list_highlights(self) -> List[HighlightSlot]:
        """Highlighted channels in rank order."""
        return await self.store.list_highlighted()

    async def list_candidates(self) -> List[HighlightSlot]:
        """Public channels that could be promoted."""
        return await self.store.list_candidates()

    async def promote(self, channel_id: int) -> HighlightResult:
        """Highlight a channel, appending it after the current last one."""
        try:
            slot = await self.store.get_slot(channel_id)
            if slot is None:
                return self._fail(channel_id, f"Channel {channel_id} not found", FailureKind.NOT_FOUND)
            if slot.is_highlight:
                return self._decline(
                    channel_id,
                    f"Channel {channel_id} is already highlighted",
                    slot.highlight_order,
                )

            max_order = await self.store.get_max_order()
            new_order = 0 if max_order is None else max_order + 1

            await self.store.apply([
                HighlightUpdate(
                    channel_id=channel_id,
                    is_highlight=True,
                    highlight_order=new_order,
                    expected_highlight=slot.is_highlight,
                    expected_order=slot.highlight_order,
                ),
            ])
        except OrderConflictError as e:
            return self._fail(channel_id, str(e), FailureKind.CONFLICT)
        except HighlightStoreError as e:
            return self._store_failure(channel_id, "promote", e)

        logger.info(f"Promoted channel {channel_id} to highlight order {new_order}")
        return HighlightResult.applied(channel_id, new_order)

    async def demote(self, channel_id: int) -> HighlightResult:
        """Remove a channel from the highlights and close the gap it leaves."""
        warnings: List[str] = []
        try:
            slot = await self.store.get_slot(channel_id)
            if slot is None:
                return self._fail(channel_id, f"Channel {channel_id} not found", FailureKind.NOT_FOUND)
            if not slot.is_highlight and slot.highlight_order is None:
                return self._fail(
                    channel_id,
                    f"Channel {channel_id} is not highlighted",
                    FailureKind.INCONSISTENT,
                )

            updates = [
                HighlightUpdate(
                    channel_id=channel_id,
                    is_highlight=False,
                    highlight_order=None,
                    expected_highlight=slot.is_highlight,
                    expected_order=slot.highlight_order,
                ),
            ]

            removed = slot.highlight_order
            if slot.is_highlight and removed is not None:
                for other in await self.store.list_highlighted():
                    if other.channel_id == channel_id or other.highlight_order is None:
                        continue
                    if other.highlight_order > removed:
                        updates.append(
                            HighlightUpdate(
                                channel_id=other.channel_id,
                                is_highlight=True,
                                highlight_order=other.highlight_order - 1,
                                expected_highlight=True,
                                expected_order=other.highlight_order,
                            )
                        )
            else:
                # Flag and order disagree: clear both, leave the others alone
                warnings.append(
                    f"Channel {channel_id} had is_highlight={slot.is_highlight} "
                    f"with highlight_order={removed}; skipped compaction"
                )
                logger.warning(warnings[-1])

            await self.store.apply(updates)
        except OrderConflictError as e:
            return self._fail(channel_id, str(e), FailureKind.CONFLICT)
        except HighlightStoreError as e:
            return self._store_failure(channel_id, "demote", e)

        logger.info(
            f"Demoted channel {channel_id} from highlight order {removed}, "
            f"shifted {len(updates) - 1} channel(s)"
        )
        return HighlightResult.applied(channel_id, None, warnings)

    async def swap(
        self,
        channel_id: int,
        current_order: int,
        direction: SwapDirection,
        max_order: int,
    ) -> HighlightResult:
        """
        Exchange a channel with its neighbour in ``direction``.

        Args:
            channel_id: Channel to move
            current_order: Its order as last seen by the caller
            direction: UP (towards 0) or DOWN
            max_order: Largest order as last seen by the caller

        Moving more than one slot takes repeated swaps.
        """
        direction = SwapDirection(direction)
        if direction == SwapDirection.UP:
            if current_order <= 0:
                return self._decline(channel_id, "Channel is already first", current_order)
            new_order = current_order - 1
        else:
            if current_order >= max_order:
                return self._decline(channel_id, "Channel is already last", current_order)
            new_order = current_order + 1

        try:
            partner = await self.store.find_by_order(new_order)
            if partner is None:
                return self._fail(
                    channel_id,
                    f"No highlighted channel holds order {new_order}; highlight order is inconsistent",
                    FailureKind.INCONSISTENT,
                )

            await self.store.apply([
                HighlightUpdate(
                    channel_id=channel_id,
                    is_highlight=True,
                    highlight_order=new_order,
                    expected_highlight=True,
                    expected_order=current_order,
                ),
                HighlightUpdate(
                    channel_id=partner.channel_id,
                    is_highlight=True,
                    highlight_order=current_order,
                    expected_highlight=True,
                    expected_order=new_order,
                ),
            ])
        except OrderConflictError as e:
            return self._fail(channel_id, str(e), FailureKind.CONFLICT)
        except HighlightStoreError as e:
            return self._store_failure(channel_id, f"move {direction.value}", e)

        logger.info(
            f"Swapped channel {channel_id} ({current_order} -> {new_order}) "
            f"with channel {partner.channel_id}"
        )
        return HighlightResult.applied(channel_id, new_order)

    async def swap_up(self, channel_id: int) -> HighlightResult:
        """Move a channel one slot towards the top."""
        return await self._swap_from_store(channel_id, SwapDirection.UP)

    async def swap_down(self, channel_id: int) -> HighlightResult:
        """Move a channel one slot towards the bottom."""
        return await self._swap_from_store(channel_id, SwapDirection.DOWN)

    async def _swap_from_store(self, channel_id: int, direction: SwapDirection) -> HighlightResult:
        try:
            slot = await self.store.get_slot(channel_id)
            if slot is None:
                return self._fail(channel_id, f"Channel {channel_id} not found", FailureKind.NOT_FOUND)
            if not slot.is_highlight or slot.highlight_order is None:
                return self._fail(
                    channel_id,
                    f"Channel {channel_id} is not highlighted",
                    FailureKind.INCONSISTENT,
                )
            max_order = await self.store.get_max_order()
        except HighlightStoreError as e:
            return self._store_failure(channel_id, f"move {direction.value}", e)

        return await self.swap(channel_id, slot.highlight_order, direction, max_order)

    def _decline(self, channel_id: int, reason: str, order: Optional[int]) -> HighlightResult:
        logger.warning(f"Highlight operation on channel {channel_id} declined: {reason}")
        return HighlightResult.declined(channel_id, reason, order)

    def _fail(self, channel_id: int, error: str, kind: FailureKind) -> HighlightResult:
        logger.warning(f"Highlight operation on channel {channel_id} failed ({kind.value}): {error}")
        return HighlightResult.failure(channel_id, error, kind)

    def _store_failure(self, channel_id: int, operation: str, error: HighlightStoreError) -> HighlightResult:
        logger.error(f"Highlight store error during {operation} of channel {channel_id}: {error}")
        return HighlightResult.failure(channel_id, str(error), FailureKind.STORE_ERROR)
