"""
Duration arithmetic over a channel schedule.

A schedule is one stored list. Disabled items keep their place (and index)
in that list; the "playable" view is computed on the fly instead of being
kept as a second list.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from handpicked.playout.state import ScheduleItem


@dataclass(frozen=True)
class ActiveItem:
    """The item covering a point of the loop, with its original-list index."""

    item: "ScheduleItem"
    index: int
    offset_seconds: int


def is_playable(item: "ScheduleItem") -> bool:
    """Disabled items are skipped by playback."""
    return not item.is_disabled


def playable_indices(items: Sequence["ScheduleItem"]) -> List[int]:
    """Original-list indices of the playable items, in schedule order."""
    return [index for index, item in enumerate(items) if is_playable(item)]


def total_duration(items: Sequence["ScheduleItem"]) -> int:
    """
    Length of one loop in seconds.

    0 means there is nothing to play; callers must not divide by it.
    """
    return sum(item.duration_seconds for item in items if is_playable(item))


def locate(items: Sequence["ScheduleItem"], position_in_loop: int) -> Optional[ActiveItem]:
    """
    Find the playable item covering ``position_in_loop``.

    Args:
        items: Full schedule in position order, disabled items included.
        position_in_loop: Seconds into the loop, ``0 <= p < total_duration``.

    Returns:
        ActiveItem with ``0 <= offset_seconds < item.duration_seconds``.
        Falls back to the first playable item at offset 0 when no item
        covers the position. None only if nothing is playable.
    """
    indices = playable_indices(items)
    if not indices:
        return None

    accumulated = 0
    for index in indices:
        item = items[index]
        item_end = accumulated + item.duration_seconds
        if accumulated <= position_in_loop < item_end:
            return ActiveItem(item=item, index=index, offset_seconds=position_in_loop - accumulated)
        accumulated = item_end

    first = indices[0]
    return ActiveItem(item=items[first], index=first, offset_seconds=0)
