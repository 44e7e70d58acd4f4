"""
Next-item resolution for pre-loading and end-of-video advance.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from handpicked.playout.schedule_math import is_playable
from handpicked.playout.state import ScheduleItem


@dataclass(frozen=True)
class ScheduleSlot:
    """An item together with its index in the full schedule."""

    item: ScheduleItem
    index: int


def next_playable(schedule: Sequence[ScheduleItem], current_index: int) -> Optional[ScheduleSlot]:
    """
    Find the next playable item after ``current_index``, wrapping around.

    Scans at most ``len(schedule)`` positions starting at ``current_index + 1``,
    so the current item itself is returned last (when it is the only playable
    one). ``current_index`` may point at an item that has just been disabled,
    or lie outside the list.

    Returns:
        ScheduleSlot, or None if the schedule is empty or fully disabled.
    """
    length = len(schedule)
    if length == 0:
        return None

    for step in range(1, length + 1):
        index = (current_index + step) % length
        candidate = schedule[index]
        if is_playable(candidate):
            return ScheduleSlot(item=candidate, index=index)

    return None
