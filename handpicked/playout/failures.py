"""
Playback failure reports.

A viewer's player reports an error code when a video cannot be played.
Codes meaning the video itself is gone (removed, private, embedding
disabled) disable the schedule item so the loop skips it for everyone.
Other codes (network trouble, autoplay blocked) are viewer-local and
rejected.
"""

from datetime import datetime
from typing import Any, Iterable, Optional

from handpicked.config import get_config


class PlaybackFailureError(Exception):
    """Invalid playback failure report."""

    def __init__(self, message: str, error_code: Any = None):
        super().__init__(message)
        self.error_code = error_code


def validate_schedule_item_id(schedule_item_id: Any) -> int:
    """
    Check the schedule item id of a failure report.

    Raises:
        PlaybackFailureError: Missing or non-integer id.
    """
    if isinstance(schedule_item_id, bool) or not isinstance(schedule_item_id, int):
        raise PlaybackFailureError("Missing scheduleItemId")
    return schedule_item_id


def validate_failure_report(error_code: Any, allowed: Optional[Iterable[int]] = None) -> int:
    """
    Check that ``error_code`` may disable a schedule item.

    Args:
        error_code: Code reported by the player
        allowed: Accepted codes (defaults to playback.disabling_error_codes)

    Returns:
        The validated code.

    Raises:
        PlaybackFailureError: Missing, non-integer or non-disabling code.
    """
    if allowed is None:
        allowed = get_config().playback.disabling_error_codes
    allowed_codes = list(allowed)

    # bool is an int subclass; True is not an error code
    if isinstance(error_code, bool) or not isinstance(error_code, int):
        raise PlaybackFailureError("Missing or invalid errorCode", error_code)

    if error_code not in allowed_codes:
        raise PlaybackFailureError(
            f"Invalid error code. Allowed: {', '.join(str(code) for code in allowed_codes)}",
            error_code,
        )

    return error_code


def build_disable_values(
    error_code: int,
    error_message: Optional[str],
    now: datetime,
) -> dict[str, Any]:
    """Column values written to a ChannelScheduleItem on a failure report."""
    message = error_message or get_config().playback.default_error_message.format(code=error_code)
    return {
        "is_disabled": True,
        "last_error_code": error_code,
        "last_error_message": message,
        "last_checked_at": now,
    }
