"""
Highlighted channel ranking.

Dense 0..N-1 ordering of featured channels under promote, demote and
single-step reordering.
"""

from handpicked.highlights.order import (
    FailureKind,
    HighlightOrderMaintainer,
    HighlightOutcome,
    HighlightResult,
    SwapDirection,
)
from handpicked.highlights.store import (
    HighlightSlot,
    HighlightStore,
    HighlightStoreError,
    HighlightUpdate,
    OrderConflictError,
    SQLAlchemyHighlightStore,
)

__all__ = [
    # Maintainer
    "HighlightOrderMaintainer",
    "HighlightResult",
    "HighlightOutcome",
    "FailureKind",
    "SwapDirection",
    # Store
    "HighlightStore",
    "SQLAlchemyHighlightStore",
    "HighlightSlot",
    "HighlightUpdate",
    "HighlightStoreError",
    "OrderConflictError",
]
