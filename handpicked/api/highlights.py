"""Highlight ranking API endpoints"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..api.schemas import HighlightChannelResponse, HighlightOperationResponse
from ..database import get_db
from ..highlights import (
    FailureKind,
    HighlightOrderMaintainer,
    HighlightOutcome,
    HighlightResult,
    HighlightStoreError,
    SQLAlchemyHighlightStore,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/highlights", tags=["Highlights"])

_FAILURE_STATUS = {
    FailureKind.NOT_FOUND: 404,
    FailureKind.INCONSISTENT: 409,
    FailureKind.CONFLICT: 409,
    FailureKind.STORE_ERROR: 503,
}


def get_highlight_maintainer(db: AsyncSession = Depends(get_db)) -> HighlightOrderMaintainer:
    """FastAPI dependency for the highlight maintainer."""
    return HighlightOrderMaintainer(SQLAlchemyHighlightStore(db))


def _result_to_response(result: HighlightResult) -> HighlightOperationResponse:
    if result.outcome == HighlightOutcome.DECLINED:
        raise HTTPException(status_code=409, detail=result.error)
    if result.outcome == HighlightOutcome.FAILED:
        raise HTTPException(status_code=_FAILURE_STATUS[result.failure_kind], detail=result.error)

    return HighlightOperationResponse(
        outcome=result.outcome.value,
        channel_id=result.channel_id,
        highlight_order=result.highlight_order,
        warnings=result.warnings,
    )


@router.get("", response_model=list[HighlightChannelResponse])
async def list_highlights(
    maintainer: HighlightOrderMaintainer = Depends(get_highlight_maintainer),
) -> Any:
    """Get highlighted channels in rank order."""
    try:
        slots = await maintainer.list_highlights()
    except HighlightStoreError as e:
        logger.error(f"Failed to list highlights: {e}")
        raise HTTPException(status_code=503, detail="Highlight store unavailable")

    return [
        HighlightChannelResponse(
            channel_id=slot.channel_id,
            slug=slot.slug,
            title=slot.title,
            highlight_order=slot.highlight_order,
        )
        for slot in slots
    ]


@router.get("/candidates", response_model=list[HighlightChannelResponse])
async def list_highlight_candidates(
    maintainer: HighlightOrderMaintainer = Depends(get_highlight_maintainer),
) -> Any:
    """Get public, non-highlighted channels that can be promoted."""
    try:
        slots = await maintainer.list_candidates()
    except HighlightStoreError as e:
        logger.error(f"Failed to list highlight candidates: {e}")
        raise HTTPException(status_code=503, detail="Highlight store unavailable")

    return [
        HighlightChannelResponse(channel_id=slot.channel_id, slug=slot.slug, title=slot.title)
        for slot in slots
    ]


@router.post("/{channel_id}/promote", response_model=HighlightOperationResponse)
async def promote_channel(
    channel_id: int,
    maintainer: HighlightOrderMaintainer = Depends(get_highlight_maintainer),
) -> Any:
    """Add a channel to the end of the highlights."""
    return _result_to_response(await maintainer.promote(channel_id))


@router.post("/{channel_id}/demote", response_model=HighlightOperationResponse)
async def demote_channel(
    channel_id: int,
    maintainer: HighlightOrderMaintainer = Depends(get_highlight_maintainer),
) -> Any:
    """Remove a channel from the highlights."""
    return _result_to_response(await maintainer.demote(channel_id))


@router.post("/{channel_id}/move-up", response_model=HighlightOperationResponse)
async def move_channel_up(
    channel_id: int,
    maintainer: HighlightOrderMaintainer = Depends(get_highlight_maintainer),
) -> Any:
    """Swap a channel with the one ranked just above it."""
    return _result_to_response(await maintainer.swap_up(channel_id))


@router.post("/{channel_id}/move-down", response_model=HighlightOperationResponse)
async def move_channel_down(
    channel_id: int,
    maintainer: HighlightOrderMaintainer = Depends(get_highlight_maintainer),
) -> Any:
    """Swap a channel with the one ranked just below it."""
    return _result_to_response(await maintainer.swap_down(channel_id))
