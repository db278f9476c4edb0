# src/humor_gallery/api/v1/endpoints/votes.py
"""Vote-related endpoints for the Humor Gallery API."""

from fastapi import APIRouter, status

from humor_gallery.core.errors import GalleryError
from humor_gallery.schemas.vote import (
    VoteCreate,
    VoteDelete,
    VoteDeleteResponse,
    VoteResponse,
)

from ..dependencies import CurrentUserIdDep, VoteRecorderDep, to_http_exception

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("", response_model=VoteResponse, status_code=status.HTTP_200_OK)
async def cast_vote(
    vote_data: VoteCreate,
    user_id: CurrentUserIdDep,
    recorder: VoteRecorderDep,
) -> VoteResponse:
    """Cast or change the caller's vote on a caption."""
    try:
        direction = recorder.record(user_id, vote_data.caption_id, vote_data.direction)
    except GalleryError as err:
        raise to_http_exception(err) from err
    return VoteResponse(direction=direction)


@router.delete("", response_model=VoteDeleteResponse)
async def retract_vote(
    vote_data: VoteDelete,
    user_id: CurrentUserIdDep,
    recorder: VoteRecorderDep,
) -> VoteDeleteResponse:
    """Remove the caller's vote on a caption; succeeds even if there was none."""
    try:
        recorder.retract(user_id, vote_data.caption_id)
    except GalleryError as err:
        raise to_http_exception(err) from err
    return VoteDeleteResponse(ok=True)


@router.get("/{caption_id}", response_model=VoteResponse)
async def get_my_vote(
    caption_id: str,
    user_id: CurrentUserIdDep,
    recorder: VoteRecorderDep,
) -> VoteResponse:
    """Get the caller's current vote on a caption (0 when not voted)."""
    try:
        direction = recorder.current_direction(user_id, caption_id)
    except GalleryError as err:
        raise to_http_exception(err) from err
    return VoteResponse(direction=direction)
