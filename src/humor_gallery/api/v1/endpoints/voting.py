# src/humor_gallery/api/v1/endpoints/voting.py
"""Single-item voting feed endpoint."""

from fastapi import APIRouter, Query

from humor_gallery.core.errors import GalleryError
from humor_gallery.core.settings import settings
from humor_gallery.schemas.feed import FeedItemResponse, FeedPageResponse
from humor_gallery.services.feed import FeedEntry, load_feed, resolve_page

from ..dependencies import ImageRepoDep, OptionalUserIdDep, VoteRepoDep, to_http_exception

router = APIRouter(prefix="/voting", tags=["voting"])


def _to_item(entry: FeedEntry | None) -> FeedItemResponse | None:
    if entry is None:
        return None
    return FeedItemResponse(
        image_id=entry.image_id,
        image_url=entry.image_url,
        image_created_at=entry.image_created_at,
        caption_id=entry.caption_id,
        caption_content=entry.caption_content,
    )


@router.get("", response_model=FeedPageResponse)
async def get_voting_page(
    images: ImageRepoDep,
    votes: VoteRepoDep,
    user_id: OptionalUserIdDep,
    page: int = Query(1, description="1-indexed page number"),
) -> FeedPageResponse:
    """Return the next image to vote on for the caller.

    Pages past the end are not clamped; they come back with `item: null`.
    Authentication is optional here. A missing or rejected token, or an identity
    provider that cannot be reached, yields the anonymous view rather than a 401
    or 503; only a store outage produces a 503 on this endpoint.
    """
    try:
        feed = load_feed(images, votes, user_id)
        resolved = resolve_page(feed, page, settings.voting_page_size)
    except GalleryError as err:
        raise to_http_exception(err) from err

    authenticated = user_id is not None
    return FeedPageResponse(
        item=_to_item(resolved.item),
        page=resolved.page,
        total_count=resolved.total_count,
        total_pages=resolved.total_pages,
        remaining=resolved.remaining,
        has_next=resolved.has_next,
        has_prev=resolved.has_prev,
        next_page=resolved.next_page,
        prev_page=resolved.prev_page,
        prev_item=_to_item(resolved.prev_item),
        can_undo=resolved.undo_target(authenticated) is not None,
        authenticated=authenticated,
    )
