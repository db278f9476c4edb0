"""Voting feed Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class FeedItemResponse(BaseModel):
    """An image with the caption to vote on."""

    image_id: str
    image_url: str
    image_created_at: datetime | None
    caption_id: str
    caption_content: str


class FeedPageResponse(BaseModel):
    """A single page of the voting feed.

    `item` is null when the viewer has run out of images ("all done").
    """

    item: FeedItemResponse | None
    page: int
    total_count: int
    total_pages: int
    remaining: int = Field(..., description="Items left after the current one")
    has_next: bool
    has_prev: bool
    next_page: int | None
    prev_page: int | None
    prev_item: FeedItemResponse | None
    can_undo: bool
    authenticated: bool
