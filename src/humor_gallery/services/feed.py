"""Voting feed construction and single-item pagination.

The feed is every image that has a usable caption, newest first, minus the
captions the viewer has already voted on. Pages are resolved by offset into
the full filtered list, so any page can be recomputed on its own.
"""
from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol, overload

from humor_gallery.core.errors import InvalidArgumentError
from humor_gallery.repositories.image_repo import ImageRepository
from humor_gallery.repositories.vote_repo import VoteRepository

logger = logging.getLogger(__name__)

# Text the captioning flow leaves behind when a user skips an image.
PLACEHOLDER_CAPTION = "next"


class CaptionLike(Protocol):
    id: str
    image_id: str
    content: str | None


class ImageLike(Protocol):
    id: str
    url: str | None
    created_datetime_utc: datetime | None


def clean_caption_text(content: str | None) -> str | None:
    """Return the trimmed caption text, or None if it is blank or the placeholder."""
    if content is None:
        return None
    trimmed = content.strip()
    if not trimmed or trimmed.lower() == PLACEHOLDER_CAPTION:
        return None
    return trimmed


def is_valid_caption(content: str | None) -> bool:
    return clean_caption_text(content) is not None


@dataclass(frozen=True)
class FeedEntry:
    """An image paired with its representative caption."""

    image_id: str
    image_url: str
    image_created_at: datetime | None
    caption_id: str
    caption_content: str


def representative_captions(captions: Iterable[CaptionLike]) -> dict[str, tuple[str, str]]:
    """Map image id to (caption id, trimmed text) of its first valid caption.

    First wins in iteration order; later valid captions for the same image are
    ignored even if they are "better".
    """
    chosen: dict[str, tuple[str, str]] = {}
    for caption in captions:
        if caption.image_id in chosen:
            continue
        text = clean_caption_text(caption.content)
        if text is None:
            continue
        chosen[caption.image_id] = (caption.id, text)
    return chosen


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _recency_key(entry: FeedEntry) -> tuple[bool, datetime]:
    created = entry.image_created_at
    if created is None:
        return (False, datetime.min.replace(tzinfo=UTC))
    return (True, _as_utc(created))


class Feed(Sequence[FeedEntry]):
    """Immutable, re-iterable sequence of feed entries."""

    def __init__(self, entries: Iterable[FeedEntry] = ()) -> None:
        self._entries = tuple(entries)

    @overload
    def __getitem__(self, index: int) -> FeedEntry: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[FeedEntry]: ...

    def __getitem__(self, index):
        return self._entries[index]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[FeedEntry]:
        return iter(self._entries)

    def get(self, index: int) -> FeedEntry | None:
        """Return the entry at a non-negative index, or None when out of range."""
        if 0 <= index < len(self._entries):
            return self._entries[index]
        return None

    def __repr__(self) -> str:
        return f"Feed({len(self._entries)} entries)"


def build_feed(
    captions: Iterable[CaptionLike],
    images: Iterable[ImageLike],
    voted_caption_ids: Collection[str] | None = None,
) -> Feed:
    """Build the ordered voting feed.

    Args:
        captions: Captions in store fetch order.
        images: Candidate images; order does not matter.
        voted_caption_ids: Captions the viewer already voted on, or None for an
            anonymous viewer (no vote filtering).

    Returns:
        Entries ordered newest image first; ties are broken by image id.
    """
    return _assemble_feed(representative_captions(captions), images, voted_caption_ids)


def _assemble_feed(
    chosen: Mapping[str, tuple[str, str]],
    images: Iterable[ImageLike],
    voted_caption_ids: Collection[str] | None,
) -> Feed:
    entries: list[FeedEntry] = []
    for image in images:
        caption = chosen.get(image.id)
        if caption is None or not image.url:
            continue
        entries.append(
            FeedEntry(
                image_id=image.id,
                image_url=image.url,
                image_created_at=image.created_datetime_utc,
                caption_id=caption[0],
                caption_content=caption[1],
            )
        )

    entries.sort(key=lambda entry: entry.image_id)
    entries.sort(key=_recency_key, reverse=True)

    if voted_caption_ids is not None:
        voted = set(voted_caption_ids)
        entries = [entry for entry in entries if entry.caption_id not in voted]

    return Feed(entries)


@dataclass(frozen=True)
class FeedPage:
    """One resolved page of the voting feed."""

    page: int
    page_size: int
    total_count: int
    item: FeedEntry | None
    has_next: bool
    has_prev: bool
    prev_item: FeedEntry | None

    @property
    def total_pages(self) -> int:
        if not self.total_count:
            return 1
        return -(-self.total_count // self.page_size)

    @property
    def remaining(self) -> int:
        """Items left after this one, as shown in the "N left" counter."""
        return max(0, self.total_count - self.page)

    @property
    def next_page(self) -> int | None:
        return self.page + 1 if self.has_next else None

    @property
    def prev_page(self) -> int | None:
        return self.page - 1 if self.has_prev else None

    def undo_target(self, authenticated: bool) -> FeedEntry | None:
        """Return the previous entry if its vote can be undone by this viewer."""
        if not authenticated or not self.has_prev:
            return None
        return self.prev_item


def resolve_page(feed: Sequence[FeedEntry], page_number: int, page_size: int = 1) -> FeedPage:
    """Resolve a 1-indexed page of the feed.

    Out-of-range pages are not clamped: they resolve to an empty page with
    `item` set to None.
    """
    if page_number < 1:
        raise InvalidArgumentError("Page number must be at least 1")
    if page_size < 1:
        raise InvalidArgumentError("Page size must be at least 1")

    total = len(feed)
    offset = (page_number - 1) * page_size
    has_prev = page_number > 1
    prev_offset = offset - page_size

    return FeedPage(
        page=page_number,
        page_size=page_size,
        total_count=total,
        item=feed[offset] if offset < total else None,
        has_next=offset + page_size < total,
        has_prev=has_prev,
        prev_item=feed[prev_offset] if has_prev and prev_offset < total else None,
    )


def load_feed(
    images: ImageRepository,
    votes: VoteRepository,
    user_id: str | None,
) -> Feed:
    """Fetch captions, images and the viewer's votes and build the feed."""
    captions = images.list_captions_with_content()
    candidates = representative_captions(captions)
    image_rows = images.list_images_by_ids(list(candidates))
    voted = votes.voted_caption_ids(user_id) if user_id else None
    feed = _assemble_feed(candidates, image_rows, voted)
    logger.debug(
        "Built voting feed: %d candidates, %d entries, user=%s",
        len(candidates),
        len(feed),
        user_id or "anonymous",
    )
    return feed
