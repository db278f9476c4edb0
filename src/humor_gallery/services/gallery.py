"""Service-level helpers for the paginated image gallery."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from humor_gallery.core.errors import InvalidArgumentError
from humor_gallery.models import Caption, Image
from humor_gallery.repositories.image_repo import ImageRepository


class CategoryNotFoundError(LookupError):
    """Raised when filtering by a category that does not exist."""


@dataclass(frozen=True)
class GalleryItem:
    image: Image
    caption: Caption | None


@dataclass(frozen=True)
class GalleryPage:
    items: list[GalleryItem]
    page: int
    page_size: int
    total_count: int

    @property
    def total_pages(self) -> int:
        if not self.total_count:
            return 1
        return -(-self.total_count // self.page_size)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


def first_caption_by_image(captions: Iterable[Caption]) -> dict[str, Caption]:
    """Group captions by image and keep the first one seen for each image.

    Unlike the voting feed, the gallery shows the first caption as stored,
    without skipping blank or placeholder text.
    """
    first: dict[str, Caption] = {}
    for caption in captions:
        first.setdefault(caption.image_id, caption)
    return first


def get_gallery_page(
    repo: ImageRepository,
    *,
    page: int,
    page_size: int,
    category_id: int | None = None,
) -> GalleryPage:
    """Return one page of images, newest first, each with its first caption.

    Raises:
        InvalidArgumentError: If `page` or `page_size` is below 1.
        CategoryNotFoundError: If `category_id` does not exist.
    """
    if page < 1:
        raise InvalidArgumentError("Page number must be at least 1")
    if page_size < 1:
        raise InvalidArgumentError("Page size must be at least 1")
    if category_id is not None and repo.get_category(category_id) is None:
        raise CategoryNotFoundError(f"Category {category_id} not found")

    total = repo.count_images(category_id)
    images = repo.list_images_page(
        offset=(page - 1) * page_size,
        limit=page_size,
        category_id=category_id,
    )
    captions = first_caption_by_image(
        repo.list_captions_for_images([image.id for image in images])
    )
    return GalleryPage(
        items=[GalleryItem(image=image, caption=captions.get(image.id)) for image in images],
        page=page,
        page_size=page_size,
        total_count=total,
    )
