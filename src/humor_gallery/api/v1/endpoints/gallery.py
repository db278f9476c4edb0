# src/humor_gallery/api/v1/endpoints/gallery.py
"""Public gallery endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from humor_gallery.core.errors import GalleryError
from humor_gallery.core.settings import settings
from humor_gallery.models import Category
from humor_gallery.schemas.gallery import (
    CaptionResponse,
    CategoryResponse,
    GalleryItemResponse,
    GalleryPageResponse,
    ImageResponse,
)
from humor_gallery.services.gallery import CategoryNotFoundError, get_gallery_page

from ..dependencies import ImageRepoDep, to_http_exception

router = APIRouter(tags=["gallery"])


@router.get("/images", response_model=GalleryPageResponse)
async def list_images(
    repo: ImageRepoDep,
    page: int = Query(1, description="1-indexed page number"),
    category: int | None = Query(None, description="Filter by category id"),
) -> GalleryPageResponse:
    """List images newest first, each with its first caption.

    Args:
        repo: Image repository bound to the request session
        page: Page number, starting at 1
        category: Optional category id to filter by

    Raises:
        HTTPException: 400 for an invalid page, 404 for an unknown category
    """
    try:
        gallery = get_gallery_page(
            repo,
            page=page,
            page_size=settings.gallery_page_size,
            category_id=category,
        )
    except CategoryNotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        ) from err
    except GalleryError as err:
        raise to_http_exception(err) from err

    return GalleryPageResponse(
        items=[
            GalleryItemResponse(
                image=ImageResponse.model_validate(item.image),
                caption=(
                    CaptionResponse.model_validate(item.caption)
                    if item.caption is not None
                    else None
                ),
            )
            for item in gallery.items
        ],
        page=gallery.page,
        total_pages=gallery.total_pages,
        total_count=gallery.total_count,
        has_next=gallery.has_next,
        has_prev=gallery.has_prev,
    )


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(repo: ImageRepoDep) -> list[Category]:
    """List all categories ordered by name."""
    try:
        return repo.list_categories()
    except GalleryError as err:
        raise to_http_exception(err) from err
