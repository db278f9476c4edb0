"""Data access helpers for images, captions and categories."""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from humor_gallery.models import Caption, Category, Image, ImageCategory
from humor_gallery.repositories.base import store_error

__all__ = ["ImageRepository"]


class ImageRepository:
    """Read-only access to the gallery tables."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def _scalars(self, stmt: Select, what: str) -> list:
        try:
            return list(self.session.execute(stmt).scalars())
        except SQLAlchemyError as exc:
            raise store_error(f"Error loading {what}", exc) from exc

    @staticmethod
    def _filter_category(stmt: Select, category_id: int | None) -> Select:
        if category_id is None:
            return stmt
        return stmt.join(ImageCategory, ImageCategory.image_id == Image.id).where(
            ImageCategory.category_id == category_id
        )

    def list_captions_with_content(self) -> list[Caption]:
        """Return every caption whose content is not NULL, in store order."""
        return self._scalars(
            select(Caption).where(Caption.content.is_not(None)),
            "captions",
        )

    def list_captions_for_images(self, image_ids: Sequence[str]) -> list[Caption]:
        """Return the captions attached to the given images, in store order."""
        if not image_ids:
            return []
        return self._scalars(
            select(Caption).where(Caption.image_id.in_(list(image_ids))),
            "captions",
        )

    def list_images_by_ids(self, image_ids: Sequence[str]) -> list[Image]:
        """Return the given images, newest first."""
        if not image_ids:
            return []
        return self._scalars(
            select(Image)
            .where(Image.id.in_(list(image_ids)))
            .order_by(Image.created_datetime_utc.desc().nulls_last(), Image.id.asc()),
            "images",
        )

    def count_images(self, category_id: int | None = None) -> int:
        """Return the number of images, optionally within a category."""
        stmt = self._filter_category(select(func.count()).select_from(Image), category_id)
        try:
            return int(self.session.execute(stmt).scalar_one())
        except SQLAlchemyError as exc:
            raise store_error("Error counting images", exc) from exc

    def list_images_page(
        self,
        *,
        offset: int,
        limit: int,
        category_id: int | None = None,
    ) -> list[Image]:
        """Return one page of images ordered newest first."""
        stmt = self._filter_category(select(Image), category_id)
        stmt = (
            stmt.order_by(Image.created_datetime_utc.desc().nulls_last(), Image.id.asc())
            .offset(offset)
            .limit(limit)
        )
        return self._scalars(stmt, "images")

    def get_category(self, category_id: int) -> Category | None:
        """Return a category by identifier."""
        try:
            return self.session.get(Category, category_id)
        except SQLAlchemyError as exc:
            raise store_error("Error loading category", exc) from exc

    def list_categories(self) -> list[Category]:
        """Return all categories ordered by name."""
        return self._scalars(select(Category).order_by(Category.name.asc()), "categories")
