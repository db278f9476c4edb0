"""SQLAlchemy models for image categories."""
from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from humor_gallery.db.session import Base


class Category(Base):
    """Named grouping used to filter the gallery."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)


class ImageCategory(Base):
    """Join table mapping images into categories."""

    __tablename__ = "image_categories"

    image_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("images.id", ondelete="CASCADE"),
        primary_key=True,
    )
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        primary_key=True,
    )
    # No timestamps; presence implies membership.
