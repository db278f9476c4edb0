# src/humor_gallery/models/caption.py
"""SQLAlchemy model for image captions."""

from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from humor_gallery.db.session import Base


class Caption(Base):
    """Caption text attached to an image; an image may carry many captions."""

    __tablename__ = "captions"
    __table_args__ = (
        Index("ix_captions_image_id", "image_id"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    image_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("images.id", ondelete="CASCADE"),
        nullable=False,
    )
    # May be NULL, blank, or the "next" placeholder left behind by the captioning flow.
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
