# src/humor_gallery/models/image.py
"""SQLAlchemy model for gallery images."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from humor_gallery.db.session import Base
from humor_gallery.db.time import utcnow


class Image(Base):
    """An uploaded image. This service never mutates image rows."""

    __tablename__ = "images"
    __table_args__ = (
        Index("ix_images_created_datetime_utc", "created_datetime_utc"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    # Public display URL; rows with an empty URL are never shown for voting.
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_datetime_utc: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=utcnow,
    )
