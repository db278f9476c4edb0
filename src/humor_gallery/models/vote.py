# src/humor_gallery/models/vote.py
"""Models capturing votes on captions."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    SmallInteger,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from humor_gallery.db.session import Base


class CaptionVote(Base):
    """Per-user thumbs-up/down on a caption.

    The row is owned by the voting profile. It is created on the first vote,
    flipped in place on later votes and deleted on undo.
    """

    __tablename__ = "caption_votes"
    __table_args__ = (
        CheckConstraint("vote_value IN (1, -1)", name="ck_caption_votes_vote_value"),
        Index("ix_caption_votes_caption_id", "caption_id"),
    )

    # Composite primary key prevents duplicate votes from the same user.
    profile_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    caption_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("captions.id", ondelete="CASCADE"),
        primary_key=True,
    )

    # 1 = upvote, -1 = downvote.
    vote_value: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    # Set once on insert; updates only touch modified_datetime_utc.
    created_datetime_utc: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    modified_datetime_utc: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
