"""Data access helpers for caption votes.

Every method maps driver failures onto `StoreUnavailableError`, or
`ServiceUnreachableError` when the database did not answer in time. The one
failure that is *not* an error is a unique-key collision on insert, which is
reported as `InsertOutcome.CONFLICT` so callers can branch on it explicitly.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from humor_gallery.core.errors import StoreUnavailableError
from humor_gallery.models.vote import CaptionVote
from humor_gallery.repositories.base import store_error

__all__ = ["InsertOutcome", "InsertResult", "VoteRepository"]

logger = logging.getLogger(__name__)

# Postgres SQLSTATE for unique_violation.
UNIQUE_VIOLATION = "23505"


class InsertOutcome(Enum):
    """Result of attempting to insert a vote row."""

    INSERTED = "inserted"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class InsertResult:
    """Typed insert result; `vote_value` is set only when the row was written."""

    outcome: InsertOutcome
    vote_value: int | None = None

    @property
    def conflict(self) -> bool:
        return self.outcome is InsertOutcome.CONFLICT


def is_unique_violation(exc: IntegrityError) -> bool:
    """Return True if the integrity error is a duplicate-key violation."""
    orig = exc.orig
    # psycopg exposes `sqlstate`, psycopg2 exposes `pgcode`.
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is not None:
        return code == UNIQUE_VIOLATION
    message = str(orig)
    return "UNIQUE constraint failed" in message or "duplicate key" in message


class VoteRepository:
    """Thin wrapper around database access for caption votes."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def insert(
        self,
        *,
        profile_id: str,
        caption_id: str,
        vote_value: int,
        now: datetime,
    ) -> InsertResult:
        """Insert a new vote row with both timestamps set to `now`.

        The statement runs inside a savepoint so a duplicate-key failure leaves
        the surrounding transaction usable for the follow-up update.
        """
        stmt = insert(CaptionVote).values(
            profile_id=profile_id,
            caption_id=caption_id,
            vote_value=vote_value,
            created_datetime_utc=now,
            modified_datetime_utc=now,
        )
        try:
            with self.session.begin_nested():
                self.session.execute(stmt)
        except IntegrityError as exc:
            if is_unique_violation(exc):
                return InsertResult(InsertOutcome.CONFLICT)
            raise StoreUnavailableError(f"Failed to insert vote: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            raise store_error("Failed to insert vote", exc) from exc
        return InsertResult(InsertOutcome.INSERTED, vote_value)

    def update_direction(
        self,
        *,
        profile_id: str,
        caption_id: str,
        vote_value: int,
        now: datetime,
    ) -> int | None:
        """Set the direction and modified timestamp of an existing vote.

        Returns:
            The persisted direction, or None if no row matched.
        """
        stmt = (
            update(CaptionVote)
            .where(
                CaptionVote.profile_id == profile_id,
                CaptionVote.caption_id == caption_id,
            )
            .values(vote_value=vote_value, modified_datetime_utc=now)
        )
        try:
            result = self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise store_error("Failed to update vote", exc) from exc
        if result.rowcount == 0:
            return None
        return vote_value

    def delete(self, *, profile_id: str, caption_id: str) -> int:
        """Delete the vote for the pair, returning the number of rows removed."""
        stmt = delete(CaptionVote).where(
            CaptionVote.profile_id == profile_id,
            CaptionVote.caption_id == caption_id,
        )
        try:
            result = self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise store_error("Failed to delete vote", exc) from exc
        return result.rowcount

    def get(self, *, profile_id: str, caption_id: str) -> CaptionVote | None:
        """Return the vote row for the pair, if any."""
        try:
            return self.session.execute(
                select(CaptionVote).where(
                    CaptionVote.profile_id == profile_id,
                    CaptionVote.caption_id == caption_id,
                )
            ).scalars().first()
        except SQLAlchemyError as exc:
            raise store_error("Failed to load vote", exc) from exc

    def voted_caption_ids(self, profile_id: str) -> set[str]:
        """Return the ids of every caption the profile has voted on."""
        try:
            rows = self.session.execute(
                select(CaptionVote.caption_id).where(CaptionVote.profile_id == profile_id)
            ).scalars()
            return set(rows)
        except SQLAlchemyError as exc:
            raise store_error("Failed to load votes", exc) from exc

    def commit(self) -> None:
        """Commit pending changes, rolling back on failure."""
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            logger.error("Vote commit failed: %s", exc)
            self.session.rollback()
            raise store_error("Failed to commit vote", exc) from exc

    def rollback(self) -> None:
        self.session.rollback()
