"""Recording and retracting caption votes.

Each (profile, caption) pair moves between three states: no vote, upvoted and
downvoted. A vote is written by inserting first; when the store reports a
duplicate key the existing row is updated instead, so the pair never has more
than one row and its creation timestamp survives direction changes.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from humor_gallery.core.errors import (
    InvalidArgumentError,
    ServiceUnreachableError,
    StoreUnavailableError,
    UnauthenticatedError,
)
from humor_gallery.db.time import utcnow
from humor_gallery.repositories.vote_repo import VoteRepository

logger = logging.getLogger(__name__)

UPVOTE = 1
DOWNVOTE = -1
NO_VOTE = 0
VALID_DIRECTIONS = (UPVOTE, DOWNVOTE)

# Store failures that abort a vote call.
STORE_ERRORS = (StoreUnavailableError, ServiceUnreachableError)


def validate_direction(direction: object) -> int:
    """Return `direction` if it is exactly 1 or -1."""
    # bool is an int subclass; True must not pass as an upvote.
    if type(direction) is not int or direction not in VALID_DIRECTIONS:
        raise InvalidArgumentError("Direction must be 1 or -1")
    return direction


def validate_caption_id(caption_id: object) -> str:
    """Return the caption id if it is a non-blank string."""
    if not isinstance(caption_id, str) or not caption_id.strip():
        raise InvalidArgumentError("Missing caption id")
    return caption_id


def _require_user(user_id: str | None) -> str:
    if not user_id:
        raise UnauthenticatedError("A signed-in user is required to vote")
    return user_id


class VoteRecorder:
    """Persist exactly one current vote per (profile, caption) pair."""

    def __init__(
        self,
        repo: VoteRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.repo = repo
        self._clock = clock

    def record(self, user_id: str | None, caption_id: object, direction: object) -> int:
        """Make the stored vote for the pair match `direction`.

        Args:
            user_id: Verified user id, or None for an anonymous caller.
            caption_id: Caption being voted on.
            direction: 1 for thumbs-up, -1 for thumbs-down.

        Returns:
            The direction now persisted for the pair.

        Raises:
            UnauthenticatedError: If no user id is supplied.
            InvalidArgumentError: If the caption id or direction is invalid.
            StoreUnavailableError: If the insert or the fallback update fails.
            ServiceUnreachableError: If the database did not answer in time.
        """
        profile_id = _require_user(user_id)
        caption = validate_caption_id(caption_id)
        value = validate_direction(direction)
        now = self._clock()

        try:
            result = self.repo.insert(
                profile_id=profile_id,
                caption_id=caption,
                vote_value=value,
                now=now,
            )
            if result.conflict:
                persisted = self.repo.update_direction(
                    profile_id=profile_id,
                    caption_id=caption,
                    vote_value=value,
                    now=now,
                )
                if persisted is None:
                    # The row was retracted between the insert and the update.
                    raise StoreUnavailableError("Vote row disappeared during update")
            else:
                persisted = result.vote_value
            self.repo.commit()
        except STORE_ERRORS as exc:
            logger.error(
                "Failed to record vote profile_id=%s caption_id=%s direction=%s: %s",
                profile_id,
                caption,
                value,
                exc,
            )
            self.repo.rollback()
            raise

        logger.info(
            "Recorded vote profile_id=%s caption_id=%s direction=%s (%s)",
            profile_id,
            caption,
            persisted,
            "updated" if result.conflict else "inserted",
        )
        return persisted

    def retract(self, user_id: str | None, caption_id: object) -> None:
        """Delete the vote for the pair; a missing vote is not an error."""
        profile_id = _require_user(user_id)
        caption = validate_caption_id(caption_id)

        try:
            removed = self.repo.delete(profile_id=profile_id, caption_id=caption)
            self.repo.commit()
        except STORE_ERRORS as exc:
            logger.error(
                "Failed to retract vote profile_id=%s caption_id=%s: %s",
                profile_id,
                caption,
                exc,
            )
            self.repo.rollback()
            raise

        logger.info(
            "Retracted vote profile_id=%s caption_id=%s removed=%d",
            profile_id,
            caption,
            removed,
        )

    def current_direction(self, user_id: str | None, caption_id: object) -> int:
        """Return the stored direction for the pair, or 0 when there is no vote."""
        profile_id = _require_user(user_id)
        caption = validate_caption_id(caption_id)
        try:
            vote = self.repo.get(profile_id=profile_id, caption_id=caption)
        except STORE_ERRORS as exc:
            logger.error(
                "Failed to load vote profile_id=%s caption_id=%s: %s",
                profile_id,
                caption,
                exc,
            )
            raise
        if vote is None:
            return NO_VOTE
        return vote.vote_value
