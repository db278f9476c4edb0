# tests/v1/test_vote_recorder.py
"""Tests for the vote recorder service."""

import logging
from datetime import UTC, datetime, timedelta
from itertools import count

import pytest
from sqlalchemy import select

from humor_gallery.core.errors import (
    InvalidArgumentError,
    ServiceUnreachableError,
    StoreUnavailableError,
    UnauthenticatedError,
)
from humor_gallery.models import CaptionVote
from humor_gallery.repositories.image_repo import ImageRepository
from humor_gallery.repositories.vote_repo import InsertOutcome, InsertResult, VoteRepository
from humor_gallery.services.feed import load_feed, resolve_page
from humor_gallery.services.vote_recorder import VoteRecorder


def _ticking_clock(start: datetime = datetime(2024, 5, 1, 12, 0)):
    ticks = count()

    def _now() -> datetime:
        return start + timedelta(seconds=next(ticks))

    return _now


@pytest.fixture()
def recorder(db_session) -> VoteRecorder:
    return VoteRecorder(VoteRepository(db_session), clock=_ticking_clock())


def _rows(db_session, user_id, caption_id):
    db_session.expire_all()
    return db_session.execute(
        select(CaptionVote).where(
            CaptionVote.profile_id == user_id,
            CaptionVote.caption_id == caption_id,
        )
    ).scalars().all()


def test_first_vote_inserts_row(recorder, db_session, user_id, test_caption) -> None:
    assert recorder.record(user_id, test_caption.id, 1) == 1

    rows = _rows(db_session, user_id, test_caption.id)
    assert len(rows) == 1
    assert rows[0].vote_value == 1
    assert rows[0].created_datetime_utc == rows[0].modified_datetime_utc


def test_repeat_same_direction_keeps_created(recorder, db_session, user_id, test_caption) -> None:
    recorder.record(user_id, test_caption.id, 1)
    first = _rows(db_session, user_id, test_caption.id)[0]
    created, modified = first.created_datetime_utc, first.modified_datetime_utc

    assert recorder.record(user_id, test_caption.id, 1) == 1

    rows = _rows(db_session, user_id, test_caption.id)
    assert len(rows) == 1
    assert rows[0].vote_value == 1
    assert rows[0].created_datetime_utc == created
    assert rows[0].modified_datetime_utc >= modified


def test_flip_direction_updates_in_place(recorder, db_session, user_id, test_caption) -> None:
    recorder.record(user_id, test_caption.id, 1)
    created = _rows(db_session, user_id, test_caption.id)[0].created_datetime_utc

    assert recorder.record(user_id, test_caption.id, -1) == -1

    rows = _rows(db_session, user_id, test_caption.id)
    assert len(rows) == 1
    assert rows[0].vote_value == -1
    assert rows[0].created_datetime_utc == created
    assert rows[0].modified_datetime_utc > created


def test_repeated_votes_across_commits(recorder, db_session, user_id, test_caption) -> None:
    recorder.record(user_id, test_caption.id, 1)
    created = _rows(db_session, user_id, test_caption.id)[0].created_datetime_utc

    for direction in (1, -1, 1):
        assert recorder.record(user_id, test_caption.id, direction) == direction

    rows = _rows(db_session, user_id, test_caption.id)
    assert len(rows) == 1
    assert rows[0].vote_value == 1
    assert rows[0].created_datetime_utc == created

    recorder.retract(user_id, test_caption.id)
    recorder.retract(user_id, test_caption.id)
    assert _rows(db_session, user_id, test_caption.id) == []


def test_state_cycle(recorder, user_id, test_caption) -> None:
    """NoVote -> Downvoted -> Upvoted -> NoVote -> Upvoted."""
    assert recorder.current_direction(user_id, test_caption.id) == 0
    recorder.record(user_id, test_caption.id, -1)
    assert recorder.current_direction(user_id, test_caption.id) == -1
    recorder.record(user_id, test_caption.id, 1)
    assert recorder.current_direction(user_id, test_caption.id) == 1
    recorder.retract(user_id, test_caption.id)
    assert recorder.current_direction(user_id, test_caption.id) == 0
    recorder.record(user_id, test_caption.id, 1)
    assert recorder.current_direction(user_id, test_caption.id) == 1


def test_retract_missing_vote_is_noop(recorder, db_session, user_id, test_caption) -> None:
    recorder.retract(user_id, test_caption.id)
    assert _rows(db_session, user_id, test_caption.id) == []


@pytest.mark.parametrize("direction", [0, 2, -2, True, 1.0, "1", None])
def test_invalid_direction_writes_nothing(recorder, db_session, user_id, test_caption, direction) -> None:
    with pytest.raises(InvalidArgumentError):
        recorder.record(user_id, test_caption.id, direction)
    assert _rows(db_session, user_id, test_caption.id) == []


@pytest.mark.parametrize("caption_id", [None, "", "   ", 42])
def test_invalid_caption_id(recorder, user_id, caption_id) -> None:
    with pytest.raises(InvalidArgumentError):
        recorder.record(user_id, caption_id, 1)
    with pytest.raises(InvalidArgumentError):
        recorder.retract(user_id, caption_id)


@pytest.mark.parametrize("user", [None, ""])
def test_anonymous_caller_is_rejected(recorder, test_caption, user) -> None:
    with pytest.raises(UnauthenticatedError):
        recorder.record(user, test_caption.id, 1)
    with pytest.raises(UnauthenticatedError):
        recorder.retract(user, test_caption.id)


def test_retracted_caption_reappears_in_feed(
    recorder, db_session, user_id, make_image, make_caption
) -> None:
    image = make_image(datetime(2024, 1, 1, tzinfo=UTC))
    caption = make_caption(image, "Funny!")
    images = ImageRepository(db_session)
    votes = VoteRepository(db_session)

    recorder.record(user_id, caption.id, 1)
    assert resolve_page(load_feed(images, votes, user_id), 1).item is None

    recorder.retract(user_id, caption.id)
    page = resolve_page(load_feed(images, votes, user_id), 1)
    assert page.item is not None
    assert page.item.caption_id == caption.id


class _FakeRepo:
    """In-memory stand-in that records which store calls were made."""

    def __init__(self, *, insert_result=None, insert_error=None, update_result=1, update_error=None):
        self.insert_result = insert_result or InsertResult(InsertOutcome.INSERTED, 1)
        self.insert_error = insert_error
        self.update_result = update_result
        self.update_error = update_error
        self.calls: list[str] = []

    def insert(self, **kwargs):
        self.calls.append("insert")
        if self.insert_error:
            raise self.insert_error
        return self.insert_result

    def update_direction(self, **kwargs):
        self.calls.append("update")
        if self.update_error:
            raise self.update_error
        return kwargs["vote_value"] if self.update_result else None

    def delete(self, **kwargs):
        self.calls.append("delete")
        raise StoreUnavailableError("delete failed")

    def get(self, **kwargs):
        self.calls.append("get")
        raise ServiceUnreachableError("Failed to load vote: database unreachable or timed out")

    def commit(self):
        self.calls.append("commit")

    def rollback(self):
        self.calls.append("rollback")


def test_conflict_falls_back_to_update() -> None:
    repo = _FakeRepo(insert_result=InsertResult(InsertOutcome.CONFLICT))
    assert VoteRecorder(repo).record("user", "caption", -1) == -1
    assert repo.calls == ["insert", "update", "commit"]


def test_insert_failure_is_surfaced_without_update() -> None:
    repo = _FakeRepo(insert_error=StoreUnavailableError("boom"))
    with pytest.raises(StoreUnavailableError):
        VoteRecorder(repo).record("user", "caption", 1)
    assert repo.calls == ["insert", "rollback"]


def test_update_failure_is_not_retried() -> None:
    repo = _FakeRepo(
        insert_result=InsertResult(InsertOutcome.CONFLICT),
        update_error=StoreUnavailableError("boom"),
    )
    with pytest.raises(StoreUnavailableError):
        VoteRecorder(repo).record("user", "caption", 1)
    assert repo.calls == ["insert", "update", "rollback"]


def test_vanished_row_during_update_is_an_error() -> None:
    repo = _FakeRepo(insert_result=InsertResult(InsertOutcome.CONFLICT), update_result=None)
    with pytest.raises(StoreUnavailableError):
        VoteRecorder(repo).record("user", "caption", 1)


def test_delete_failure_is_surfaced() -> None:
    repo = _FakeRepo()
    with pytest.raises(StoreUnavailableError):
        VoteRecorder(repo).retract("user", "caption")
    assert repo.calls == ["delete", "rollback"]


def test_store_timeout_is_rolled_back_and_surfaced() -> None:
    repo = _FakeRepo(insert_error=ServiceUnreachableError("Failed to insert vote: timed out"))
    with pytest.raises(ServiceUnreachableError):
        VoteRecorder(repo).record("user", "caption", 1)
    assert repo.calls == ["insert", "rollback"]


def test_current_direction_failure_is_logged(caplog) -> None:
    repo = _FakeRepo()
    with caplog.at_level(logging.ERROR, logger="humor_gallery.services.vote_recorder"):
        with pytest.raises(ServiceUnreachableError):
            VoteRecorder(repo).current_direction("user-1", "caption-9")
    assert repo.calls == ["get"]
    assert "profile_id=user-1 caption_id=caption-9" in caplog.text
