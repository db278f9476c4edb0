# tests/conftest.py
from __future__ import annotations

import os
import time
import uuid
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

TEST_JWT_SECRET = "test-jwt-secret"

os.environ.setdefault("PYTEST_RUNNING", "true")
os.environ["AUTH_JWT_SECRET"] = TEST_JWT_SECRET
os.environ["AUTH_VERIFY_REMOTE"] = "false"

from humor_gallery.db.session import Base
from humor_gallery.db.session import get_db as app_get_session
from humor_gallery.main import app as fastapi_app
from humor_gallery.models import Caption, Category, Image, ImageCategory

TEST_DB_URL = "sqlite://"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    # Session commits and rollbacks act on a savepoint inside the outer
    # transaction, so nested savepoints opened by repositories stay valid.
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def make_token(user_id: str, *, audience: str = "authenticated", expires_in: int = 3600) -> str:
    """Mint an access token the way the identity provider does."""
    now = int(time.time())
    payload = {
        "sub": user_id,
        "aud": audience,
        "role": "authenticated",
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


@pytest.fixture()
def user_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture()
def other_user_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture()
def auth_token(user_id: str) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture()
def other_auth_token(other_user_id: str) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return {"Authorization": f"Bearer {make_token(other_user_id)}"}


@pytest.fixture()
def make_image(db_session: Session) -> Callable[..., Image]:
    """Factory persisting an image row."""

    def _make(
        created: datetime | None = None,
        *,
        url: str | None = "https://cdn.example.com/img.png",
        image_id: str | None = None,
    ) -> Image:
        image = Image(
            id=image_id or str(uuid.uuid4()),
            url=url,
            created_datetime_utc=created or datetime.now(UTC),
        )
        db_session.add(image)
        db_session.flush()
        return image

    return _make


@pytest.fixture()
def make_caption(db_session: Session) -> Callable[..., Caption]:
    """Factory persisting a caption row."""

    def _make(image: Image, content: str | None, *, caption_id: str | None = None) -> Caption:
        caption = Caption(
            id=caption_id or str(uuid.uuid4()),
            image_id=image.id,
            content=content,
        )
        db_session.add(caption)
        db_session.flush()
        return caption

    return _make


@pytest.fixture()
def make_category(db_session: Session) -> Callable[..., Category]:
    """Factory persisting a category and mapping images into it."""

    def _make(name: str, images: tuple[Image, ...] = ()) -> Category:
        category = Category(name=name)
        db_session.add(category)
        db_session.flush()
        for image in images:
            db_session.add(ImageCategory(image_id=image.id, category_id=category.id))
        db_session.flush()
        return category

    return _make


@pytest.fixture()
def test_caption(make_image, make_caption) -> Caption:
    """A single votable caption."""
    image = make_image()
    return make_caption(image, "Funny!")
