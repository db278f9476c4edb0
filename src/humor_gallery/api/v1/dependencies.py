"""Shared API dependencies for authentication and common functionality."""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from humor_gallery.core.errors import (
    GalleryError,
    InvalidArgumentError,
    ServiceUnreachableError,
    StoreUnavailableError,
    UnauthenticatedError,
)
from humor_gallery.db.session import get_db
from humor_gallery.repositories import ImageRepository, VoteRepository
from humor_gallery.services.identity import IdentityService, get_identity_service
from humor_gallery.services.vote_recorder import VoteRecorder

logger = logging.getLogger(__name__)

# auto_error=False so a missing header reaches our own 401 handling and
# optional-auth endpoints can treat it as anonymous.
bearer_scheme = HTTPBearer(auto_error=False)

BearerDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]
SessionDep = Annotated[Session, Depends(get_db)]


def get_identity_service_dep() -> IdentityService:
    """Return the identity service used to verify bearer tokens."""
    return get_identity_service()


IdentityServiceDep = Annotated[IdentityService, Depends(get_identity_service_dep)]


def to_http_exception(err: GalleryError) -> HTTPException:
    """Translate a domain error into the matching HTTP error response."""
    if isinstance(err, InvalidArgumentError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err))
    if isinstance(err, UnauthenticatedError):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if isinstance(err, ServiceUnreachableError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service temporarily unreachable, please try again",
        )
    if isinstance(err, StoreUnavailableError):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(err),
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


async def get_current_user_id(
    credentials: BearerDep,
    identity: IdentityServiceDep,
) -> str:
    """Return the verified user id for the request's bearer token.

    Raises:
        HTTPException: 401 if the token is missing or invalid, 503 if the
            identity provider cannot be reached.
    """
    token = credentials.credentials if credentials else None
    try:
        return await identity.verify(token)
    except GalleryError as err:
        raise to_http_exception(err) from err


async def get_optional_user_id(
    credentials: BearerDep,
    identity: IdentityServiceDep,
) -> str | None:
    """Return the verified user id, or None for anonymous or unverifiable callers."""
    if credentials is None:
        return None
    try:
        return await identity.verify(credentials.credentials)
    except UnauthenticatedError:
        return None
    except ServiceUnreachableError as err:
        logger.warning("Identity provider unreachable; serving anonymous view: %s", err)
        return None


CurrentUserIdDep = Annotated[str, Depends(get_current_user_id)]
OptionalUserIdDep = Annotated[str | None, Depends(get_optional_user_id)]


def get_vote_repository(db: SessionDep) -> VoteRepository:
    return VoteRepository(db)


def get_image_repository(db: SessionDep) -> ImageRepository:
    return ImageRepository(db)


VoteRepoDep = Annotated[VoteRepository, Depends(get_vote_repository)]
ImageRepoDep = Annotated[ImageRepository, Depends(get_image_repository)]


def get_vote_recorder(repo: VoteRepoDep) -> VoteRecorder:
    """Return a vote recorder bound to the request's session."""
    return VoteRecorder(repo)


VoteRecorderDep = Annotated[VoteRecorder, Depends(get_vote_recorder)]
