"""Domain exceptions shared by the service layer.

Endpoints translate these into HTTP responses; the service layer never
raises `HTTPException` itself.
"""

from __future__ import annotations


class GalleryError(RuntimeError):
    """Base exception for all Humor Gallery failures."""


class InvalidArgumentError(GalleryError):
    """Raised when caller input is missing or malformed."""


class UnauthenticatedError(GalleryError):
    """Raised when no verified user identity can be established."""


class StoreUnavailableError(GalleryError):
    """Raised when a database operation fails for a reason other than a conflict."""


class ServiceUnreachableError(GalleryError):
    """Raised when the identity provider or store does not answer in time."""
