# src/humor_gallery/services/__init__.py
"""Business logic services for the Humor Gallery application."""

from .feed import Feed, FeedEntry, FeedPage, build_feed, load_feed, resolve_page
from .gallery import CategoryNotFoundError, GalleryPage, get_gallery_page
from .identity import IdentityService, get_identity_service
from .vote_recorder import VoteRecorder

__all__ = [
    "Feed", "FeedEntry", "FeedPage", "build_feed", "load_feed", "resolve_page",
    "CategoryNotFoundError", "GalleryPage", "get_gallery_page",
    "IdentityService", "get_identity_service",
    "VoteRecorder",
]
