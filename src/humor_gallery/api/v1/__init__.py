# src/humor_gallery/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import gallery_router, votes_router, voting_router

__all__ = [
    "gallery_router",
    "votes_router",
    "voting_router",
]
