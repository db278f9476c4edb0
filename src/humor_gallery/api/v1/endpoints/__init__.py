# src/humor_gallery/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .gallery import router as gallery_router
from .votes import router as votes_router
from .voting import router as voting_router

__all__ = [
    "gallery_router",
    "votes_router",
    "voting_router",
]
