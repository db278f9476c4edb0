# src/humor_gallery/models/__init__.py
"""SQLAlchemy models for the Humor Gallery application."""

from .caption import Caption
from .category import Category, ImageCategory
from .image import Image
from .vote import CaptionVote

__all__ = [
    "Caption",
    "Category", "ImageCategory",
    "Image",
    "CaptionVote",
]
