"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .feed import FeedItemResponse, FeedPageResponse
from .gallery import (
    CaptionResponse,
    CategoryResponse,
    GalleryItemResponse,
    GalleryPageResponse,
    ImageResponse,
)
from .vote import VoteCreate, VoteDelete, VoteDeleteResponse, VoteResponse

__all__ = [
    "FeedItemResponse", "FeedPageResponse",
    "CaptionResponse", "CategoryResponse", "GalleryItemResponse", "GalleryPageResponse",
    "ImageResponse",
    "VoteCreate", "VoteDelete", "VoteDeleteResponse", "VoteResponse",
]
