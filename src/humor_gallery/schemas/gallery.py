"""Gallery Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class CaptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    image_id: str
    content: str | None


class ImageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    url: str | None
    created_datetime_utc: datetime | None


class GalleryItemResponse(BaseModel):
    image: ImageResponse
    caption: CaptionResponse | None


class GalleryPageResponse(BaseModel):
    """One page of the public gallery."""

    items: list[GalleryItemResponse]
    page: int
    total_pages: int
    total_count: int
    has_next: bool
    has_prev: bool


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
