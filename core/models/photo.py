# =============================================================================
# core/models/photo.py - Photo and Testimonial Schemas
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import AnyHttpUrl, BaseModel, Field


class PhotoCreate(BaseModel):
    """
    Schema for adding a photo by external URL.

    Uploaded photos go through the multipart upload endpoint instead.
    """

    url: AnyHttpUrl = Field(
        ...,
        description="Public image URL"
    )

    caption: str | None = Field(
        default=None,
        max_length=100,
        description="Optional caption"
    )


class PhotoUpdate(BaseModel):
    """
    Schema for editing a photo. Omitted fields are left unchanged.

    An empty caption clears it.
    """

    url: AnyHttpUrl | None = None
    caption: str | None = Field(default=None, max_length=100)


class PhotoResponse(BaseModel):
    id: UUID
    user_id: UUID
    url: str
    caption: str | None = None
    created_at: datetime | None = None


class TestimonialCreate(BaseModel):
    """
    Schema for a testimonial.

    Example:
        {"author": "Maria", "content": "Great service, would recommend!"}
    """

    author: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Who said it"
    )

    content: str = Field(
        ...,
        min_length=10,
        max_length=500,
        description="Testimonial text"
    )


class TestimonialUpdate(BaseModel):
    author: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = Field(default=None, min_length=10, max_length=500)


class TestimonialResponse(BaseModel):
    id: UUID
    user_id: UUID
    author: str
    content: str
    created_at: datetime | None = None
