# =============================================================================
# core/models/link.py - Link Schemas
# =============================================================================
# A link is a button on the public page. Links belong to the user and exist
# on their own; sections reference them through the section_links table.
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import AnyHttpUrl, BaseModel, Field

# "#fff", "#ffffff" or "#ffffffff"
HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$"


class LinkCreate(BaseModel):
    """
    Schema for creating a link.

    Example:
        {
            "title": "My shop",
            "url": "https://shop.example.com",
            "section_ids": ["a1f0..."],
            "background_color": "#d3bd75"
        }
    """

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Button label"
    )

    url: AnyHttpUrl = Field(
        ...,
        description="Target URL (must include http:// or https://)"
    )

    is_active: bool = Field(
        default=True,
        description="Show the link on the public page"
    )

    text_color: str | None = Field(
        default=None,
        pattern=HEX_COLOR_PATTERN,
        description="Button text color"
    )

    background_color: str | None = Field(
        default=None,
        pattern=HEX_COLOR_PATTERN,
        description="Button background color"
    )

    # Links sections to place this link in. New placements go to the end.
    section_ids: list[UUID] = Field(
        ...,
        min_length=1,
        description="Links sections containing this link"
    )


class LinkUpdate(BaseModel):
    """
    Schema for editing a link. Omitted fields are left unchanged.

    `section_ids`, when given, replaces the set of sections holding the link.
    """

    title: str | None = Field(default=None, min_length=1, max_length=255)
    url: AnyHttpUrl | None = None
    is_active: bool | None = None
    text_color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    background_color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    section_ids: list[UUID] | None = Field(default=None, min_length=1)


class LinkResponse(BaseModel):
    """Link as returned to the dashboard."""

    id: UUID
    user_id: UUID
    title: str
    url: str
    is_active: bool = True
    text_color: str | None = None
    background_color: str | None = None
    created_at: datetime | None = None
    section_ids: list[UUID] = Field(default_factory=list)
