# =============================================================================
# core/models/section.py - Section Schemas
# =============================================================================
# A section is an ordered, typed block of a user's public page. Its kind is a
# closed set; both the dashboard editor and the public renderer dispatch on it
# with an exhaustive match, so adding a kind means updating both places.
#
# - SectionKind: the closed set of kinds
# - SectionEditor / section_editor(): what a kind's editor manages
# - Section*: API contract for section CRUD and ordering
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import assert_never
from uuid import UUID

from pydantic import AnyHttpUrl, BaseModel, Field


class SectionKind(str, Enum):
    """
    Kinds of sections a page can contain.

    Stored in the `sections.type` column.
    """
    LINKS = "links"
    PHOTO_SLIDER = "photo_slider"
    PHOTO_GRID = "photo_grid"
    TESTIMONIALS = "testimonials"
    VIDEO = "video"
    MAP = "map"
    INFO_CARD = "info_card"


class MemberKind(str, Enum):
    """Content items that join sections through a membership table."""
    LINK = "link"
    PHOTO = "photo"


class SectionEditor(str, Enum):
    """
    What the dashboard edits for a section.

    - link_members / photo_members: an ordered membership list
    - content_url: a single embeddable URL stored on the section row
    - testimonials: the user's global testimonial list (no membership)
    - profile_info: fields of the profile (sales pitch, hours, address)
    """
    LINK_MEMBERS = "link_members"
    PHOTO_MEMBERS = "photo_members"
    CONTENT_URL = "content_url"
    TESTIMONIALS = "testimonials"
    PROFILE_INFO = "profile_info"


def section_editor(kind: SectionKind) -> SectionEditor:
    """Map a section kind to the editor that manages its content."""
    match kind:
        case SectionKind.LINKS:
            return SectionEditor.LINK_MEMBERS
        case SectionKind.PHOTO_SLIDER | SectionKind.PHOTO_GRID:
            return SectionEditor.PHOTO_MEMBERS
        case SectionKind.VIDEO | SectionKind.MAP:
            return SectionEditor.CONTENT_URL
        case SectionKind.TESTIMONIALS:
            return SectionEditor.TESTIMONIALS
        case SectionKind.INFO_CARD:
            return SectionEditor.PROFILE_INFO
        case _:
            assert_never(kind)


def member_kind_for(kind: SectionKind) -> MemberKind | None:
    """Member kind held by a section, or None when it has no membership list."""
    editor = section_editor(kind)
    if editor == SectionEditor.LINK_MEMBERS:
        return MemberKind.LINK
    if editor == SectionEditor.PHOTO_MEMBERS:
        return MemberKind.PHOTO
    return None


class SectionCreate(BaseModel):
    """
    Schema for adding a section.

    New sections are appended after the user's last section and start active.

    Example:
        {"type": "video", "content_url": "https://youtu.be/dQw4w9WgXcQ"}
    """

    type: SectionKind = Field(
        ...,
        description="Kind of section"
    )

    content_url: AnyHttpUrl | None = Field(
        default=None,
        description="Embeddable URL (video and map sections only)"
    )


class SectionUpdate(BaseModel):
    """
    Schema for updating a section.

    Example:
        {"is_active": false}
        or
        {"content_url": "https://www.google.com/maps/embed?pb=..."}
    """

    is_active: bool | None = Field(
        default=None,
        description="Show or hide the section on the public page"
    )

    content_url: AnyHttpUrl | None = Field(
        default=None,
        description="Embeddable URL (video and map sections only)"
    )


class SectionResponse(BaseModel):
    """Section as returned to the dashboard."""

    id: UUID
    user_id: UUID
    type: SectionKind
    order_index: int | None = Field(default=None, ge=0)
    is_active: bool = True
    content_url: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class OrderRequest(BaseModel):
    """
    New order for an ordered list (sections, or members of a section).

    Must list every current id exactly once.

    Example:
        {"ids": ["a1f0...", "9c2e...", "77b4..."]}
    """

    ids: list[UUID] = Field(
        ...,
        description="All ids of the list, in their new order"
    )

    @property
    def id_strings(self) -> list[str]:
        return [str(i) for i in self.ids]
