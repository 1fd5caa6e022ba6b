# =============================================================================
# core/models/public.py - Public Page Schemas
# =============================================================================
# The public page is returned as the profile header plus a list of blocks,
# one per visible section, in section order. Each block carries only what
# the browser needs to draw that kind of section.
#
# Blocks are a discriminated union on `type` (same values as SectionKind).
# =============================================================================

from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import BaseModel, Field

from .profile import PublicProfile


class LinkButton(BaseModel):
    id: UUID
    title: str
    url: str
    text_color: str | None = None
    background_color: str | None = None


class PhotoItem(BaseModel):
    id: UUID
    url: str
    caption: str | None = None


class TestimonialItem(BaseModel):
    id: UUID
    author: str
    content: str


class _Block(BaseModel):
    section_id: UUID


class LinkListBlock(_Block):
    type: Literal["links"] = "links"
    links: list[LinkButton]


class PhotoSliderBlock(_Block):
    """Auto-advancing carousel: fixed interval, infinite loop."""
    type: Literal["photo_slider"] = "photo_slider"
    photos: list[PhotoItem]
    interval_ms: int = 3000
    loop: bool = True


class PhotoGridBlock(_Block):
    type: Literal["photo_grid"] = "photo_grid"
    photos: list[PhotoItem]


class TestimonialListBlock(_Block):
    type: Literal["testimonials"] = "testimonials"
    testimonials: list[TestimonialItem]


class VideoEmbedBlock(_Block):
    type: Literal["video"] = "video"
    embed_url: str


class MapEmbedBlock(_Block):
    type: Literal["map"] = "map"
    embed_url: str


class InfoCardBlock(_Block):
    type: Literal["info_card"] = "info_card"
    sales_pitch: str | None = None
    store_hours: str | None = None
    address: str | None = None


PublicBlock = Annotated[
    Union[
        LinkListBlock,
        PhotoSliderBlock,
        PhotoGridBlock,
        TestimonialListBlock,
        VideoEmbedBlock,
        MapEmbedBlock,
        InfoCardBlock,
    ],
    Field(discriminator="type"),
]


class PublicPage(BaseModel):
    """
    Everything needed to render /u/{username}.

    Example:
        {
            "profile": {"username": "ana", "first_name": "Ana", ...},
            "full_name": "Ana Souza",
            "blocks": [
                {"type": "links", "section_id": "...", "links": [...]},
                {"type": "video", "section_id": "...", "embed_url": "https://www.youtube.com/embed/..."}
            ]
        }
    """

    profile: PublicProfile
    full_name: str
    blocks: list[PublicBlock] = Field(default_factory=list)
