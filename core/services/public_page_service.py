# =============================================================================
# core/services/public_page_service.py - Public Page Projection
# =============================================================================
# Builds what a visitor of /u/{username} sees:
#
#   profile -> active sections in order -> one block per section kind
#
# Hidden sections and inactive links are left out; a section with nothing to
# show produces no block. Everything is read fresh on every request.
# =============================================================================

import logging
from typing import Any, assert_never

from app.config import settings
from core.models.public import (
    InfoCardBlock,
    LinkButton,
    LinkListBlock,
    MapEmbedBlock,
    PhotoGridBlock,
    PhotoItem,
    PhotoSliderBlock,
    PublicBlock,
    PublicPage,
    TestimonialItem,
    TestimonialListBlock,
    VideoEmbedBlock,
)
from core.models.profile import PublicProfile
from core.models.section import MemberKind, SectionKind
from core.services.membership_service import MembershipService
from core.services.profile_service import ProfileService
from core.services.section_service import SectionService
from core.services.testimonial_service import TestimonialService
from lib.embed import map_embed_url, video_embed_url

logger = logging.getLogger(__name__)


class PublicPageService:
    """Read-only projection of a user's page for anonymous visitors."""

    @staticmethod
    def render(username: str) -> PublicPage:
        """
        Build the public page for a username.

        Raises:
            ProfileNotFoundError: If no profile has this username
        """
        profile_row = ProfileService.get_public_profile(username)
        profile = PublicProfile(**profile_row)
        user_id = str(profile.id)

        sections = SectionService.list_sections(user_id, active_only=True)
        kinds = {SectionKind(s["type"]) for s in sections}

        # Members of all sections of a kind are loaded together
        link_ids = [str(s["id"]) for s in sections if s["type"] == SectionKind.LINKS.value]
        photo_ids = [
            str(s["id"]) for s in sections
            if s["type"] in (SectionKind.PHOTO_SLIDER.value, SectionKind.PHOTO_GRID.value)
        ]
        links = MembershipService.list_members_grouped(MemberKind.LINK, link_ids, active_only=True)
        photos = MembershipService.list_members_grouped(MemberKind.PHOTO, photo_ids)
        testimonials = (
            TestimonialService.list_testimonials(user_id)
            if SectionKind.TESTIMONIALS in kinds else []
        )

        blocks: list[PublicBlock] = []
        for section in sections:
            block = PublicPageService._block(section, profile, links, photos, testimonials)
            if block is not None:
                blocks.append(block)

        logger.debug(f"Rendered public page '{profile.username}' with {len(blocks)} blocks")
        return PublicPage(profile=profile, full_name=profile.full_name, blocks=blocks)

    @staticmethod
    def _block(
        section: dict[str, Any],
        profile: PublicProfile,
        links: dict[str, list[dict[str, Any]]],
        photos: dict[str, list[dict[str, Any]]],
        testimonials: list[dict[str, Any]],
    ) -> PublicBlock | None:
        """One section's block, or None when it has nothing to show."""
        section_id = str(section["id"])
        kind = SectionKind(section["type"])
        content_url = section.get("content_url")

        match kind:
            case SectionKind.LINKS:
                buttons = [LinkButton(**link) for link in links.get(section_id, [])]
                if not buttons:
                    return None
                return LinkListBlock(section_id=section_id, links=buttons)

            case SectionKind.PHOTO_SLIDER:
                items = [PhotoItem(**photo) for photo in photos.get(section_id, [])]
                if not items:
                    return None
                return PhotoSliderBlock(
                    section_id=section_id,
                    photos=items,
                    interval_ms=settings.SLIDER_INTERVAL_MS,
                )

            case SectionKind.PHOTO_GRID:
                items = [PhotoItem(**photo) for photo in photos.get(section_id, [])]
                if not items:
                    return None
                return PhotoGridBlock(section_id=section_id, photos=items[:settings.PHOTO_GRID_LIMIT])

            case SectionKind.TESTIMONIALS:
                if not testimonials:
                    return None
                return TestimonialListBlock(
                    section_id=section_id,
                    testimonials=[TestimonialItem(**t) for t in testimonials],
                )

            case SectionKind.VIDEO:
                if not content_url:
                    return None
                return VideoEmbedBlock(section_id=section_id, embed_url=video_embed_url(content_url))

            case SectionKind.MAP:
                if not content_url:
                    return None
                return MapEmbedBlock(section_id=section_id, embed_url=map_embed_url(content_url))

            case SectionKind.INFO_CARD:
                if not (profile.sales_pitch or profile.store_hours or profile.address):
                    return None
                return InfoCardBlock(
                    section_id=section_id,
                    sales_pitch=profile.sales_pitch,
                    store_hours=profile.store_hours,
                    address=profile.address,
                )

            case _:
                assert_never(kind)
