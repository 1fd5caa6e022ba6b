# =============================================================================
# core/services/link_service.py - Link Business Logic
# =============================================================================
# Links exist on their own; which links sections show them is stored in
# section_links and edited through MembershipService.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from app.exceptions import DatabaseWriteError, LinkNotFoundError, SectionKindMismatchError
from core.models.section import MemberKind
from core.services.membership_service import MembershipService
from core.services.section_service import SectionService

logger = logging.getLogger(__name__)

TABLE = "links"


class LinkService:
    """Service for the user's links."""

    @staticmethod
    def list_links(user_id: UUID | str) -> list[dict[str, Any]]:
        """All of the user's links, newest first, each with its `section_ids`."""
        links = SupabaseClient.select(
            TABLE,
            filters={"user_id": str(user_id)},
            order="created_at",
            desc=True,
        )
        sections = MembershipService.sections_by_member(
            MemberKind.LINK, [str(link["id"]) for link in links]
        )
        for link in links:
            link["section_ids"] = sections.get(str(link["id"]), [])
        return links

    @staticmethod
    def get_link(link_id: str | UUID, user_id: UUID | str) -> dict[str, Any]:
        """
        Get a link owned by the user.

        Raises:
            LinkNotFoundError: If it doesn't exist or belongs to someone else
        """
        link = SupabaseClient.fetch_one(TABLE, {"id": str(link_id)})
        if not link or str(link.get("user_id")) != str(user_id):
            raise LinkNotFoundError(str(link_id))
        return link

    @staticmethod
    def get_link_with_sections(link_id: str | UUID, user_id: UUID | str) -> dict[str, Any]:
        link = LinkService.get_link(link_id, user_id)
        link["section_ids"] = MembershipService.member_sections(MemberKind.LINK, str(link_id))
        return link

    @staticmethod
    def _check_sections(section_ids: list[str], user_id: UUID | str) -> None:
        """
        Every target section must be one of the user's links sections.

        Raises:
            SectionNotFoundError / SectionKindMismatchError
        """
        for section_id in section_ids:
            section = SectionService.get_section(section_id, user_id)
            kind = SectionService.require_member_kind(section, "links")
            if kind != MemberKind.LINK:
                raise SectionKindMismatchError(section_id, section["type"], "links")

    @staticmethod
    def create_link(
        user_id: UUID | str,
        title: str,
        url: str,
        is_active: bool = True,
        text_color: str | None = None,
        background_color: str | None = None,
        section_ids: list[str] | None = None,
    ) -> dict[str, Any]:
        """
        Create a link and append it to the given links sections.

        The link row is written first; if placing it in a section fails the
        link still exists (not compensated).

        Raises:
            SectionNotFoundError / SectionKindMismatchError: Bad section_ids
            DatabaseWriteError: If the insert fails
            CommitFailedError: If adding it to a section fails
        """
        section_ids = section_ids or []
        LinkService._check_sections(section_ids, user_id)

        data = {
            "user_id": str(user_id),
            "title": title,
            "url": url,
            "is_active": is_active,
            "text_color": text_color,
            "background_color": background_color,
        }

        try:
            rows = SupabaseClient.insert(TABLE, data)
        except SupabaseClientError as e:
            logger.error(f"Failed to create link: {e}")
            raise DatabaseWriteError("create link", e.message)

        if not rows:
            raise DatabaseWriteError("create link", "insert returned no data")

        link = rows[0]
        link_id = str(link["id"])
        logger.info(f"Created link: {link_id} for user: {user_id}")

        if section_ids:
            MembershipService.set_member_sections(MemberKind.LINK, link_id, section_ids)
        link["section_ids"] = section_ids
        return link

    @staticmethod
    def update_link(
        link_id: str | UUID,
        user_id: UUID | str,
        values: dict[str, Any],
        section_ids: list[str] | None = None,
    ) -> dict[str, Any]:
        """
        Update link fields and, when `section_ids` is given, its sections.

        Raises:
            LinkNotFoundError: If the user doesn't own the link
            DatabaseWriteError: If the update fails
            CommitFailedError: If changing its sections fails
        """
        link = LinkService.get_link(link_id, user_id)
        link_id_str = str(link_id)

        if section_ids is not None:
            LinkService._check_sections(section_ids, user_id)

        if values:
            try:
                rows = SupabaseClient.update(TABLE, values, {"id": link_id_str})
            except SupabaseClientError as e:
                logger.error(f"Failed to update link: {e}")
                raise DatabaseWriteError("update link", e.message)
            link = rows[0] if rows else {**link, **values}
            logger.info(f"Updated link: {link_id_str}")

        if section_ids is not None:
            MembershipService.set_member_sections(MemberKind.LINK, link_id_str, section_ids)
            link["section_ids"] = section_ids
        else:
            link["section_ids"] = MembershipService.member_sections(MemberKind.LINK, link_id_str)

        return link

    @staticmethod
    def toggle_active(link_id: str | UUID, user_id: UUID | str) -> dict[str, Any]:
        """Flip is_active on the link itself (affects every section showing it)."""
        link = LinkService.get_link(link_id, user_id)
        return LinkService.update_link(link_id, user_id, {"is_active": not link.get("is_active", True)})

    @staticmethod
    def delete_link(link_id: str | UUID, user_id: UUID | str) -> None:
        """
        Delete a link; it disappears from every section.

        Raises:
            LinkNotFoundError: If the user doesn't own the link
            DatabaseWriteError: If a delete fails
        """
        LinkService.get_link(link_id, user_id)
        link_id_str = str(link_id)

        try:
            MembershipService.remove_member_everywhere(MemberKind.LINK, link_id_str)
            SupabaseClient.delete(TABLE, filters={"id": link_id_str})
        except SupabaseClientError as e:
            logger.error(f"Failed to delete link: {e}")
            raise DatabaseWriteError("delete link", e.message)

        logger.info(f"Deleted link: {link_id_str}")
