# =============================================================================
# core/services/section_service.py - Section Business Logic
# =============================================================================
# Handles section CRUD, section ordering and the member lists of links /
# photo sections, for one owner.
# Sections are ordered by order_index within their owner; the order is saved
# with the same OrderedDraft used for memberships, renumbering every section.
# =============================================================================

import logging
from typing import Any, Callable
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from app.exceptions import (
    CommitFailedError,
    DatabaseWriteError,
    LinkNotFoundError,
    PhotoNotFoundError,
    SectionKindMismatchError,
    SectionNotFoundError,
)
from core.journal import CommitJournal
from core.models.section import (
    MemberKind,
    SectionEditor,
    SectionKind,
    member_kind_for,
    section_editor,
)
from core.ordering import OrderedDraft
from core.services.membership_service import MEMBERSHIP_TABLES, MembershipService

logger = logging.getLogger(__name__)

TABLE = "sections"


class SectionService:
    """
    Service for section management operations.

    Every method takes the owner's user_id and only ever touches that
    user's rows.
    """

    @staticmethod
    def list_sections(
        user_id: UUID | str,
        active_only: bool = False,
    ) -> list[dict[str, Any]]:
        """Sections of a user in ascending order_index."""
        filters: dict[str, Any] = {"user_id": str(user_id)}
        if active_only:
            filters["is_active"] = True
        return SupabaseClient.select(TABLE, filters=filters, order="order_index")

    @staticmethod
    def get_section(section_id: str | UUID, user_id: UUID | str) -> dict[str, Any]:
        """
        Get a section owned by the user.

        Raises:
            SectionNotFoundError: If it doesn't exist or belongs to someone else
        """
        section = SupabaseClient.fetch_one(TABLE, {"id": str(section_id)})

        # Don't reveal that another user's section exists
        if not section or str(section.get("user_id")) != str(user_id):
            raise SectionNotFoundError(str(section_id))

        return section

    @staticmethod
    def require_member_kind(section: dict[str, Any], operation: str) -> MemberKind:
        """
        Member kind held by the section.

        Raises:
            SectionKindMismatchError: If the section has no membership list
        """
        kind = SectionKind(section["type"])
        member_kind = member_kind_for(kind)
        if member_kind is None:
            raise SectionKindMismatchError(str(section["id"]), kind.value, operation)
        return member_kind

    @staticmethod
    def create_section(
        user_id: UUID | str,
        kind: SectionKind,
        content_url: str | None = None,
    ) -> dict[str, Any]:
        """
        Append a new active section after the user's last one.

        Reads the current maximum position and writes max + 1; two concurrent
        creates by the same user can end up sharing a position.

        Raises:
            SectionKindMismatchError: If content_url is given for a kind without one
            DatabaseWriteError: If the insert fails
        """
        if content_url and section_editor(kind) != SectionEditor.CONTENT_URL:
            raise SectionKindMismatchError("new", kind.value, "content_url")

        # Rows written without an index hold NULL and are skipped
        rows = SupabaseClient.select(
            TABLE,
            columns="order_index",
            filters={"user_id": str(user_id)},
        )
        positions = [row["order_index"] for row in rows if row.get("order_index") is not None]
        next_index = max(positions) + 1 if positions else 0

        data = {
            "user_id": str(user_id),
            "type": kind.value,
            "order_index": next_index,
            "is_active": True,
        }
        if content_url:
            data["content_url"] = content_url

        try:
            rows = SupabaseClient.insert(TABLE, data)
        except SupabaseClientError as e:
            logger.error(f"Failed to create section: {e}")
            raise DatabaseWriteError("create section", e.message)

        section = rows[0] if rows else data
        logger.info(f"Created {kind.value} section at position {next_index} for user: {user_id}")
        return section

    @staticmethod
    def update_section(
        section_id: str | UUID,
        user_id: UUID | str,
        is_active: bool | None = None,
        content_url: str | None = None,
        clear_content_url: bool = False,
    ) -> dict[str, Any]:
        """
        Update visibility and/or content URL.

        `content_url=None` leaves the URL unchanged; pass
        `clear_content_url=True` to empty it.

        Raises:
            SectionNotFoundError: If the user doesn't own the section
            SectionKindMismatchError: If content_url is set on a kind without one
            DatabaseWriteError: If the update fails
        """
        section = SectionService.get_section(section_id, user_id)

        update_data: dict[str, Any] = {}
        if is_active is not None:
            update_data["is_active"] = is_active
        if content_url is not None or clear_content_url:
            kind = SectionKind(section["type"])
            if section_editor(kind) != SectionEditor.CONTENT_URL:
                raise SectionKindMismatchError(str(section_id), kind.value, "content_url")
            update_data["content_url"] = content_url

        if not update_data:
            return section

        try:
            rows = SupabaseClient.update(TABLE, update_data, {"id": str(section_id)})
        except SupabaseClientError as e:
            logger.error(f"Failed to update section: {e}")
            raise DatabaseWriteError("update section", e.message)

        logger.info(f"Updated section: {section_id}")
        return rows[0] if rows else {**section, **update_data}

    @staticmethod
    def toggle_active(section_id: str | UUID, user_id: UUID | str) -> dict[str, Any]:
        """Flip is_active (show / hide the section on the public page)."""
        section = SectionService.get_section(section_id, user_id)
        return SectionService.update_section(
            section_id,
            user_id,
            is_active=not section.get("is_active", True),
        )

    @staticmethod
    def delete_section(section_id: str | UUID, user_id: UUID | str) -> None:
        """
        Delete a section and its memberships.

        Members themselves (links, photos) are kept.

        Raises:
            SectionNotFoundError: If the user doesn't own the section
            DatabaseWriteError: If a delete fails
        """
        section = SectionService.get_section(section_id, user_id)
        section_id_str = str(section_id)

        try:
            member_kind = member_kind_for(SectionKind(section["type"]))
            if member_kind is not None:
                MembershipService.clear_section(member_kind, section_id_str)
            SupabaseClient.delete(TABLE, filters={"id": section_id_str})
        except SupabaseClientError as e:
            logger.error(f"Failed to delete section: {e}")
            raise DatabaseWriteError("delete section", e.message)

        logger.info(f"Deleted section: {section_id_str}")

    # -------------------------------------------------------------------------
    # Ordering
    # -------------------------------------------------------------------------

    @staticmethod
    def open_order_draft(user_id: UUID | str) -> tuple[OrderedDraft, dict[str, dict[str, Any]]]:
        """
        Load the user's sections into a clean draft.

        Returns:
            (draft keyed by section id, section rows by id)
        """
        sections = SectionService.list_sections(user_id)
        rows = {str(s["id"]): s for s in sections}
        draft = OrderedDraft.from_rows(
            f"sections:{user_id}",
            [(section_id, row.get("order_index") or 0) for section_id, row in rows.items()],
        )
        return draft, rows

    @staticmethod
    def save_order(user_id: UUID | str, ordered_ids: list[str]) -> list[dict[str, Any]]:
        """
        Save a new order for all of the user's sections.

        Every section is rewritten with its index in `ordered_ids`, as one
        upsert keyed on id.

        Raises:
            InvalidReorderError: If ordered_ids isn't a permutation of the user's sections
            CommitFailedError: If the upsert fails
        """
        draft, rows = SectionService.open_order_draft(user_id)
        draft.reorder(ordered_ids)

        plan = draft.plan()
        journal = CommitJournal.from_plan(plan)
        if plan.is_empty:
            return SectionService.list_sections(user_id)

        # Sections are never added or removed through a reorder
        step = journal.steps[0]
        updates = [
            {**rows[section_id], "order_index": position}
            for section_id, position in step.positions
        ]
        try:
            SupabaseClient.upsert(TABLE, updates, on_conflict="id")
        except SupabaseClientError as e:
            journal.failed(step, e)
            raise CommitFailedError(draft.container_id, e.message, journal.to_list())

        journal.applied(step)
        draft.absorb(step)
        draft.mark_committed()
        logger.info(f"Saved section order for user: {user_id}")

        return sorted(updates, key=lambda s: s["order_index"])

    # -------------------------------------------------------------------------
    # Members
    # -------------------------------------------------------------------------

    @staticmethod
    def _member_section(
        section_id: str | UUID,
        user_id: UUID | str,
        operation: str,
    ) -> tuple[str, MemberKind]:
        section = SectionService.get_section(section_id, user_id)
        return str(section["id"]), SectionService.require_member_kind(section, operation)

    @staticmethod
    def _check_members_owned(kind: MemberKind, user_id: UUID | str, member_ids: list[str]) -> None:
        """
        Raises:
            LinkNotFoundError / PhotoNotFoundError: For the first id the user doesn't own
        """
        if not member_ids:
            return
        table = MEMBERSHIP_TABLES[kind].member_table
        owned = {
            str(row["id"])
            for row in SupabaseClient.select(
                table,
                columns="id",
                filters={"user_id": str(user_id)},
                in_filters={"id": member_ids},
            )
        }
        for member_id in member_ids:
            if member_id not in owned:
                if kind == MemberKind.LINK:
                    raise LinkNotFoundError(member_id)
                raise PhotoNotFoundError(member_id)

    @staticmethod
    def list_section_members(section_id: str | UUID, user_id: UUID | str) -> list[dict[str, Any]]:
        """
        Links or photos of a section in position order (inactive links included).

        Raises:
            SectionNotFoundError: If the user doesn't own the section
            SectionKindMismatchError: If the section has no member list
        """
        section_id_str, kind = SectionService._member_section(section_id, user_id, "list members")
        return MembershipService.list_members(kind, section_id_str)

    @staticmethod
    def _commit_members(
        section_id: str | UUID,
        user_id: UUID | str,
        operation: str,
        edit: Callable[[OrderedDraft], None],
        new_ids: list[str],
    ) -> list[dict[str, Any]]:
        """Open the section's draft, apply `edit`, commit and return the new list."""
        section_id_str, kind = SectionService._member_section(section_id, user_id, operation)
        SectionService._check_members_owned(kind, user_id, new_ids)

        draft = MembershipService.open_draft(kind, section_id_str)
        edit(draft)
        MembershipService.commit(kind, draft)
        return MembershipService.list_members(kind, section_id_str)

    @staticmethod
    def set_section_members(
        section_id: str | UUID,
        user_id: UUID | str,
        member_ids: list[str],
    ) -> list[dict[str, Any]]:
        """
        Make the section hold exactly `member_ids`, in that order.

        Raises:
            SectionNotFoundError / SectionKindMismatchError: Bad section
            LinkNotFoundError / PhotoNotFoundError: Member not owned by the user
            CommitFailedError: If a commit step fails
        """
        return SectionService._commit_members(
            section_id, user_id, "set members",
            lambda draft: draft.replace(member_ids),
            member_ids,
        )

    @staticmethod
    def add_section_members(
        section_id: str | UUID,
        user_id: UUID | str,
        member_ids: list[str],
    ) -> list[dict[str, Any]]:
        """Append members to the end of the section. Ones already in it stay where they are."""
        return SectionService._commit_members(
            section_id, user_id, "add members",
            lambda draft: draft.add(member_ids),
            member_ids,
        )

    @staticmethod
    def reorder_section_members(
        section_id: str | UUID,
        user_id: UUID | str,
        ordered_ids: list[str],
    ) -> list[dict[str, Any]]:
        """
        Save a drag-and-drop order of the section's members.

        Raises:
            InvalidReorderError: If ordered_ids isn't a permutation of the members
        """
        return SectionService._commit_members(
            section_id, user_id, "reorder members",
            lambda draft: draft.reorder(ordered_ids),
            [],
        )

    @staticmethod
    def remove_section_member(
        section_id: str | UUID,
        user_id: UUID | str,
        member_id: str,
    ) -> list[dict[str, Any]]:
        """Take a member out of the section. The link / photo itself is kept."""
        return SectionService._commit_members(
            section_id, user_id, "remove member",
            lambda draft: draft.remove([member_id]),
            [],
        )
