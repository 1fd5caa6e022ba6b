# =============================================================================
# core/services/membership_service.py - Ordered Membership Store
# =============================================================================
# Links and photos join sections through the section_links / section_photos
# tables: (section_id, member_id, order_index), unique on (section_id,
# member_id). This service lists members in order, opens an OrderedDraft
# for a section and commits a draft back:
#
#   1. delete rows for members dropped from the draft
#   2. insert rows for new members after the highest surviving position
#   3. when the order changed, upsert every row with its draft index
#
# The steps are separate requests with no transaction around them. A
# CommitJournal records them before they run; when one fails the earlier
# ones stay applied and CommitFailedError reports the journal.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from lib.supabase_client import SupabaseClient, SupabaseClientError
from app.exceptions import CommitFailedError
from core.journal import CommitJournal, JournalStep, StepKind
from core.models.section import MemberKind
from core.ordering import OrderedDraft

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MembershipTable:
    """Where one member kind's memberships and rows live."""
    table: str
    member_column: str
    member_table: str

    @property
    def on_conflict(self) -> str:
        return f"section_id,{self.member_column}"


MEMBERSHIP_TABLES: dict[MemberKind, MembershipTable] = {
    MemberKind.LINK: MembershipTable("section_links", "link_id", "links"),
    MemberKind.PHOTO: MembershipTable("section_photos", "photo_id", "photos"),
}


class MembershipService:
    """
    Service for ordered section memberships.

    Example:
        draft = MembershipService.open_draft(MemberKind.LINK, section_id)
        draft.reorder([l2, l1])
        MembershipService.commit(MemberKind.LINK, draft)
        MembershipService.list_members(MemberKind.LINK, section_id)  # [L2, L1]
    """

    @staticmethod
    def _rows(
        kind: MemberKind,
        section_id: str,
        positions: Iterable[tuple[str, int]],
    ) -> list[dict[str, Any]]:
        target = MEMBERSHIP_TABLES[kind]
        return [
            {"section_id": section_id, target.member_column: member_id, "order_index": position}
            for member_id, position in positions
        ]

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @staticmethod
    def fetch_positions(kind: MemberKind, section_id: str) -> list[tuple[str, int]]:
        """(member_id, order_index) pairs of a section, ascending by position."""
        target = MEMBERSHIP_TABLES[kind]
        rows = SupabaseClient.select(
            target.table,
            columns=f"{target.member_column}, order_index",
            filters={"section_id": section_id},
            order="order_index",
        )
        return [(str(row[target.member_column]), row.get("order_index") or 0) for row in rows]

    @staticmethod
    def list_members(
        kind: MemberKind,
        section_id: str,
        active_only: bool = False,
    ) -> list[dict[str, Any]]:
        """
        Members of a section in ascending position.

        Each returned member row is extended with its `order_index`. A section
        that doesn't exist simply has no members.

        Args:
            kind: Link or photo
            section_id: Section UUID
            active_only: Skip members whose `is_active` is false (links)
        """
        return MembershipService.list_members_grouped(kind, [section_id], active_only).get(section_id, [])

    @staticmethod
    def list_members_grouped(
        kind: MemberKind,
        section_ids: list[str],
        active_only: bool = False,
    ) -> dict[str, list[dict[str, Any]]]:
        """
        Members of several sections at once, keyed by section id.

        Two queries in total: memberships, then the member rows.
        """
        if not section_ids:
            return {}

        target = MEMBERSHIP_TABLES[kind]
        memberships = SupabaseClient.select(
            target.table,
            columns=f"section_id, {target.member_column}, order_index",
            in_filters={"section_id": section_ids},
            order="order_index",
        )
        if not memberships:
            return {}

        member_ids = sorted({str(m[target.member_column]) for m in memberships})
        filters = {"is_active": True} if active_only else None
        members = SupabaseClient.select(
            target.member_table,
            filters=filters,
            in_filters={"id": member_ids},
        )
        by_id = {str(member["id"]): member for member in members}

        grouped: dict[str, list[dict[str, Any]]] = {}
        for membership in sorted(memberships, key=lambda m: m.get("order_index") or 0):
            member = by_id.get(str(membership[target.member_column]))
            if member is None:
                continue
            grouped.setdefault(str(membership["section_id"]), []).append(
                {**member, "order_index": membership.get("order_index") or 0}
            )
        return grouped

    @staticmethod
    def open_draft(kind: MemberKind, section_id: str) -> OrderedDraft:
        """Load the section's current memberships into a clean draft."""
        return OrderedDraft.from_rows(section_id, MembershipService.fetch_positions(kind, section_id))

    # -------------------------------------------------------------------------
    # Commit
    # -------------------------------------------------------------------------

    @staticmethod
    def _run_step(kind: MemberKind, section_id: str, step: JournalStep) -> None:
        target = MEMBERSHIP_TABLES[kind]
        if step.kind == StepKind.DELETE:
            SupabaseClient.delete(
                target.table,
                filters={"section_id": section_id},
                in_filters={target.member_column: step.member_ids},
            )
        elif step.kind == StepKind.INSERT:
            SupabaseClient.insert(target.table, MembershipService._rows(kind, section_id, step.positions))
        else:
            SupabaseClient.upsert(
                target.table,
                MembershipService._rows(kind, section_id, step.positions),
                on_conflict=target.on_conflict,
            )

    @staticmethod
    def commit(kind: MemberKind, draft: OrderedDraft) -> CommitJournal:
        """
        Reconcile a draft with the store.

        A clean draft is a no-op. After a successful commit the draft is clean
        and `draft.committed` matches the store.

        Returns:
            The journal of executed steps (empty for a no-op)

        Raises:
            CommitFailedError: If a step fails. Earlier steps stay applied,
                the draft stays dirty and `draft.committed` reflects what
                reached the store, so committing the same draft again
                finishes the job.
        """
        plan = draft.plan()
        journal = CommitJournal.from_plan(plan)
        if plan.is_empty:
            draft.dirty = False
            return journal

        section_id = draft.container_id
        for step in journal.steps:
            try:
                MembershipService._run_step(kind, section_id, step)
            except SupabaseClientError as e:
                journal.failed(step, e)
                raise CommitFailedError(section_id, e.message, journal.to_list())

            journal.applied(step)
            draft.absorb(step)

        draft.mark_committed()
        logger.info(f"Committed {kind.value} order for section {section_id} ({len(draft)} members)")
        return journal

    # -------------------------------------------------------------------------
    # Member-side edits
    # -------------------------------------------------------------------------

    @staticmethod
    def member_sections(kind: MemberKind, member_id: str) -> list[str]:
        """Ids of the sections a member belongs to."""
        target = MEMBERSHIP_TABLES[kind]
        rows = SupabaseClient.select(
            target.table,
            columns="section_id",
            filters={target.member_column: member_id},
        )
        return [str(row["section_id"]) for row in rows]

    @staticmethod
    def sections_by_member(kind: MemberKind, member_ids: list[str]) -> dict[str, list[str]]:
        """Section ids of several members at once, keyed by member id."""
        if not member_ids:
            return {}
        target = MEMBERSHIP_TABLES[kind]
        rows = SupabaseClient.select(
            target.table,
            columns=f"section_id, {target.member_column}",
            in_filters={target.member_column: member_ids},
        )
        grouped: dict[str, list[str]] = {}
        for row in rows:
            grouped.setdefault(str(row[target.member_column]), []).append(str(row["section_id"]))
        return grouped

    @staticmethod
    def set_member_sections(kind: MemberKind, member_id: str, section_ids: list[str]) -> None:
        """
        Make a member belong to exactly these sections.

        Sections gaining the member append it at their end; sections losing
        it drop its row. Positions of other members are untouched.

        Raises:
            CommitFailedError: If one of the section commits fails
        """
        current = set(MembershipService.member_sections(kind, member_id))
        desired = set(section_ids)

        for section_id in sorted(current - desired):
            draft = MembershipService.open_draft(kind, section_id)
            draft.remove([member_id])
            MembershipService.commit(kind, draft)

        for section_id in [s for s in section_ids if s not in current]:
            draft = MembershipService.open_draft(kind, section_id)
            draft.add([member_id])
            MembershipService.commit(kind, draft)

    @staticmethod
    def remove_member_everywhere(kind: MemberKind, member_id: str) -> None:
        """Delete every membership row of a member (before the member itself is deleted)."""
        target = MEMBERSHIP_TABLES[kind]
        SupabaseClient.delete(target.table, filters={target.member_column: member_id})

    @staticmethod
    def clear_section(kind: MemberKind, section_id: str) -> None:
        """Delete every membership row of a section."""
        target = MEMBERSHIP_TABLES[kind]
        SupabaseClient.delete(target.table, filters={"section_id": section_id})
