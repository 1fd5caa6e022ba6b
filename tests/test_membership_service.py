# =============================================================================
# tests/test_membership_service.py - Ordered Membership Store Tests
# =============================================================================
# Runs MembershipService against the in-memory FakeSupabase:
# - any saved permutation is what list_members returns
# - add / remove reconcile to (existing + added) - removed
# - a clean second commit writes nothing
# - a failing step leaves earlier steps applied and a retry finishes
#
# Run with: pytest tests/test_membership_service.py -v
# =============================================================================

from itertools import permutations

import pytest

from app.exceptions import CommitFailedError
from core.models.section import MemberKind
from core.services.membership_service import MembershipService


def _ids(members):
    return [str(m["id"]) for m in members]


def _link(section_id, link, position, fake_db):
    fake_db.add("section_links", section_id=section_id, link_id=link["id"], order_index=position)


@pytest.fixture
def three_links(fake_db, links_section, make_link):
    links = [make_link("One"), make_link("Two"), make_link("Three")]
    for position, link in enumerate(links):
        _link(links_section["id"], link, position, fake_db)
    return [link["id"] for link in links]


# =============================================================================
# Reads
# =============================================================================

class TestListMembers:

    def test_unknown_section_is_empty(self, fake_db):
        assert MembershipService.list_members(MemberKind.LINK, "no-such-section") == []

    def test_members_in_position_order(self, fake_db, links_section, make_link):
        first, second = make_link("First"), make_link("Second")
        _link(links_section["id"], second, 5, fake_db)
        _link(links_section["id"], first, 2, fake_db)

        members = MembershipService.list_members(MemberKind.LINK, links_section["id"])

        assert _ids(members) == [first["id"], second["id"]]
        assert [m["order_index"] for m in members] == [2, 5]

    def test_active_only_skips_hidden_links(self, fake_db, links_section, make_link):
        shown, hidden = make_link("Shown"), make_link("Hidden", is_active=False)
        _link(links_section["id"], shown, 0, fake_db)
        _link(links_section["id"], hidden, 1, fake_db)

        members = MembershipService.list_members(MemberKind.LINK, links_section["id"], active_only=True)

        assert _ids(members) == [shown["id"]]

    def test_grouped_by_section(self, fake_db, links_section, make_link):
        other = fake_db.add("sections", user_id=links_section["user_id"], type="links", order_index=1)
        link = make_link("Shared")
        _link(links_section["id"], link, 0, fake_db)
        _link(other["id"], link, 0, fake_db)

        grouped = MembershipService.list_members_grouped(
            MemberKind.LINK, [links_section["id"], other["id"]]
        )

        assert set(grouped) == {links_section["id"], other["id"]}


# =============================================================================
# Commit
# =============================================================================

class TestCommit:

    @pytest.mark.parametrize("order", list(permutations(range(3))))
    def test_any_permutation_round_trips(self, fake_db, links_section, three_links, order):
        wanted = [three_links[i] for i in order]

        draft = MembershipService.open_draft(MemberKind.LINK, links_section["id"])
        draft.reorder(wanted)
        MembershipService.commit(MemberKind.LINK, draft)

        assert _ids(MembershipService.list_members(MemberKind.LINK, links_section["id"])) == wanted
        assert not draft.dirty

    def test_two_link_swap_gets_dense_positions(self, fake_db, links_section, make_link):
        l1, l2 = make_link("L1"), make_link("L2")
        _link(links_section["id"], l1, 0, fake_db)
        _link(links_section["id"], l2, 1, fake_db)

        draft = MembershipService.open_draft(MemberKind.LINK, links_section["id"])
        draft.reorder([l2["id"], l1["id"]])
        MembershipService.commit(MemberKind.LINK, draft)

        members = MembershipService.list_members(MemberKind.LINK, links_section["id"])
        assert [(m["id"], m["order_index"]) for m in members] == [(l2["id"], 0), (l1["id"], 1)]

    def test_add_and_remove_reconcile(self, fake_db, links_section, three_links, make_link):
        added = [make_link("Four")["id"], make_link("Five")["id"]]
        removed = [three_links[1]]

        draft = MembershipService.open_draft(MemberKind.LINK, links_section["id"])
        draft.add(added)
        draft.remove(removed)
        MembershipService.commit(MemberKind.LINK, draft)

        members = _ids(MembershipService.list_members(MemberKind.LINK, links_section["id"]))
        assert set(members) == (set(three_links) | set(added)) - set(removed)
        assert members == [three_links[0], three_links[2], *added]

    def test_first_add_lands_at_zero(self, fake_db, links_section, make_link):
        link = make_link("Only")

        draft = MembershipService.open_draft(MemberKind.LINK, links_section["id"])
        draft.add([link["id"]])
        MembershipService.commit(MemberKind.LINK, draft)

        assert fake_db.rows("section_links")[0]["order_index"] == 0

    def test_second_commit_writes_nothing(self, fake_db, links_section, three_links):
        draft = MembershipService.open_draft(MemberKind.LINK, links_section["id"])
        draft.reorder(list(reversed(three_links)))
        MembershipService.commit(MemberKind.LINK, draft)

        writes_before = len(fake_db.writes())
        journal = MembershipService.commit(MemberKind.LINK, draft)

        assert journal.steps == []
        assert len(fake_db.writes()) == writes_before

    def test_clean_draft_is_noop(self, fake_db, links_section, three_links):
        draft = MembershipService.open_draft(MemberKind.LINK, links_section["id"])
        MembershipService.commit(MemberKind.LINK, draft)
        assert fake_db.writes() == []

    def test_failed_step_keeps_earlier_steps_and_retry_finishes(
        self, fake_db, links_section, three_links, make_link
    ):
        new_link = make_link("New")["id"]
        draft = MembershipService.open_draft(MemberKind.LINK, links_section["id"])
        draft.remove([three_links[0]])
        draft.add([new_link])
        fake_db.fail_next("insert", "section_links")

        with pytest.raises(CommitFailedError) as exc_info:
            MembershipService.commit(MemberKind.LINK, draft)

        statuses = [step["status"] for step in exc_info.value.details["journal"]]
        assert statuses == ["applied", "failed"]
        # The delete reached the store and is not rolled back
        assert _ids(MembershipService.list_members(MemberKind.LINK, links_section["id"])) == three_links[1:]
        assert draft.dirty
        assert three_links[0] not in draft.committed

        journal = MembershipService.commit(MemberKind.LINK, draft)

        assert [step.kind.value for step in journal.steps] == ["insert"]
        assert _ids(MembershipService.list_members(MemberKind.LINK, links_section["id"])) == [
            three_links[1], three_links[2], new_link,
        ]


# =============================================================================
# Member-side edits
# =============================================================================

class TestMemberSections:

    def test_set_member_sections_appends_and_removes(self, fake_db, links_section, three_links, make_link):
        second = fake_db.add("sections", user_id=links_section["user_id"], type="links", order_index=1)
        link = three_links[0]

        MembershipService.set_member_sections(MemberKind.LINK, link, [second["id"]])

        assert MembershipService.member_sections(MemberKind.LINK, link) == [second["id"]]
        assert link not in _ids(MembershipService.list_members(MemberKind.LINK, links_section["id"]))

    def test_new_section_gets_member_at_tail(self, fake_db, links_section, three_links, make_link):
        link = make_link("Late")["id"]

        MembershipService.set_member_sections(MemberKind.LINK, link, [links_section["id"]])

        assert _ids(MembershipService.list_members(MemberKind.LINK, links_section["id"]))[-1] == link

    def test_sections_by_member(self, fake_db, links_section, three_links):
        grouped = MembershipService.sections_by_member(MemberKind.LINK, three_links[:2])
        assert grouped == {three_links[0]: [links_section["id"]], three_links[1]: [links_section["id"]]}
