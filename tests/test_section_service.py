# =============================================================================
# tests/test_section_service.py - Section Service Tests
# =============================================================================

import pytest

from app.exceptions import (
    CommitFailedError,
    InvalidReorderError,
    LinkNotFoundError,
    SectionKindMismatchError,
    SectionNotFoundError,
)
from core.models.section import (
    MemberKind,
    SectionEditor,
    SectionKind,
    member_kind_for,
    section_editor,
)
from core.services.section_service import SectionService
from tests.conftest import OTHER_USER_ID, USER_ID


# =============================================================================
# Editor dispatch
# =============================================================================

class TestSectionEditor:

    @pytest.mark.parametrize("kind,editor", [
        (SectionKind.LINKS, SectionEditor.LINK_MEMBERS),
        (SectionKind.PHOTO_SLIDER, SectionEditor.PHOTO_MEMBERS),
        (SectionKind.PHOTO_GRID, SectionEditor.PHOTO_MEMBERS),
        (SectionKind.TESTIMONIALS, SectionEditor.TESTIMONIALS),
        (SectionKind.VIDEO, SectionEditor.CONTENT_URL),
        (SectionKind.MAP, SectionEditor.CONTENT_URL),
        (SectionKind.INFO_CARD, SectionEditor.PROFILE_INFO),
    ])
    def test_every_kind_has_an_editor(self, kind, editor):
        assert section_editor(kind) == editor

    def test_member_kinds(self):
        assert member_kind_for(SectionKind.LINKS) == MemberKind.LINK
        assert member_kind_for(SectionKind.PHOTO_GRID) == MemberKind.PHOTO
        assert member_kind_for(SectionKind.MAP) is None


# =============================================================================
# CRUD
# =============================================================================

class TestSectionCrud:

    def test_create_appends_after_last(self, fake_db):
        first = SectionService.create_section(USER_ID, SectionKind.LINKS)
        second = SectionService.create_section(USER_ID, SectionKind.VIDEO, "https://youtu.be/abc")

        assert first["order_index"] == 0
        assert second["order_index"] == 1
        assert second["content_url"] == "https://youtu.be/abc"
        assert second["is_active"] is True

    def test_create_positions_are_per_user(self, fake_db):
        fake_db.add("sections", user_id=OTHER_USER_ID, type="links", order_index=9)
        section = SectionService.create_section(USER_ID, SectionKind.MAP)
        assert section["order_index"] == 0

    def test_create_skips_sections_without_position(self, fake_db):
        fake_db.add("sections", user_id=USER_ID, type="links", order_index=3)
        fake_db.add("sections", user_id=USER_ID, type="map", order_index=None)

        section = SectionService.create_section(USER_ID, SectionKind.VIDEO)

        assert section["order_index"] == 4

    def test_create_when_only_unpositioned_sections(self, fake_db):
        fake_db.add("sections", user_id=USER_ID, type="links", order_index=None)
        assert SectionService.create_section(USER_ID, SectionKind.VIDEO)["order_index"] == 0

    def test_content_url_rejected_for_grid(self, fake_db):
        with pytest.raises(SectionKindMismatchError):
            SectionService.create_section(USER_ID, SectionKind.PHOTO_GRID, "https://example.com")

    def test_other_users_section_is_not_found(self, fake_db):
        section = fake_db.add("sections", user_id=OTHER_USER_ID, type="links", order_index=0)
        with pytest.raises(SectionNotFoundError):
            SectionService.get_section(section["id"], USER_ID)

    def test_toggle_active(self, fake_db, links_section):
        section = SectionService.toggle_active(links_section["id"], USER_ID)
        assert section["is_active"] is False

    def test_update_content_url_on_links_section_fails(self, fake_db, links_section):
        with pytest.raises(SectionKindMismatchError):
            SectionService.update_section(links_section["id"], USER_ID, content_url="https://x.test")

    def test_clear_content_url(self, fake_db):
        section = SectionService.create_section(USER_ID, SectionKind.MAP, "https://maps.test/embed")

        updated = SectionService.update_section(section["id"], USER_ID, clear_content_url=True)

        assert updated["content_url"] is None

    def test_omitted_content_url_is_kept(self, fake_db):
        section = SectionService.create_section(USER_ID, SectionKind.MAP, "https://maps.test/embed")

        updated = SectionService.update_section(section["id"], USER_ID, is_active=False)

        assert updated["content_url"] == "https://maps.test/embed"

    def test_clear_content_url_on_links_section_fails(self, fake_db, links_section):
        with pytest.raises(SectionKindMismatchError):
            SectionService.update_section(links_section["id"], USER_ID, clear_content_url=True)

    def test_delete_removes_memberships_but_keeps_links(self, fake_db, links_section, make_link):
        link = make_link("Kept")
        fake_db.add("section_links", section_id=links_section["id"], link_id=link["id"], order_index=0)

        SectionService.delete_section(links_section["id"], USER_ID)

        assert fake_db.rows("sections") == []
        assert fake_db.rows("section_links") == []
        assert len(fake_db.rows("links")) == 1


# =============================================================================
# Section order
# =============================================================================

class TestSaveOrder:

    def _three_sections(self, fake_db):
        return [
            fake_db.add("sections", user_id=USER_ID, type=kind, order_index=i, is_active=True)["id"]
            for i, kind in enumerate(["links", "video", "map"])
        ]

    def test_save_order_renumbers_densely(self, fake_db):
        ids = self._three_sections(fake_db)
        wanted = [ids[2], ids[0], ids[1]]

        result = SectionService.save_order(USER_ID, wanted)

        assert [s["id"] for s in result] == wanted
        assert [s["order_index"] for s in SectionService.list_sections(USER_ID)] == [0, 1, 2]
        assert [s["id"] for s in SectionService.list_sections(USER_ID)] == wanted

    def test_unchanged_order_writes_nothing(self, fake_db):
        ids = self._three_sections(fake_db)
        SectionService.save_order(USER_ID, ids)
        assert fake_db.writes() == []

    def test_order_must_be_permutation(self, fake_db):
        ids = self._three_sections(fake_db)
        with pytest.raises(InvalidReorderError):
            SectionService.save_order(USER_ID, ids[:2])

    def test_failed_save_reports_journal(self, fake_db):
        ids = self._three_sections(fake_db)
        fake_db.fail_next("upsert", "sections")

        with pytest.raises(CommitFailedError) as exc_info:
            SectionService.save_order(USER_ID, list(reversed(ids)))

        assert exc_info.value.details["journal"][0]["status"] == "failed"


# =============================================================================
# Section members
# =============================================================================

class TestSectionMembers:

    def test_add_and_reorder_members(self, fake_db, links_section, make_link):
        a, b = make_link("A")["id"], make_link("B")["id"]

        SectionService.add_section_members(links_section["id"], USER_ID, [a, b])
        members = SectionService.reorder_section_members(links_section["id"], USER_ID, [b, a])

        assert [m["id"] for m in members] == [b, a]

    def test_set_members_replaces(self, fake_db, links_section, make_link):
        a, b, c = (make_link(t)["id"] for t in ("A", "B", "C"))
        SectionService.add_section_members(links_section["id"], USER_ID, [a, b])

        members = SectionService.set_section_members(links_section["id"], USER_ID, [c, a])

        assert [m["id"] for m in members] == [c, a]

    def test_remove_member_keeps_link(self, fake_db, links_section, make_link):
        l1, l2 = make_link("L1")["id"], make_link("L2")["id"]
        SectionService.add_section_members(links_section["id"], USER_ID, [l1, l2])

        members = SectionService.remove_section_member(links_section["id"], USER_ID, l1)

        assert [m["id"] for m in members] == [l2]
        assert l1 in [row["id"] for row in fake_db.rows("links")]

    def test_photos_cannot_go_into_links_section(self, fake_db, links_section, make_photo):
        photo = make_photo("p1")
        with pytest.raises(LinkNotFoundError):
            SectionService.add_section_members(links_section["id"], USER_ID, [photo["id"]])

    def test_members_of_video_section_rejected(self, fake_db):
        video = fake_db.add("sections", user_id=USER_ID, type="video", order_index=0)
        with pytest.raises(SectionKindMismatchError):
            SectionService.list_section_members(video["id"], USER_ID)

    def test_other_users_link_rejected(self, fake_db, links_section, make_link):
        foreign = make_link("Foreign", user_id=OTHER_USER_ID)
        with pytest.raises(LinkNotFoundError):
            SectionService.add_section_members(links_section["id"], USER_ID, [foreign["id"]])
