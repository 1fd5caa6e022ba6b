# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the request / response models to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - Public blocks serialize with their type tag
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from uuid import uuid4

import pytest
from pydantic import TypeAdapter, ValidationError

from core.models import (
    LinkCreate,
    LinkUpdate,
    OrderRequest,
    PhotoCreate,
    ProfileUpdate,
    PublicBlock,
    PublicProfile,
    SectionCreate,
    SectionKind,
    TestimonialCreate,
    is_valid_username,
    normalize_username,
)


# =============================================================================
# Section Models
# =============================================================================

class TestSectionModels:

    def test_valid_section_create(self):
        section = SectionCreate(type="video", content_url="https://youtu.be/abc")
        assert section.type == SectionKind.VIDEO
        assert str(section.content_url) == "https://youtu.be/abc"

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            SectionCreate(type="carousel")

    def test_order_request_ids(self):
        ids = [uuid4(), uuid4()]
        assert OrderRequest(ids=ids).id_strings == [str(i) for i in ids]

    def test_order_request_rejects_non_uuid(self):
        with pytest.raises(ValidationError):
            OrderRequest(ids=["not-a-uuid"])


# =============================================================================
# Link / Photo / Testimonial Models
# =============================================================================

class TestLinkModels:

    SECTIONS = [str(uuid4())]

    def test_defaults(self):
        link = LinkCreate(title="Shop", url="https://shop.example.com", section_ids=self.SECTIONS)
        assert link.is_active is True
        assert [str(s) for s in link.section_ids] == self.SECTIONS

    def test_at_least_one_section(self):
        with pytest.raises(ValidationError):
            LinkCreate(title="Shop", url="https://shop.example.com", section_ids=[])
        with pytest.raises(ValidationError):
            LinkCreate(title="Shop", url="https://shop.example.com")

    def test_url_needs_scheme(self):
        with pytest.raises(ValidationError):
            LinkCreate(title="Shop", url="shop.example.com", section_ids=self.SECTIONS)

    def test_title_required(self):
        with pytest.raises(ValidationError):
            LinkCreate(title="", url="https://shop.example.com", section_ids=self.SECTIONS)

    @pytest.mark.parametrize("color", ["#fff", "#D3BD75", "#d3bd75ff"])
    def test_hex_colors(self, color):
        assert LinkCreate(title="a", url="https://a.test", background_color=color, section_ids=self.SECTIONS).background_color == color

    @pytest.mark.parametrize("color", ["red", "#ggg", "d3bd75"])
    def test_bad_colors(self, color):
        with pytest.raises(ValidationError):
            LinkCreate(title="a", url="https://a.test", text_color=color, section_ids=self.SECTIONS)

    def test_update_leaves_sections_unset(self):
        assert LinkUpdate(title="New").section_ids is None

    def test_update_cannot_empty_sections(self):
        with pytest.raises(ValidationError):
            LinkUpdate(section_ids=[])


class TestPhotoModels:

    def test_caption_limit(self):
        with pytest.raises(ValidationError):
            PhotoCreate(url="https://img.test/a.jpg", caption="x" * 101)

    def test_testimonial_content_length(self):
        with pytest.raises(ValidationError):
            TestimonialCreate(author="Maria", content="Too short")
        assert TestimonialCreate(author="Maria", content="Long enough text").author == "Maria"


# =============================================================================
# Profile Models
# =============================================================================

class TestProfileModels:

    def test_empty_strings_become_none(self):
        profile = ProfileUpdate(first_name="Ana", bio="  ", address="")
        assert profile.bio is None
        assert profile.address is None

    def test_first_name_required(self):
        with pytest.raises(ValidationError):
            ProfileUpdate(first_name="")

    def test_bio_limit(self):
        with pytest.raises(ValidationError):
            ProfileUpdate(first_name="Ana", bio="x" * 161)

    @pytest.mark.parametrize("username,valid", [
        ("ana", True),
        ("bakery_42", True),
        ("a-b", True),
        ("ab", False),
        ("x" * 21, False),
        ("Ana", False),
        ("ana!", False),
    ])
    def test_username_pattern(self, username, valid):
        assert is_valid_username(username) is valid

    def test_normalize_username(self):
        assert normalize_username("  Ana ") == "ana"

    def test_full_name(self):
        assert PublicProfile(id=uuid4(), first_name="Ana").full_name == "Ana"
        assert PublicProfile(id=uuid4(), first_name="Ana", last_name="Souza").full_name == "Ana Souza"


# =============================================================================
# Public Blocks
# =============================================================================

class TestPublicBlocks:

    def test_discriminated_by_type(self):
        adapter = TypeAdapter(PublicBlock)
        block = adapter.validate_python({
            "type": "map",
            "section_id": str(uuid4()),
            "embed_url": "https://maps.test/embed",
        })
        assert type(block).__name__ == "MapEmbedBlock"

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            TypeAdapter(PublicBlock).validate_python({"type": "banner", "section_id": str(uuid4())})
