# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - section.py: Section kinds, editor dispatch, section CRUD and ordering
# - link.py: Link CRUD schemas
# - photo.py: Photo and testimonial schemas
# - profile.py: Profile settings, username rules, directory entries
# - public.py: Public page blocks
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Section Models
# -----------------------------------------------------------------------------
from .section import (
    MemberKind,
    OrderRequest,
    SectionCreate,
    SectionEditor,
    SectionKind,
    SectionResponse,
    SectionUpdate,
    member_kind_for,
    section_editor,
)

# -----------------------------------------------------------------------------
# Member Models - links, photos, testimonials
# -----------------------------------------------------------------------------
from .link import (
    LinkCreate,
    LinkResponse,
    LinkUpdate,
)
from .photo import (
    PhotoCreate,
    PhotoResponse,
    PhotoUpdate,
    TestimonialCreate,
    TestimonialResponse,
    TestimonialUpdate,
)

# -----------------------------------------------------------------------------
# Profile Models
# -----------------------------------------------------------------------------
from .profile import (
    DirectoryEntry,
    ProfileResponse,
    ProfileUpdate,
    PublicProfile,
    UsernameAvailability,
    UsernameRequest,
    UsernameStatus,
    is_valid_username,
    normalize_username,
)

# -----------------------------------------------------------------------------
# Public Page Models
# -----------------------------------------------------------------------------
from .public import (
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

__all__ = [
    # Section
    "MemberKind",
    "OrderRequest",
    "SectionCreate",
    "SectionEditor",
    "SectionKind",
    "SectionResponse",
    "SectionUpdate",
    "member_kind_for",
    "section_editor",
    # Link
    "LinkCreate",
    "LinkResponse",
    "LinkUpdate",
    # Photo / Testimonial
    "PhotoCreate",
    "PhotoResponse",
    "PhotoUpdate",
    "TestimonialCreate",
    "TestimonialResponse",
    "TestimonialUpdate",
    # Profile
    "DirectoryEntry",
    "ProfileResponse",
    "ProfileUpdate",
    "PublicProfile",
    "UsernameAvailability",
    "UsernameRequest",
    "UsernameStatus",
    "is_valid_username",
    "normalize_username",
    # Public page
    "InfoCardBlock",
    "LinkButton",
    "LinkListBlock",
    "MapEmbedBlock",
    "PhotoGridBlock",
    "PhotoItem",
    "PhotoSliderBlock",
    "PublicBlock",
    "PublicPage",
    "TestimonialItem",
    "TestimonialListBlock",
    "VideoEmbedBlock",
]
