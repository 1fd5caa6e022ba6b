# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .storage_service import StorageService
from .membership_service import MembershipService, MEMBERSHIP_TABLES
from .section_service import SectionService
from .link_service import LinkService
from .photo_service import PhotoService
from .testimonial_service import TestimonialService
from .profile_service import ProfileService
from .public_page_service import PublicPageService

__all__ = [
    "StorageService",
    "MembershipService",
    "MEMBERSHIP_TABLES",
    "SectionService",
    "LinkService",
    "PhotoService",
    "TestimonialService",
    "ProfileService",
    "PublicPageService",
]
