# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - profiles.py: Own profile, username and avatar
# - sections.py: Sections, section order and section members
# - links.py: Link buttons
# - photos.py: Photo library and uploads
# - testimonials.py: Testimonials
# - public.py: Public page and directory (no auth)
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import profiles
from . import sections
from . import links
from . import photos
from . import testimonials
from . import public

__all__ = [
    "health",
    "profiles",
    "sections",
    "links",
    "photos",
    "testimonials",
    "public",
]
