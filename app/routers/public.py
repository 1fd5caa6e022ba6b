# =============================================================================
# app/routers/public.py - Public Page Endpoints
# =============================================================================
# Read-only endpoints for visitors. No authentication.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from core.models.profile import DirectoryEntry
from core.models.public import PublicPage
from core.services.profile_service import ProfileService
from core.services.public_page_service import PublicPageService

router = APIRouter()


@router.get("/public/{username}", response_model=PublicPage)
async def get_public_page(
    username: Annotated[str, Path(description="Public username")],
):
    """
    Everything needed to render a user's public page.

    Hidden sections and hidden links are left out; blocks come in section
    order.
    """
    return PublicPageService.render(username)


@router.get("/directory", response_model=list[DirectoryEntry])
async def list_directory(
    search: Annotated[str | None, Query(max_length=100, description="Filter by name, username, bio or address")] = None,
):
    """
    Profiles that opted into the public directory.
    """
    return ProfileService.list_directory(search)
