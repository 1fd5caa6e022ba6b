# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/links")
#   async def list_links(user: AuthUser = Depends(get_current_user)):
#       return LinkService.list_links(user.id)
# =============================================================================

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, MeResponse

__all__ = [
    "get_current_user",
    "AuthUser",
    "MeResponse",
]
