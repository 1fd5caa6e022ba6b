# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Actual signup/login is handled by Supabase Auth client-side.
# These routes are for getting user info after authentication.
# =============================================================================

import logging
from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, MeResponse
from core.services.profile_service import ProfileService
from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=MeResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> MeResponse:
    """
    Get the current authenticated user and their profile summary.

    Raises:
        401: If not authenticated
    """
    try:
        profile = ProfileService.get_profile(user.id)
    except SupabaseClientError as e:
        logger.warning(f"Could not fetch profile for {user.id}: {e}")
        profile = None

    # The profile row is created on the first settings save
    if not profile:
        return MeResponse(id=user.id, email=user.email)

    return MeResponse(
        id=user.id,
        email=user.email,
        username=profile.get("username"),
        first_name=profile.get("first_name"),
        avatar_url=profile.get("avatar_url"),
        has_profile=True,
    )


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.

    Returns:
        dict: Confirmation with user_id

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }
