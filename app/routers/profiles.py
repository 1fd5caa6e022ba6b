# =============================================================================
# app/routers/profiles.py - Profile Endpoints
# =============================================================================
# The signed-in user's own profile: settings form, username and avatar.
# All endpoints require authentication.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, File, Query, UploadFile

from app.dependencies import CurrentUser, read_upload
from app.exceptions import ProfileNotFoundError
from core.models.profile import (
    ProfileResponse,
    ProfileUpdate,
    UsernameAvailability,
    UsernameRequest,
    normalize_username,
)
from core.services.profile_service import ProfileService

router = APIRouter()


@router.get("", response_model=ProfileResponse)
async def get_profile(user: CurrentUser):
    """
    Get the user's profile.

    Raises 404 until the settings form has been saved once.
    """
    profile = ProfileService.get_profile(user.id)
    if not profile:
        raise ProfileNotFoundError(str(user.id))
    return ProfileResponse(**profile, email=user.email)


@router.put("", response_model=ProfileResponse)
async def update_profile(request: ProfileUpdate, user: CurrentUser):
    """
    Save the profile settings form.

    Empty optional fields are stored as null. The profile is created on
    first save.
    """
    profile = ProfileService.update_profile(user.id, request.model_dump())
    return ProfileResponse(**profile, email=user.email)


@router.get("/username/check", response_model=UsernameAvailability)
async def check_username(
    user: CurrentUser,
    username: Annotated[str, Query(min_length=1, max_length=50)],
):
    """
    Check whether a username can be claimed.

    Returns `invalid`, `available` or `unavailable`. The user's own current
    username counts as available.
    """
    status = ProfileService.check_username(username, user.id)
    return UsernameAvailability(username=normalize_username(username), status=status)


@router.put("/username", response_model=ProfileResponse)
async def set_username(request: UsernameRequest, user: CurrentUser):
    """
    Claim a username (3-20 characters: a-z, 0-9, -, _). Stored lowercase.
    """
    profile = ProfileService.set_username(user.id, request.username)
    return ProfileResponse(**profile, email=user.email)


@router.post("/avatar", response_model=ProfileResponse)
async def upload_avatar(
    file: Annotated[UploadFile, File(description="Avatar image (max 2MB)")],
    user: CurrentUser,
):
    """
    Upload a new avatar. The previous stored avatar is deleted.
    """
    filename, content, content_type = await read_upload(file)
    profile = ProfileService.upload_avatar(user.id, filename, content, content_type)
    return ProfileResponse(**profile, email=user.email)


@router.delete("/avatar", response_model=ProfileResponse)
async def remove_avatar(user: CurrentUser):
    profile = ProfileService.remove_avatar(user.id)
    return ProfileResponse(**profile, email=user.email)
