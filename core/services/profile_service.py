# =============================================================================
# core/services/profile_service.py - Profile Business Logic
# =============================================================================
# One row in `profiles` per auth user (profiles.id = user id). Handles:
# - profile settings (name, bio, info card fields, directory visibility)
# - the public username
# - the avatar image
# - public lookups by username and the directory listing
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from app.config import settings
from app.exceptions import (
    DatabaseWriteError,
    InvalidUsernameError,
    ProfileNotFoundError,
    UsernameTakenError,
)
from core.models.profile import (
    UsernameStatus,
    is_valid_username,
    normalize_username,
)
from core.services.storage_service import StorageService

logger = logging.getLogger(__name__)

TABLE = "profiles"

# Columns anyone may read through the public page or the directory
PUBLIC_COLUMNS = (
    "id, first_name, last_name, avatar_url, bio, store_hours, "
    "address, sales_pitch, username"
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _full_name(profile: dict[str, Any]) -> str:
    return " ".join(
        part for part in (profile.get("first_name"), profile.get("last_name")) if part
    )


class ProfileService:
    """Service for profile operations."""

    @staticmethod
    def get_profile(user_id: UUID | str) -> dict[str, Any] | None:
        """The user's own profile row, or None if it hasn't been created yet."""
        return SupabaseClient.fetch_one(TABLE, {"id": str(user_id)})

    @staticmethod
    def _save(user_id: str, values: dict[str, Any], operation: str) -> dict[str, Any]:
        """Update the profile row, inserting it first time round."""
        values = {**values, "updated_at": _now()}
        try:
            if SupabaseClient.fetch_one(TABLE, {"id": user_id}, columns="id"):
                rows = SupabaseClient.update(TABLE, values, {"id": user_id})
            else:
                rows = SupabaseClient.insert(TABLE, {"id": user_id, **values})
        except SupabaseClientError as e:
            logger.error(f"Failed to {operation}: {e}")
            raise DatabaseWriteError(operation, e.message)

        return rows[0] if rows else {"id": user_id, **values}

    @staticmethod
    def update_profile(user_id: UUID | str, values: dict[str, Any]) -> dict[str, Any]:
        """
        Save the profile settings form.

        Args:
            user_id: Owner
            values: Validated ProfileUpdate fields; None clears optional text
                fields, a None visibility flag leaves it unchanged

        Raises:
            DatabaseWriteError: If the write fails
        """
        values = dict(values)
        if values.get("is_visible_in_directory") is None:
            values.pop("is_visible_in_directory", None)

        profile = ProfileService._save(str(user_id), values, "update profile")
        logger.info(f"Updated profile for user: {user_id}")
        return profile

    # -------------------------------------------------------------------------
    # Username
    # -------------------------------------------------------------------------

    @staticmethod
    def _owner_of(username: str) -> str | None:
        row = SupabaseClient.fetch_one(TABLE, {"username": username}, columns="id")
        return str(row["id"]) if row else None

    @staticmethod
    def check_username(username: str, user_id: UUID | str | None = None) -> UsernameStatus:
        """
        Availability of a username for `user_id`.

        A lookup that fails counts as unavailable so the form never offers a
        name it couldn't verify.
        """
        username = normalize_username(username)
        if not is_valid_username(username):
            return UsernameStatus.INVALID

        try:
            owner = ProfileService._owner_of(username)
        except SupabaseClientError as e:
            logger.warning(f"Username lookup failed for '{username}': {e}")
            return UsernameStatus.UNAVAILABLE

        if owner is None or (user_id is not None and owner == str(user_id)):
            return UsernameStatus.AVAILABLE
        return UsernameStatus.UNAVAILABLE

    @staticmethod
    def set_username(user_id: UUID | str, username: str) -> dict[str, Any]:
        """
        Claim a username.

        Raises:
            InvalidUsernameError: If it doesn't match the allowed pattern
            UsernameTakenError: If another profile has it
            DatabaseWriteError: If the write fails
        """
        username = normalize_username(username)
        if not is_valid_username(username):
            raise InvalidUsernameError(username)

        owner = ProfileService._owner_of(username)
        if owner is not None and owner != str(user_id):
            raise UsernameTakenError(username)

        profile = ProfileService._save(str(user_id), {"username": username}, "set username")
        logger.info(f"User {user_id} is now '{username}'")
        return profile

    # -------------------------------------------------------------------------
    # Avatar
    # -------------------------------------------------------------------------

    @staticmethod
    def upload_avatar(
        user_id: UUID | str,
        filename: str,
        content: bytes,
        content_type: str | None,
    ) -> dict[str, Any]:
        """
        Replace the avatar image.

        The file is written with upsert to the user's fixed avatar path. Once
        avatar_url is saved, a previous avatar stored at another path of ours
        (different extension) is deleted; if the save fails, the new file is
        deleted instead and the old one stays referenced.

        Raises:
            InvalidFileTypeError / FileTooLargeError: Rejected before upload
            StorageUploadError: If the upload fails
            DatabaseWriteError: If saving avatar_url fails
        """
        StorageService.validate_image(filename, content, content_type, settings.max_avatar_size_bytes)

        user_id_str = str(user_id)
        current = ProfileService.get_profile(user_id_str) or {}
        old_path = StorageService.path_from_public_url(current.get("avatar_url"))

        path = StorageService.avatar_path(user_id_str, filename)
        public_url = StorageService.upload_image(path, content, content_type, upsert=True)

        try:
            profile = ProfileService._save(user_id_str, {"avatar_url": public_url}, "update avatar")
        except DatabaseWriteError:
            # An upsert onto the stored path already replaced the referenced file
            if path != old_path:
                StorageService.delete_file(path)
            raise

        if old_path and old_path != path:
            StorageService.delete_file(old_path)
        logger.info(f"Updated avatar for user: {user_id_str}")
        return profile

    @staticmethod
    def remove_avatar(user_id: UUID | str) -> dict[str, Any]:
        """Delete the stored avatar (if ours) and clear avatar_url."""
        user_id_str = str(user_id)
        current = ProfileService.get_profile(user_id_str)
        if not current:
            raise ProfileNotFoundError(user_id_str)

        StorageService.delete_by_public_url(current.get("avatar_url"))
        return ProfileService._save(user_id_str, {"avatar_url": None}, "remove avatar")

    # -------------------------------------------------------------------------
    # Public lookups
    # -------------------------------------------------------------------------

    @staticmethod
    def get_public_profile(username: str) -> dict[str, Any]:
        """
        Public fields of the profile with this username.

        Raises:
            ProfileNotFoundError: If no profile has it
        """
        username = normalize_username(username)
        profile = None
        if is_valid_username(username):
            profile = SupabaseClient.fetch_one(TABLE, {"username": username}, columns=PUBLIC_COLUMNS)
        if not profile:
            raise ProfileNotFoundError(username)
        return profile

    @staticmethod
    def list_directory(search: str | None = None) -> list[dict[str, Any]]:
        """
        Profiles that opted into the directory and have a username.

        Args:
            search: Case-insensitive substring matched against full name,
                username, bio and address

        Returns:
            DirectoryEntry-shaped dicts sorted by full name
        """
        rows = SupabaseClient.select(
            TABLE,
            columns=PUBLIC_COLUMNS,
            filters={"is_visible_in_directory": True},
        )

        needle = (search or "").strip().lower()
        entries = []
        for row in rows:
            if not row.get("username"):
                continue
            entry = {
                "id": row["id"],
                "username": row["username"],
                "full_name": _full_name(row),
                "bio": row.get("bio"),
                "avatar_url": row.get("avatar_url"),
                "address": row.get("address"),
            }
            if needle:
                haystack = " ".join(
                    value for value in (entry["full_name"], entry["username"], entry["bio"], entry["address"])
                    if value
                ).lower()
                if needle not in haystack:
                    continue
            entries.append(entry)

        return sorted(entries, key=lambda e: (e["full_name"].lower(), e["username"]))
