# =============================================================================
# core/services/photo_service.py - Photo Business Logic
# =============================================================================
# A photo is either an external URL or a file uploaded to our bucket.
# Photos are shown by slider and grid sections through section_photos.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from app.config import settings
from app.exceptions import DatabaseWriteError, PhotoNotFoundError
from core.models.section import MemberKind
from core.services.membership_service import MembershipService
from core.services.storage_service import StorageService

logger = logging.getLogger(__name__)

TABLE = "photos"


class PhotoService:
    """Service for the user's photo library."""

    @staticmethod
    def list_photos(user_id: UUID | str) -> list[dict[str, Any]]:
        """All photos of the user, newest first."""
        return SupabaseClient.select(
            TABLE,
            filters={"user_id": str(user_id)},
            order="created_at",
            desc=True,
        )

    @staticmethod
    def get_photo(photo_id: str | UUID, user_id: UUID | str) -> dict[str, Any]:
        """
        Get a photo owned by the user.

        Raises:
            PhotoNotFoundError: If it doesn't exist or belongs to someone else
        """
        photo = SupabaseClient.fetch_one(TABLE, {"id": str(photo_id)})
        if not photo or str(photo.get("user_id")) != str(user_id):
            raise PhotoNotFoundError(str(photo_id))
        return photo

    @staticmethod
    def create_photo(user_id: UUID | str, url: str, caption: str | None = None) -> dict[str, Any]:
        """
        Add a photo row pointing at `url`.

        Raises:
            DatabaseWriteError: If the insert fails
        """
        data = {
            "user_id": str(user_id),
            "url": url,
            "caption": caption or None,
        }

        try:
            rows = SupabaseClient.insert(TABLE, data)
        except SupabaseClientError as e:
            logger.error(f"Failed to create photo: {e}")
            raise DatabaseWriteError("create photo", e.message)

        if not rows:
            raise DatabaseWriteError("create photo", "insert returned no data")

        logger.info(f"Created photo: {rows[0]['id']} for user: {user_id}")
        return rows[0]

    @staticmethod
    def upload_photo(
        user_id: UUID | str,
        filename: str,
        content: bytes,
        content_type: str | None,
        caption: str | None = None,
    ) -> dict[str, Any]:
        """
        Store an uploaded image and add it to the library.

        If the row insert fails the uploaded file is removed again.

        Raises:
            InvalidFileTypeError / FileTooLargeError: Rejected before upload
            StorageUploadError: If the upload fails
            DatabaseWriteError: If the insert fails
        """
        StorageService.validate_image(filename, content, content_type, settings.max_photo_size_bytes)

        path = StorageService.photo_path(str(user_id), filename)
        public_url = StorageService.upload_image(path, content, content_type)

        try:
            return PhotoService.create_photo(user_id, public_url, caption)
        except DatabaseWriteError:
            StorageService.delete_file(path)
            raise

    @staticmethod
    def update_photo(
        photo_id: str | UUID,
        user_id: UUID | str,
        values: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Change caption and/or URL.

        When the URL changes and the old one was in our bucket, the old file
        is deleted (best effort).

        Raises:
            PhotoNotFoundError: If the user doesn't own the photo
            DatabaseWriteError: If the update fails
        """
        photo = PhotoService.get_photo(photo_id, user_id)
        if not values:
            return photo

        if "caption" in values:
            values["caption"] = values["caption"] or None

        try:
            rows = SupabaseClient.update(TABLE, values, {"id": str(photo_id)})
        except SupabaseClientError as e:
            logger.error(f"Failed to update photo: {e}")
            raise DatabaseWriteError("update photo", e.message)

        old_url = photo.get("url")
        if "url" in values and values["url"] != old_url:
            StorageService.delete_by_public_url(old_url)

        logger.info(f"Updated photo: {photo_id}")
        return rows[0] if rows else {**photo, **values}

    @staticmethod
    def replace_file(
        photo_id: str | UUID,
        user_id: UUID | str,
        filename: str,
        content: bytes,
        content_type: str | None,
    ) -> dict[str, Any]:
        """Upload a new image for an existing photo, keeping its memberships."""
        PhotoService.get_photo(photo_id, user_id)
        StorageService.validate_image(filename, content, content_type, settings.max_photo_size_bytes)

        path = StorageService.photo_path(str(user_id), filename)
        public_url = StorageService.upload_image(path, content, content_type)

        try:
            return PhotoService.update_photo(photo_id, user_id, {"url": public_url})
        except DatabaseWriteError:
            StorageService.delete_file(path)
            raise

    @staticmethod
    def delete_photo(photo_id: str | UUID, user_id: UUID | str) -> None:
        """
        Delete a photo from every section, then its row, then its file.

        Raises:
            PhotoNotFoundError: If the user doesn't own the photo
            DatabaseWriteError: If a delete fails
        """
        photo = PhotoService.get_photo(photo_id, user_id)
        photo_id_str = str(photo_id)

        try:
            MembershipService.remove_member_everywhere(MemberKind.PHOTO, photo_id_str)
            SupabaseClient.delete(TABLE, filters={"id": photo_id_str})
        except SupabaseClientError as e:
            logger.error(f"Failed to delete photo: {e}")
            raise DatabaseWriteError("delete photo", e.message)

        StorageService.delete_by_public_url(photo.get("url"))
        logger.info(f"Deleted photo: {photo_id_str}")
