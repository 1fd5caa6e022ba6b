# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles image upload / delete in Supabase Storage and converts between
# storage paths and public URLs.
#
# Paths inside the bucket:
#   {user_id}/{uuid}.{ext}              photos
#   {user_id}/avatars/avatar.{ext}      avatar (overwritten on change)
# =============================================================================

import logging
import uuid

from lib.supabase_client import SupabaseClient
from app.config import settings
from app.exceptions import FileTooLargeError, InvalidFileTypeError, StorageUploadError

logger = logging.getLogger(__name__)

# Cache header sent with every upload (seconds)
CACHE_CONTROL = "3600"


def file_extension(filename: str | None, default: str = "jpg") -> str:
    """Lowercased extension of a filename, without the dot."""
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[-1].lower()
        if ext:
            return ext
    return default


class StorageService:
    """
    Service for Supabase Storage operations.

    All objects live in `settings.STORAGE_BUCKET`.
    """

    @staticmethod
    def validate_image(
        filename: str,
        content: bytes,
        content_type: str | None,
        max_bytes: int,
    ) -> None:
        """
        Check type and size before anything is uploaded.

        Raises:
            InvalidFileTypeError: If the content type isn't an allowed image type
            FileTooLargeError: If the file exceeds `max_bytes`
        """
        allowed = settings.allowed_image_types_list
        if (content_type or "").lower() not in allowed:
            raise InvalidFileTypeError(filename, allowed)

        if len(content) > max_bytes:
            raise FileTooLargeError(len(content) / (1024 * 1024), max_bytes // (1024 * 1024))

    @staticmethod
    def photo_path(user_id: str, filename: str | None) -> str:
        return f"{user_id}/{uuid.uuid4()}.{file_extension(filename)}"

    @staticmethod
    def avatar_path(user_id: str, filename: str | None) -> str:
        return f"{user_id}/avatars/avatar.{file_extension(filename)}"

    @staticmethod
    def upload_image(
        path: str,
        content: bytes,
        content_type: str,
        upsert: bool = False,
    ) -> str:
        """
        Upload image bytes and return the object's public URL.

        Args:
            path: Object path inside the bucket
            content: File bytes
            content_type: MIME type stored with the object
            upsert: Overwrite an existing object at the same path

        Raises:
            StorageUploadError: If upload fails
        """
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(settings.STORAGE_BUCKET).upload(
                path=path,
                file=content,
                file_options={
                    "content-type": content_type,
                    "cache-control": CACHE_CONTROL,
                    "upsert": "true" if upsert else "false",
                }
            )
            logger.info(f"Uploaded file to storage: {path}")

        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

        return StorageService.get_public_url(path)

    @staticmethod
    def get_public_url(storage_path: str) -> str:
        """
        Get a public URL for a storage file.

        Raises:
            StorageUploadError: If the URL can't be derived
        """
        client = SupabaseClient.get_client()

        try:
            return client.storage.from_(settings.STORAGE_BUCKET).get_public_url(storage_path)
        except Exception as e:
            logger.error(f"Failed to get public URL: {e}")
            raise StorageUploadError(str(e))

    @staticmethod
    def path_from_public_url(url: str | None) -> str | None:
        """
        Storage path of one of our own objects, or None for external URLs.

        Example:
            https://x.supabase.co/storage/v1/object/public/photos/u1/a.jpg -> "u1/a.jpg"
        """
        if not url:
            return None
        prefix = settings.storage_public_prefix
        if not url.startswith(prefix):
            return None
        path = url[len(prefix):].split("?", 1)[0]
        return path or None

    @staticmethod
    def delete_file(storage_path: str) -> bool:
        """
        Delete a file from storage.

        Best effort: a failure is logged and reported as False, never raised,
        because the database row it belonged to is already gone or replaced.

        Returns:
            True if deleted successfully
        """
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(settings.STORAGE_BUCKET).remove([storage_path])
            logger.info(f"Deleted file from storage: {storage_path}")
            return True

        except Exception as e:
            logger.warning(f"Failed to delete file {storage_path}, it may be orphaned: {e}")
            return False

    @staticmethod
    def delete_by_public_url(url: str | None) -> bool:
        """Delete the object behind one of our public URLs. External URLs are ignored."""
        path = StorageService.path_from_public_url(url)
        if path is None:
            return False
        return StorageService.delete_file(path)
