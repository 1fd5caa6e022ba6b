# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

from fastapi import Depends, UploadFile

from app.auth import AuthUser, get_current_user


# Type alias for the signed-in owner of the page being edited
CurrentUser = Annotated[AuthUser, Depends(get_current_user)]


async def read_upload(file: UploadFile) -> tuple[str, bytes, str | None]:
    """
    Read an uploaded file fully.

    Size and type are checked by StorageService before anything is stored.

    Returns:
        (filename, content, content_type)
    """
    content = await file.read()
    return file.filename or "upload", content, file.content_type
