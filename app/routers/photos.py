# =============================================================================
# app/routers/photos.py - Photo Endpoints
# =============================================================================
# The user's photo library. Photos are added by URL or uploaded as files
# (multipart/form-data); slider and grid sections pick from this library.
# All endpoints require authentication.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, File, Form, Path, UploadFile

from app.dependencies import CurrentUser, read_upload
from core.models.photo import PhotoCreate, PhotoResponse, PhotoUpdate
from core.services.photo_service import PhotoService

router = APIRouter()

PhotoId = Annotated[UUID, Path(description="Photo UUID")]


@router.get("", response_model=list[PhotoResponse])
async def list_photos(user: CurrentUser):
    """
    List the user's photos, newest first.
    """
    return PhotoService.list_photos(user.id)


@router.post("", response_model=PhotoResponse, status_code=201)
async def create_photo(request: PhotoCreate, user: CurrentUser):
    """
    Add a photo by URL.
    """
    return PhotoService.create_photo(user.id, str(request.url), request.caption)


@router.post("/upload", response_model=PhotoResponse, status_code=201)
async def upload_photo(
    file: Annotated[UploadFile, File(description="Image file (JPEG, PNG, GIF or WebP)")],
    user: CurrentUser,
    caption: Annotated[str | None, Form(max_length=100)] = None,
):
    """
    Upload an image into the user's library.

    **Constraints:**
    - Max file size: 5MB
    - Allowed types: JPEG, PNG, GIF, WebP
    """
    filename, content, content_type = await read_upload(file)
    return PhotoService.upload_photo(user.id, filename, content, content_type, caption)


@router.patch("/{photo_id}", response_model=PhotoResponse)
async def update_photo(photo_id: PhotoId, request: PhotoUpdate, user: CurrentUser):
    """
    Change a photo's caption or URL. A replaced uploaded file is deleted.
    """
    values = request.model_dump(exclude_unset=True)
    if values.get("url") is not None:
        values["url"] = str(values["url"])
    elif "url" in values:
        values.pop("url")
    return PhotoService.update_photo(photo_id, user.id, values)


@router.put("/{photo_id}/file", response_model=PhotoResponse)
async def replace_photo_file(
    photo_id: PhotoId,
    file: Annotated[UploadFile, File(description="Replacement image")],
    user: CurrentUser,
):
    """
    Upload a new image for a photo. It keeps its place in every section.
    """
    filename, content, content_type = await read_upload(file)
    return PhotoService.replace_file(photo_id, user.id, filename, content, content_type)


@router.delete("/{photo_id}", status_code=204)
async def delete_photo(photo_id: PhotoId, user: CurrentUser):
    """
    Delete a photo from the library and every section.
    """
    PhotoService.delete_photo(photo_id, user.id)
