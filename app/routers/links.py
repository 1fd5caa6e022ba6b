# =============================================================================
# app/routers/links.py - Link Endpoints
# =============================================================================
# CRUD for the user's link buttons. A link can sit in several links sections;
# `section_ids` on create / update decides which.
# All endpoints require authentication.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path

from app.dependencies import CurrentUser
from core.models.link import LinkCreate, LinkResponse, LinkUpdate
from core.services.link_service import LinkService

router = APIRouter()

LinkId = Annotated[UUID, Path(description="Link UUID")]


@router.get("", response_model=list[LinkResponse])
async def list_links(user: CurrentUser):
    """
    List all of the user's links, newest first, with the sections holding each.
    """
    return LinkService.list_links(user.id)


@router.post("", response_model=LinkResponse, status_code=201)
async def create_link(request: LinkCreate, user: CurrentUser):
    """
    Create a link and append it to the end of each section in `section_ids`.
    """
    return LinkService.create_link(
        user.id,
        title=request.title,
        url=str(request.url),
        is_active=request.is_active,
        text_color=request.text_color,
        background_color=request.background_color,
        section_ids=[str(s) for s in request.section_ids],
    )


@router.get("/{link_id}", response_model=LinkResponse)
async def get_link(link_id: LinkId, user: CurrentUser):
    return LinkService.get_link_with_sections(link_id, user.id)


@router.patch("/{link_id}", response_model=LinkResponse)
async def update_link(link_id: LinkId, request: LinkUpdate, user: CurrentUser):
    """
    Edit a link. Omitted fields are unchanged; `section_ids` replaces the
    link's sections when present.
    """
    values = request.model_dump(exclude_unset=True, exclude={"section_ids"})
    if "url" in values and values["url"] is not None:
        values["url"] = str(values["url"])

    section_ids = (
        [str(s) for s in request.section_ids]
        if request.section_ids is not None else None
    )
    return LinkService.update_link(link_id, user.id, values, section_ids=section_ids)


@router.post("/{link_id}/toggle", response_model=LinkResponse)
async def toggle_link(link_id: LinkId, user: CurrentUser):
    """
    Show / hide a link everywhere it appears.
    """
    return LinkService.toggle_active(link_id, user.id)


@router.delete("/{link_id}", status_code=204)
async def delete_link(link_id: LinkId, user: CurrentUser):
    """
    Delete a link and remove it from every section.
    """
    LinkService.delete_link(link_id, user.id)
