# =============================================================================
# app/routers/sections.py - Section Endpoints
# =============================================================================
# Dashboard endpoints for the sections of the signed-in user's page and for
# the ordered member lists of links / photo sections.
# All endpoints require authentication.
# =============================================================================

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Path
from pydantic import BaseModel, Field

from app.dependencies import CurrentUser
from core.models.section import (
    OrderRequest,
    SectionCreate,
    SectionEditor,
    SectionKind,
    SectionResponse,
    SectionUpdate,
    section_editor,
)
from core.services.section_service import SectionService

router = APIRouter()

SectionId = Annotated[UUID, Path(description="Section UUID")]


# =============================================================================
# Request/Response Models
# =============================================================================

class SectionDetail(SectionResponse):
    """Section plus what its editor manages."""
    editor: SectionEditor


class MembersRequest(BaseModel):
    """Ids of links or photos, in the order they should appear."""
    member_ids: list[UUID] = Field(
        ...,
        description="Link or photo UUIDs"
    )

    model_config = {
        "json_schema_extra": {
            "example": {"member_ids": ["550e8400-e29b-41d4-a716-446655440000"]}
        }
    }

    @property
    def id_strings(self) -> list[str]:
        return [str(i) for i in self.member_ids]


class MembersResponse(BaseModel):
    section_id: UUID
    members: list[dict[str, Any]]


def _detail(section: dict[str, Any]) -> SectionDetail:
    return SectionDetail(**section, editor=section_editor(SectionKind(section["type"])))


# =============================================================================
# Section Endpoints
# =============================================================================

@router.get("", response_model=list[SectionDetail])
async def list_sections(user: CurrentUser):
    """
    List the user's sections in page order (hidden ones included).
    """
    return [_detail(s) for s in SectionService.list_sections(user.id)]


@router.post("", response_model=SectionDetail, status_code=201)
async def create_section(request: SectionCreate, user: CurrentUser):
    """
    Add a section at the end of the page.

    `content_url` is accepted for video and map sections only.
    """
    content_url = str(request.content_url) if request.content_url else None
    section = SectionService.create_section(user.id, request.type, content_url)
    return _detail(section)


@router.put("/order", response_model=list[SectionDetail])
async def save_section_order(request: OrderRequest, user: CurrentUser):
    """
    Save the order of all sections.

    `ids` must contain every section of the user exactly once.
    """
    return [_detail(s) for s in SectionService.save_order(user.id, request.id_strings)]


@router.get("/{section_id}", response_model=SectionDetail)
async def get_section(section_id: SectionId, user: CurrentUser):
    return _detail(SectionService.get_section(section_id, user.id))


@router.patch("/{section_id}", response_model=SectionDetail)
async def update_section(section_id: SectionId, request: SectionUpdate, user: CurrentUser):
    """
    Show / hide a section or change its video / map URL.

    An explicit `"content_url": null` clears the URL; omitting it leaves the
    URL as is.
    """
    section = SectionService.update_section(
        section_id,
        user.id,
        is_active=request.is_active,
        content_url=str(request.content_url) if request.content_url else None,
        clear_content_url="content_url" in request.model_fields_set and request.content_url is None,
    )
    return _detail(section)


@router.post("/{section_id}/toggle", response_model=SectionDetail)
async def toggle_section(section_id: SectionId, user: CurrentUser):
    return _detail(SectionService.toggle_active(section_id, user.id))


@router.delete("/{section_id}", status_code=204)
async def delete_section(section_id: SectionId, user: CurrentUser):
    """
    Delete a section. Its links and photos stay in the user's library.
    """
    SectionService.delete_section(section_id, user.id)


# =============================================================================
# Member Endpoints
# =============================================================================

@router.get("/{section_id}/members", response_model=MembersResponse)
async def list_members(section_id: SectionId, user: CurrentUser):
    """
    Links or photos of a section, in position order.
    """
    members = SectionService.list_section_members(section_id, user.id)
    return MembersResponse(section_id=section_id, members=members)


@router.put("/{section_id}/members", response_model=MembersResponse)
async def set_members(section_id: SectionId, request: MembersRequest, user: CurrentUser):
    """
    Replace the members of a section with exactly `member_ids`, in order.
    """
    members = SectionService.set_section_members(section_id, user.id, request.id_strings)
    return MembersResponse(section_id=section_id, members=members)


@router.post("/{section_id}/members", response_model=MembersResponse)
async def add_members(section_id: SectionId, request: MembersRequest, user: CurrentUser):
    """
    Append members at the end of a section.
    """
    members = SectionService.add_section_members(section_id, user.id, request.id_strings)
    return MembersResponse(section_id=section_id, members=members)


@router.put("/{section_id}/members/order", response_model=MembersResponse)
async def reorder_members(section_id: SectionId, request: OrderRequest, user: CurrentUser):
    """
    Save a new member order. `ids` must list every member exactly once.
    """
    members = SectionService.reorder_section_members(section_id, user.id, request.id_strings)
    return MembersResponse(section_id=section_id, members=members)


@router.delete("/{section_id}/members/{member_id}", response_model=MembersResponse)
async def remove_member(
    section_id: SectionId,
    member_id: Annotated[UUID, Path(description="Link or photo UUID")],
    user: CurrentUser,
):
    """
    Take one link / photo out of a section.
    """
    members = SectionService.remove_section_member(section_id, user.id, str(member_id))
    return MembersResponse(section_id=section_id, members=members)
