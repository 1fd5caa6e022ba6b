# =============================================================================
# app/routers/testimonials.py - Testimonial Endpoints
# =============================================================================
# All endpoints require authentication.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path

from app.dependencies import CurrentUser
from core.models.photo import TestimonialCreate, TestimonialResponse, TestimonialUpdate
from core.services.testimonial_service import TestimonialService

router = APIRouter()

TestimonialId = Annotated[UUID, Path(description="Testimonial UUID")]


@router.get("", response_model=list[TestimonialResponse])
async def list_testimonials(user: CurrentUser):
    return TestimonialService.list_testimonials(user.id)


@router.post("", response_model=TestimonialResponse, status_code=201)
async def create_testimonial(request: TestimonialCreate, user: CurrentUser):
    return TestimonialService.create_testimonial(user.id, request.author, request.content)


@router.patch("/{testimonial_id}", response_model=TestimonialResponse)
async def update_testimonial(
    testimonial_id: TestimonialId,
    request: TestimonialUpdate,
    user: CurrentUser,
):
    values = request.model_dump(exclude_unset=True, exclude_none=True)
    return TestimonialService.update_testimonial(testimonial_id, user.id, values)


@router.delete("/{testimonial_id}", status_code=204)
async def delete_testimonial(testimonial_id: TestimonialId, user: CurrentUser):
    TestimonialService.delete_testimonial(testimonial_id, user.id)
