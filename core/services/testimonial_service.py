# =============================================================================
# core/services/testimonial_service.py - Testimonial Business Logic
# =============================================================================
# Testimonials belong to the user, not to a section: every testimonials
# section on the public page shows the same list.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from app.exceptions import DatabaseWriteError, TestimonialNotFoundError

logger = logging.getLogger(__name__)

TABLE = "testimonials"


class TestimonialService:

    @staticmethod
    def list_testimonials(user_id: UUID | str) -> list[dict[str, Any]]:
        """Newest first."""
        return SupabaseClient.select(
            TABLE,
            filters={"user_id": str(user_id)},
            order="created_at",
            desc=True,
        )

    @staticmethod
    def get_testimonial(testimonial_id: str | UUID, user_id: UUID | str) -> dict[str, Any]:
        testimonial = SupabaseClient.fetch_one(TABLE, {"id": str(testimonial_id)})
        if not testimonial or str(testimonial.get("user_id")) != str(user_id):
            raise TestimonialNotFoundError(str(testimonial_id))
        return testimonial

    @staticmethod
    def create_testimonial(user_id: UUID | str, author: str, content: str) -> dict[str, Any]:
        data = {
            "user_id": str(user_id),
            "author": author.strip(),
            "content": content.strip(),
        }

        try:
            rows = SupabaseClient.insert(TABLE, data)
        except SupabaseClientError as e:
            logger.error(f"Failed to create testimonial: {e}")
            raise DatabaseWriteError("create testimonial", e.message)

        if not rows:
            raise DatabaseWriteError("create testimonial", "insert returned no data")

        logger.info(f"Created testimonial: {rows[0]['id']} for user: {user_id}")
        return rows[0]

    @staticmethod
    def update_testimonial(
        testimonial_id: str | UUID,
        user_id: UUID | str,
        values: dict[str, Any],
    ) -> dict[str, Any]:
        testimonial = TestimonialService.get_testimonial(testimonial_id, user_id)
        if not values:
            return testimonial

        try:
            rows = SupabaseClient.update(TABLE, values, {"id": str(testimonial_id)})
        except SupabaseClientError as e:
            logger.error(f"Failed to update testimonial: {e}")
            raise DatabaseWriteError("update testimonial", e.message)

        logger.info(f"Updated testimonial: {testimonial_id}")
        return rows[0] if rows else {**testimonial, **values}

    @staticmethod
    def delete_testimonial(testimonial_id: str | UUID, user_id: UUID | str) -> None:
        TestimonialService.get_testimonial(testimonial_id, user_id)

        try:
            SupabaseClient.delete(TABLE, filters={"id": str(testimonial_id)})
        except SupabaseClientError as e:
            logger.error(f"Failed to delete testimonial: {e}")
            raise DatabaseWriteError("delete testimonial", e.message)

        logger.info(f"Deleted testimonial: {testimonial_id}")
