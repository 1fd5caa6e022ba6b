# =============================================================================
# core/models/profile.py - Profile Schemas
# =============================================================================
# One profile per user (profiles.id = auth user id). It carries the public
# display fields, the unique public handle (username) and the fields the
# info card section is built from.
# =============================================================================

import re
from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

USERNAME_PATTERN = re.compile(r"^[a-z0-9_-]{3,20}$")


def normalize_username(value: str) -> str:
    """Usernames are case-insensitive; they are stored lowercase."""
    return value.strip().lower()


def is_valid_username(value: str) -> bool:
    return bool(USERNAME_PATTERN.match(value))


class UsernameStatus(str, Enum):
    """Result of a username availability check."""
    INVALID = "invalid"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class ProfileUpdate(BaseModel):
    """
    Schema for the profile settings form.

    Empty strings are stored as NULL for the optional fields.

    Example:
        {
            "first_name": "Ana",
            "bio": "Baker and coffee nerd",
            "store_hours": "Mon-Fri 8h-18h",
            "address": "Rua das Flores, 12",
            "sales_pitch": "Fresh bread every morning."
        }
    """

    first_name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="First name (required)"
    )

    last_name: str | None = Field(default=None, max_length=100)

    bio: str | None = Field(
        default=None,
        max_length=160,
        description="Short bio shown under the avatar"
    )

    store_hours: str | None = Field(default=None, max_length=255)

    address: str | None = Field(default=None, max_length=255)

    sales_pitch: str | None = Field(default=None, max_length=500)

    is_visible_in_directory: bool | None = Field(
        default=None,
        description="List the profile in the public directory"
    )

    @field_validator("last_name", "bio", "store_hours", "address", "sales_pitch")
    @classmethod
    def empty_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None


class UsernameRequest(BaseModel):
    """Claim a public handle. Validated and lowercased by the service."""

    username: str = Field(..., min_length=1, max_length=50)


class UsernameAvailability(BaseModel):
    username: str
    status: UsernameStatus


class ProfileResponse(BaseModel):
    """Owner's view of their profile."""

    id: UUID
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    store_hours: str | None = None
    address: str | None = None
    sales_pitch: str | None = None
    username: str | None = None
    is_visible_in_directory: bool = False
    updated_at: datetime | None = None
    email: str | None = None


class PublicProfile(BaseModel):
    """Fields of a profile that anyone may see."""

    id: UUID
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    store_hours: str | None = None
    address: str | None = None
    sales_pitch: str | None = None
    username: str | None = None

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class DirectoryEntry(BaseModel):
    """Card in the public directory."""

    id: UUID
    username: str
    full_name: str
    bio: str | None = None
    avatar_url: str | None = None
    address: str | None = None
