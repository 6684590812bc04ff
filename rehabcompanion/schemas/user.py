"""User profile schemas."""

from datetime import datetime

from pydantic import Field

from rehabcompanion.schemas.common import CamelModel


class UserResponse(CamelModel):
    """Public profile. Never carries the encryption key."""

    id: int
    email: str
    first_name: str
    last_name: str
    role: str
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = None
    is_active: bool
    created_at: datetime | None = None


class ProfileUpdate(CamelModel):
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    emergency_contact_name: str | None = Field(default=None, max_length=200)
    emergency_contact_phone: str | None = Field(default=None, max_length=50)


class ProfileUpdateResponse(CamelModel):
    message: str = "Profile updated successfully"
    user: UserResponse
