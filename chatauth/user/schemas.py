"""User domain schemas.

Security notes:
- password_hash and external_id are internal-only, never exposed in responses
- UserPublicRead contains only fields safe for API responses
"""

import uuid
from datetime import UTC, datetime

from pydantic import EmailStr, field_serializer
from sqlmodel import SQLModel


class UserPublicRead(SQLModel):
    """Response schema for the current user's own record."""

    id: uuid.UUID
    email: EmailStr
    display_name: str | None
    first_name: str | None
    last_name: str | None
    avatar_url: str | None
    is_subscribed: bool
    chat_start_time: datetime | None
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at", "chat_start_time")
    def serialize_datetime(self, value: datetime | None) -> str | None:
        """Format datetime as ISO 8601 string in UTC with Z suffix.

        Naive values are assumed to already be UTC (as written by
        TimestampMixin and read back from SQLite).
        """
        if value is None:
            return None
        if value.tzinfo is not None:
            utc_value = value.astimezone(UTC)
        else:
            utc_value = value.replace(tzinfo=UTC)
        return utc_value.replace(microsecond=0).isoformat().replace("+00:00", "Z")
