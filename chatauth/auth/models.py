"""Auth domain models.

Server-side session records. The cookie carries only a signed reference
to a row here; the row carries only the user identifier.
"""

import uuid
from datetime import datetime

from sqlmodel import Field, SQLModel

from chatauth.core.mixins import utc_now


class AuthSession(SQLModel, table=True):
    __tablename__: str = "auth_sessions"

    id: str = Field(primary_key=True, max_length=64)
    user_id: uuid.UUID = Field(
        index=True, foreign_key="users.id", ondelete="CASCADE"
    )
    created_at: datetime = Field(default_factory=utc_now)
    expires_at: datetime = Field(index=True)
