"""User domain models.

SQLModel table definition for User.
"""

import uuid
from datetime import datetime

from pydantic import EmailStr
from sqlmodel import Field, SQLModel

from chatauth.core.mixins import TimestampMixin


class User(TimestampMixin, SQLModel, table=True):
    """User database model.

    A record is local (password_hash set), federated (external_id set),
    or both. Neither password_hash nor external_id may ever be exposed
    in API responses.
    """

    __tablename__: str = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: EmailStr = Field(index=True, unique=True, max_length=255)
    # NULLs never collide, so unique holds only among federated users.
    external_id: str | None = Field(
        default=None, index=True, unique=True, max_length=255
    )
    password_hash: str | None = Field(default=None, max_length=255)

    # Profile fields captured from the identity provider
    display_name: str | None = Field(default=None, max_length=255)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    avatar_url: str | None = Field(default=None, max_length=2048)

    # Product fields, untouched by the auth flows
    is_subscribed: bool = Field(default=False)
    chat_start_time: datetime | None = Field(default=None)

    @property
    def is_local(self) -> bool:
        return self.password_hash is not None

    @property
    def is_federated(self) -> bool:
        return self.external_id is not None
