"""Auth domain schemas.

Request and response schemas for authentication operations.
"""

from pydantic import BaseModel, EmailStr, Field


class AuthRegister(BaseModel):
    """Request schema for user registration."""

    email: EmailStr
    password: str = Field(min_length=8)


class EmailPasswordLoginRequest(BaseModel):
    """Request schema for email/password login."""

    email: EmailStr
    password: str = Field(min_length=1)


class AuthMessage(BaseModel):
    """Generic auth message response."""

    message: str
