from datetime import datetime
from typing import Optional
from uuid import UUID
from sqlmodel import SQLModel, Field

from app.db.schema import UserRole
from app.models.fields import NonBlankStr, NormalizedEmail


class UserRead(SQLModel):
    id: UUID
    email: str
    name: str
    role: UserRole
    is_active: bool
    created_at: Optional[datetime] = None


class UserSignin(SQLModel):
    email: NormalizedEmail = Field(
        description="Registered email address of the user."
    )
    password: str = Field(
        min_length=8,
        max_length=72,
        description="Plain text password."
    )


class UserCreate(SQLModel):
    """
    DTO for customer registration.
    Administrators are never created through the public API; see seed.py.
    """
    name: NonBlankStr = Field(
        max_length=100,
        description="Display name."
    )
    email: NormalizedEmail = Field(
        description="Unique email address for signin."
    )
    password: str = Field(
        min_length=8,
        max_length=72,
        description="Plain text password."
    )


class Token(SQLModel):
    access_token: str
    refresh_token: str
    token_type: str
    user: UserRead


class TokenAccess(SQLModel):
    access_token: str


class TokenRefresh(SQLModel):
    refresh_token: str


class TokenData(SQLModel):
    user_id: UUID
