"""User entity model."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlmodel import Field, Relationship, SQLModel

from app.models.base import timestamp_field, utc_now

if TYPE_CHECKING:
    from app.models.access_token import AccessToken
    from app.models.task import Task


class User(SQLModel, table=True):
    """User database model."""

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    email: str = Field(max_length=255, unique=True, index=True)
    hashed_password: str = Field(max_length=255)
    created_at: datetime = timestamp_field(default_factory=utc_now)
    updated_at: datetime = timestamp_field(default_factory=utc_now)

    tasks: list["Task"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
    access_tokens: list["AccessToken"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class UserCreate(SQLModel):
    """Schema for user registration.

    Fields are optional at the schema level so that missing values are
    reported through the registration field-error map.
    """

    name: str | None = None
    email: str | None = None
    password: str | None = None
    password_confirmation: str | None = None


class UserLogin(SQLModel):
    """Schema for user login."""

    email: str | None = None
    password: str | None = None


class UserResponse(SQLModel):
    """Schema for user response (no password)."""

    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(SQLModel):
    """Schema for authentication response."""

    user: UserResponse
    token: str
