"""Task entity model."""

from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import StrictBool
from sqlalchemy import Column, Text
from sqlmodel import Field, Relationship, SQLModel

from app.models.base import timestamp_field, utc_now

if TYPE_CHECKING:
    from app.models.user import User

TITLE_MAX_LENGTH = 255


class Task(SQLModel, table=True):
    """Task database model."""

    __tablename__ = "tasks"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    title: str = Field(max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    completed: bool = Field(default=False)
    created_at: datetime = timestamp_field(default_factory=utc_now)
    updated_at: datetime = timestamp_field(default_factory=utc_now)

    user: "User" = Relationship(back_populates="tasks")


class TaskCreate(SQLModel):
    """Schema for task creation.

    ``title`` is checked by the task service so that a missing title yields
    the same field error as a blank one.
    """

    title: str | None = None
    description: str | None = None


class TaskUpdate(SQLModel):
    """Schema for partial task update. Only fields sent by the client are applied."""

    title: str | None = None
    description: str | None = None
    completed: StrictBool | None = None


class TaskResponse(SQLModel):
    """Schema for task response."""

    id: int
    user_id: int
    title: str
    description: str | None
    completed: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TaskEnvelope(SQLModel):
    """Single task response body."""

    success: str
    task: TaskResponse


class TaskListEnvelope(SQLModel):
    """Task list response body."""

    success: str
    tasks: list[TaskResponse]


class SuccessResponse(SQLModel):
    """Body for operations that return no entity."""

    success: str
