"""Client-side domain objects parsed from API payloads."""

from datetime import datetime

from pydantic import BaseModel


class User(BaseModel):
    """Authenticated user as returned by the API."""

    id: int
    name: str
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Task(BaseModel):
    """Locally cached copy of a server task.

    Optimistic placeholders use negative ids and carry no timestamps until
    the server copy replaces them.
    """

    id: int
    title: str
    description: str | None = None
    completed: bool = False
    user_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_placeholder(self) -> bool:
        return self.id < 0
