"""SQLModel entities for the Task Manager application."""

from app.models.access_token import AccessToken
from app.models.task import Task
from app.models.user import User

__all__ = [
    "User",
    "Task",
    "AccessToken",
]
