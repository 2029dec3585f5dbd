"""API client for the Task Manager backend.

Components:
- credentials.py: Token storage (in-memory or JSON file)
- transport.py: HTTP transport attaching the bearer token, typed errors
- session.py: Current-user state (login, register, logout, session restore)
- repository.py: Task CRUD calls
- controller.py: Task list with optimistic updates and reload-on-failure
"""

from app.client.controller import (
    Notification,
    NotificationLevel,
    SyncState,
    TaskCounts,
    TaskDraft,
    TaskFilter,
    TaskListController,
)
from app.client.credentials import (
    TOKEN_KEY,
    CredentialStore,
    FileCredentialStore,
    MemoryCredentialStore,
)
from app.client.models import Task, User
from app.client.repository import TaskRepository
from app.client.session import AuthSession
from app.client.transport import ApiError, ApiTransport, ErrorKind, NetworkError

__all__ = [
    # Storage and transport
    "TOKEN_KEY",
    "CredentialStore",
    "FileCredentialStore",
    "MemoryCredentialStore",
    "ApiTransport",
    "ApiError",
    "NetworkError",
    "ErrorKind",
    # Domain objects
    "Task",
    "User",
    # Session and tasks
    "AuthSession",
    "TaskRepository",
    "TaskListController",
    "TaskDraft",
    "TaskFilter",
    "TaskCounts",
    "SyncState",
    "Notification",
    "NotificationLevel",
]
