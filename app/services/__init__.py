"""Services module.

Services:
- auth.py: Registration, credential checks, token issuance and revocation
- tasks.py: Task CRUD scoped to the owning user
"""

from app.services.tasks import TaskNotFoundError

__all__ = [
    "TaskNotFoundError",
]
