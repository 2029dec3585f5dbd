"""Typed wrappers over the /tasks endpoints."""

from typing import Any

from app.client.models import Task
from app.client.transport import ApiTransport

TASKS_PATH = "/tasks"


class TaskRepository:
    """CRUD operations against the signed-in user's tasks.

    Every method raises ``ApiError`` (or ``NetworkError``) on failure.
    """

    def __init__(self, transport: ApiTransport) -> None:
        self.transport = transport

    async def list(self) -> list[Task]:
        body = await self.transport.get(TASKS_PATH)
        return [Task.model_validate(item) for item in body.get("tasks") or []]

    async def create(self, title: str, description: str | None = None) -> Task:
        body = await self.transport.post(
            TASKS_PATH, json={"title": title, "description": description}
        )
        return Task.model_validate(body["task"])

    async def get(self, task_id: int) -> Task:
        body = await self.transport.get(f"{TASKS_PATH}/{task_id}")
        return Task.model_validate(body["task"])

    async def update(self, task_id: int, **fields: Any) -> Task:
        """Partial update; only the given fields are sent."""
        body = await self.transport.put(f"{TASKS_PATH}/{task_id}", json=fields)
        return Task.model_validate(body["task"])

    async def delete(self, task_id: int) -> None:
        await self.transport.delete(f"{TASKS_PATH}/{task_id}")
