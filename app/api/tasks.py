"""Task API endpoints."""

from fastapi import APIRouter, Query, status

from app.api.deps import CurrentUser, DBSession, TaskId
from app.api.errors import ValidationFailed
from app.models.task import (
    SuccessResponse,
    TaskCreate,
    TaskEnvelope,
    TaskListEnvelope,
    TaskResponse,
    TaskUpdate,
)
from app.results import Err
from app.services.tasks import (
    create_task,
    delete_task,
    get_task,
    list_tasks,
    update_task,
)

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])


@router.get("", response_model=TaskListEnvelope)
def list_tasks_endpoint(
    session: DBSession,
    current_user: CurrentUser,
    completed: bool | None = Query(default=None, description="Filter by completion status"),
) -> TaskListEnvelope:
    """List all tasks of the authenticated user."""
    tasks = list_tasks(session, current_user.id, completed)
    return TaskListEnvelope(
        success="Tasks fetched successfully",
        tasks=[TaskResponse.model_validate(t) for t in tasks],
    )


@router.post("", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
def create_task_endpoint(
    session: DBSession,
    current_user: CurrentUser,
    task_data: TaskCreate,
) -> TaskEnvelope:
    """Create a new task for the authenticated user."""
    result = create_task(session, current_user.id, task_data)
    if isinstance(result, Err):
        raise ValidationFailed(result.error)
    return TaskEnvelope(
        success="Task created successfully",
        task=TaskResponse.model_validate(result.value),
    )


@router.get("/{task_id}", response_model=TaskEnvelope)
def get_task_endpoint(
    session: DBSession,
    current_user: CurrentUser,
    task_id: TaskId,
) -> TaskEnvelope:
    """Get a specific task by ID."""
    task = get_task(session, current_user.id, task_id)
    return TaskEnvelope(
        success="Task fetched successfully",
        task=TaskResponse.model_validate(task),
    )


@router.put("/{task_id}", response_model=TaskEnvelope)
def update_task_endpoint(
    session: DBSession,
    current_user: CurrentUser,
    task_id: TaskId,
    task_data: TaskUpdate,
) -> TaskEnvelope:
    """Update the supplied fields of a task."""
    result = update_task(session, current_user.id, task_id, task_data)
    if isinstance(result, Err):
        raise ValidationFailed(result.error)
    return TaskEnvelope(
        success="Task updated successfully",
        task=TaskResponse.model_validate(result.value),
    )


@router.delete("/{task_id}", response_model=SuccessResponse)
def delete_task_endpoint(
    session: DBSession,
    current_user: CurrentUser,
    task_id: TaskId,
) -> SuccessResponse:
    """Delete a task."""
    delete_task(session, current_user.id, task_id)
    return SuccessResponse(success="Task deleted successfully")
