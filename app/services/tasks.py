"""Task service for CRUD operations scoped to the owning user."""

import logging

from sqlmodel import Session, select

from app.models.base import utc_now
from app.models.task import TITLE_MAX_LENGTH, Task, TaskCreate, TaskUpdate
from app.results import Err, FieldErrors, Ok, Result, add_error

logger = logging.getLogger(__name__)

# Upper bound of the INTEGER primary key column
MAX_TASK_ID = 2**31 - 1


class TaskNotFoundError(Exception):
    """Raised when a task does not exist or belongs to another user."""

    def __init__(self, task_id: int | str) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


def validate_title(title: str | None, errors: FieldErrors) -> None:
    """Title must be present, non-blank and at most TITLE_MAX_LENGTH characters."""
    if title is None or not title.strip():
        add_error(errors, "title", "The title field is required.")
    elif len(title.strip()) > TITLE_MAX_LENGTH:
        add_error(
            errors,
            "title",
            f"The title field must not be greater than {TITLE_MAX_LENGTH} characters.",
        )


def clean_description(description: str | None) -> str | None:
    """Trim a description; blank descriptions are stored as null."""
    if description is None:
        return None
    return description.strip() or None


def list_tasks(
    session: Session,
    user_id: int,
    completed: bool | None = None,
) -> list[Task]:
    """Get all tasks owned by the user in insertion order."""
    query = select(Task).where(Task.user_id == user_id)
    if completed is not None:
        query = query.where(Task.completed == completed)
    query = query.order_by(Task.id)
    return list(session.exec(query).all())


def create_task(session: Session, user_id: int, task_data: TaskCreate) -> Result[Task, FieldErrors]:
    """Create a new task for the specified user. New tasks are never completed."""
    errors: FieldErrors = {}
    validate_title(task_data.title, errors)
    if errors:
        return Err(errors)

    task = Task(
        user_id=user_id,
        title=task_data.title.strip(),
        description=clean_description(task_data.description),
        completed=False,
    )
    session.add(task)
    session.commit()
    session.refresh(task)

    logger.info("Task created", extra={"task_id": task.id, "user_id": user_id})
    return Ok(task)


def get_task(session: Session, user_id: int, task_id: int) -> Task:
    """
    Get a specific task owned by the user.
    Raises TaskNotFoundError for unknown ids and for tasks of other users.
    """
    if not 0 < task_id <= MAX_TASK_ID:
        raise TaskNotFoundError(task_id)
    task = session.exec(
        select(Task).where(Task.id == task_id, Task.user_id == user_id)
    ).first()
    if task is None:
        raise TaskNotFoundError(task_id)
    return task


def update_task(
    session: Session, user_id: int, task_id: int, task_data: TaskUpdate
) -> Result[Task, FieldErrors]:
    """Apply the supplied fields to a task owned by the user."""
    task = get_task(session, user_id, task_id)
    update_data = task_data.model_dump(exclude_unset=True)

    errors: FieldErrors = {}
    if "title" in update_data:
        validate_title(update_data["title"], errors)
    if "completed" in update_data and update_data["completed"] is None:
        add_error(errors, "completed", "The completed field is required.")
    if errors:
        return Err(errors)

    if "title" in update_data:
        update_data["title"] = update_data["title"].strip()
    if "description" in update_data:
        update_data["description"] = clean_description(update_data["description"])

    for key, value in update_data.items():
        setattr(task, key, value)

    task.updated_at = utc_now()
    session.add(task)
    session.commit()
    session.refresh(task)

    logger.info(
        "Task updated",
        extra={"task_id": task.id, "user_id": user_id, "fields": sorted(update_data)},
    )
    return Ok(task)


def delete_task(session: Session, user_id: int, task_id: int) -> None:
    """Permanently delete a task owned by the user."""
    task = get_task(session, user_id, task_id)
    session.delete(task)
    session.commit()
    logger.info("Task deleted", extra={"task_id": task_id, "user_id": user_id})
