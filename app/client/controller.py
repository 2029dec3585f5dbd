"""Task list state with optimistic mutations.

The controller keeps a local copy of the user's tasks and applies every
mutation to it before the server answers. Each task carries a sync state:

    absent     -> creating   -> confirmed | absent
    confirmed  -> toggling   -> confirmed (or reset by reload)
    confirmed  -> removing   -> absent    (or reset by reload)

When any mutation fails, local optimism is discarded and the full list is
reloaded from the server instead of undoing the single change, so several
in-flight edits can never leave the list drifting from the server.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from app.client.models import Task
from app.client.repository import TaskRepository
from app.client.transport import ApiError, ErrorKind
from app.results import Err, FieldErrors, Ok, Result

logger = logging.getLogger(__name__)


class TaskFilter(str, Enum):
    """Which tasks the list shows."""

    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"


class SyncState(str, Enum):
    """Client view of a single task's lifecycle."""

    ABSENT = "absent"
    CREATING = "creating"
    CONFIRMED = "confirmed"
    TOGGLING = "toggling"
    REMOVING = "removing"


_TRANSITIONS: dict[SyncState, frozenset[SyncState]] = {
    SyncState.ABSENT: frozenset({SyncState.CREATING}),
    SyncState.CREATING: frozenset({SyncState.CONFIRMED, SyncState.ABSENT}),
    SyncState.CONFIRMED: frozenset({SyncState.TOGGLING, SyncState.REMOVING}),
    SyncState.TOGGLING: frozenset({SyncState.TOGGLING, SyncState.CONFIRMED, SyncState.REMOVING}),
    SyncState.REMOVING: frozenset({SyncState.ABSENT}),
}


class InvalidTransitionError(RuntimeError):
    """Raised when a task is moved to a state its current state cannot reach."""


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """Transient message for the user (a toast in a graphical client)."""

    level: NotificationLevel
    title: str
    message: str


Notifier = Callable[[Notification], None]


@dataclass(frozen=True)
class TaskCounts:
    total: int
    completed: int
    pending: int


@dataclass
class TaskDraft:
    """Editable copy of a task. ``id`` is None for a task not yet created."""

    title: str = ""
    description: str | None = None
    id: int | None = None

    @classmethod
    def from_task(cls, task: Task) -> "TaskDraft":
        return cls(title=task.title, description=task.description, id=task.id)


def filter_tasks(tasks: list[Task], task_filter: TaskFilter) -> list[Task]:
    """Return the tasks matching a filter, preserving order."""
    if task_filter == TaskFilter.PENDING:
        return [task for task in tasks if not task.completed]
    if task_filter == TaskFilter.COMPLETED:
        return [task for task in tasks if task.completed]
    return list(tasks)


def count_tasks(tasks: list[Task]) -> TaskCounts:
    completed = sum(1 for task in tasks if task.completed)
    return TaskCounts(total=len(tasks), completed=completed, pending=len(tasks) - completed)


def _error_map(error: ApiError) -> FieldErrors:
    if error.kind == ErrorKind.VALIDATION and error.errors:
        return error.errors
    return {"message": [error.message]}


class TaskListController:
    """Holds the task list, the active filter and the edit/delete dialogs.

    Args:
        repository: Task repository used for all server calls
        notify: Callback receiving user-facing notifications
    """

    def __init__(self, repository: TaskRepository, notify: Notifier | None = None) -> None:
        self.repository = repository
        self._notify = notify or (lambda notification: None)

        self.tasks: list[Task] = []
        self.filter = TaskFilter.ALL
        self.loading = False

        # Two-phase delete and edit surface
        self.pending_delete_id: int | None = None
        self.editor_open = False
        self.draft: TaskDraft | None = None

        self._states: dict[int, SyncState] = {}
        # Bumped on every local mutation of a task; a server answer is only
        # applied if the task was not touched again while it was in flight.
        self._revisions: dict[int, int] = {}
        # Bumped on every reload; answers from before a reload are stale.
        self._epoch = 0
        self._next_placeholder_id = -1

    # ---- derived views ----

    @property
    def visible_tasks(self) -> list[Task]:
        return filter_tasks(self.tasks, self.filter)

    @property
    def counts(self) -> TaskCounts:
        return count_tasks(self.tasks)

    def set_filter(self, task_filter: TaskFilter | str) -> None:
        self.filter = TaskFilter(task_filter)

    def sync_state(self, task_id: int) -> SyncState:
        return self._states.get(task_id, SyncState.ABSENT)

    def find(self, task_id: int) -> Task | None:
        return next((task for task in self.tasks if task.id == task_id), None)

    # ---- state bookkeeping ----

    def _set_state(self, task_id: int, state: SyncState) -> None:
        current = self.sync_state(task_id)
        if state not in _TRANSITIONS[current]:
            raise InvalidTransitionError(
                f"Task {task_id} cannot go from {current.value} to {state.value}"
            )
        if state == SyncState.ABSENT:
            self._states.pop(task_id, None)
        else:
            self._states[task_id] = state

    def _touch(self, task_id: int) -> int:
        revision = self._revisions.get(task_id, 0) + 1
        self._revisions[task_id] = revision
        return revision

    def _is_current(self, task_id: int, revision: int, epoch: int) -> bool:
        return epoch == self._epoch and self._revisions.get(task_id) == revision

    def _replace(self, task_id: int, task: Task) -> None:
        self.tasks = [task if item.id == task_id else item for item in self.tasks]

    def _remove(self, task_id: int) -> None:
        self.tasks = [item for item in self.tasks if item.id != task_id]

    def _error(self, title: str, error: ApiError) -> None:
        self._notify(Notification(NotificationLevel.ERROR, title, error.message))

    # ---- operations ----

    async def load(self) -> bool:
        """Replace the local list with the server's. On failure local state is kept."""
        self.loading = True
        try:
            tasks = await self.repository.list()
        except ApiError as e:
            logger.warning(f"Loading tasks failed: {e.message}")
            self._error("Could not load tasks", e)
            return False
        finally:
            self.loading = False

        self.tasks = tasks
        self._states = {task.id: SyncState.CONFIRMED for task in tasks}
        self._epoch += 1
        return True

    refresh = load

    async def toggle(self, task: Task) -> bool:
        """Flip ``completed`` locally, then persist it.

        Returns True when the server accepted the change.
        """
        current = self.find(task.id)
        if current is None or current.is_placeholder:
            return False
        if self.sync_state(task.id) not in (SyncState.CONFIRMED, SyncState.TOGGLING):
            return False

        completed = not current.completed
        self._replace(task.id, current.model_copy(update={"completed": completed}))
        self._set_state(task.id, SyncState.TOGGLING)
        revision = self._touch(task.id)
        epoch = self._epoch

        try:
            saved = await self.repository.update(task.id, completed=completed)
        except ApiError as e:
            self._error("Could not update task", e)
            await self.load()
            return False

        if self._is_current(task.id, revision, epoch):
            self._replace(task.id, saved)
            self._set_state(task.id, SyncState.CONFIRMED)
        return True

    def request_delete(self, task_id: int) -> bool:
        """First phase of delete: remember the task awaiting confirmation."""
        task = self.find(task_id)
        if task is None or task.is_placeholder:
            return False
        self.pending_delete_id = task_id
        return True

    def cancel_delete(self) -> None:
        self.pending_delete_id = None

    async def confirm_delete(self, task_id: int | None = None) -> bool:
        """Second phase of delete: remove locally, then on the server.

        Only the task passed to ``request_delete`` can be confirmed.
        """
        target = self.pending_delete_id
        self.pending_delete_id = None
        if target is None or (task_id is not None and task_id != target):
            return False
        if self.find(target) is None:
            return False

        self._set_state(target, SyncState.REMOVING)
        self._remove(target)
        self._touch(target)

        try:
            await self.repository.delete(target)
        except ApiError as e:
            self._error("Could not delete task", e)
            await self.load()
            return False

        if self.sync_state(target) == SyncState.REMOVING:
            self._set_state(target, SyncState.ABSENT)
        else:
            # A reload ran while the delete was in flight and brought it back
            self._remove(target)
            self._states.pop(target, None)
        self._notify(Notification(NotificationLevel.SUCCESS, "Deleted", "The task was deleted"))
        return True

    def open_editor(self, task: Task | None = None) -> TaskDraft:
        self.draft = TaskDraft.from_task(task) if task is not None else TaskDraft()
        self.editor_open = True
        return self.draft

    def close_editor(self) -> None:
        self.editor_open = False
        self.draft = None

    async def save(self, draft: TaskDraft) -> Result[Task, FieldErrors]:
        """Create (no id) or update (with id) a task from a draft.

        A blank title is rejected locally without any request. On success the
        editor is closed and the list is reloaded.
        """
        title = (draft.title or "").strip()
        if not title:
            self._notify(
                Notification(NotificationLevel.WARNING, "Title required", "Please enter a title")
            )
            return Err({"title": ["The title field is required."]})
        description = (draft.description or "").strip() or None

        if draft.id is None:
            result = await self._create(title, description)
        else:
            result = await self._update(draft.id, title, description)

        if isinstance(result, Ok):
            self.close_editor()
            await self.load()
        return result

    async def _create(self, title: str, description: str | None) -> Result[Task, FieldErrors]:
        placeholder = Task(id=self._next_placeholder_id, title=title, description=description)
        self._next_placeholder_id -= 1
        self.tasks = [*self.tasks, placeholder]
        self._set_state(placeholder.id, SyncState.CREATING)

        try:
            task = await self.repository.create(title, description)
        except ApiError as e:
            if self.find(placeholder.id) is not None:
                self._remove(placeholder.id)
                self._set_state(placeholder.id, SyncState.ABSENT)
            self._error("Could not create task", e)
            await self.load()
            return Err(_error_map(e))

        if self.find(placeholder.id) is not None:
            self._replace(placeholder.id, task)
            self._set_state(placeholder.id, SyncState.CONFIRMED)
            self._states[task.id] = self._states.pop(placeholder.id)
        self._notify(Notification(NotificationLevel.SUCCESS, "Created", "The task was created"))
        return Ok(task)

    async def _update(
        self, task_id: int, title: str, description: str | None
    ) -> Result[Task, FieldErrors]:
        try:
            task = await self.repository.update(task_id, title=title, description=description)
        except ApiError as e:
            self._error("Could not update task", e)
            return Err(_error_map(e))

        self._notify(Notification(NotificationLevel.SUCCESS, "Updated", "The task was updated"))
        return Ok(task)
