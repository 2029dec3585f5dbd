"""Command-line front end for the Task Manager API.

Usage:
    taskapp register "Ana" ana@x.com
    taskapp login ana@x.com
    taskapp whoami
    taskapp list --filter pending
    taskapp add "Buy milk" --description "Two litres"
    taskapp edit 3 --title "Buy oat milk"
    taskapp toggle 3
    taskapp delete 3
    taskapp logout

Passwords are prompted for unless --password is given.

Environment variables:
    TASKAPP_API_URL: API base URL (default: http://localhost:8000/api)
    TASKAPP_CREDENTIALS: Token file (default: ~/.config/taskapp/credentials.json)
    TASKAPP_TIMEOUT: Request timeout in seconds (default: 10)
"""

import argparse
import asyncio
import getpass
import logging
import sys
from collections.abc import Callable

import httpx

from app.client.config import get_client_settings
from app.client.controller import (
    Notification,
    NotificationLevel,
    TaskDraft,
    TaskFilter,
    TaskListController,
)
from app.client.credentials import CredentialStore, FileCredentialStore
from app.client.models import Task
from app.client.repository import TaskRepository
from app.client.session import AuthSession
from app.client.transport import ApiError, ApiTransport
from app.config import configure_logging

logger = logging.getLogger(__name__)

AUTH_COMMANDS = {"register", "login"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskapp",
        description="Manage your tasks from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    register = commands.add_parser("register", help="Create an account")
    register.add_argument("name")
    register.add_argument("email")
    register.add_argument("--password", default=None)

    login = commands.add_parser("login", help="Sign in")
    login.add_argument("email")
    login.add_argument("--password", default=None)

    commands.add_parser("logout", help="Sign out")
    commands.add_parser("whoami", help="Show the signed-in user")

    list_cmd = commands.add_parser("list", help="List tasks")
    list_cmd.add_argument(
        "--filter",
        choices=[f.value for f in TaskFilter],
        default=TaskFilter.ALL.value,
    )

    add = commands.add_parser("add", help="Create a task")
    add.add_argument("title")
    add.add_argument("--description", default=None)

    edit = commands.add_parser("edit", help="Change a task's title or description")
    edit.add_argument("task_id", type=int)
    edit.add_argument("--title", default=None)
    edit.add_argument("--description", default=None)

    toggle = commands.add_parser("toggle", help="Mark a task done or not done")
    toggle.add_argument("task_id", type=int)

    delete = commands.add_parser("delete", help="Delete a task")
    delete.add_argument("task_id", type=int)
    delete.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")

    return parser


def format_task(task: Task) -> str:
    mark = "[x]" if task.completed else "[ ]"
    line = f"{mark} {task.id:>4}  {task.title}"
    if task.description:
        line += f"\n           {task.description}"
    return line


def print_notification(notification: Notification) -> None:
    stream = sys.stderr if notification.level == NotificationLevel.ERROR else sys.stdout
    print(f"{notification.title}: {notification.message}", file=stream)


def print_api_error(error: ApiError) -> None:
    print(error.message, file=sys.stderr)
    for field, messages in error.errors.items():
        for message in messages:
            print(f"  {field}: {message}", file=sys.stderr)


async def run(
    args: argparse.Namespace,
    *,
    store: CredentialStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    base_url: str | None = None,
    confirm: Callable[[str], str] = input,
) -> int:
    """Execute one parsed command. Returns the process exit code."""
    settings = get_client_settings()
    store = store or FileCredentialStore(settings.CREDENTIALS_PATH)

    async with ApiTransport(
        base_url or settings.API_URL,
        store,
        timeout=settings.TIMEOUT_SECONDS,
        transport=transport,
    ) as api:
        session = AuthSession(api, store)

        if args.command in AUTH_COMMANDS:
            password = args.password or getpass.getpass("Password: ")
            try:
                if args.command == "register":
                    confirmation = args.password or getpass.getpass("Confirm password: ")
                    user = await session.register(args.name, args.email, password, confirmation)
                else:
                    user = await session.login(args.email, password)
            except ApiError as e:
                print_api_error(e)
                return 1
            print(f"Signed in as {user.name} <{user.email}>")
            return 0

        user = await session.check_session()
        if args.command == "logout":
            await session.logout()
            print("Signed out")
            return 0
        if user is None:
            print("Not signed in. Run `taskapp login` first.", file=sys.stderr)
            return 1
        if args.command == "whoami":
            print(f"{user.name} <{user.email}>")
            return 0

        controller = TaskListController(TaskRepository(api), notify=print_notification)
        if not await controller.load():
            return 1

        if args.command == "list":
            controller.set_filter(args.filter)
            for task in controller.visible_tasks:
                print(format_task(task))
            counts = controller.counts
            print(f"{counts.total} total, {counts.pending} pending, {counts.completed} completed")
            return 0

        if args.command == "add":
            result = await controller.save(TaskDraft(title=args.title, description=args.description))
            return 0 if result.is_ok else 1

        task = controller.find(args.task_id)
        if task is None:
            print(f"Task {args.task_id} not found", file=sys.stderr)
            return 1

        if args.command == "toggle":
            return 0 if await controller.toggle(task) else 1

        if args.command == "edit":
            draft = controller.open_editor(task)
            if args.title is not None:
                draft.title = args.title
            if args.description is not None:
                draft.description = args.description
            result = await controller.save(draft)
            return 0 if result.is_ok else 1

        if args.command == "delete":
            controller.request_delete(task.id)
            if not args.yes:
                answer = confirm(f"Delete task {task.id} \"{task.title}\"? [y/N] ")
                if answer.strip().lower() not in ("y", "yes"):
                    controller.cancel_delete()
                    print("Cancelled")
                    return 0
            return 0 if await controller.confirm_delete(task.id) else 1

    return 2


def main(argv: list[str] | None = None) -> int:
    """Main entrypoint for the task CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
