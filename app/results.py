"""Tagged result values for operations that can fail validation.

Validation failures are ordinary outcomes, not exceptional ones, so the
services return ``Ok(value)`` or ``Err(field_errors)`` instead of raising.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")

# field name -> list of human readable messages
FieldErrors = dict[str, list[str]]


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying an error payload."""

    error: E

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok[T], Err[E]]


def add_error(errors: FieldErrors, field: str, message: str) -> None:
    """Append a message to the error list of a field."""
    errors.setdefault(field, []).append(message)


def summarize(errors: FieldErrors) -> str:
    """Build a one-line summary of a field error map.

    The first message is shown, followed by a count of the remaining ones,
    e.g. ``"The title field is required. (and 1 more error)"``.
    """
    messages = [message for field_messages in errors.values() for message in field_messages]
    if not messages:
        return "The given data was invalid."
    summary = messages[0]
    remaining = len(messages) - 1
    if remaining == 1:
        summary += " (and 1 more error)"
    elif remaining > 1:
        summary += f" (and {remaining} more errors)"
    return summary
