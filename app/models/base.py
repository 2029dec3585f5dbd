"""Timestamp helpers shared by the table models."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime
from sqlmodel import Field


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive values (SQLite drops the offset when reading back)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def timestamp_field(**kwargs: Any) -> Any:
    """Field stored in a timezone-aware DATETIME column."""
    return Field(sa_type=DateTime(timezone=True), **kwargs)
