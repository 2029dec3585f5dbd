"""Issued bearer token records."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel

from app.models.base import as_utc, timestamp_field, utc_now

if TYPE_CHECKING:
    from app.models.user import User


class AccessToken(SQLModel, table=True):
    """One row per issued token, keyed by the token's ``jti`` claim.

    A token is only honoured while its row exists and ``revoked_at`` is unset.
    """

    __tablename__ = "access_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = timestamp_field(default_factory=utc_now)
    expires_at: datetime | None = timestamp_field(default=None)
    revoked_at: datetime | None = timestamp_field(default=None)

    user: "User" = Relationship(back_populates="access_tokens")

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return as_utc(now or utc_now()) >= as_utc(self.expires_at)
