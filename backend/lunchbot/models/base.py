"""Declarative base and shared column mixins."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def new_record_id() -> str:
    """Return a fresh 32-character hex identifier."""

    return uuid4().hex


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


class IdMixin:
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_record_id)


class CreatedAtMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )


class OwnedMixin:
    # Internal user id of the identity the record was written as.
    owner_id: Mapped[str | None] = mapped_column(String(32), nullable=True)
