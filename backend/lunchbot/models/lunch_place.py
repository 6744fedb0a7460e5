"""Lunch place ORM model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from lunchbot.models.base import Base, CreatedAtMixin, IdMixin, OwnedMixin


class LunchPlace(Base, IdMixin, CreatedAtMixin, OwnedMixin):
    """Place suggested by a workspace member."""

    __tablename__ = "lunch_places"

    name: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
