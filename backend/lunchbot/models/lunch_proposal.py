"""Lunch proposal ORM model."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from lunchbot.models.base import Base, CreatedAtMixin, IdMixin, OwnedMixin


class LunchProposal(Base, IdMixin, CreatedAtMixin, OwnedMixin):
    """Randomly picked place proposed for lunch."""

    __tablename__ = "lunch_proposals"

    place_id: Mapped[str] = mapped_column(ForeignKey("lunch_places.id", ondelete="CASCADE"), index=True, nullable=False)
    channel: Mapped[str | None] = mapped_column(String(255), nullable=True)
