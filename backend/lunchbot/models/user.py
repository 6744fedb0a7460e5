"""User auth and profile ORM models."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from lunchbot.models.base import Base, CreatedAtMixin, IdMixin


class UserAuth(Base, IdMixin, CreatedAtMixin):
    """Credential row owning the internal user id."""

    __tablename__ = "auth"

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)


class UserProfile(Base):
    """Profile row mapping an internal user id to its chat username."""

    __tablename__ = "user_profiles"

    id: Mapped[str] = mapped_column(ForeignKey("auth.id", ondelete="CASCADE"), primary_key=True)
    username: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
