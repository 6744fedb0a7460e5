"""SQLAlchemy metadata registry import for Alembic."""

from lunchbot.models import LunchPlace, LunchProposal, UserAuth, UserProfile
from lunchbot.models.base import Base

__all__ = ["Base", "LunchPlace", "LunchProposal", "UserAuth", "UserProfile"]
