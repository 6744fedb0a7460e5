"""ORM models package exports."""

from lunchbot.models.lunch_place import LunchPlace
from lunchbot.models.lunch_proposal import LunchProposal
from lunchbot.models.user import UserAuth, UserProfile

__all__ = [
    "LunchPlace",
    "LunchProposal",
    "UserAuth",
    "UserProfile",
]
