"""Chat user identity lookup and creation."""

from __future__ import annotations

import hashlib
import logging
import secrets
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from lunchbot.errors import IdentityError
from lunchbot.models.base import new_record_id
from lunchbot.models.user import UserAuth, UserProfile
from lunchbot.schemas.records import User

logger = logging.getLogger(__name__)

_PBKDF2_ITERATIONS = 240_000


class IdentityResolver(Protocol):
    """Protocol for mapping external chat ids to internal users."""

    def find_user(self, username: str) -> User | None:
        """Return the user for ``username`` or ``None`` when unknown."""

    def create_user(self, username: str) -> User:
        """Create and return a new user for ``username``."""


def generate_password() -> str:
    return secrets.token_urlsafe(16)


def hash_password(password: str, *, salt: str | None = None) -> str:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), _PBKDF2_ITERATIONS)
    return f"pbkdf2_sha256${_PBKDF2_ITERATIONS}${salt}${digest.hex()}"


class DatabaseIdentityResolver:
    """Identity resolver backed by the ``auth`` and ``user_profiles`` tables."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_user(self, username: str) -> User | None:
        stmt = (
            select(UserAuth.id)
            .join(UserProfile, UserProfile.id == UserAuth.id)
            .where(UserProfile.username == username)
        )
        try:
            user_id = self.db.scalar(stmt)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Unable to execute query for finding user %s", username)
            raise IdentityError(f"Unable to look up user {username}") from exc
        if user_id is None:
            return None
        return User(id=user_id, username=username)

    def create_user(self, username: str) -> User:
        auth = UserAuth(id=new_record_id(), password_hash=hash_password(generate_password()))
        try:
            self.db.add(auth)
            self.db.flush()
            self.db.add(UserProfile(id=auth.id, username=username))
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise IdentityError(f"User {username} already exists") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise IdentityError(f"Unable to create user for {username}") from exc
        logger.info('Created user "%s" for "%s".', auth.id, username)
        return User(id=auth.id, username=username)


def resolve_or_create_user(identity: IdentityResolver, username: str) -> User:
    """Return the user for ``username``, creating it on first contact."""

    user = identity.find_user(username)
    if user is not None:
        return user
    logger.info('User for slack ID "%s" does not exist. Creating...', username)
    return identity.create_user(username)
