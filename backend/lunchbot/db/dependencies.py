"""FastAPI dependencies for database sessions and the bot runtime."""

from collections.abc import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from lunchbot.bot import LunchBot


def get_lunch_bot(request: Request) -> LunchBot:
    return request.app.state.lunch_bot


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a session scoped to one request."""

    db = get_lunch_bot(request).session_factory()
    try:
        yield db
    finally:
        db.close()
