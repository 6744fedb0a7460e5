"""Engine and session factory construction."""

from __future__ import annotations

import logging

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from lunchbot.config import Settings

logger = logging.getLogger(__name__)


def create_db_engine(settings: Settings) -> Engine:
    """Build the engine for the configured database.

    PostgreSQL connections are pinned to the application's schema so every
    query resolves unqualified table names inside ``app_<app_name>`` first.
    In-memory SQLite shares one connection so all sessions see the same data.
    """

    url = settings.database_url
    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/").endswith("sqlite:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, future=True, **kwargs)

    engine = create_engine(url, future=True, pool_pre_ping=True)
    schema_name = settings.schema_name

    @event.listens_for(engine, "connect")
    def _set_search_path(dbapi_connection, _connection_record) -> None:
        # Outside a transaction, otherwise the pool's reset-on-return rolls it back.
        existing_autocommit = dbapi_connection.autocommit
        dbapi_connection.autocommit = True
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute(f'SET SESSION search_path TO "{schema_name}",public')
        finally:
            cursor.close()
            dbapi_connection.autocommit = existing_autocommit
        logger.debug("Connection pinned to schema %s", schema_name)

    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Return the session factory bound to ``engine``."""

    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
