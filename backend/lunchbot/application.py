"""Application factory; importing this module builds nothing."""

from contextlib import asynccontextmanager
import logging
import os

from fastapi import FastAPI

from lunchbot.bot import LunchBot, build_lunch_bot
from lunchbot.config import Settings, get_settings
from lunchbot.db.session import create_db_engine, create_session_factory
from lunchbot.routers import slack
from lunchbot.services.schedule import build_scheduler

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.lunchbot_debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Settings | None = None, *, bot: LunchBot | None = None) -> FastAPI:
    """Build the application with one bot runtime for its whole lifetime.

    The lunch scheduler lives inside the process, so ``ENABLE_SCHEDULER``
    must be on for exactly one worker of a multi-worker deployment.
    """

    settings = settings or get_settings()
    configure_logging(settings)
    if bot is None:
        bot = build_lunch_bot(settings, create_session_factory(create_db_engine(settings)))

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        scheduler = None
        if settings.enable_scheduler:
            scheduler = build_scheduler(bot)
            scheduler.start()
            logger.info("Lunch schedule %r started in pid %s.", settings.lunch_schedule, os.getpid())
        try:
            yield
        finally:
            if scheduler is not None:
                scheduler.shutdown(wait=False)
            bot.notifier.close()

    app = FastAPI(title="Lunch Bot", version="0.1.0", lifespan=lifespan)
    app.state.lunch_bot = bot
    app.include_router(slack.router, tags=["slack"])

    @app.get("/health")
    def health() -> dict[str, str]:
        """Simple health check endpoint."""

        return {"status": "ok"}

    return app
