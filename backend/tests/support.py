"""Shared fixtures for lunch bot tests."""

from __future__ import annotations

import random
import unittest

from lunchbot.bot import LunchBot, build_lunch_bot
from lunchbot.config import Settings
from lunchbot.db.session import create_db_engine, create_session_factory
from lunchbot.models.base import Base
from lunchbot.schemas.records import User
from lunchbot.schemas.slack import SlackMessage
from lunchbot.services.identity import DatabaseIdentityResolver
from lunchbot.services.notifier import Notifier, WebhookError

TEST_TOKEN = "test-slash-token"


def make_settings(**overrides) -> Settings:
    values = {
        "database_url": "sqlite+pysqlite:///:memory:",
        "slack_slash_command_token": TEST_TOKEN,
        "slack_incoming_webhook": None,
        "channel_override": "",
        "default_user": "admin",
        "enable_scheduler": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class StubWebhook:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.messages: list[SlackMessage] = []

    def send(self, message: SlackMessage) -> str:
        self.messages.append(message)
        if self.fail:
            raise WebhookError("Slack webhook HTTP 500: boom")
        return "ok"


class DatabaseTestCase(unittest.TestCase):
    """Fresh in-memory database, default user and stubbed webhook per test."""

    settings_overrides: dict = {}
    create_default_user = True

    def setUp(self) -> None:
        self.settings = make_settings(**self.settings_overrides)
        self.engine = create_db_engine(self.settings)
        Base.metadata.create_all(self.engine)
        self.session_factory = create_session_factory(self.engine)
        self.db = self.session_factory()
        self.webhook = StubWebhook()
        self.bot: LunchBot = build_lunch_bot(
            self.settings,
            self.session_factory,
            notifier=Notifier(self.webhook, channel_override=self.settings.channel_override),
            rng=random.Random(1234),
        )
        self.system_user = self.create_user(self.settings.default_user) if self.create_default_user else None

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def create_user(self, username: str) -> User:
        return DatabaseIdentityResolver(self.db).create_user(username)
