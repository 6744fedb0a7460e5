"""Composition of the lunch bot components."""

from __future__ import annotations

import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial

from sqlalchemy.orm import Session, sessionmaker

from lunchbot.config import Settings
from lunchbot.schemas.records import RecordKind, User
from lunchbot.services.identity import DatabaseIdentityResolver
from lunchbot.services.lunch import post_lunch_proposal
from lunchbot.services.notifier import Notifier
from lunchbot.services.store import AfterSaveHooks, RecordStore


@dataclass(slots=True)
class LunchBot:
    """Settings and collaborators shared by every invocation."""

    settings: Settings
    session_factory: sessionmaker[Session]
    notifier: Notifier
    hooks: AfterSaveHooks
    rng: random.Random = field(default_factory=random.Random)

    def store_for(self, db: Session, user: User) -> RecordStore:
        return RecordStore(db, user_id=user.id, hooks=self.hooks)

    def identity(self, db: Session) -> DatabaseIdentityResolver:
        return DatabaseIdentityResolver(db)


def build_lunch_bot(
    settings: Settings,
    session_factory: sessionmaker[Session],
    *,
    notifier: Notifier | None = None,
    rng: random.Random | None = None,
) -> LunchBot:
    """Wire the notifier and the proposal after-save hook."""

    if notifier is None:
        notifier = Notifier.from_settings(
            settings,
            executor=ThreadPoolExecutor(max_workers=2, thread_name_prefix="slack-notifier"),
        )
    hooks = AfterSaveHooks()
    hooks.register(
        RecordKind.LUNCH_PROPOSAL,
        partial(post_lunch_proposal, notifier=notifier, default_username=settings.default_user),
    )
    return LunchBot(
        settings=settings,
        session_factory=session_factory,
        notifier=notifier,
        hooks=hooks,
        rng=rng or random.Random(),
    )
