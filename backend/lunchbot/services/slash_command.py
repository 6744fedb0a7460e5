"""Slash-command request handling."""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from lunchbot.errors import AuthorizationError, LunchbotError
from lunchbot.schemas.records import User
from lunchbot.schemas.slack import SlackMessage, SlashCommandForm
from lunchbot.services.commands import handle_command
from lunchbot.services.notifier import MessageWebhook, WebhookError, webhook_or_none

if TYPE_CHECKING:
    from lunchbot.bot import LunchBot

logger = logging.getLogger(__name__)

THINKING_TEXT = "thinking..."
FAILURE_TEXT = "Unable to fulfil your request"


@dataclass(slots=True)
class SlashCommandOutcome:
    """Immediate reply plus the work still to run after replying, if any."""

    response: SlackMessage
    deferred: Callable[[], None] | None = None


def verify_token(expected: str | None, received: str) -> None:
    if not expected or not secrets.compare_digest(expected.encode("utf-8"), received.encode("utf-8")):
        logger.error("slash command token does not match expected value")
        raise AuthorizationError("token does not match")


def run_command(db: Session, bot: LunchBot, user: User, form: SlashCommandForm) -> SlackMessage:
    """Run the command, turning workflow failures into a generic reply."""

    try:
        return handle_command(bot.store_for(db, user), user, form.channel_id, form.text, rng=bot.rng)
    except LunchbotError:
        logger.exception("Error handling slash-command")
        return SlackMessage(text=FAILURE_TEXT)


def handle_slash_command(db: Session, bot: LunchBot, form: SlashCommandForm) -> SlashCommandOutcome:
    """Authenticate the request, resolve the user and run the command.

    Creating a user may outlast Slack's reply deadline, so when a response
    URL is available a new user gets ``thinking...`` straight away and the
    result is posted to the response URL once the deferred work finishes.
    """

    logger.debug("Received slash command user_id=%s channel_id=%s", form.user_id, form.channel_id)
    verify_token(bot.settings.slack_slash_command_token, form.token)

    identity = bot.identity(db)
    try:
        user = identity.find_user(form.user_id)
        if user is None:
            logger.info('User for slack ID "%s" does not exist. Creating...', form.user_id)
            response_webhook = webhook_or_none(
                form.response_url,
                timeout_seconds=bot.settings.slack_webhook_timeout_seconds,
            )
            if response_webhook is not None:
                return SlashCommandOutcome(
                    response=SlackMessage(text=THINKING_TEXT),
                    deferred=partial(complete_for_new_user, bot, form, response_webhook),
                )
            user = identity.create_user(form.user_id)
    except LunchbotError:
        logger.exception("Error handling slash-command")
        return SlashCommandOutcome(response=SlackMessage(text=FAILURE_TEXT))

    logger.debug('Slack ID "%s" has user ID "%s".', user.username, user.id)
    return SlashCommandOutcome(response=run_command(db, bot, user, form))


def complete_for_new_user(bot: LunchBot, form: SlashCommandForm, response_webhook: MessageWebhook) -> None:
    """Create the user, run the command and post the result to the response URL."""

    db = bot.session_factory()
    try:
        try:
            user = bot.identity(db).create_user(form.user_id)
        except LunchbotError:
            logger.exception("Error handling slash-command")
            result = SlackMessage(text=FAILURE_TEXT)
        else:
            result = run_command(db, bot, user, form)
    finally:
        db.close()

    try:
        response_webhook.send(result)
    except WebhookError:
        logger.exception("Error posting slash-command result to response URL.")
