"""Slash-command text parsing and dispatch."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from lunchbot.errors import AuthorizationError, UnrecognizedRequestError
from lunchbot.schemas.records import User
from lunchbot.schemas.slack import SlackMessage
from lunchbot.services.lunch import add_lunch_place, create_random_proposal, list_lunch_places, show_help
from lunchbot.services.store import RecordStore

logger = logging.getLogger(__name__)

RESERVED_USERNAME = "admin"


@dataclass(frozen=True, slots=True)
class ParsedCommand:
    verb: str
    argument: str = ""


def parse_command(text: str | None) -> ParsedCommand:
    """Split command text on its first space into verb and argument.

    The argument is the remainder verbatim. Nothing is stripped, so a leading
    space gives an empty verb, which dispatches to the default action like
    empty text does. Only a missing text is unrecognized.
    """

    if text is None:
        raise UnrecognizedRequestError("don't understand this request")
    verb, _, argument = text.partition(" ")
    return ParsedCommand(verb=verb, argument=argument)


def handle_command(
    store: RecordStore,
    user: User,
    channel: str | None,
    text: str | None,
    *,
    rng: random.Random | None = None,
) -> SlackMessage:
    """Route the user command to the matching lunch action."""

    if user.username == RESERVED_USERNAME:
        raise AuthorizationError("you cannot be admin")

    logger.info('Received text "%s" from "%s".', text, user.username)
    command = parse_command(text)

    if command.verb == "list":
        return list_lunch_places(store)
    if command.verb == "add":
        if not command.argument:
            raise UnrecognizedRequestError("add needs a lunch place name")
        return add_lunch_place(store, command.argument)
    if command.verb == "help":
        return show_help()
    # "suggest" and anything unrecognized propose a lunch place.
    return create_random_proposal(store, channel=channel, rng=rng)
