"""Lunch place and proposal actions."""

from __future__ import annotations

import logging
import random

from lunchbot.errors import ConflictError, LunchbotError, NotFoundError
from lunchbot.schemas.records import Place, Proposal, Record, RecordKind
from lunchbot.schemas.slack import SlackMessage
from lunchbot.services.identity import DatabaseIdentityResolver, IdentityResolver
from lunchbot.services.notifier import Notifier
from lunchbot.services.store import RecordStore

logger = logging.getLogger(__name__)

HELP_COMMANDS = (
    "help - for this help",
    "add <lunch place> - to add a new place to eat",
    "list - to list places to eat",
    "suggest - to pick place to eat",
)
PLACE_CREATED_TEXT = "New lunch place! Thank you for your suggestion."
PLACE_EXISTS_TEXT = "This lunch place already exists."
PROPOSAL_DONE_TEXT = "done"


def show_help() -> SlackMessage:
    logger.debug("in show_help")
    return SlackMessage(text="\n".join(HELP_COMMANDS))


def add_lunch_place(store: RecordStore, name: str) -> SlackMessage:
    """Add a user suggested lunch place unless one with that name exists."""

    logger.debug("in add_lunch_place user=%s name=%s", store.user_id, name)
    if store.query(RecordKind.LUNCH_PLACE, name=name):
        return SlackMessage(text=PLACE_EXISTS_TEXT)

    logger.info('Lunch place "%s" does not exist. Creating...', name)
    try:
        store.save(Place(name=name))
    except ConflictError:
        # Lost the race against a concurrent add of the same name.
        return SlackMessage(text=PLACE_EXISTS_TEXT)
    return SlackMessage(text=PLACE_CREATED_TEXT)


def list_lunch_places(store: RecordStore) -> SlackMessage:
    """List every stored lunch place, one per line."""

    logger.debug("in list_lunch_places user=%s", store.user_id)
    places = store.query(RecordKind.LUNCH_PLACE)
    logger.info("Found %d lunch places.", len(places))
    return SlackMessage(text="".join(f"{place.name}\n" for place in places))


def create_random_proposal(
    store: RecordStore,
    *,
    channel: str | None = None,
    rng: random.Random | None = None,
) -> SlackMessage:
    """Pick a lunch place at random and save a proposal for it."""

    logger.debug("in create_random_proposal user=%s channel=%s", store.user_id, channel)
    places = store.query(RecordKind.LUNCH_PLACE)
    if not places:
        logger.warning("No lunch places found.")
        raise NotFoundError("There are no lunch places.")

    place = (rng or random).choice(places)
    logger.info("Picked %s for lunch.", place.name)

    proposal = store.save(Proposal(place=place.ref(), channel=channel or None))
    logger.info("Saved lunch proposal %s.", proposal.id)
    return SlackMessage(text=PROPOSAL_DONE_TEXT)


def proposal_message(place: Place) -> str:
    return f"Let's go have lunch at {place.name}."


def post_lunch_proposal(
    store: RecordStore,
    record: Record,
    original: Record | None,
    *,
    notifier: Notifier,
    default_username: str,
    identity: IdentityResolver | None = None,
) -> None:
    """After-save hook sending a newly created proposal to Slack.

    Updates to an existing proposal are ignored so a proposal is announced
    at most once. The referenced place is read as the default system user.
    """

    logger.debug("in lunch_proposal after save record=%s original=%s", record, original)
    if original is not None or not isinstance(record, Proposal):
        return

    identity = identity or DatabaseIdentityResolver(store.db)
    try:
        system_user = identity.find_user(default_username)
        if system_user is None:
            raise NotFoundError(f'Default user "{default_username}" does not exist.')

        system_store = RecordStore(store.db, user_id=system_user.id)
        logger.debug('Finding name for lunch place "%s"', record.place.id)
        places = system_store.query(RecordKind.LUNCH_PLACE, id=record.place.id)
        if not places:
            raise NotFoundError(f'Unable to find the lunch place "{record.place.id}" referenced in the proposal.')
    except LunchbotError:
        logger.exception("Error handling lunch proposal after save.")
        return

    notifier.dispatch(proposal_message(places[0]), channel=record.channel)
