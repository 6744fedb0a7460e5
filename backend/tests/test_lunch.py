"""Tests for lunch place and proposal actions."""

from __future__ import annotations

import unittest
from unittest import mock

from sqlalchemy import select

from lunchbot.errors import NotFoundError
from lunchbot.models.lunch_place import LunchPlace
from lunchbot.schemas.records import Place, Proposal, RecordKind, RecordRef
from lunchbot.services.lunch import (
    add_lunch_place,
    create_random_proposal,
    list_lunch_places,
    post_lunch_proposal,
    show_help,
)
from lunchbot.services.notifier import Notifier
from lunchbot.services.store import RecordStore
from tests.support import DatabaseTestCase, StubWebhook


class LunchActionTests(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.member = self.create_user("U100")
        self.store = self.bot.store_for(self.db, self.member)

    def test_help_lists_every_command(self) -> None:
        text = show_help().text

        for fragment in ("help -", "add <lunch place>", "list -", "suggest -"):
            self.assertIn(fragment, text)
        self.assertEqual(len(text.splitlines()), 4)

    def test_add_creates_place_once(self) -> None:
        first = add_lunch_place(self.store, "Pizza Place")
        second = add_lunch_place(self.store, "Pizza Place")

        self.assertEqual(first.text, "New lunch place! Thank you for your suggestion.")
        self.assertEqual(second.text, "This lunch place already exists.")
        places = self.store.query(RecordKind.LUNCH_PLACE, name="Pizza Place")
        self.assertEqual(len(places), 1)

    def test_add_reports_existing_place_when_insert_conflicts(self) -> None:
        add_lunch_place(self.store, "Pizza Place")

        # Another add committed the same name after the existence check ran.
        with mock.patch.object(self.store, "query", return_value=[]):
            reply = add_lunch_place(self.store, "Pizza Place")

        self.assertEqual(reply.text, "This lunch place already exists.")
        rows = self.db.scalars(select(LunchPlace).where(LunchPlace.name == "Pizza Place")).all()
        self.assertEqual(len(rows), 1)

    def test_list_with_no_places_is_empty_text(self) -> None:
        self.assertEqual(list_lunch_places(self.store).text, "")

    def test_list_returns_one_name_per_line(self) -> None:
        add_lunch_place(self.store, "Pizza Place")
        add_lunch_place(self.store, "Noodle Bar")

        text = list_lunch_places(self.store).text

        self.assertTrue(text.endswith("\n"))
        self.assertEqual(sorted(text.splitlines()), ["Noodle Bar", "Pizza Place"])

    def test_propose_without_places_fails_and_saves_nothing(self) -> None:
        with self.assertRaises(NotFoundError):
            create_random_proposal(self.store, channel="C1")

        self.assertEqual(self.store.query(RecordKind.LUNCH_PROPOSAL), [])
        self.assertEqual(self.webhook.messages, [])

    def test_propose_saves_one_proposal_for_an_existing_place(self) -> None:
        for name in ("Pizza Place", "Noodle Bar", "Taco Truck"):
            add_lunch_place(self.store, name)
        place_ids = {place.id for place in self.store.query(RecordKind.LUNCH_PLACE)}

        result = create_random_proposal(self.store, channel="C1", rng=self.bot.rng)

        self.assertEqual(result.text, "done")
        proposals = self.store.query(RecordKind.LUNCH_PROPOSAL)
        self.assertEqual(len(proposals), 1)
        self.assertIn(proposals[0].place.id, place_ids)
        self.assertEqual(proposals[0].channel, "C1")

    def test_new_proposal_is_announced_once_with_place_name(self) -> None:
        add_lunch_place(self.store, "Pizza Place")

        create_random_proposal(self.store, channel="C1")

        self.assertEqual(len(self.webhook.messages), 1)
        message = self.webhook.messages[0]
        self.assertEqual(message.text, "Let's go have lunch at Pizza Place.")
        self.assertEqual(message.channel, "C1")

    def test_proposal_without_channel_uses_webhook_default(self) -> None:
        add_lunch_place(self.store, "Pizza Place")

        create_random_proposal(self.store)

        self.assertIsNone(self.webhook.messages[0].channel)
        self.assertNotIn("channel", self.webhook.messages[0].payload())

    def test_proposal_update_is_not_announced(self) -> None:
        add_lunch_place(self.store, "Pizza Place")
        create_random_proposal(self.store, channel="C1")
        proposal = self.store.query(RecordKind.LUNCH_PROPOSAL)[0]

        self.store.save(proposal.model_copy(update={"channel": "C2"}))

        self.assertEqual(len(self.webhook.messages), 1)


class PostLunchProposalHookTests(DatabaseTestCase):
    settings_overrides = {"channel_override": "#general"}

    def setUp(self) -> None:
        super().setUp()
        self.store = RecordStore(self.db, user_id=self.system_user.id)
        self.place = self.store.save(Place(name="Pizza Place"))
        self.notifier = Notifier(self.webhook, channel_override=self.settings.channel_override)

    def _post(self, record, original=None) -> None:
        post_lunch_proposal(
            self.store,
            record,
            original,
            notifier=self.notifier,
            default_username=self.settings.default_user,
        )

    def test_channel_override_wins_over_proposal_channel(self) -> None:
        self._post(Proposal(id="p1", place=self.place.ref(), channel="#random"))

        self.assertEqual(len(self.webhook.messages), 1)
        self.assertEqual(self.webhook.messages[0].channel, "#general")
        self.assertIn("Pizza Place", self.webhook.messages[0].text)

    def test_update_with_prior_version_sends_nothing(self) -> None:
        record = Proposal(id="p1", place=self.place.ref(), channel="#random")

        self._post(record, original=record.model_copy(update={"channel": None}))

        self.assertEqual(self.webhook.messages, [])

    def test_missing_place_is_logged_and_not_sent(self) -> None:
        record = Proposal(id="p1", place=RecordRef(kind=RecordKind.LUNCH_PLACE, id="f" * 32))

        with self.assertLogs("lunchbot.services.lunch", level="ERROR"):
            self._post(record)
        self.assertEqual(self.webhook.messages, [])

    def test_missing_default_user_is_logged_and_not_sent(self) -> None:
        record = Proposal(id="p1", place=self.place.ref())

        with self.assertLogs("lunchbot.services.lunch", level="ERROR"):
            post_lunch_proposal(
                self.store,
                record,
                None,
                notifier=self.notifier,
                default_username="nobody",
            )
        self.assertEqual(self.webhook.messages, [])

    def test_unconfigured_notifier_skips_delivery(self) -> None:
        inert = Notifier(None)

        post_lunch_proposal(
            self.store,
            Proposal(id="p1", place=self.place.ref()),
            None,
            notifier=inert,
            default_username=self.settings.default_user,
        )

        self.assertFalse(inert.enabled)

    def test_delivery_failure_is_logged(self) -> None:
        failing = StubWebhook(fail=True)

        with self.assertLogs("lunchbot.services.notifier", level="ERROR"):
            post_lunch_proposal(
                self.store,
                Proposal(id="p1", place=self.place.ref()),
                None,
                notifier=Notifier(failing),
                default_username=self.settings.default_user,
            )
        self.assertEqual(len(failing.messages), 1)


if __name__ == "__main__":
    unittest.main()
