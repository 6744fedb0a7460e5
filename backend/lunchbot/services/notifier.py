"""Outbound Slack webhook delivery."""

from __future__ import annotations

import json
import logging
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Protocol
from urllib import error as urllib_error
from urllib import request as urllib_request

from lunchbot.config import Settings
from lunchbot.schemas.slack import SlackMessage

logger = logging.getLogger(__name__)


class WebhookError(RuntimeError):
    """Raised when a webhook POST fails."""


class MessageWebhook(Protocol):
    """Protocol for anything that can deliver a Slack message."""

    def send(self, message: SlackMessage) -> str:
        """Deliver ``message`` and return the response body."""


@dataclass(slots=True)
class SlackWebhook:
    """Minimal Slack incoming/response webhook client using stdlib HTTP."""

    url: str
    timeout_seconds: int = 10

    def send(self, message: SlackMessage) -> str:
        req = urllib_request.Request(
            url=self.url,
            data=json.dumps(message.payload()).encode("utf-8"),
            method="POST",
            headers={"Content-Type": "application/json"},
        )
        try:
            with urllib_request.urlopen(req, timeout=self.timeout_seconds) as resp:
                return resp.read().decode("utf-8")
        except urllib_error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace")
            raise WebhookError(f"Slack webhook HTTP {exc.code}: {detail}") from exc
        except urllib_error.URLError as exc:
            raise WebhookError(f"Slack webhook request failed: {exc.reason}") from exc


def webhook_or_none(url: str | None, *, timeout_seconds: int = 10) -> SlackWebhook | None:
    """Return a webhook for ``url``, or ``None`` when no URL is given."""

    if not url:
        return None
    return SlackWebhook(url=url, timeout_seconds=timeout_seconds)


def select_channel(channel_override: str, record_channel: str | None) -> str | None:
    """Pick the target channel; ``None`` leaves it to the webhook's default."""

    if channel_override:
        return channel_override
    if record_channel:
        return record_channel
    return None


class Notifier:
    """Posts lunch notifications to the configured incoming webhook.

    A notifier without a webhook is inert: ``send`` skips delivery and reports
    that nothing was sent. Delivery failures are logged, never raised.
    With an executor, ``dispatch`` posts from a worker thread so callers never
    wait on the webhook.
    """

    def __init__(
        self,
        webhook: MessageWebhook | None,
        *,
        channel_override: str = "",
        executor: Executor | None = None,
    ) -> None:
        self.webhook = webhook
        self.channel_override = channel_override
        self.executor = executor

    @classmethod
    def from_settings(cls, settings: Settings, *, executor: Executor | None = None) -> Notifier:
        return cls(
            webhook_or_none(
                settings.slack_incoming_webhook,
                timeout_seconds=settings.slack_webhook_timeout_seconds,
            ),
            channel_override=settings.channel_override,
            executor=executor,
        )

    @property
    def enabled(self) -> bool:
        return self.webhook is not None

    def send(self, text: str, channel: str | None = None) -> bool:
        """Post ``text``; returns whether the webhook accepted it."""

        if self.webhook is None:
            logger.info("Slack incoming webhook is not configured; skipping message.")
            return False
        message = SlackMessage(text=text, channel=select_channel(self.channel_override, channel))
        logger.debug("Posting message to slack: %s", message.payload())
        try:
            response = self.webhook.send(message)
        except WebhookError:
            logger.exception("Error posting message to slack.")
            return False
        logger.info("Posted message to slack: %s", response)
        return True

    def dispatch(self, text: str, channel: str | None = None) -> None:
        """Fire-and-forget ``send``, on the executor when one is configured."""

        if self.executor is None or self.webhook is None:
            self.send(text, channel=channel)
            return
        self.executor.submit(self.send, text, channel)

    def close(self) -> None:
        """Wait for queued deliveries and release the executor."""

        if self.executor is not None:
            self.executor.shutdown(wait=True)
