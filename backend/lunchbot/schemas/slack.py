"""Slack wire payloads."""

from pydantic import BaseModel


class SlackMessage(BaseModel):
    """Message body posted to Slack or returned from a slash command."""

    text: str
    channel: str | None = None

    def payload(self) -> dict[str, str]:
        return self.model_dump(exclude_none=True)


class SlashCommandForm(BaseModel):
    """Fields of an inbound slash-command request."""

    token: str = ""
    user_id: str
    channel_id: str | None = None
    text: str | None = ""
    response_url: str | None = None
