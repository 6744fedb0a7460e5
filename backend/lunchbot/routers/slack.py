"""Slack slash-command route."""

from fastapi import APIRouter, BackgroundTasks, Depends, Form, HTTPException
from sqlalchemy.orm import Session

from lunchbot.bot import LunchBot
from lunchbot.db.dependencies import get_db, get_lunch_bot
from lunchbot.errors import AuthorizationError
from lunchbot.schemas.slack import SlackMessage, SlashCommandForm
from lunchbot.services.slash_command import handle_slash_command


router = APIRouter()


@router.post("/slash-command", response_model=SlackMessage, response_model_exclude_none=True)
def slash_command(
    background_tasks: BackgroundTasks,
    token: str = Form(""),
    user_id: str = Form(..., min_length=1),
    channel_id: str | None = Form(None),
    text: str = Form(""),
    response_url: str | None = Form(None),
    db: Session = Depends(get_db),
    bot: LunchBot = Depends(get_lunch_bot),
) -> SlackMessage:
    """Handle a slash command posted by Slack."""

    form = SlashCommandForm(
        token=token,
        user_id=user_id,
        channel_id=channel_id,
        text=text,
        response_url=response_url,
    )
    try:
        outcome = handle_slash_command(db, bot, form)
    except AuthorizationError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc

    if outcome.deferred is not None:
        background_tasks.add_task(outcome.deferred)
    return outcome.response
