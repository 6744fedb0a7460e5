"""Scheduled lunch proposals."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from lunchbot.errors import IdentityError
from lunchbot.services.lunch import create_random_proposal

if TYPE_CHECKING:
    from lunchbot.bot import LunchBot

logger = logging.getLogger(__name__)

LUNCH_SCHEDULE_JOB_ID = "lunch_schedule"

_CRON_WEEKDAYS = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")
# "*", "n" or "n-m", each optionally followed by "/step".
_NUMERIC_WEEKDAY_RE = re.compile(r"^(\*|\d+(?:-\d+)?)(?:/(\d+))?$")


def _expand_weekday_part(part: str) -> list[int] | None:
    """Return cron weekday numbers for a numeric part, ``None`` for named parts."""

    match = _NUMERIC_WEEKDAY_RE.match(part)
    if match is None:
        return None
    base, step = match.group(1), int(match.group(2) or 1)
    if base == "*":
        first, last = 0, 6
    elif "-" in base:
        first, last = (int(value) for value in base.split("-"))
    else:
        first = int(base)
        last = 7 if match.group(2) else first
    if step < 1 or not 0 <= first <= last <= 7:
        raise ValueError(f"Invalid day-of-week value in cron expression: {part!r}")
    return list(range(first, last + 1, step))


def _cron_day_of_week(field: str) -> str:
    """Translate a cron day-of-week field into APScheduler weekday names.

    APScheduler numbers weekdays from Monday and rejects ranges that wrap
    past Sunday, so numeric values (0 or 7 = Sunday) are expanded into an
    explicit list of names.
    """

    if field == "*":
        return field
    days: set[int] = set()
    named: list[str] = []
    for part in field.split(","):
        numbers = _expand_weekday_part(part)
        if numbers is None:
            named.append(part)
        else:
            days.update(number % 7 for number in numbers)
    return ",".join([_CRON_WEEKDAYS[day] for day in sorted(days)] + named)


def cron_trigger_from_expression(expression: str, *, timezone: str | None = None) -> CronTrigger:
    """Build a trigger from a 5-field or 6-field (seconds first) cron expression."""

    fields = expression.split()
    if len(fields) == 5:
        fields = ["0", *fields]
    if len(fields) != 6:
        raise ValueError(f"Wrong number of fields in cron expression: {expression!r}")

    second, minute, hour, day, month, day_of_week = fields
    return CronTrigger(
        second=second,
        minute=minute,
        hour=hour,
        day=day,
        month=month,
        day_of_week=_cron_day_of_week(day_of_week),
        timezone=timezone,
    )


def run_lunch_schedule(bot: LunchBot) -> None:
    """Propose a lunch place as the default system user."""

    logger.debug("in lunch schedule cronjob")
    db = bot.session_factory()
    try:
        username = bot.settings.default_user
        user = bot.identity(db).find_user(username)
        if user is None:
            raise IdentityError(f'Default user "{username}" does not exist.')
        create_random_proposal(bot.store_for(db, user), rng=bot.rng)
    except Exception:
        logger.exception("Error running lunch schedule cronjob.")
    finally:
        db.close()


def build_scheduler(bot: LunchBot) -> BackgroundScheduler:
    """Return an unstarted scheduler running the lunch schedule job."""

    settings = bot.settings
    scheduler = BackgroundScheduler(timezone=settings.lunch_timezone)
    scheduler.add_job(
        run_lunch_schedule,
        trigger=cron_trigger_from_expression(settings.lunch_schedule, timezone=settings.lunch_timezone),
        args=[bot],
        id=LUNCH_SCHEDULE_JOB_ID,
        replace_existing=True,
    )
    return scheduler
