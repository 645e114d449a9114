"""
Wall-clock boundary.

The engine never reads the clock itself. Routes call `current_moment` once
per request and thread the resulting Moment through every query.
"""

from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo
import logging

from models.schemas import Moment

logger = logging.getLogger(__name__)


def normalize_day_of_week(value: int) -> int:
    """Map a Sunday=0 calendar day number onto the engine's 1..7 range."""
    return 7 if value == 0 else value


def day_of_week_for(day: date) -> int:
    """Monday=1 .. Sunday=7"""
    # %w numbers the week from Sunday=0
    return normalize_day_of_week(int(day.strftime("%w")))


def moment_from(now: datetime, timezone: Optional[str] = None) -> Moment:
    """
    Convert an instant into engine conventions.

    Aware datetimes are shifted into `timezone` first; naive ones are taken
    as already local.
    """
    if timezone and now.tzinfo is not None:
        now = now.astimezone(ZoneInfo(timezone))
    local_day = now.date()
    return Moment(
        date=local_day,
        day_of_week=day_of_week_for(local_day),
        time=now.strftime("%H:%M"),
    )


def current_moment(timezone: Optional[str] = None, now: Optional[datetime] = None) -> Moment:
    """Read the clock (unless `now` is given) and return a Moment."""
    if now is None:
        now = datetime.now(ZoneInfo(timezone)) if timezone else datetime.now()
        logger.debug(f"Clock read: {now.isoformat()}")
    return moment_from(now, timezone)
