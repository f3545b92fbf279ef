"""
Trading Calendar Policy
Decides whether a venue category is tradable at a given instant

Rules are evaluated on the New York civil calendar:
    crypto            always
    fx_or_commodity   Monday-Friday, any time of day
    index             Monday-Friday, any time of day
    equity            Monday-Friday, 09:30-16:30 inclusive
    unknown           never

All timezone handling lives in this module. Callers pass absolute instants;
tests can skip the conversion and call is_eligible_local() directly.
"""

from datetime import datetime, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from config.constants import (
    VENUE_TIMEZONE,
    TRADING_WEEKDAYS,
    EQUITY_SESSION_OPEN_MINUTE,
    EQUITY_SESSION_CLOSE_MINUTE,
)
from core.catalog import Category


_VENUE_TZ = ZoneInfo(VENUE_TIMEZONE)


def to_venue_local(instant: datetime) -> Tuple[int, int]:
    """
    Convert an absolute instant to venue-local (ISO weekday, minute of day).

    Naive datetimes are taken to be UTC.

    Returns:
        (weekday, minute) where weekday is 1=Monday ... 7=Sunday
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    local = instant.astimezone(_VENUE_TZ)
    return local.isoweekday(), local.hour * 60 + local.minute


def is_eligible_local(category: Category, weekday: int, minute_of_day: int) -> bool:
    """
    Apply the category rule to pre-converted local calendar values.

    Args:
        category: Venue category
        weekday: ISO weekday in the venue timezone (1=Monday ... 7=Sunday)
        minute_of_day: Minutes since local midnight (0-1439)
    """
    if category is Category.CRYPTO:
        return True

    if category in (Category.FX_OR_COMMODITY, Category.INDEX):
        return weekday in TRADING_WEEKDAYS

    if category is Category.EQUITY:
        if weekday not in TRADING_WEEKDAYS:
            return False
        return EQUITY_SESSION_OPEN_MINUTE <= minute_of_day <= EQUITY_SESSION_CLOSE_MINUTE

    return False


def is_eligible(category: Category, instant: Optional[datetime] = None) -> bool:
    """
    True if `category` is tradable at `instant` (defaults to now).

    Pure for a given instant: no state is read or written.
    """
    if instant is None:
        instant = datetime.now(timezone.utc)
    weekday, minute = to_venue_local(instant)
    return is_eligible_local(category, weekday, minute)
