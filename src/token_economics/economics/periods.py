"""Period key normalization between spend and savings ledger calendars."""

from __future__ import annotations

from datetime import datetime, timedelta

from .schemas import Granularity

PERIOD_DATE_FORMAT = "%Y-%m-%d"
# Savings weeks start on Saturday, spend weeks on the following ISO Monday.
SATURDAY_TO_MONDAY = timedelta(days=2)


def convert_saturday_to_monday(saturday: str) -> str | None:
    """Convert a legacy Saturday week start to its ISO Monday key.

    Example: `"2026-01-18"` becomes `"2026-01-20"`. Returns `None` when the
    value is not a `YYYY-MM-DD` date.
    """
    try:
        parsed = datetime.strptime(saturday, PERIOD_DATE_FORMAT).date()
    except (TypeError, ValueError):
        return None
    try:
        monday = parsed + SATURDAY_TO_MONDAY
    except OverflowError:
        return None
    return monday.isoformat()


def normalize_savings_key(granularity: Granularity, key: str) -> str | None:
    """Return the canonical period key for a savings-ledger key."""
    if granularity is Granularity.WEEKLY:
        return convert_saturday_to_monday(key)
    return key
