"""Checks a user must pass before a rating is accepted."""

from datetime import UTC, datetime, timedelta
from math import ceil

from protean.exceptions import ValidationError

from ratings.rating.queries import ratings_created_since
from ratings.security.flagging import active_flags_for

MAX_RATINGS_PER_HOUR = 5
RATE_WINDOW = timedelta(hours=1)


def retry_after_seconds(user_id, now=None) -> int:
    """Seconds until the user may submit another new rating; 0 when they may now."""
    now = now or datetime.now(UTC)
    recent = ratings_created_since(user_id, now - RATE_WINDOW)
    if len(recent) < MAX_RATINGS_PER_HOUR:
        return 0
    oldest = recent[0].created_at
    oldest = oldest if oldest.tzinfo else oldest.replace(tzinfo=UTC)
    return max(ceil((oldest + RATE_WINDOW - now).total_seconds()), 1)


def ensure_not_flagged(user_id) -> None:
    if active_flags_for(user_id):
        raise ValidationError({"account": ["Account flagged for suspicious activity. Please contact support."]})


def ensure_within_rate_limit(user_id, now=None) -> None:
    wait = retry_after_seconds(user_id, now)
    if wait:
        raise ValidationError({"rate_limit": [f"Too many ratings submitted. Please wait {wait} seconds."]})
