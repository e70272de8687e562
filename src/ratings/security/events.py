"""Domain events for suspicious user flags."""

from protean.fields import DateTime, Identifier, String, Text

from ratings.domain import ratings


@ratings.event(part_of="SuspiciousUserFlag")
class SuspiciousUserFlagged:
    """A user was flagged for suspicious rating activity."""

    __version__ = 1

    flag_id = Identifier(required=True)
    user_id = Identifier(required=True)
    reason = String(required=True)
    evidence = Text()  # JSON
    flagged_by = String()
    flagged_at = DateTime(required=True)


@ratings.event(part_of="SuspiciousUserFlag")
class SuspiciousUserFlagReviewed:
    __version__ = 1

    flag_id = Identifier(required=True)
    user_id = Identifier(required=True)
    previous_status = String(required=True)
    status = String(required=True)
    reviewed_by = String()
    reviewed_at = DateTime(required=True)
