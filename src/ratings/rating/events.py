"""Domain events for the Rating aggregate.

Consumed by the BusinessScore and UserRatingHistory projectors and by the
achievement evaluator.
"""

from protean.fields import DateTime, Float, Identifier, String, Text

from ratings.domain import ratings


@ratings.event(part_of="Rating")
class RatingSubmitted:
    """A user rated a business for the first time."""

    __version__ = 1

    rating_id = Identifier(required=True)
    business_id = Identifier(required=True)
    user_id = Identifier(required=True)
    user_account_type = String(required=True)
    answers = Text(required=True)  # JSON: {question_key: option}
    total_score = Float(required=True)
    welcoming_level = String(required=True)
    user_ip_address = String()
    submitted_at = DateTime(required=True)


@ratings.event(part_of="Rating")
class RatingRevised:
    """The author answered the survey again for the same business."""

    __version__ = 1

    rating_id = Identifier(required=True)
    business_id = Identifier(required=True)
    user_id = Identifier(required=True)
    answers = Text(required=True)
    previous_total_score = Float(required=True)
    total_score = Float(required=True)
    welcoming_level = String(required=True)
    revised_at = DateTime(required=True)


@ratings.event(part_of="Rating")
class RatingRemoved:
    """An administrator removed a rating."""

    __version__ = 1

    rating_id = Identifier(required=True)
    business_id = Identifier(required=True)
    user_id = Identifier(required=True)
    total_score = Float(required=True)
    removed_by = String(required=True)
    reason = String()
    removed_at = DateTime(required=True)


@ratings.event(part_of="Rating")
class RatingMigrated:
    """A cookie account rating was moved to a full account."""

    __version__ = 1

    rating_id = Identifier(required=True)
    business_id = Identifier(required=True)
    from_user_id = Identifier(required=True)
    to_user_id = Identifier(required=True)
    migrated_at = DateTime(required=True)
