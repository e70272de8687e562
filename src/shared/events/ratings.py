"""Cross-domain event contracts for Ratings domain events.

These classes define the event shape for consumption by the Notifications
domain (score updates, nearby ratings, achievements and report updates).
They are registered as external events via domain.register_external_event()
with matching __type__ strings so Protean's stream deserialization works
correctly.

The source-of-truth events live in src/ratings/*/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier, Integer, String, Text


class BusinessRated(BaseEvent):
    """A rating was recorded against a business."""

    __version__ = 1

    business_id = Identifier(required=True)
    business_name = String(required=True)
    rating_id = Identifier(required=True)
    user_id = Identifier(required=True)
    total_score = Float(required=True)
    welcoming_level = String(required=True)
    previous_average = Float()
    new_average = Float(required=True)
    total_ratings = Integer(required=True)
    latitude = Float()
    longitude = Float()
    nearby_raters = Text()  # JSON: [{user_id, distance_miles}]
    rated_at = DateTime(required=True)


class AchievementUnlocked(BaseEvent):
    """A user earned an achievement."""

    __version__ = 1

    achievement_id = Identifier(required=True)
    user_id = Identifier(required=True)
    achievement_type = String(required=True)
    title = String(required=True)
    description = Text()
    unlocked_at = DateTime(required=True)


class BusinessReportSubmitted(BaseEvent):
    """A user reported a business."""

    __version__ = 1

    report_id = Identifier(required=True)
    business_id = Identifier(required=True)
    business_name = String(required=True)
    reported_by = Identifier(required=True)
    reporter_email = String()
    reason = String(required=True)
    description = Text()
    severity = String(required=True)
    submitted_at = DateTime(required=True)


class BusinessReportStatusChanged(BaseEvent):
    """An administrator changed the status of a business report."""

    __version__ = 1

    report_id = Identifier(required=True)
    business_id = Identifier(required=True)
    business_name = String(required=True)
    reported_by = Identifier(required=True)
    reporter_email = String()
    previous_status = String(required=True)
    status = String(required=True)
    admin_id = String()
    admin_notes = Text()
    changed_at = DateTime(required=True)
