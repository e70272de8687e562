"""Inbound cross-domain event handlers — Notifications reacts to Ratings events.

Listens for BusinessRated (score update to the rater, nearby rating to
people who rated close by) and AchievementUnlocked.
"""

import json

import structlog
from notifications.domain import notifications
from notifications.notification.helpers import create_notifications_for_user, notify_nearby_rating
from notifications.notification.notification import Notification, NotificationType
from protean.utils.mixins import handle
from shared.events.ratings import AchievementUnlocked, BusinessRated

logger = structlog.get_logger(__name__)

notifications.register_external_event(BusinessRated, "Ratings.BusinessRated.v1")
notifications.register_external_event(AchievementUnlocked, "Ratings.AchievementUnlocked.v1")


@notifications.event_handler(part_of=Notification, stream_category="ratings::business")
class BusinessRatingEventsHandler:
    """Reacts to new ratings of a business."""

    @handle(BusinessRated)
    def on_business_rated(self, event: BusinessRated) -> None:
        if event.previous_average is not None and event.previous_average != event.new_average:
            create_notifications_for_user(
                user_id=str(event.user_id),
                notification_type=NotificationType.SCORE_UPDATE.value,
                context={
                    "business_id": str(event.business_id),
                    "business_name": event.business_name,
                    "old_score": event.previous_average,
                    "new_score": event.new_average,
                },
                source_event_type="Ratings.BusinessRated.v1",
            )

        raters = json.loads(event.nearby_raters) if event.nearby_raters else []
        for rater in raters:
            if str(rater["user_id"]) == str(event.user_id):
                continue
            try:
                notify_nearby_rating(
                    user_id=str(rater["user_id"]),
                    business_id=str(event.business_id),
                    business_name=event.business_name,
                    score=event.total_score,
                    welcoming_level=event.welcoming_level,
                    distance_miles=rater["distance_miles"],
                    source_event_type="Ratings.BusinessRated.v1",
                )
            except Exception as e:
                logger.error(
                    "Nearby rating notification failed",
                    user_id=str(rater["user_id"]),
                    business_id=str(event.business_id),
                    error=str(e),
                )


@notifications.event_handler(part_of=Notification, stream_category="ratings::achievement")
class AchievementEventsHandler:
    @handle(AchievementUnlocked)
    def on_achievement_unlocked(self, event: AchievementUnlocked) -> None:
        create_notifications_for_user(
            user_id=str(event.user_id),
            notification_type=NotificationType.ACHIEVEMENT.value,
            context={
                "achievement_type": event.achievement_type,
                "achievement_name": event.title,
                "description": event.description,
            },
            source_event_type="Ratings.AchievementUnlocked.v1",
        )
