"""Nearby rating template — someone rated a business close to where the user rates."""

from notifications.notification.notification import (
    NotificationChannel,
    NotificationType,
)

LEVEL_LABELS = {
    "very-welcoming": "Very Welcoming",
    "moderately-welcoming": "Moderately Welcoming",
    "not-welcoming": "Not Welcoming",
}


class NearbyRatingTemplate:
    notification_type = NotificationType.NEARBY_RATING.value
    default_channels = [NotificationChannel.IN_APP.value, NotificationChannel.PUSH.value]

    @staticmethod
    def render(context: dict) -> dict:
        level = LEVEL_LABELS.get(context["welcoming_level"], context["welcoming_level"])
        return {
            "title": "New Rating Nearby!",
            "message": (
                f"Someone just rated {context['business_name']} as {level} "
                f"({float(context['score']):.1f}/5.0) - {float(context['distance_miles']):.1f} miles away"
            ),
            "action_url": f"/business/{context['business_id']}",
            "action_label": "View Business",
        }
