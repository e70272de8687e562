"""New business template — a business was added near the user."""

from notifications.notification.notification import (
    NotificationChannel,
    NotificationType,
)


class NewBusinessTemplate:
    notification_type = NotificationType.NEW_BUSINESS.value
    default_channels = [NotificationChannel.IN_APP.value, NotificationChannel.PUSH.value]

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "New Business Nearby!",
            "message": (
                f"{context['business_name']} has been added {float(context['distance_miles']):.1f} miles from you"
            ),
            "action_url": f"/business/{context['business_id']}",
            "action_label": "View Business",
        }
