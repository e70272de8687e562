"""Community activity template — free-form message from the Welcome Winks team."""

from notifications.notification.notification import (
    NotificationChannel,
    NotificationType,
)


class CommunityActivityTemplate:
    notification_type = NotificationType.COMMUNITY_ACTIVITY.value
    default_channels = [NotificationChannel.IN_APP.value]

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Community Activity",
            "message": context["message"],
            "action_url": context.get("action_url"),
            "action_label": "View Activity",
        }
