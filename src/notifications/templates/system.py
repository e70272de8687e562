"""System template — product announcements and maintenance notices."""

from notifications.notification.notification import (
    NotificationChannel,
    NotificationType,
)


class SystemTemplate:
    notification_type = NotificationType.SYSTEM.value
    default_channels = [NotificationChannel.IN_APP.value, NotificationChannel.EMAIL.value]

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": context["title"],
            "message": context["message"],
            "action_url": context.get("action_url"),
            "action_label": "Learn More",
        }
