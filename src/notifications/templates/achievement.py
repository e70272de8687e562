"""Achievement template — sent when a user unlocks an achievement."""

from notifications.notification.notification import (
    NotificationChannel,
    NotificationType,
)


class AchievementTemplate:
    notification_type = NotificationType.ACHIEVEMENT.value
    default_channels = [
        NotificationChannel.IN_APP.value,
        NotificationChannel.EMAIL.value,
        NotificationChannel.PUSH.value,
    ]

    @staticmethod
    def render(context: dict) -> dict:
        message = f'You earned the "{context["achievement_name"]}" achievement'
        if context.get("description"):
            message += f": {context['description']}"
        return {
            "title": "Achievement Unlocked!",
            "message": message,
            "action_url": "/profile",
            "action_label": "View Profile",
        }
