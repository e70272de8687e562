"""Score update template — the average of a business the user rated moved."""

from notifications.notification.notification import (
    NotificationChannel,
    NotificationType,
)


class ScoreUpdateTemplate:
    notification_type = NotificationType.SCORE_UPDATE.value
    default_channels = [NotificationChannel.IN_APP.value, NotificationChannel.PUSH.value]

    @staticmethod
    def render(context: dict) -> dict:
        old_score = float(context["old_score"])
        new_score = float(context["new_score"])
        change = "increased" if new_score > old_score else "decreased"
        return {
            "title": "Score Updated!",
            "message": (
                f"{context['business_name']}'s Welcome Winks score {change} from {old_score:.1f} to {new_score:.1f}"
            ),
            "action_url": f"/business/{context['business_id']}",
            "action_label": "View Business",
        }
