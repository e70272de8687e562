"""Report resolved template — tells the reporter how their report was closed."""

from notifications.notification.notification import (
    NotificationChannel,
    NotificationType,
)


class ReportResolvedTemplate:
    notification_type = NotificationType.REPORT_RESOLVED.value
    default_channels = [NotificationChannel.IN_APP.value, NotificationChannel.EMAIL.value]

    @staticmethod
    def render(context: dict) -> dict:
        message = (
            f"We have completed our review of your report regarding {context['business_name']}.\n\n"
            f"Status: {context['status'].title()}"
        )
        if context.get("admin_notes"):
            message += f"\n\nAdmin Notes: {context['admin_notes']}"
        message += "\n\nThank you for your contribution.\n\nThe Welcome Winks Team"
        return {
            "title": "Update on your Report - Welcome Winks",
            "message": message,
            "action_url": f"/business/{context['business_id']}",
            "action_label": "View Business",
        }
