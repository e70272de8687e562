"""Report received template — confirms a business report to the reporter."""

from notifications.notification.notification import (
    NotificationChannel,
    NotificationType,
)


class ReportReceivedTemplate:
    notification_type = NotificationType.REPORT_RECEIVED.value
    default_channels = [NotificationChannel.IN_APP.value, NotificationChannel.EMAIL.value]

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Report Received - Welcome Winks",
            "message": (
                f"This is to confirm that we received your report regarding {context['business_name']}.\n\n"
                "Our team will review the details and take appropriate action. You will receive "
                "another notification once the review is complete.\n\n"
                "Thank you for helping keep our community safe.\n\n"
                "The Welcome Winks Team"
            ),
            "action_url": f"/business/{context['business_id']}",
            "action_label": "View Business",
        }
