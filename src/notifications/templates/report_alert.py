"""Report alert template — internal heads-up to operations about a new report."""

from notifications.notification.notification import (
    NotificationChannel,
    NotificationType,
)


class ReportAlertTemplate:
    notification_type = NotificationType.REPORT_ALERT.value
    default_channels = [NotificationChannel.EMAIL.value]

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": f"New Report: {context['reason']} - {context['business_name']}",
            "message": (
                f"Business: {context['business_name']}\n"
                f"Reason: {context['reason']}\n"
                f"Severity: {context['severity']}\n"
                f"Reporter: {context.get('reporter_email') or 'Anonymous'}\n\n"
                f"{context.get('description') or ''}"
            ).rstrip(),
            "action_url": "/admin",
            "action_label": "View in Admin Dashboard",
        }
