"""Inbound cross-domain event handler — Notifications reacts to business reports.

A new report is confirmed to the reporter (by email when an address was
given) and raised with the operations team. Closing a report tells the
reporter how it ended.
"""

import structlog
from notifications.domain import notifications
from notifications.notification.helpers import create_internal_notification, create_notifications_for_user
from notifications.notification.notification import Notification, NotificationType
from protean.utils.mixins import handle
from shared.events.ratings import BusinessReportStatusChanged, BusinessReportSubmitted

logger = structlog.get_logger(__name__)

notifications.register_external_event(BusinessReportSubmitted, "Ratings.BusinessReportSubmitted.v1")
notifications.register_external_event(BusinessReportStatusChanged, "Ratings.BusinessReportStatusChanged.v1")

REASON_TEXT = {
    "fake_reviews": "Fake Reviews",
    "spam_reviews": "Spam Reviews",
}
CLOSED_STATUSES = {"resolved", "dismissed"}


@notifications.event_handler(part_of=Notification, stream_category="ratings::business_report")
class ReportEventsHandler:
    @handle(BusinessReportSubmitted)
    def on_report_submitted(self, event: BusinessReportSubmitted) -> None:
        create_notifications_for_user(
            user_id=str(event.reported_by),
            notification_type=NotificationType.REPORT_RECEIVED.value,
            context={
                "report_id": str(event.report_id),
                "business_id": str(event.business_id),
                "business_name": event.business_name,
            },
            source_event_type="Ratings.BusinessReportSubmitted.v1",
            email_address=event.reporter_email,
        )
        create_internal_notification(
            notification_type=NotificationType.REPORT_ALERT.value,
            context={
                "report_id": str(event.report_id),
                "business_id": str(event.business_id),
                "business_name": event.business_name,
                "reason": REASON_TEXT.get(event.reason, "Review Issues"),
                "severity": event.severity,
                "reporter_email": event.reporter_email,
                "description": event.description,
            },
            source_event_type="Ratings.BusinessReportSubmitted.v1",
        )

    @handle(BusinessReportStatusChanged)
    def on_report_status_changed(self, event: BusinessReportStatusChanged) -> None:
        if event.status not in CLOSED_STATUSES:
            logger.info("Report still open, reporter not notified", report_id=str(event.report_id), status=event.status)
            return

        create_notifications_for_user(
            user_id=str(event.reported_by),
            notification_type=NotificationType.REPORT_RESOLVED.value,
            context={
                "report_id": str(event.report_id),
                "business_id": str(event.business_id),
                "business_name": event.business_name,
                "status": event.status,
                "admin_notes": event.admin_notes,
            },
            source_event_type="Ratings.BusinessReportStatusChanged.v1",
            email_address=event.reporter_email,
        )
