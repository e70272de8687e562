"""Application tests for the business report event handlers."""

from datetime import UTC, datetime

from notifications.channel import get_channel
from notifications.notification.helpers import OPERATIONS_RECIPIENT
from notifications.notification.notification import Notification, NotificationChannel, NotificationType
from notifications.notification.report_events import ReportEventsHandler
from notifications.preference.preference import NotificationPreference, Topic
from protean import current_domain
from shared.events.ratings import BusinessReportStatusChanged, BusinessReportSubmitted


def _submitted(reporter_email="reporter@example.com"):
    return BusinessReportSubmitted(
        report_id="report-1",
        business_id="place-rep",
        business_name="Shady Bar",
        reported_by="user-reporter",
        reporter_email=reporter_email,
        reason="fake_reviews",
        description="Ten perfect reviews in an hour",
        severity="high",
        submitted_at=datetime.now(UTC),
    )


def _status_changed(status, admin_notes=None):
    return BusinessReportStatusChanged(
        report_id="report-1",
        business_id="place-rep",
        business_name="Shady Bar",
        reported_by="user-reporter",
        reporter_email="reporter@example.com",
        previous_status="pending",
        status=status,
        admin_id="admin-1",
        admin_notes=admin_notes,
        changed_at=datetime.now(UTC),
    )


def _notifications_for(recipient_id, notification_type):
    return (
        current_domain.repository_for(Notification)
        ._dao.query.filter(recipient_id=recipient_id, notification_type=notification_type)
        .all()
        .items
    )


class TestReportSubmitted:
    def test_reporter_gets_confirmation_in_app_and_by_email(self):
        ReportEventsHandler().on_report_submitted(_submitted())
        received = _notifications_for("user-reporter", NotificationType.REPORT_RECEIVED.value)
        assert sorted(n.channel for n in received) == [NotificationChannel.EMAIL.value, NotificationChannel.IN_APP.value]
        assert len(get_channel(NotificationChannel.EMAIL.value).messages_to("reporter@example.com")) == 1

    def test_without_email_only_in_app(self):
        ReportEventsHandler().on_report_submitted(_submitted(reporter_email=None))
        received = _notifications_for("user-reporter", NotificationType.REPORT_RECEIVED.value)
        assert [n.channel for n in received] == [NotificationChannel.IN_APP.value]

    def test_operations_alerted(self):
        ReportEventsHandler().on_report_submitted(_submitted())
        [alert] = _notifications_for(OPERATIONS_RECIPIENT, NotificationType.REPORT_ALERT.value)
        assert alert.title == "New Report: Fake Reviews - Shady Bar"
        assert "Reporter: reporter@example.com" in alert.message

    def test_topic_switches_do_not_silence_reports(self):
        pref = NotificationPreference.create_default("user-reporter")
        pref.update_topics(**{t.value: False for t in Topic})
        current_domain.repository_for(NotificationPreference).add(pref)

        ReportEventsHandler().on_report_submitted(_submitted())
        assert len(_notifications_for("user-reporter", NotificationType.REPORT_RECEIVED.value)) == 2


class TestReportStatusChanged:
    def test_under_review_is_quiet(self):
        ReportEventsHandler().on_report_status_changed(_status_changed("under_review"))
        assert _notifications_for("user-reporter", NotificationType.REPORT_RESOLVED.value) == []

    def test_resolved_notifies_reporter(self):
        ReportEventsHandler().on_report_status_changed(_status_changed("resolved", admin_notes="Removed 4 ratings"))
        resolved = _notifications_for("user-reporter", NotificationType.REPORT_RESOLVED.value)
        assert len(resolved) == 2
        assert all("Admin Notes: Removed 4 ratings" in n.message for n in resolved)

    def test_dismissed_notifies_reporter(self):
        ReportEventsHandler().on_report_status_changed(_status_changed("dismissed"))
        resolved = _notifications_for("user-reporter", NotificationType.REPORT_RESOLVED.value)
        assert "Status: Dismissed" in resolved[0].message
