"""Domain tests for the BusinessReport aggregate and its state machine."""

import pytest
from protean.exceptions import ValidationError
from ratings.report.events import BusinessReportStatusChanged, BusinessReportSubmitted
from ratings.report.report import (
    BusinessReport,
    ReportSeverity,
    ReportStatus,
    reason_display_text,
    severity_for,
)


def _report(**overrides):
    defaults = {
        "business_id": "place-rep-1",
        "business_name": "Suspicious Diner",
        "reported_by": "user-rep-1",
        "reason": "fake_reviews",
        "description": "Lots of five star ratings from the same night.",
    }
    defaults.update(overrides)
    return BusinessReport.submit(**defaults)


class TestReportSubmit:
    def test_starts_pending_with_high_severity(self):
        report = _report()
        assert report.status == ReportStatus.PENDING.value
        assert report.severity == ReportSeverity.HIGH.value
        assert report.created_at is not None

    def test_raises_report_submitted(self):
        report = _report(reporter_email="reporter@example.com")
        event = report._events[-1]
        assert isinstance(event, BusinessReportSubmitted)
        assert event.reason == "fake_reviews"
        assert event.reporter_email == "reporter@example.com"
        assert event.severity == "high"

    def test_unknown_reason_rejected(self):
        with pytest.raises(ValidationError):
            _report(reason="bad_food")

    def test_description_limit(self):
        with pytest.raises(ValidationError) as exc:
            _report(description="x" * 2001)
        assert "2000 characters" in str(exc.value)


class TestReportStatusTransitions:
    def test_pending_to_under_review(self):
        report = _report()
        report.change_status("under_review", admin_id="admin-1")
        assert report.status == "under_review"
        assert report.resolved_at is None

    def test_resolve_records_admin_and_time(self):
        report = _report()
        report.change_status("resolved", admin_id="admin-1", notes="Removed 4 ratings")
        assert report.status == "resolved"
        assert report.resolved_by == "admin-1"
        assert report.resolved_at is not None
        assert report.admin_notes == "Removed 4 ratings"

    def test_under_review_to_dismissed(self):
        report = _report()
        report.change_status("under_review")
        report.change_status("dismissed", admin_id="admin-1")
        assert report.status == "dismissed"

    def test_closed_reports_are_terminal(self):
        report = _report()
        report.change_status("resolved", admin_id="admin-1")
        with pytest.raises(ValidationError) as exc:
            report.change_status("under_review")
        assert "Cannot transition" in str(exc.value)

    def test_unknown_status_rejected(self):
        report = _report()
        with pytest.raises(ValidationError) as exc:
            report.change_status("escalated")
        assert "Unknown report status" in str(exc.value)

    def test_status_change_event(self):
        report = _report(reporter_email="reporter@example.com")
        report._events.clear()
        report.change_status("dismissed", admin_id="admin-1", notes="Ratings look genuine")
        event = report._events[-1]
        assert isinstance(event, BusinessReportStatusChanged)
        assert event.previous_status == "pending"
        assert event.status == "dismissed"
        assert event.admin_notes == "Ratings look genuine"
        assert event.reporter_email == "reporter@example.com"


class TestReportHelpers:
    def test_reason_text(self):
        assert reason_display_text("fake_reviews") == "Fake Reviews"
        assert reason_display_text("spam_reviews") == "Spam Reviews"
        assert reason_display_text("other") == "Review Issues"

    def test_severity_is_high(self):
        assert severity_for("spam_reviews") == "high"
