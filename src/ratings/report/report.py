"""BusinessReport aggregate — users flag businesses with manipulated reviews.

State Machine:
    PENDING → UNDER_REVIEW | RESOLVED | DISMISSED
    UNDER_REVIEW → RESOLVED | DISMISSED
    RESOLVED, DISMISSED → (terminal)
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text

from ratings.domain import ratings
from ratings.rating.rating import UNKNOWN_IP, AccountType
from ratings.report.events import BusinessReportStatusChanged, BusinessReportSubmitted


class ReportReason(Enum):
    FAKE_REVIEWS = "fake_reviews"
    SPAM_REVIEWS = "spam_reviews"


class ReportSeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReportStatus(Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


_VALID_TRANSITIONS = {
    ReportStatus.PENDING: {ReportStatus.UNDER_REVIEW, ReportStatus.RESOLVED, ReportStatus.DISMISSED},
    ReportStatus.UNDER_REVIEW: {ReportStatus.RESOLVED, ReportStatus.DISMISSED},
    ReportStatus.RESOLVED: set(),
    ReportStatus.DISMISSED: set(),
}

_CLOSED = {ReportStatus.RESOLVED, ReportStatus.DISMISSED}

_REASON_TEXT = {
    ReportReason.FAKE_REVIEWS: "Fake Reviews",
    ReportReason.SPAM_REVIEWS: "Spam Reviews",
}


def reason_display_text(reason) -> str:
    try:
        return _REASON_TEXT[ReportReason(reason)]
    except ValueError:
        return "Review Issues"


def severity_for(reason) -> str:
    return ReportSeverity.HIGH.value


@ratings.aggregate
class BusinessReport:
    business_id = Identifier(required=True)
    business_name = String(required=True, max_length=255)
    reported_by = Identifier(required=True)
    reporter_account_type = String(choices=AccountType, default=AccountType.ANONYMOUS.value)
    reporter_email = String(max_length=254)
    reporter_ip_address = String(max_length=64, default=UNKNOWN_IP)
    reason = String(choices=ReportReason, required=True)
    description = Text()
    severity = String(choices=ReportSeverity, default=ReportSeverity.HIGH.value)
    status = String(choices=ReportStatus, default=ReportStatus.PENDING.value)
    admin_notes = Text()
    resolved_by = String(max_length=255)
    resolved_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def description_length(self):
        if self.description and len(self.description) > 2000:
            raise ValidationError({"description": ["Description cannot exceed 2000 characters"]})

    @classmethod
    def submit(
        cls,
        business_id,
        business_name,
        reported_by,
        reason,
        description=None,
        reporter_account_type=AccountType.ANONYMOUS.value,
        reporter_email=None,
        reporter_ip_address=None,
    ):
        now = datetime.now(UTC)
        report = cls(
            business_id=business_id,
            business_name=business_name,
            reported_by=reported_by,
            reporter_account_type=reporter_account_type,
            reporter_email=reporter_email,
            reporter_ip_address=reporter_ip_address or UNKNOWN_IP,
            reason=reason,
            description=description,
            severity=severity_for(reason),
            status=ReportStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        report.raise_(
            BusinessReportSubmitted(
                report_id=str(report.id),
                business_id=str(business_id),
                business_name=business_name,
                reported_by=str(reported_by),
                reporter_email=reporter_email,
                reason=report.reason,
                description=description,
                severity=report.severity,
                submitted_at=now,
            )
        )
        return report

    def change_status(self, status, admin_id=None, notes=None):
        current = ReportStatus(self.status)
        try:
            target = ReportStatus(status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown report status: {status}"]}) from None
        if target not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

        now = datetime.now(UTC)
        self.status = target.value
        if notes is not None:
            self.admin_notes = notes
        if target in _CLOSED:
            self.resolved_by = admin_id
            self.resolved_at = now
        self.updated_at = now

        self.raise_(
            BusinessReportStatusChanged(
                report_id=str(self.id),
                business_id=str(self.business_id),
                business_name=self.business_name,
                reported_by=str(self.reported_by),
                reporter_email=self.reporter_email,
                previous_status=current.value,
                status=target.value,
                admin_id=admin_id,
                admin_notes=notes,
                changed_at=now,
            )
        )
