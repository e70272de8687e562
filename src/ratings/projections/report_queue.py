"""ReportQueue — business reports still awaiting an administrator."""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from ratings.domain import ratings
from ratings.report.events import BusinessReportStatusChanged, BusinessReportSubmitted
from ratings.report.report import BusinessReport, ReportStatus, reason_display_text


@ratings.projection
class ReportQueue:
    report_id = Identifier(identifier=True, required=True)
    business_id = Identifier(required=True)
    business_name = String(required=True)
    reported_by = Identifier(required=True)
    reason = String(required=True)
    reason_text = String()
    description = Text()
    severity = String()
    status = String(required=True)
    submitted_at = DateTime()
    updated_at = DateTime()


@ratings.projector(projector_for=ReportQueue, aggregates=[BusinessReport])
class ReportQueueProjector:
    @on(BusinessReportSubmitted)
    def on_report_submitted(self, event):
        current_domain.repository_for(ReportQueue).add(
            ReportQueue(
                report_id=event.report_id,
                business_id=event.business_id,
                business_name=event.business_name,
                reported_by=event.reported_by,
                reason=event.reason,
                reason_text=reason_display_text(event.reason),
                description=event.description,
                severity=event.severity,
                status=ReportStatus.PENDING.value,
                submitted_at=event.submitted_at,
                updated_at=event.submitted_at,
            )
        )

    @on(BusinessReportStatusChanged)
    def on_report_status_changed(self, event):
        repo = current_domain.repository_for(ReportQueue)
        try:
            entry = repo.get(event.report_id)
        except ObjectNotFoundError:
            return

        if event.status in (ReportStatus.RESOLVED.value, ReportStatus.DISMISSED.value):
            repo._dao.delete(entry)
        else:
            entry.status = event.status
            entry.updated_at = event.changed_at
            repo.add(entry)
