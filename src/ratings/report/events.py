"""Domain events for business reports."""

from protean.fields import DateTime, Identifier, String, Text

from ratings.domain import ratings


@ratings.event(part_of="BusinessReport")
class BusinessReportSubmitted:
    """A user reported a business for review manipulation."""

    __version__ = 1

    report_id = Identifier(required=True)
    business_id = Identifier(required=True)
    business_name = String(required=True)
    reported_by = Identifier(required=True)
    reporter_email = String()
    reason = String(required=True)
    description = Text()
    severity = String(required=True)
    submitted_at = DateTime(required=True)


@ratings.event(part_of="BusinessReport")
class BusinessReportStatusChanged:
    """An administrator moved a report through the review workflow."""

    __version__ = 1

    report_id = Identifier(required=True)
    business_id = Identifier(required=True)
    business_name = String(required=True)
    reported_by = Identifier(required=True)
    reporter_email = String()
    previous_status = String(required=True)
    status = String(required=True)
    admin_id = String()
    admin_notes = Text()
    changed_at = DateTime(required=True)
