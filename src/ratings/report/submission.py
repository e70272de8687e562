"""SubmitBusinessReport / UpdateReportStatus."""

from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from ratings.domain import logger, ratings
from ratings.rating.rating import AccountType
from ratings.report.report import BusinessReport


@ratings.command(part_of="BusinessReport")
class SubmitBusinessReport:
    business_id = Identifier(required=True)
    business_name = String(required=True, max_length=255)
    reported_by = Identifier(required=True)
    reporter_account_type = String(default=AccountType.ANONYMOUS.value)
    reporter_email = String(max_length=254)
    reporter_ip_address = String(max_length=64)
    reason = String(required=True)
    description = Text()


@ratings.command(part_of="BusinessReport")
class UpdateReportStatus:
    report_id = Identifier(required=True)
    status = String(required=True)
    admin_id = String(max_length=255)
    notes = Text()


def has_reported(business_id, user_id) -> bool:
    repo = current_domain.repository_for(BusinessReport)
    return bool(repo._dao.query.filter(business_id=str(business_id), reported_by=str(user_id)).all().items)


@ratings.command_handler(part_of=BusinessReport)
class BusinessReportHandler:
    @handle(SubmitBusinessReport)
    def submit_report(self, command):
        if has_reported(command.business_id, command.reported_by):
            raise ValidationError({"report": ["You have already reported this business"]})

        report = BusinessReport.submit(
            business_id=command.business_id,
            business_name=command.business_name,
            reported_by=command.reported_by,
            reason=command.reason,
            description=command.description,
            reporter_account_type=command.reporter_account_type,
            reporter_email=command.reporter_email,
            reporter_ip_address=command.reporter_ip_address,
        )
        current_domain.repository_for(BusinessReport).add(report)

        logger.info(
            "Business report submitted",
            report_id=str(report.id),
            business_id=str(command.business_id),
            reason=report.reason,
        )
        return str(report.id)

    @handle(UpdateReportStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(BusinessReport)
        report = repo.get(command.report_id)
        report.change_status(command.status, admin_id=command.admin_id, notes=command.notes)
        repo.add(report)
