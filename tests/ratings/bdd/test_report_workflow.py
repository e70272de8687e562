"""BDD tests for the business report workflow."""

from protean.exceptions import ValidationError
from pytest_bdd import parsers, scenarios, then, when
from ratings.report.report import BusinessReport

scenarios("features/report_workflow.feature")


@when(
    parsers.cfparse('user "{user_id}" reports "{business_name}" for "{reason}"'),
    target_fixture="report",
)
def submit_report(user_id, business_name, reason):
    return BusinessReport.submit(
        business_id="place-bdd-rw",
        business_name=business_name,
        reported_by=user_id,
        reason=reason,
    )


@when(
    parsers.cfparse('an admin moves the report to "{status}"'),
    target_fixture="report",
)
def move_report(report, status, error):
    try:
        report.change_status(status, admin_id="admin-bdd", notes=f"Moved to {status}")
    except ValidationError as exc:
        error["exc"] = exc
    return report


@then(parsers.cfparse('the report severity is "{severity}"'))
def report_severity_is(report, severity):
    assert report.severity == severity


@then("the report records who resolved it")
def report_records_resolver(report):
    assert report.resolved_by == "admin-bdd"
    assert report.resolved_at is not None
