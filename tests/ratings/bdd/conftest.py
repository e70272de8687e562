"""Shared BDD fixtures and step definitions for the Ratings domain."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from ratings.rating.events import RatingMigrated, RatingRemoved, RatingRevised, RatingSubmitted
from ratings.rating.rating import Rating
from ratings.rating.scoring import QUESTION_KEYS
from ratings.report.events import BusinessReportStatusChanged, BusinessReportSubmitted
from ratings.report.report import BusinessReport

ANSWER_SETS = {
    "most welcoming": {
        "trump_welcome": "No",
        "obama_welcome": "Yes",
        "person_of_color_comfort": "Yes",
        "lgbtq_safety": "Yes",
        "undocumented_safety": "Yes",
        "firearm_normal": "No",
    },
    "least welcoming": {
        "trump_welcome": "Yes",
        "obama_welcome": "No",
        "person_of_color_comfort": "No",
        "lgbtq_safety": "No",
        "undocumented_safety": "No",
        "firearm_normal": "Yes",
    },
    "all probably": {key: "Probably" for key in QUESTION_KEYS},
    "all probably not": {key: "ProbablyNot" for key in QUESTION_KEYS},
}

_EVENT_CLASSES = {
    "RatingSubmitted": RatingSubmitted,
    "RatingRevised": RatingRevised,
    "RatingRemoved": RatingRemoved,
    "RatingMigrated": RatingMigrated,
    "BusinessReportSubmitted": BusinessReportSubmitted,
    "BusinessReportStatusChanged": BusinessReportStatusChanged,
}


@pytest.fixture()
def answer_sets():
    return ANSWER_SETS


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('an active "{answer_set}" rating by user "{user_id}"'),
    target_fixture="rating",
)
def active_rating(answer_set, user_id):
    rating = Rating.submit(business_id="place-bdd", user_id=user_id, answers=ANSWER_SETS[answer_set])
    rating._events.clear()
    return rating


@given("a removed rating", target_fixture="rating")
def removed_rating():
    rating = Rating.submit(business_id="place-bdd", user_id="user-bdd", answers=ANSWER_SETS["all probably"])
    rating.remove(removed_by="admin-bdd")
    rating._events.clear()
    return rating


@given(
    parsers.cfparse('a pending "{reason}" report on "{business_name}"'),
    target_fixture="report",
)
def pending_report(reason, business_name):
    report = BusinessReport.submit(
        business_id="place-bdd-report",
        business_name=business_name,
        reported_by="user-bdd-reporter",
        reason=reason,
        reporter_email="reporter@example.com",
    )
    report._events.clear()
    return report


@given(parsers.cfparse('the report has moved to "{status}"'))
def report_moved_to(report, status):
    report.change_status(status, admin_id="admin-bdd")
    report._events.clear()


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the total score is {score:f}"))
def total_score_is(rating, score):
    assert rating.total_score == pytest.approx(score)


@then(parsers.cfparse('the welcoming level is "{level}"'))
def welcoming_level_is(rating, level):
    assert rating.welcoming_level == level


@then(parsers.cfparse('the rating status is "{status}"'))
def rating_status_is(rating, status):
    assert rating.status == status


@then(parsers.cfparse('the report status is "{status}"'))
def report_status_is(report, status):
    assert report.status == status


@then("the action fails with a validation error")
def action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse("a {event_type} rating event is raised"))
def rating_event_raised(rating, event_type):
    event_cls = _EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in rating._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in rating._events]}"


@then(parsers.cfparse("a {event_type} report event is raised"))
def report_event_raised(report, event_type):
    event_cls = _EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in report._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in report._events]}"
