"""BDD tests for revising, removing and migrating ratings."""

from protean.exceptions import ValidationError
from pytest_bdd import parsers, scenarios, then, when

scenarios("features/rating_lifecycle.feature")


@when(
    parsers.cfparse('the rating is revised with "{answer_set}" answers'),
    target_fixture="rating",
)
def revise_rating(rating, answer_set, answer_sets, error):
    try:
        rating.revise(answer_sets[answer_set])
    except ValidationError as exc:
        error["exc"] = exc
    return rating


@when(
    parsers.cfparse('the rating is removed by "{removed_by}" for reason "{reason}"'),
    target_fixture="rating",
)
def remove_rating(rating, removed_by, reason, error):
    try:
        rating.remove(removed_by=removed_by, reason=reason)
    except ValidationError as exc:
        error["exc"] = exc
    return rating


@when(
    parsers.cfparse('the rating is migrated to user "{user_id}"'),
    target_fixture="rating",
)
def migrate_rating(rating, user_id, error):
    try:
        rating.migrate_to(user_id)
    except ValidationError as exc:
        error["exc"] = exc
    return rating


@then(parsers.cfparse('the rating belongs to user "{user_id}"'))
def rating_belongs_to(rating, user_id):
    assert str(rating.user_id) == user_id
    assert rating.user_account_type == "full"


@then(parsers.cfparse('the original user was "{user_id}"'))
def original_user_was(rating, user_id):
    assert str(rating.original_user_id) == user_id
