"""Application tests for revising, removing, migrating and re-scoring ratings."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from ratings.business.registration import RegisterBusiness
from ratings.projections.business_score import BusinessScore
from ratings.projections.user_rating_history import UserRatingHistory
from ratings.rating.migration import MigrateUserRatings
from ratings.rating.rating import AccountType, Rating, RatingStatus
from ratings.rating.refresh import RefreshBusinessScores
from ratings.rating.removal import BulkRemoveRatings, RemoveRating
from ratings.rating.revision import ReviseRating
from ratings.rating.scoring import QUESTION_KEYS
from ratings.rating.submission import SubmitRating

MOST_WELCOMING = {
    "trump_welcome": "No",
    "obama_welcome": "Yes",
    "person_of_color_comfort": "Yes",
    "lgbtq_safety": "Yes",
    "undocumented_safety": "Yes",
    "firearm_normal": "No",
}
ALL_PROBABLY = {key: "Probably" for key in QUESTION_KEYS}


def _register(place_id):
    current_domain.process(
        RegisterBusiness(place_id=place_id, name=f"Business {place_id}", latitude=34.05, longitude=-118.24),
        asynchronous=False,
    )


def _submit(business_id, user_id, answers=MOST_WELCOMING, **overrides):
    command = SubmitRating(business_id=business_id, user_id=user_id, answers=json.dumps(answers), **overrides)
    return current_domain.process(command, asynchronous=False)


def _rated(place_id, user_id, answers=MOST_WELCOMING, **overrides):
    _register(place_id)
    return _submit(place_id, user_id, answers, **overrides)


def _score(business_id):
    try:
        return current_domain.repository_for(BusinessScore).get(business_id)
    except ObjectNotFoundError:
        return None


class TestReviseRating:
    def test_author_revises(self):
        rating_id = _rated("place-rev-1", "user-rev-1")
        current_domain.process(
            ReviseRating(rating_id=rating_id, user_id="user-rev-1", answers=json.dumps(ALL_PROBABLY)),
            asynchronous=False,
        )
        rating = current_domain.repository_for(Rating).get(rating_id)
        assert rating.total_score == pytest.approx(2.786)
        assert rating.welcoming_level == "moderately-welcoming"

    def test_revision_refreshes_projections(self):
        rating_id = _rated("place-rev-2", "user-rev-2")
        current_domain.process(
            ReviseRating(rating_id=rating_id, user_id="user-rev-2", answers=json.dumps(ALL_PROBABLY)),
            asynchronous=False,
        )
        assert _score("place-rev-2").average_score == pytest.approx(2.786)
        history = current_domain.repository_for(UserRatingHistory).get(rating_id)
        assert history.welcoming_level == "moderately-welcoming"

    def test_other_user_cannot_revise(self):
        rating_id = _rated("place-rev-3", "user-rev-3")
        with pytest.raises(ValidationError) as exc:
            current_domain.process(
                ReviseRating(rating_id=rating_id, user_id="someone-else", answers=json.dumps(ALL_PROBABLY)),
                asynchronous=False,
            )
        assert "Only the author" in str(exc.value)


class TestRemoveRating:
    def test_soft_removes(self):
        rating_id = _rated("place-rem-1", "user-rem-1")
        current_domain.process(
            RemoveRating(rating_id=rating_id, removed_by="admin-1", reason="Spam"),
            asynchronous=False,
        )
        rating = current_domain.repository_for(Rating).get(rating_id)
        assert rating.status == RatingStatus.REMOVED.value
        assert rating.removed_by == "admin-1"

    def test_last_rating_removed_clears_score(self):
        rating_id = _rated("place-rem-2", "user-rem-2")
        assert _score("place-rem-2") is not None

        current_domain.process(RemoveRating(rating_id=rating_id, removed_by="admin-1"), asynchronous=False)
        assert _score("place-rem-2") is None

    def test_removal_recomputes_average(self):
        _rated("place-rem-3", "user-a", MOST_WELCOMING)
        removed_id = _submit("place-rem-3", "user-b", ALL_PROBABLY)

        current_domain.process(RemoveRating(rating_id=removed_id, removed_by="admin-1"), asynchronous=False)
        score = _score("place-rem-3")
        assert score.total_ratings == 1
        assert score.average_score == 4.998

    def test_removed_rating_leaves_history(self):
        rating_id = _rated("place-rem-4", "user-rem-4")
        current_domain.process(RemoveRating(rating_id=rating_id, removed_by="admin-1"), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(UserRatingHistory).get(rating_id)

    def test_removing_twice_rejected(self):
        rating_id = _rated("place-rem-5", "user-rem-5")
        current_domain.process(RemoveRating(rating_id=rating_id, removed_by="admin-1"), asynchronous=False)
        with pytest.raises(ValidationError):
            current_domain.process(RemoveRating(rating_id=rating_id, removed_by="admin-1"), asynchronous=False)

    def test_rater_can_rate_again_after_removal(self):
        first_id = _rated("place-rem-6", "user-rem-6")
        current_domain.process(RemoveRating(rating_id=first_id, removed_by="admin-1"), asynchronous=False)

        second_id = _submit("place-rem-6", "user-rem-6", ALL_PROBABLY)
        assert second_id != first_id
        assert _score("place-rem-6").total_ratings == 1


class TestBulkRemoveRatings:
    def test_removes_all(self):
        _register("place-bulk-1")
        ids = [_submit("place-bulk-1", f"user-bulk-{i}") for i in range(3)]

        result = current_domain.process(
            BulkRemoveRatings(rating_ids=json.dumps(ids), removed_by="admin-1", reason="Coordinated spam"),
            asynchronous=False,
        )
        assert result.success is True
        assert result.removed_count == 3
        assert result.failed_count == 0
        assert _score("place-bulk-1") is None

    def test_reports_failures(self):
        rating_id = _rated("place-bulk-2", "user-bulk-x")
        current_domain.process(RemoveRating(rating_id=rating_id, removed_by="admin-1"), asynchronous=False)
        keep_id = _submit("place-bulk-2", "user-bulk-y")

        result = current_domain.process(
            BulkRemoveRatings(
                rating_ids=json.dumps([rating_id, "missing-rating", keep_id]),
                removed_by="admin-1",
            ),
            asynchronous=False,
        )
        assert result.success is False
        assert result.removed_count == 1
        assert result.failed_count == 2
        assert any("missing-rating not found" in error for error in result.errors)
        assert any("already been removed" in error for error in result.errors)


class TestMigrateUserRatings:
    def test_moves_ratings_to_full_account(self):
        first = _rated("place-mig-1", "cookie_mig", user_account_type=AccountType.COOKIE.value)
        second = _rated("place-mig-2", "cookie_mig", user_account_type=AccountType.COOKIE.value)

        migrated = current_domain.process(
            MigrateUserRatings(from_user_id="cookie_mig", to_user_id="user-mig"),
            asynchronous=False,
        )
        assert migrated == 2

        repo = current_domain.repository_for(Rating)
        for rating_id in (first, second):
            rating = repo.get(rating_id)
            assert str(rating.user_id) == "user-mig"
            assert str(rating.original_user_id) == "cookie_mig"
            assert rating.user_account_type == AccountType.FULL.value

    def test_history_follows_the_user(self):
        rating_id = _rated("place-mig-3", "cookie_hist")
        current_domain.process(
            MigrateUserRatings(from_user_id="cookie_hist", to_user_id="user-hist"),
            asynchronous=False,
        )
        history = current_domain.repository_for(UserRatingHistory).get(rating_id)
        assert str(history.user_id) == "user-hist"
        assert history.was_migrated is True

    def test_nothing_to_migrate(self):
        migrated = current_domain.process(
            MigrateUserRatings(from_user_id="cookie_empty", to_user_id="user-empty"),
            asynchronous=False,
        )
        assert migrated == 0

    def test_same_user_rejected(self):
        with pytest.raises(ValidationError):
            current_domain.process(
                MigrateUserRatings(from_user_id="user-same", to_user_id="user-same"),
                asynchronous=False,
            )


class TestRefreshBusinessScores:
    def test_rebuilds_missing_score(self):
        _rated("place-ref-1", "user-ref-1")
        repo = current_domain.repository_for(BusinessScore)
        repo._dao.delete(repo.get("place-ref-1"))

        refreshed = current_domain.process(RefreshBusinessScores(business_id="place-ref-1"), asynchronous=False)
        assert refreshed == 1
        assert _score("place-ref-1").average_score == 4.998

    def test_refresh_all(self):
        _rated("place-ref-2", "user-ref-2")
        _rated("place-ref-3", "user-ref-3")
        refreshed = current_domain.process(RefreshBusinessScores(), asynchronous=False)
        assert refreshed >= 2
