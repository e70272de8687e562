"""Domain tests for the Rating aggregate."""

import json

import pytest
from protean.exceptions import ValidationError
from ratings.rating.events import RatingMigrated, RatingRemoved, RatingRevised, RatingSubmitted
from ratings.rating.rating import UNKNOWN_IP, AccountType, Rating, RatingStatus
from ratings.rating.scoring import QUESTION_KEYS, build_profile

MOST_WELCOMING = {
    "trump_welcome": "No",
    "obama_welcome": "Yes",
    "person_of_color_comfort": "Yes",
    "lgbtq_safety": "Yes",
    "undocumented_safety": "Yes",
    "firearm_normal": "No",
}
ALL_PROBABLY = {key: "Probably" for key in QUESTION_KEYS}


def _rating(**overrides):
    defaults = {
        "business_id": "place-dom-1",
        "user_id": "user-dom-1",
        "answers": MOST_WELCOMING,
    }
    defaults.update(overrides)
    return Rating.submit(**defaults)


class TestRatingSubmit:
    def test_scores_answers(self):
        rating = _rating()
        assert rating.total_score == 4.998
        assert rating.welcoming_level == "very-welcoming"
        assert rating.responses.trump_welcome == 0.833
        assert rating.responses.as_dict()["firearm_normal"] == 0.833

    def test_keeps_raw_answers(self):
        rating = _rating(answers=ALL_PROBABLY)
        assert rating.answer_map() == ALL_PROBABLY
        assert json.loads(rating.answers)["obama_welcome"] == "Probably"

    def test_defaults(self):
        rating = _rating()
        assert rating.status == RatingStatus.ACTIVE.value
        assert rating.user_account_type == AccountType.ANONYMOUS.value
        assert rating.user_ip_address == UNKNOWN_IP
        assert rating.created_at is not None
        assert rating.is_active

    def test_records_account_type_and_ip(self):
        rating = _rating(user_account_type="cookie", user_ip_address="203.0.113.9")
        assert rating.user_account_type == "cookie"
        assert rating.user_ip_address == "203.0.113.9"

    def test_raises_rating_submitted(self):
        rating = _rating()
        events = [e for e in rating._events if isinstance(e, RatingSubmitted)]
        assert len(events) == 1
        assert events[0].total_score == 4.998
        assert events[0].welcoming_level == "very-welcoming"
        assert events[0].business_id == "place-dom-1"

    def test_incomplete_answers_rejected(self):
        answers = dict(MOST_WELCOMING)
        answers.pop("obama_welcome")
        with pytest.raises(ValidationError):
            _rating(answers=answers)

    def test_invalid_account_type_rejected(self):
        with pytest.raises(ValidationError):
            _rating(user_account_type="premium")

    def test_scored_with_profile(self):
        profile = build_profile({"yes": 1.0})
        rating = _rating(profile=profile)
        assert rating.total_score == 6.0
        assert rating.welcoming_level == "very-welcoming"


class TestRatingRevise:
    def test_rescoring(self):
        rating = _rating()
        rating._events.clear()
        rating.revise(ALL_PROBABLY)
        assert rating.total_score == pytest.approx(2.786)
        assert rating.welcoming_level == "moderately-welcoming"
        assert rating.answer_map() == ALL_PROBABLY

    def test_raises_rating_revised(self):
        rating = _rating()
        rating._events.clear()
        rating.revise(ALL_PROBABLY)
        event = rating._events[-1]
        assert isinstance(event, RatingRevised)
        assert event.previous_total_score == 4.998
        assert event.total_score == pytest.approx(2.786)

    def test_updates_ip_when_given(self):
        rating = _rating(user_ip_address="203.0.113.1")
        rating.revise(ALL_PROBABLY, user_ip_address="203.0.113.2")
        assert rating.user_ip_address == "203.0.113.2"

    def test_keeps_ip_when_omitted(self):
        rating = _rating(user_ip_address="203.0.113.1")
        rating.revise(ALL_PROBABLY)
        assert rating.user_ip_address == "203.0.113.1"

    def test_removed_rating_cannot_be_revised(self):
        rating = _rating()
        rating.remove(removed_by="admin-1")
        with pytest.raises(ValidationError) as exc:
            rating.revise(ALL_PROBABLY)
        assert "cannot be revised" in str(exc.value)


class TestRatingRemove:
    def test_soft_removal(self):
        rating = _rating()
        rating.remove(removed_by="admin-1", reason="Spam")
        assert rating.status == RatingStatus.REMOVED.value
        assert rating.removed_by == "admin-1"
        assert rating.removal_reason == "Spam"
        assert rating.removed_at is not None
        assert not rating.is_active

    def test_raises_rating_removed(self):
        rating = _rating()
        rating._events.clear()
        rating.remove(removed_by="admin-1")
        assert isinstance(rating._events[-1], RatingRemoved)
        assert rating._events[-1].total_score == 4.998

    def test_cannot_remove_twice(self):
        rating = _rating()
        rating.remove(removed_by="admin-1")
        with pytest.raises(ValidationError) as exc:
            rating.remove(removed_by="admin-2")
        assert "already been removed" in str(exc.value)


class TestRatingMigration:
    def test_moves_rating_to_full_account(self):
        rating = _rating(user_id="cookie_abc", user_account_type="cookie")
        rating.migrate_to("user-full-1")
        assert str(rating.user_id) == "user-full-1"
        assert str(rating.original_user_id) == "cookie_abc"
        assert rating.user_account_type == AccountType.FULL.value
        assert rating.migrated_at is not None

    def test_keeps_first_original_user(self):
        rating = _rating(user_id="cookie_abc", user_account_type="cookie")
        rating.migrate_to("user-full-1")
        rating.migrate_to("user-full-2")
        assert str(rating.original_user_id) == "cookie_abc"

    def test_raises_rating_migrated(self):
        rating = _rating(user_id="cookie_abc", user_account_type="cookie")
        rating._events.clear()
        rating.migrate_to("user-full-1")
        event = rating._events[-1]
        assert isinstance(event, RatingMigrated)
        assert event.from_user_id == "cookie_abc"
        assert event.to_user_id == "user-full-1"

    def test_same_user_rejected(self):
        rating = _rating(user_id="user-full-1")
        with pytest.raises(ValidationError):
            rating.migrate_to("user-full-1")
