"""Application tests for administrator commands on device review ledgers."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError
from ratings.business.registration import RegisterBusiness
from ratings.device.ledger import ClearDeviceReviews, ForgetReviewedBusiness, ledger_for
from ratings.rating.scoring import QUESTION_KEYS
from ratings.rating.submission import SubmitRating

ANSWERS = {key: "Probably" for key in QUESTION_KEYS}


def _rate_from_device(place_id, user_id, device_id):
    current_domain.process(
        RegisterBusiness(place_id=place_id, name="Lunch Spot", latitude=29.76, longitude=-95.37),
        asynchronous=False,
    )
    return current_domain.process(
        SubmitRating(
            business_id=place_id,
            user_id=user_id,
            user_account_type="cookie",
            answers=json.dumps(ANSWERS),
            device_id=device_id,
        ),
        asynchronous=False,
    )


class TestClearDeviceReviews:
    def test_clears_every_entry(self):
        _rate_from_device("place-dev-1", "cookie_dev1", "device-clear")
        _rate_from_device("place-dev-2", "cookie_dev1", "device-clear")

        current_domain.process(ClearDeviceReviews(device_id="device-clear"), asynchronous=False)
        assert ledger_for("device-clear").reviewed_businesses() == []

    def test_device_can_review_again_after_clear(self):
        _rate_from_device("place-dev-3", "cookie_dev3", "device-again")
        current_domain.process(ClearDeviceReviews(device_id="device-again"), asynchronous=False)

        rating_id = _rate_from_device("place-dev-3", "cookie_dev3b", "device-again")
        assert rating_id is not None

    def test_unknown_device(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(ClearDeviceReviews(device_id="device-unknown"), asynchronous=False)


class TestForgetReviewedBusiness:
    def test_forgets_single_business(self):
        _rate_from_device("place-dev-4", "cookie_dev4", "device-forget")
        _rate_from_device("place-dev-5", "cookie_dev4", "device-forget")

        current_domain.process(
            ForgetReviewedBusiness(device_id="device-forget", business_id="place-dev-4"),
            asynchronous=False,
        )
        ledger = ledger_for("device-forget")
        assert not ledger.has_reviewed("place-dev-4")
        assert ledger.has_reviewed("place-dev-5")
