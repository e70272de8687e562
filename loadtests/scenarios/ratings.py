"""Ratings domain load test scenarios.

Stateful SequentialTaskSet journeys: a rater discovering and rating
businesses, a cookie visitor who later signs up, and a reporter. Steps
execute in order; each depends on the previous step succeeding.
"""

import random

from locust import SequentialTaskSet, task

from loadtests.data_generators import (
    business_data,
    cookie_user_id,
    device_id,
    rating_data,
    report_data,
    user_id,
)
from loadtests.helpers.response import extract_error_detail, is_expected_rejection
from loadtests.helpers.state import RaterState


class _RaterTaskSet(SequentialTaskSet):
    def on_start(self):
        self.state = RaterState(user_id=user_id(), device_id=device_id())

    def _register_business(self, chain: bool = False) -> str | None:
        payload = business_data(chain=chain)
        with self.client.post(
            "/businesses",
            json=payload,
            catch_response=True,
            name="POST /businesses",
        ) as resp:
            if resp.status_code == 201:
                business_id = resp.json()["business_id"]
                self.state.business_ids.append(business_id)
                self.state.business_names[business_id] = payload["name"]
                return business_id
            resp.failure(f"Register business failed: {resp.status_code} — {extract_error_detail(resp)}")
            return None

    def _rate(self, business_id: str, device: str | None = None) -> str | None:
        with self.client.post(
            "/ratings",
            json=rating_data(business_id, self.state.user_id, device),
            catch_response=True,
            name="POST /ratings",
        ) as resp:
            if resp.status_code == 201:
                rating_id = resp.json()["rating_id"]
                self.state.rating_ids.append(rating_id)
                return rating_id
            if is_expected_rejection(resp):
                resp.success()
                return None
            resp.failure(f"Submit rating failed: {resp.status_code} — {extract_error_detail(resp)}")
            return None


class RateNeighbourhoodJourney(_RaterTaskSet):
    """Register three businesses -> rate each -> read scores -> check stats.

    Generates BusinessRegistered (x3), RatingSubmitted (x3) and
    BusinessRated (x3), plus achievement unlocks on the way.
    """

    @task
    def register_businesses(self):
        for _ in range(3):
            self._register_business(chain=random.random() < 0.2)
        if not self.state.business_ids:
            self.interrupt()

    @task
    def rate_businesses(self):
        for business_id in self.state.business_ids:
            self._rate(business_id)

    @task
    def read_business(self):
        business_id = random.choice(self.state.business_ids)
        with self.client.get(
            f"/businesses/{business_id}",
            catch_response=True,
            name="GET /businesses/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Get business failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def reviewer_stats(self):
        with self.client.get(
            f"/ratings/users/{self.state.user_id}/stats",
            catch_response=True,
            name="GET /ratings/users/{id}/stats",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Reviewer stats failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def achievements(self):
        with self.client.get(
            f"/ratings/users/{self.state.user_id}/achievements",
            catch_response=True,
            name="GET /ratings/users/{id}/achievements",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Achievements failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class CookieVisitorJourney(_RaterTaskSet):
    """Rate as a cookie visitor -> retry from same device (rejected) -> sign up.

    Exercises the per-device ledger and rating migration.
    """

    def on_start(self):
        self.state = RaterState(user_id=cookie_user_id(), device_id=device_id())

    @task
    def rate_as_cookie(self):
        business_id = self._register_business()
        if business_id is None or self._rate(business_id, self.state.device_id) is None:
            self.interrupt()

    @task
    def second_attempt_from_device(self):
        business_id = self.state.business_ids[0]
        with self.client.post(
            "/ratings",
            json=rating_data(business_id, cookie_user_id(), self.state.device_id),
            catch_response=True,
            name="POST /ratings (same device)",
        ) as resp:
            if is_expected_rejection(resp):
                resp.success()
            else:
                resp.failure(f"Expected device rejection, got {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def sign_up(self):
        with self.client.post(
            "/ratings/migrate",
            json={"from_user_id": self.state.user_id, "to_user_id": user_id()},
            catch_response=True,
            name="POST /ratings/migrate",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Migration failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class ReportBusinessJourney(_RaterTaskSet):
    """Register -> rate -> report the business. Fans out report notifications."""

    @task
    def register_and_rate(self):
        business_id = self._register_business()
        if business_id is None:
            self.interrupt()
            return
        self._rate(business_id)

    @task
    def report(self):
        business_id = self.state.business_ids[0]
        payload = report_data(business_id, self.state.business_names[business_id], self.state.user_id)
        with self.client.post(
            "/reports",
            json=payload,
            catch_response=True,
            name="POST /reports",
        ) as resp:
            if resp.status_code != 201 and not is_expected_rejection(resp):
                resp.failure(f"Report failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()
