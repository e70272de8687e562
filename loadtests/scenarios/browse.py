"""Read-heavy browsing scenarios: nearby, top rated and search."""

import random

from locust import TaskSet, task

from loadtests.data_generators import METRO_CENTRES, fake
from loadtests.helpers.response import extract_error_detail


class BrowseMapTaskSet(TaskSet):
    """Anonymous visitors panning the map and searching."""

    @task(5)
    def nearby(self):
        lat, lng = random.choice(METRO_CENTRES)
        with self.client.get(
            "/businesses/nearby",
            params={"latitude": lat, "longitude": lng, "radius_km": random.choice([1, 5, 10])},
            catch_response=True,
            name="GET /businesses/nearby",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Nearby failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task(2)
    def top_rated(self):
        with self.client.get("/businesses/top", catch_response=True, name="GET /businesses/top") as resp:
            if resp.status_code != 200:
                resp.failure(f"Top rated failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task(2)
    def search(self):
        with self.client.get(
            "/businesses/search",
            params={"q": fake.last_name()[:3]},
            catch_response=True,
            name="GET /businesses/search",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Search failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task(1)
    def scoring_profile(self):
        with self.client.get("/scoring/profile", catch_response=True, name="GET /scoring/profile") as resp:
            if resp.status_code != 200:
                resp.failure(f"Scoring profile failed: {resp.status_code} — {extract_error_detail(resp)}")
