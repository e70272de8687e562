"""Notifications domain load test scenarios."""

from locust import SequentialTaskSet, task

from loadtests.data_generators import fake, topic_switches, user_id
from loadtests.helpers.response import extract_error_detail


class NotificationInboxJourney(SequentialTaskSet):
    """Set preferences -> read feed -> unread count -> mark all read."""

    def on_start(self):
        self.user_id = user_id()

    @task
    def update_channels(self):
        with self.client.put(
            f"/notifications/preferences/{self.user_id}",
            json={"email_enabled": True, "push_enabled": True, "email_address": fake.free_email()},
            catch_response=True,
            name="PUT /notifications/preferences/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update preferences failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def update_topics(self):
        with self.client.put(
            f"/notifications/preferences/{self.user_id}/topics",
            json=topic_switches(),
            catch_response=True,
            name="PUT /notifications/preferences/{id}/topics",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update topics failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def read_feed(self):
        with self.client.get(
            f"/notifications/users/{self.user_id}",
            catch_response=True,
            name="GET /notifications/users/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Feed failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def unread_count(self):
        with self.client.get(
            f"/notifications/users/{self.user_id}/unread-count",
            catch_response=True,
            name="GET /notifications/users/{id}/unread-count",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Unread count failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def mark_all_read(self):
        with self.client.put(
            f"/notifications/users/{self.user_id}/read-all",
            catch_response=True,
            name="PUT /notifications/users/{id}/read-all",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Mark all read failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()
