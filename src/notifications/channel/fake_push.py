"""In-memory push adapter, the default outside production."""

from uuid import uuid4

from notifications.channel.push_port import PushPort


class FakePushAdapter(PushPort):
    """Records pushes per device token."""

    def __init__(self):
        self.sent: list[dict] = []
        self.failure: str | None = None

    def fail_with(self, reason: str = "Push delivery failed"):
        """Make every following send fail with ``reason``."""
        self.failure = reason

    def send(self, device_token: str, title: str, body: str, data: dict | None = None) -> dict:
        if self.failure:
            return {"message_id": None, "status": "failed", "error": self.failure}

        message_id = f"push-{uuid4().hex[:12]}"
        self.sent.append(
            {"message_id": message_id, "device_token": device_token, "title": title, "body": body, "data": data or {}}
        )
        return {"message_id": message_id, "status": "sent"}

    def messages_for(self, device_token: str) -> list[dict]:
        return [push for push in self.sent if push["device_token"] == device_token]

    def reset(self):
        self.sent.clear()
        self.failure = None
