"""In-memory email adapter, the default outside production."""

from uuid import uuid4

from notifications.channel.email_port import EmailPort


class FakeEmailAdapter(EmailPort):
    """Keeps an outbox instead of talking to a provider."""

    def __init__(self):
        self.outbox: list[dict] = []
        self.failure: str | None = None

    def fail_with(self, reason: str = "Email delivery failed"):
        """Make every following send fail with ``reason``."""
        self.failure = reason

    def send(self, to: str, subject: str, body: str) -> dict:
        if self.failure:
            return {"message_id": None, "status": "failed", "error": self.failure}
        if not to:
            return {"message_id": None, "status": "failed", "error": "Missing recipient address"}

        message_id = f"email-{uuid4().hex[:12]}"
        self.outbox.append(
            {"message_id": message_id, "from": self.sender, "to": to, "subject": subject, "body": body}
        )
        return {"message_id": message_id, "status": "sent"}

    def messages_to(self, address: str) -> list[dict]:
        return [message for message in self.outbox if message["to"] == address]

    def reset(self):
        self.outbox.clear()
        self.failure = None
