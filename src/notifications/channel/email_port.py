"""Email channel port — what the dispatcher needs from an email provider."""

from abc import ABC, abstractmethod

DEFAULT_SENDER = "Welcome Winks <noreply@welcomewinks.app>"


class EmailPort(ABC):
    sender: str = DEFAULT_SENDER

    @abstractmethod
    def send(self, to: str, subject: str, body: str) -> dict:
        """Send a plain-text email.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
