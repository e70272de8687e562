"""Push channel port — what the dispatcher needs from a push provider."""

from abc import ABC, abstractmethod


class PushPort(ABC):
    @abstractmethod
    def send(self, device_token: str, title: str, body: str, data: dict | None = None) -> dict:
        """Send a push message to a user's registered device.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
