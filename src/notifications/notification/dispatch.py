"""Internal dispatch handler — sends notifications via channel adapters.

Reacts to NotificationCreated and NotificationRetried. In-app
notifications need no delivery and are marked sent straight away; email
and push copies go through their channel adapter and end up SENT or
FAILED based on the result.
"""

import structlog
from notifications.channel import get_channel
from notifications.domain import notifications
from notifications.notification.events import NotificationCreated, NotificationRetried
from notifications.notification.notification import (
    Notification,
    NotificationChannel,
    NotificationStatus,
)
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

logger = structlog.get_logger(__name__)


@notifications.event_handler(part_of=Notification)
class NotificationDispatcher:
    """Dispatches notifications via channel adapters."""

    @handle(NotificationCreated)
    def on_notification_created(self, event: NotificationCreated) -> None:
        self._dispatch(event.notification_id)

    @handle(NotificationRetried)
    def on_notification_retried(self, event: NotificationRetried) -> None:
        self._dispatch(event.notification_id)

    def _dispatch(self, notification_id) -> None:
        repo = current_domain.repository_for(Notification)

        try:
            notification = repo.get(notification_id)
        except ObjectNotFoundError:
            logger.error("Failed to load notification for dispatch", notification_id=str(notification_id))
            return

        if NotificationStatus(notification.status) != NotificationStatus.PENDING:
            logger.info(
                "Notification not in PENDING status, skipping dispatch",
                notification_id=str(notification_id),
                status=notification.status,
            )
            return

        if notification.channel == NotificationChannel.IN_APP.value:
            notification.mark_sent()
            repo.add(notification)
            return

        try:
            adapter = get_channel(notification.channel)
            result = _dispatch_via_channel(adapter, notification)

            if result.get("status") == "sent":
                notification.mark_sent()
            else:
                notification.mark_failed(result.get("error", "Unknown dispatch error"))
        except Exception as e:
            notification.mark_failed(str(e))
            logger.error(
                "Notification dispatch failed",
                notification_id=str(notification.id),
                error=str(e),
            )

        repo.add(notification)


def _dispatch_via_channel(adapter, notification: Notification) -> dict:
    """Route dispatch to the correct adapter method based on channel."""
    channel = notification.channel

    if channel == NotificationChannel.EMAIL.value:
        return adapter.send(
            to=notification.recipient_address,
            subject=notification.title,
            body=notification.message,
        )
    elif channel == NotificationChannel.PUSH.value:
        return adapter.send(
            device_token=str(notification.recipient_id),
            title=notification.title,
            body=notification.message,
            data={"action_url": notification.action_url} if notification.action_url else None,
        )
    else:
        return {"status": "failed", "error": f"Unknown channel: {channel}"}
