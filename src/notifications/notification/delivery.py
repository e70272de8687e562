"""Delivery commands — retry a failed notification or cancel a pending one."""

from notifications.domain import notifications
from notifications.notification.notification import Notification
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle


@notifications.command(part_of="Notification")
class RetryNotification:
    notification_id: Identifier(required=True)


@notifications.command(part_of="Notification")
class CancelNotification:
    notification_id: Identifier(required=True)
    reason: String(required=True, max_length=500)


@notifications.command_handler(part_of=Notification)
class DeliveryHandler:
    @handle(RetryNotification)
    def retry_notification(self, command: RetryNotification):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(command.notification_id)
        notification.retry()
        repo.add(notification)

    @handle(CancelNotification)
    def cancel_notification(self, command: CancelNotification):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(command.notification_id)
        notification.cancel(command.reason)
        repo.add(notification)
