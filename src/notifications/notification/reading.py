"""Feed commands — a user reads or dismisses their in-app notifications.

Single-notification commands check ownership; the bulk variants only ever
touch the caller's own in-app notifications.
"""

import structlog
from notifications.domain import notifications
from notifications.notification.notification import Notification, NotificationChannel
from protean.exceptions import ValidationError
from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

logger = structlog.get_logger(__name__)



@notifications.command(part_of="Notification")
class MarkNotificationRead:
    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)


@notifications.command(part_of="Notification")
class MarkAllNotificationsRead:
    user_id: Identifier(required=True)


@notifications.command(part_of="Notification")
class DismissNotification:
    notification_id: Identifier(required=True)
    user_id: Identifier(required=True)


@notifications.command(part_of="Notification")
class DismissAllNotifications:
    user_id: Identifier(required=True)


def _owned(notification_id, user_id) -> Notification:
    notification = current_domain.repository_for(Notification).get(notification_id)
    if not notification.belongs_to(user_id):
        raise ValidationError({"notification_id": ["Notification does not belong to this user"]})
    return notification


def _feed(user_id, **filters) -> list[Notification]:
    return (
        current_domain.repository_for(Notification)
        ._dao.query.filter(recipient_id=str(user_id), channel=NotificationChannel.IN_APP.value, **filters)
        .limit(None)
        .all()
        .items
    )


@notifications.command_handler(part_of=Notification)
class NotificationFeedHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command: MarkNotificationRead):
        notification = _owned(command.notification_id, command.user_id)
        notification.mark_read()
        current_domain.repository_for(Notification).add(notification)

    @handle(MarkAllNotificationsRead)
    def mark_all_read(self, command: MarkAllNotificationsRead) -> int:
        repo = current_domain.repository_for(Notification)
        unread = _feed(command.user_id, is_read=False)
        for notification in unread:
            notification.mark_read()
            repo.add(notification)
        logger.info("Notifications marked read", user_id=str(command.user_id), count=len(unread))
        return len(unread)

    @handle(DismissNotification)
    def dismiss(self, command: DismissNotification):
        notification = _owned(command.notification_id, command.user_id)
        notification.dismiss()
        current_domain.repository_for(Notification).add(notification)

    @handle(DismissAllNotifications)
    def dismiss_all(self, command: DismissAllNotifications) -> int:
        repo = current_domain.repository_for(Notification)
        visible = _feed(command.user_id, is_dismissed=False)
        for notification in visible:
            notification.dismiss()
            repo.add(notification)
        logger.info("Notifications dismissed", user_id=str(command.user_id), count=len(visible))
        return len(visible)
