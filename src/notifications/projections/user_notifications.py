"""UserNotifications — a user's in-app notification feed."""

from notifications.domain import notifications
from notifications.notification.events import (
    NotificationCreated,
    NotificationDismissed,
    NotificationRead,
)
from notifications.notification.notification import Notification, NotificationChannel, RecipientType
from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

FEED_LIMIT = 100


@notifications.projection
class UserNotifications:
    notification_id: Identifier(identifier=True, required=True)
    user_id: Identifier(required=True)
    notification_type: String(required=True)
    title: String(required=True, max_length=200)
    message: Text(required=True)
    action_url: String(max_length=500)
    action_label: String(max_length=100)
    is_read: Boolean(default=False)
    read_at: DateTime()
    created_at: DateTime()


@notifications.projector(projector_for=UserNotifications, aggregates=[Notification])
class UserNotificationsProjector:
    @on(NotificationCreated)
    def on_notification_created(self, event):
        if event.channel != NotificationChannel.IN_APP.value or event.recipient_type != RecipientType.USER.value:
            return

        current_domain.repository_for(UserNotifications).add(
            UserNotifications(
                notification_id=event.notification_id,
                user_id=event.recipient_id,
                notification_type=event.notification_type,
                title=event.title,
                message=event.message,
                action_url=event.action_url,
                action_label=event.action_label,
                is_read=False,
                created_at=event.created_at,
            )
        )

    @on(NotificationRead)
    def on_notification_read(self, event):
        repo = current_domain.repository_for(UserNotifications)
        try:
            entry = repo.get(event.notification_id)
        except ObjectNotFoundError:
            return
        entry.is_read = True
        entry.read_at = event.read_at
        repo.add(entry)

    @on(NotificationDismissed)
    def on_notification_dismissed(self, event):
        repo = current_domain.repository_for(UserNotifications)
        try:
            entry = repo.get(event.notification_id)
        except ObjectNotFoundError:
            return
        repo._dao.delete(entry)


def user_feed(user_id, unread_only: bool = False, limit: int = FEED_LIMIT) -> list[UserNotifications]:
    """Newest first."""
    filters = {"user_id": str(user_id)}
    if unread_only:
        filters["is_read"] = False
    return (
        current_domain.repository_for(UserNotifications)
        ._dao.query.filter(**filters)
        .order_by("-created_at")
        .limit(limit)
        .all()
        .items
    )


def unread_count(user_id) -> int:
    return (
        current_domain.repository_for(UserNotifications)
        ._dao.query.filter(user_id=str(user_id), is_read=False)
        .all()
        .total
    )
