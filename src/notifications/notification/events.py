"""Domain events for the Notification aggregate."""

from notifications.domain import notifications
from protean.fields import DateTime, Identifier, Integer, String, Text


@notifications.event(part_of="Notification")
class NotificationCreated:
    """A notification was created and queued for dispatch."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    recipient_type: String(required=True)
    notification_type: String(required=True)
    channel: String(required=True)
    title: String(required=True)
    message: Text(required=True)
    action_url: String()
    action_label: String()
    source_event_type: String()
    created_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationSent:
    """A notification was handed to its channel."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    channel: String(required=True)
    sent_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationFailed:
    """A notification could not be sent."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    channel: String(required=True)
    reason: String(required=True)
    retry_count: Integer(required=True)
    max_retries: Integer(required=True)
    failed_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationCancelled:
    """A pending notification was cancelled."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    channel: String(required=True)
    reason: String(required=True)
    cancelled_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationRetried:
    """A failed notification was queued for another attempt."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    channel: String(required=True)
    retry_count: Integer(required=True)
    retried_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationRead:
    """The recipient opened a notification."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    read_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationDismissed:
    """The recipient removed a notification from their feed."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    dismissed_at: DateTime(required=True)
