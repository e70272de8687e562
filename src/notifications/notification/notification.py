"""Notification aggregate (CQRS) — one message to one user on one channel.

Notifications are created reactively from Ratings events (score updates,
nearby ratings, achievements, report updates) or by administrators
(system announcements, community activity). In-app notifications form the
user's feed and carry read/dismissed state; email and push copies are
dispatched through channel adapters.

State Machine:
    PENDING → SENT
    PENDING → FAILED → (retry) → PENDING
    PENDING → CANCELLED
"""

from datetime import UTC, datetime
from enum import Enum

from notifications.domain import notifications
from notifications.notification.events import (
    NotificationCancelled,
    NotificationCreated,
    NotificationDismissed,
    NotificationFailed,
    NotificationRead,
    NotificationRetried,
    NotificationSent,
)
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class NotificationType(Enum):
    NEW_BUSINESS = "NewBusiness"
    SCORE_UPDATE = "ScoreUpdate"
    ACHIEVEMENT = "Achievement"
    COMMUNITY_ACTIVITY = "CommunityActivity"
    SYSTEM = "System"
    NEARBY_RATING = "NearbyRating"
    REPORT_RECEIVED = "ReportReceived"
    REPORT_RESOLVED = "ReportResolved"
    REPORT_ALERT = "ReportAlert"


class NotificationChannel(Enum):
    IN_APP = "InApp"
    EMAIL = "Email"
    PUSH = "Push"


class NotificationStatus(Enum):
    PENDING = "Pending"
    SENT = "Sent"
    FAILED = "Failed"
    CANCELLED = "Cancelled"


class RecipientType(Enum):
    USER = "User"
    INTERNAL = "Internal"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    NotificationStatus.PENDING: {
        NotificationStatus.SENT,
        NotificationStatus.FAILED,
        NotificationStatus.CANCELLED,
    },
    NotificationStatus.FAILED: {
        NotificationStatus.PENDING,  # Via retry
    },
    NotificationStatus.SENT: set(),  # Terminal
    NotificationStatus.CANCELLED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@notifications.aggregate
class Notification:
    """A single notification delivered to a user via a channel."""

    # Recipient
    recipient_id: Identifier(required=True)
    recipient_type: String(choices=RecipientType, default=RecipientType.USER.value)
    recipient_address: String(max_length=254)  # Email address for the Email channel

    # Notification type and channel
    notification_type: String(choices=NotificationType, required=True)
    channel: String(choices=NotificationChannel, required=True)

    # Content
    title: String(required=True, max_length=200)
    message: Text(required=True)
    action_url: String(max_length=500)
    action_label: String(max_length=100)
    context_data: Text()  # JSON data used to render the template

    # Source event correlation
    source_event_type: String(max_length=200)

    # Status
    status: String(choices=NotificationStatus, default=NotificationStatus.PENDING.value)
    sent_at: DateTime()
    failure_reason: String(max_length=500)

    # Retry
    retry_count: Integer(default=0)
    max_retries: Integer(default=3)

    # Feed state
    is_read: Boolean(default=False)
    read_at: DateTime()
    is_dismissed: Boolean(default=False)
    dismissed_at: DateTime()

    # Timestamps
    created_at: DateTime()
    updated_at: DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        recipient_id,
        notification_type,
        channel,
        title,
        message,
        action_url=None,
        action_label=None,
        recipient_type=RecipientType.USER.value,
        recipient_address=None,
        source_event_type=None,
        context_data=None,
        max_retries=3,
    ):
        """Create a new notification in PENDING status."""
        if channel == NotificationChannel.EMAIL.value and not recipient_address:
            raise ValidationError({"recipient_address": ["Email notifications need a recipient address"]})

        now = datetime.now(UTC)

        notification = cls(
            recipient_id=recipient_id,
            recipient_type=recipient_type,
            recipient_address=recipient_address,
            notification_type=notification_type,
            channel=channel,
            title=title,
            message=message,
            action_url=action_url,
            action_label=action_label,
            source_event_type=source_event_type,
            context_data=context_data,
            status=NotificationStatus.PENDING.value,
            retry_count=0,
            max_retries=max_retries,
            is_read=False,
            is_dismissed=False,
            created_at=now,
            updated_at=now,
        )

        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                recipient_id=str(recipient_id),
                recipient_type=recipient_type,
                notification_type=notification_type,
                channel=channel,
                title=title,
                message=message,
                action_url=action_url,
                action_label=action_label,
                source_event_type=source_event_type,
                created_at=now,
            )
        )

        return notification

    # -------------------------------------------------------------------
    # Delivery transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = NotificationStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def mark_sent(self, sent_at=None):
        self._assert_can_transition(NotificationStatus.SENT)

        now = sent_at or datetime.now(UTC)
        self.status = NotificationStatus.SENT.value
        self.sent_at = now
        self.updated_at = now

        self.raise_(
            NotificationSent(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                channel=self.channel,
                sent_at=now,
            )
        )

    def mark_failed(self, reason):
        self._assert_can_transition(NotificationStatus.FAILED)

        now = datetime.now(UTC)
        self.status = NotificationStatus.FAILED.value
        self.failure_reason = reason
        self.retry_count = self.retry_count + 1
        self.updated_at = now

        self.raise_(
            NotificationFailed(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                channel=self.channel,
                reason=reason,
                retry_count=self.retry_count,
                max_retries=self.max_retries,
                failed_at=now,
            )
        )

    def cancel(self, reason):
        """Cancel a pending notification."""
        self._assert_can_transition(NotificationStatus.CANCELLED)

        now = datetime.now(UTC)
        self.status = NotificationStatus.CANCELLED.value
        self.failure_reason = reason
        self.updated_at = now

        self.raise_(
            NotificationCancelled(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                channel=self.channel,
                reason=reason,
                cancelled_at=now,
            )
        )

    def retry(self):
        """Put a failed notification back in the queue."""
        if NotificationStatus(self.status) != NotificationStatus.FAILED:
            raise ValidationError({"status": ["Only failed notifications can be retried"]})
        if self.retry_count >= self.max_retries:
            raise ValidationError({"retry_count": ["Maximum retry attempts exceeded"]})

        now = datetime.now(UTC)
        self.status = NotificationStatus.PENDING.value
        self.failure_reason = None
        self.updated_at = now

        self.raise_(
            NotificationRetried(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                channel=self.channel,
                retry_count=self.retry_count,
                retried_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Feed state
    # -------------------------------------------------------------------
    def mark_read(self):
        """Mark as read. Reading twice keeps the first read time."""
        if self.is_read:
            return

        now = datetime.now(UTC)
        self.is_read = True
        self.read_at = now
        self.updated_at = now

        self.raise_(
            NotificationRead(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                read_at=now,
            )
        )

    def dismiss(self):
        """Hide from the feed. A dismissed notification also counts as read."""
        if self.is_dismissed:
            return

        self.mark_read()
        now = datetime.now(UTC)
        self.is_dismissed = True
        self.dismissed_at = now
        self.updated_at = now

        self.raise_(
            NotificationDismissed(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                dismissed_at=now,
            )
        )

    def belongs_to(self, user_id) -> bool:
        return str(self.recipient_id) == str(user_id)
