"""NotificationPreference aggregate (CQRS) — what a user wants to hear about, and where.

Topic switches decide whether a kind of notification is created at all;
channel switches decide which copies go out besides the in-app one, which
is always on. Everything is opted in except push. Preferences are created
lazily, the first time a user changes them.
"""

from datetime import UTC, datetime
from enum import Enum

from notifications.domain import notifications
from notifications.notification.notification import NotificationChannel, NotificationType
from notifications.preference.events import ChannelsUpdated, PreferencesCreated, TopicsUpdated
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String


class Topic(Enum):
    NEW_BUSINESSES_NEARBY = "new_businesses_nearby"
    SCORE_UPDATES = "score_updates"
    COMMUNITY_ACTIVITY = "community_activity"
    ACHIEVEMENTS = "achievements"
    SYSTEM_UPDATES = "system_updates"


# Report notifications have no topic: a reporter always hears back.
TOPIC_FOR_TYPE = {
    NotificationType.NEW_BUSINESS.value: Topic.NEW_BUSINESSES_NEARBY,
    NotificationType.NEARBY_RATING.value: Topic.COMMUNITY_ACTIVITY,
    NotificationType.SCORE_UPDATE.value: Topic.SCORE_UPDATES,
    NotificationType.ACHIEVEMENT.value: Topic.ACHIEVEMENTS,
    NotificationType.COMMUNITY_ACTIVITY.value: Topic.COMMUNITY_ACTIVITY,
    NotificationType.SYSTEM.value: Topic.SYSTEM_UPDATES,
}

DEFAULT_TOPICS = {topic.value: True for topic in Topic}
DEFAULT_CHANNELS = {
    NotificationChannel.IN_APP.value: True,
    NotificationChannel.EMAIL.value: True,
    NotificationChannel.PUSH.value: False,
}


def topic_for(notification_type: str) -> Topic | None:
    return TOPIC_FOR_TYPE.get(notification_type)


def default_enabled_channels() -> list[str]:
    return [channel for channel, enabled in DEFAULT_CHANNELS.items() if enabled]


@notifications.aggregate
class NotificationPreference:
    """A user's notification topics and channels."""

    user_id: Identifier(required=True, unique=True)
    email_address: String(max_length=254)

    # Topics
    new_businesses_nearby: Boolean(default=True)
    score_updates: Boolean(default=True)
    community_activity: Boolean(default=True)
    achievements: Boolean(default=True)
    system_updates: Boolean(default=True)

    # Channels (in-app is always on)
    email_enabled: Boolean(default=True)
    push_enabled: Boolean(default=False)

    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create_default(cls, user_id, email_address=None):
        now = datetime.now(UTC)
        preference = cls(
            user_id=user_id,
            email_address=email_address,
            email_enabled=DEFAULT_CHANNELS[NotificationChannel.EMAIL.value],
            push_enabled=DEFAULT_CHANNELS[NotificationChannel.PUSH.value],
            created_at=now,
            updated_at=now,
            **DEFAULT_TOPICS,
        )
        preference.raise_(
            PreferencesCreated(
                preference_id=str(preference.id),
                user_id=str(user_id),
                email_enabled=preference.email_enabled,
                push_enabled=preference.push_enabled,
                created_at=now,
            )
        )
        return preference

    def update_channels(self, email=None, push=None, email_address=None):
        """Update channel switches. Pass None to keep a value unchanged."""
        if email is None and push is None and email_address is None:
            raise ValidationError({"channels": ["At least one channel preference must be provided"]})

        now = datetime.now(UTC)
        if email is not None:
            self.email_enabled = email
        if push is not None:
            self.push_enabled = push
        if email_address is not None:
            self.email_address = email_address or None
        self.updated_at = now

        self.raise_(
            ChannelsUpdated(
                preference_id=str(self.id),
                user_id=str(self.user_id),
                email_enabled=self.email_enabled,
                push_enabled=self.push_enabled,
                updated_at=now,
            )
        )

    def update_topics(self, **topics):
        """Turn topics on or off, e.g. ``update_topics(score_updates=False)``."""
        unknown = sorted(set(topics) - set(DEFAULT_TOPICS))
        if unknown:
            raise ValidationError({"topics": [f"Unknown topic: {name}" for name in unknown]})
        changes = {name: value for name, value in topics.items() if value is not None}
        if not changes:
            raise ValidationError({"topics": ["At least one topic preference must be provided"]})

        now = datetime.now(UTC)
        for name, value in changes.items():
            setattr(self, name, value)
        self.updated_at = now

        self.raise_(
            TopicsUpdated(
                preference_id=str(self.id),
                user_id=str(self.user_id),
                updated_at=now,
                **self.topics(),
            )
        )

    # -------------------------------------------------------------------
    # Query helpers
    # -------------------------------------------------------------------
    def topics(self) -> dict:
        return {topic.value: bool(getattr(self, topic.value)) for topic in Topic}

    def wants(self, notification_type: str) -> bool:
        topic = topic_for(notification_type)
        return topic is None or bool(getattr(self, topic.value))

    def get_enabled_channels(self) -> list[str]:
        channels = [NotificationChannel.IN_APP.value]
        if self.email_enabled:
            channels.append(NotificationChannel.EMAIL.value)
        if self.push_enabled:
            channels.append(NotificationChannel.PUSH.value)
        return channels
