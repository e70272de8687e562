"""Domain events for the NotificationPreference aggregate."""

from notifications.domain import notifications
from protean.fields import Boolean, DateTime, Identifier


@notifications.event(part_of="NotificationPreference")
class PreferencesCreated:
    """Default notification preferences were created for a user."""

    __version__ = 1

    preference_id: Identifier(required=True)
    user_id: Identifier(required=True)
    email_enabled: Boolean(required=True)
    push_enabled: Boolean(required=True)
    created_at: DateTime(required=True)


@notifications.event(part_of="NotificationPreference")
class ChannelsUpdated:
    """A user's email/push switches were changed."""

    __version__ = 1

    preference_id: Identifier(required=True)
    user_id: Identifier(required=True)
    email_enabled: Boolean(required=True)
    push_enabled: Boolean(required=True)
    updated_at: DateTime(required=True)


@notifications.event(part_of="NotificationPreference")
class TopicsUpdated:
    """A user turned notification topics on or off."""

    __version__ = 1

    preference_id: Identifier(required=True)
    user_id: Identifier(required=True)
    new_businesses_nearby: Boolean(required=True)
    score_updates: Boolean(required=True)
    community_activity: Boolean(required=True)
    achievements: Boolean(required=True)
    system_updates: Boolean(required=True)
    updated_at: DateTime(required=True)
