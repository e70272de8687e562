"""Preference management commands + handlers — update channels and topics."""

from notifications.domain import notifications
from notifications.preference.preference import NotificationPreference
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle


@notifications.command(part_of="NotificationPreference")
class UpdateNotificationPreferences:
    """Update a user's email/push switches and email address."""

    user_id: Identifier(required=True)
    email_enabled: Boolean()
    push_enabled: Boolean()
    email_address: String(max_length=254)


@notifications.command(part_of="NotificationPreference")
class UpdateNotificationTopics:
    """Turn notification topics on or off for a user."""

    user_id: Identifier(required=True)
    new_businesses_nearby: Boolean()
    score_updates: Boolean()
    community_activity: Boolean()
    achievements: Boolean()
    system_updates: Boolean()


def preference_for(user_id) -> NotificationPreference | None:
    repo = current_domain.repository_for(NotificationPreference)
    prefs = repo._dao.query.filter(user_id=str(user_id)).all().items
    return prefs[0] if prefs else None


@notifications.command_handler(part_of=NotificationPreference)
class ManagePreferencesHandler:
    @handle(UpdateNotificationPreferences)
    def update_preferences(self, command: UpdateNotificationPreferences):
        repo = current_domain.repository_for(NotificationPreference)
        preference = preference_for(command.user_id) or NotificationPreference.create_default(command.user_id)
        preference.update_channels(
            email=command.email_enabled,
            push=command.push_enabled,
            email_address=command.email_address,
        )
        repo.add(preference)

    @handle(UpdateNotificationTopics)
    def update_topics(self, command: UpdateNotificationTopics):
        repo = current_domain.repository_for(NotificationPreference)
        preference = preference_for(command.user_id) or NotificationPreference.create_default(command.user_id)
        preference.update_topics(
            new_businesses_nearby=command.new_businesses_nearby,
            score_updates=command.score_updates,
            community_activity=command.community_activity,
            achievements=command.achievements,
            system_updates=command.system_updates,
        )
        repo.add(preference)
