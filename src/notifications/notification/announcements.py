"""Announcements — administrators message users directly.

System notifications cover product news and maintenance; community
activity highlights what is happening around the users' area. Both fan out
to every listed user and respect each user's topic preferences.
"""

import json

import structlog
from notifications.domain import notifications
from notifications.notification.helpers import create_notifications_for_user
from notifications.notification.notification import Notification, NotificationType
from protean.exceptions import ValidationError
from protean.fields import String, Text
from protean.utils.mixins import handle

logger = structlog.get_logger(__name__)

MAX_RECIPIENTS = 500


@notifications.command(part_of="Notification")
class SendSystemNotification:
    user_ids: Text(required=True)  # JSON array
    title: String(required=True, max_length=200)
    message: Text(required=True)
    action_url: String(max_length=500)


@notifications.command(part_of="Notification")
class SendCommunityActivity:
    user_ids: Text(required=True)  # JSON array
    activity_type: String(required=True, max_length=100)
    message: Text(required=True)
    action_url: String(max_length=500)


def parse_user_ids(raw) -> list[str]:
    try:
        user_ids = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError:
        raise ValidationError({"user_ids": ["User ids must be a JSON array"]}) from None
    if not isinstance(user_ids, list) or not user_ids:
        raise ValidationError({"user_ids": ["At least one user id is required"]})
    if len(user_ids) > MAX_RECIPIENTS:
        raise ValidationError({"user_ids": [f"At most {MAX_RECIPIENTS} users per announcement"]})
    # Keep order, drop duplicates
    return list(dict.fromkeys(str(uid) for uid in user_ids))


@notifications.command_handler(part_of=Notification)
class AnnouncementHandler:
    @handle(SendSystemNotification)
    def send_system_notification(self, command: SendSystemNotification) -> int:
        created = 0
        for user_id in parse_user_ids(command.user_ids):
            created += len(
                create_notifications_for_user(
                    user_id=user_id,
                    notification_type=NotificationType.SYSTEM.value,
                    context={
                        "title": command.title,
                        "message": command.message,
                        "action_url": command.action_url,
                    },
                )
            )
        logger.info("System notification sent", title=command.title, notifications=created)
        return created

    @handle(SendCommunityActivity)
    def send_community_activity(self, command: SendCommunityActivity) -> int:
        created = 0
        for user_id in parse_user_ids(command.user_ids):
            created += len(
                create_notifications_for_user(
                    user_id=user_id,
                    notification_type=NotificationType.COMMUNITY_ACTIVITY.value,
                    context={
                        "activity_type": command.activity_type,
                        "message": command.message,
                        "action_url": command.action_url,
                    },
                )
            )
        logger.info("Community activity sent", activity_type=command.activity_type, notifications=created)
        return created
