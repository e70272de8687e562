"""Shared helpers for notification event handlers.

Provides the common pattern: look up preferences → filter topic and
channels → render template → create Notification per channel.
"""

import json
import os

import structlog
from notifications.notification.notification import (
    Notification,
    NotificationChannel,
    NotificationType,
    RecipientType,
)
from notifications.preference.management import preference_for
from notifications.preference.preference import default_enabled_channels
from notifications.templates import get_template
from protean.utils.globals import current_domain

logger = structlog.get_logger(__name__)

OPERATIONS_RECIPIENT = "operations"
DEFAULT_OPERATIONS_EMAIL = "admin@welcomewinks.app"

# Substrings of national chain names; matching businesses never produce
# nearby or new-business notifications.
CHAIN_NAMES = (
    "dunkin",
    "starbucks",
    "mcdonald",
    "subway",
    "burger king",
    "wendy",
    "taco bell",
    "kfc",
    "pizza hut",
    "domino",
    "papa john",
    "chick-fil-a",
    "chipotle",
    "panera",
    "panda express",
    "sonic",
    "dairy queen",
)


def is_chain_business(business_name: str | None) -> bool:
    name = (business_name or "").lower()
    return any(chain in name for chain in CHAIN_NAMES)


def operations_email() -> str:
    return os.environ.get("WELCOME_WINKS_ADMIN_EMAIL", DEFAULT_OPERATIONS_EMAIL)


def create_notifications_for_user(
    user_id: str,
    notification_type: str,
    context: dict,
    source_event_type: str | None = None,
    email_address: str | None = None,
) -> list[str]:
    """Create notification(s) for a user based on their preferences.

    Users without stored preferences get the defaults (every topic on,
    in-app and email channels). Email copies need an address: the one
    passed in, or the one stored on the user's preferences.

    Returns:
        List of notification IDs created.
    """
    template_cls = get_template(notification_type)

    pref = preference_for(user_id)
    if pref and not pref.wants(notification_type):
        logger.info(
            "User opted out of notification topic",
            user_id=user_id,
            notification_type=notification_type,
        )
        return []

    enabled = set(pref.get_enabled_channels() if pref else default_enabled_channels())
    address = email_address or (pref.email_address if pref else None)
    channels = [
        ch
        for ch in template_cls.default_channels
        if ch in enabled and (ch != NotificationChannel.EMAIL.value or address)
    ]

    if not channels:
        logger.info(
            "No enabled channels for notification",
            user_id=user_id,
            notification_type=notification_type,
        )
        return []

    rendered = template_cls.render(context)
    repo = current_domain.repository_for(Notification)
    notification_ids = []

    for channel in channels:
        notification = Notification.create(
            recipient_id=user_id,
            notification_type=notification_type,
            channel=channel,
            title=rendered["title"],
            message=rendered["message"],
            action_url=rendered.get("action_url"),
            action_label=rendered.get("action_label"),
            recipient_type=RecipientType.USER.value,
            recipient_address=address if channel == NotificationChannel.EMAIL.value else None,
            source_event_type=source_event_type,
            context_data=json.dumps(context, default=str),
        )
        repo.add(notification)
        notification_ids.append(str(notification.id))

    logger.info(
        "Notifications created",
        user_id=user_id,
        notification_type=notification_type,
        channels=channels,
        count=len(notification_ids),
    )

    return notification_ids


def create_internal_notification(
    notification_type: str,
    context: dict,
    source_event_type: str | None = None,
) -> str:
    """Create an email alert for the operations team.

    Internal notifications skip preference checks.
    """
    template_cls = get_template(notification_type)
    rendered = template_cls.render(context)

    notification = Notification.create(
        recipient_id=OPERATIONS_RECIPIENT,
        notification_type=notification_type,
        channel=NotificationChannel.EMAIL.value,
        title=rendered["title"],
        message=rendered["message"],
        action_url=rendered.get("action_url"),
        action_label=rendered.get("action_label"),
        recipient_type=RecipientType.INTERNAL.value,
        recipient_address=operations_email(),
        source_event_type=source_event_type,
        context_data=json.dumps(context, default=str),
    )
    current_domain.repository_for(Notification).add(notification)

    logger.info(
        "Internal notification created",
        notification_type=notification_type,
        notification_id=str(notification.id),
    )

    return str(notification.id)


def notify_new_business_nearby(user_id: str, business_id: str, business_name: str, distance_miles: float) -> list[str]:
    if is_chain_business(business_name):
        logger.info("Skipping new business notification for chain", business_name=business_name)
        return []

    return create_notifications_for_user(
        user_id=user_id,
        notification_type=NotificationType.NEW_BUSINESS.value,
        context={
            "business_id": business_id,
            "business_name": business_name,
            "distance_miles": distance_miles,
        },
    )


def notify_nearby_rating(
    user_id: str,
    business_id: str,
    business_name: str,
    score: float,
    welcoming_level: str,
    distance_miles: float,
    source_event_type: str | None = None,
) -> list[str]:
    if is_chain_business(business_name):
        logger.info("Skipping nearby rating notification for chain", business_name=business_name)
        return []

    return create_notifications_for_user(
        user_id=user_id,
        notification_type=NotificationType.NEARBY_RATING.value,
        context={
            "business_id": business_id,
            "business_name": business_name,
            "score": score,
            "welcoming_level": welcoming_level,
            "distance_miles": distance_miles,
        },
        source_event_type=source_event_type,
    )
