"""Shared BDD fixtures and step definitions for the Notifications domain."""

import pytest
from notifications.notification.events import (
    NotificationCancelled,
    NotificationCreated,
    NotificationDismissed,
    NotificationFailed,
    NotificationRead,
    NotificationRetried,
    NotificationSent,
)
from notifications.notification.notification import (
    Notification,
    NotificationChannel,
    NotificationType,
)
from notifications.preference.preference import NotificationPreference
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

_NOTIFICATION_EVENT_CLASSES = {
    "NotificationCreated": NotificationCreated,
    "NotificationSent": NotificationSent,
    "NotificationFailed": NotificationFailed,
    "NotificationCancelled": NotificationCancelled,
    "NotificationRetried": NotificationRetried,
    "NotificationRead": NotificationRead,
    "NotificationDismissed": NotificationDismissed,
}


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps: notifications
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a pending push notification for user "{user_id}"'), target_fixture="notification")
def pending_push(user_id):
    n = Notification.create(
        recipient_id=user_id,
        notification_type=NotificationType.NEARBY_RATING.value,
        channel=NotificationChannel.PUSH.value,
        title="New Rating Nearby!",
        message="Someone just rated Joe's Coffee as Very Welcoming (5.0/5.0) - 0.2 miles away",
    )
    n._events.clear()
    return n


@given("an unread in-app notification", target_fixture="notification")
def unread_in_app():
    n = Notification.create(
        recipient_id="user-bdd-feed",
        notification_type=NotificationType.ACHIEVEMENT.value,
        channel=NotificationChannel.IN_APP.value,
        title="Achievement Unlocked!",
        message='You earned the "Explorer" achievement',
    )
    n.mark_sent()
    n._events.clear()
    return n


# ---------------------------------------------------------------------------
# Given steps: preferences
# ---------------------------------------------------------------------------
@given(parsers.cfparse('default preferences for user "{user_id}"'), target_fixture="preference")
def default_preferences(user_id):
    pref = NotificationPreference.create_default(user_id)
    pref._events.clear()
    return pref


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the notification status is "{status}"'))
def notification_status_is(notification, status):
    assert notification.status == status


@then(parsers.cfparse("a {event_type} notification event is raised"))
def notification_event_raised(notification, event_type):
    event_cls = _NOTIFICATION_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in notification._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in notification._events]}"


@then("the action fails with a validation error")
def action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)
