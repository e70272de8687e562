"""FastAPI routes for the Notifications domain.

Thin adapters that translate HTTP requests into domain commands.
No business logic, just schema→command→response translation.
"""

import json

from fastapi import APIRouter, Query
from notifications.api.schemas import (
    CancelNotificationRequest,
    CommunityActivityRequest,
    CountResponse,
    NotificationListResponse,
    NotificationResponse,
    PreferencesResponse,
    StatusResponse,
    SystemNotificationRequest,
    UpdatePreferencesRequest,
    UpdateTopicsRequest,
)
from notifications.notification.announcements import SendCommunityActivity, SendSystemNotification
from notifications.notification.delivery import CancelNotification, RetryNotification
from notifications.notification.reading import (
    DismissAllNotifications,
    DismissNotification,
    MarkAllNotificationsRead,
    MarkNotificationRead,
)
from notifications.preference.management import (
    UpdateNotificationPreferences,
    UpdateNotificationTopics,
    preference_for,
)
from notifications.preference.preference import DEFAULT_CHANNELS, DEFAULT_TOPICS
from notifications.projections.user_notifications import unread_count, user_feed
from protean.utils.globals import current_domain

router = APIRouter(prefix="/notifications", tags=["notifications"])


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------
@router.get("/preferences/{user_id}", response_model=PreferencesResponse)
async def get_preferences(user_id: str) -> PreferencesResponse:
    """Get a user's notification preferences (defaults when none were saved)."""
    pref = preference_for(user_id)
    if pref is None:
        return PreferencesResponse(
            user_id=user_id,
            email_enabled=DEFAULT_CHANNELS["Email"],
            push_enabled=DEFAULT_CHANNELS["Push"],
            topics=dict(DEFAULT_TOPICS),
        )
    return PreferencesResponse(
        user_id=str(pref.user_id),
        email_address=pref.email_address,
        email_enabled=pref.email_enabled,
        push_enabled=pref.push_enabled,
        topics=pref.topics(),
    )


@router.put("/preferences/{user_id}", response_model=StatusResponse)
async def update_preferences(user_id: str, body: UpdatePreferencesRequest) -> StatusResponse:
    command = UpdateNotificationPreferences(
        user_id=user_id,
        email_enabled=body.email_enabled,
        push_enabled=body.push_enabled,
        email_address=body.email_address,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@router.put("/preferences/{user_id}/topics", response_model=StatusResponse)
async def update_topics(user_id: str, body: UpdateTopicsRequest) -> StatusResponse:
    command = UpdateNotificationTopics(user_id=user_id, **body.model_dump())
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Feed
# ---------------------------------------------------------------------------
@router.get("/users/{user_id}", response_model=NotificationListResponse)
async def get_user_notifications(
    user_id: str,
    unread_only: bool = False,
    limit: int = Query(default=50, ge=1, le=100),
) -> NotificationListResponse:
    """A user's in-app notifications, newest first."""
    return NotificationListResponse(
        notifications=[
            NotificationResponse(
                notification_id=str(n.notification_id),
                notification_type=n.notification_type,
                title=n.title,
                message=n.message,
                action_url=n.action_url,
                action_label=n.action_label,
                is_read=bool(n.is_read),
                read_at=str(n.read_at) if n.read_at else None,
                created_at=str(n.created_at) if n.created_at else None,
            )
            for n in user_feed(user_id, unread_only=unread_only, limit=limit)
        ],
        unread_count=unread_count(user_id),
    )


@router.get("/users/{user_id}/unread-count", response_model=CountResponse)
async def get_unread_count(user_id: str) -> CountResponse:
    return CountResponse(count=unread_count(user_id))


@router.put("/users/{user_id}/read-all", response_model=CountResponse)
async def mark_all_read(user_id: str) -> CountResponse:
    count = current_domain.process(MarkAllNotificationsRead(user_id=user_id), asynchronous=False)
    return CountResponse(count=count or 0)


@router.put("/users/{user_id}/dismiss-all", response_model=CountResponse)
async def dismiss_all(user_id: str) -> CountResponse:
    count = current_domain.process(DismissAllNotifications(user_id=user_id), asynchronous=False)
    return CountResponse(count=count or 0)


@router.put("/users/{user_id}/{notification_id}/read", response_model=StatusResponse)
async def mark_read(user_id: str, notification_id: str) -> StatusResponse:
    command = MarkNotificationRead(notification_id=notification_id, user_id=user_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@router.put("/users/{user_id}/{notification_id}/dismiss", response_model=StatusResponse)
async def dismiss(user_id: str, notification_id: str) -> StatusResponse:
    command = DismissNotification(notification_id=notification_id, user_id=user_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Announcements
# ---------------------------------------------------------------------------
@router.post("/system", status_code=201, response_model=CountResponse)
async def send_system_notification(body: SystemNotificationRequest) -> CountResponse:
    command = SendSystemNotification(
        user_ids=json.dumps(body.user_ids),
        title=body.title,
        message=body.message,
        action_url=body.action_url,
    )
    count = current_domain.process(command, asynchronous=False)
    return CountResponse(count=count or 0)


@router.post("/community-activity", status_code=201, response_model=CountResponse)
async def send_community_activity(body: CommunityActivityRequest) -> CountResponse:
    command = SendCommunityActivity(
        user_ids=json.dumps(body.user_ids),
        activity_type=body.activity_type,
        message=body.message,
        action_url=body.action_url,
    )
    count = current_domain.process(command, asynchronous=False)
    return CountResponse(count=count or 0)


# ---------------------------------------------------------------------------
# Notification lifecycle
# ---------------------------------------------------------------------------
@router.post("/{notification_id}/retry", status_code=201, response_model=StatusResponse)
async def retry_notification(notification_id: str) -> StatusResponse:
    """Retry a failed notification."""
    current_domain.process(RetryNotification(notification_id=notification_id), asynchronous=False)
    return StatusResponse()


@router.put("/{notification_id}/cancel", response_model=StatusResponse)
async def cancel_notification(notification_id: str, body: CancelNotificationRequest) -> StatusResponse:
    """Cancel a pending notification."""
    command = CancelNotification(notification_id=notification_id, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
