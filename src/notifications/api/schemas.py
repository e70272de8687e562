"""Pydantic request/response models for the Notifications API.

API schemas are separate from Protean commands (anti-corruption pattern).
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------
class UpdatePreferencesRequest(BaseModel):
    email_enabled: bool | None = None
    push_enabled: bool | None = None
    email_address: str | None = Field(default=None, max_length=254)


class UpdateTopicsRequest(BaseModel):
    new_businesses_nearby: bool | None = None
    score_updates: bool | None = None
    community_activity: bool | None = None
    achievements: bool | None = None
    system_updates: bool | None = None


class SystemNotificationRequest(BaseModel):
    user_ids: list[str] = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    action_url: str | None = None


class CommunityActivityRequest(BaseModel):
    user_ids: list[str] = Field(..., min_length=1)
    activity_type: str = Field(..., min_length=1, max_length=100, examples=["new_ratings_in_area"])
    message: str = Field(..., min_length=1)
    action_url: str | None = None


class CancelNotificationRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class CountResponse(BaseModel):
    count: int


class PreferencesResponse(BaseModel):
    user_id: str
    email_address: str | None = None
    email_enabled: bool
    push_enabled: bool
    topics: dict[str, bool]


class NotificationResponse(BaseModel):
    notification_id: str
    notification_type: str
    title: str
    message: str
    action_url: str | None = None
    action_label: str | None = None
    is_read: bool
    read_at: str | None = None
    created_at: str | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    unread_count: int
