"""Pydantic request/response schemas for the Ratings API.

These are separate from Protean commands (anti-corruption pattern).
The API layer is the external contract; commands are internal domain concepts.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class RegisterBusinessRequest(BaseModel):
    place_id: str
    name: str | None = None
    address: str | None = None
    vicinity: str | None = None
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    places_data: dict | None = None


class SubmitRatingRequest(BaseModel):
    business_id: str
    user_id: str
    user_account_type: str = "anonymous"
    answers: dict[str, str]  # question_key -> "Yes" | "Probably" | "ProbablyNot" | "No"
    user_ip_address: str | None = None
    device_id: str | None = None


class ReviseRatingRequest(BaseModel):
    user_id: str
    answers: dict[str, str]
    user_ip_address: str | None = None


class RemoveRatingRequest(BaseModel):
    removed_by: str
    reason: str | None = None


class BulkRemoveRatingsRequest(BaseModel):
    rating_ids: list[str] = Field(min_length=1)
    removed_by: str
    reason: str | None = None


class MigrateRatingsRequest(BaseModel):
    from_user_id: str
    to_user_id: str


class RefreshScoresRequest(BaseModel):
    business_id: str | None = None


class ResponseValuesSchema(BaseModel):
    yes: float | None = Field(default=None, ge=0)
    probably: float | None = Field(default=None, ge=0)
    probably_not: float | None = Field(default=None, ge=0)
    no: float | None = Field(default=None, ge=0)


class CreateScoringConfigRequest(BaseModel):
    version: str
    response_values: ResponseValuesSchema | None = None
    question_count: int | None = Field(default=None, ge=1)
    created_by: str | None = None
    description: str | None = None


class UpdateScoringConfigRequest(BaseModel):
    response_values: ResponseValuesSchema | None = None
    question_count: int | None = Field(default=None, ge=1)
    description: str | None = None


class UpsertQuestionRequest(BaseModel):
    text: str | None = None
    reverse_scored: bool | None = None
    is_active: bool | None = None
    display_order: int | None = None


class SubmitReportRequest(BaseModel):
    business_id: str
    business_name: str
    reported_by: str
    reporter_account_type: str = "anonymous"
    reporter_email: str | None = None
    reporter_ip_address: str | None = None
    reason: str  # "fake_reviews" or "spam_reviews"
    description: str | None = Field(default=None, max_length=2000)


class UpdateReportStatusRequest(BaseModel):
    status: str
    admin_id: str
    notes: str | None = None


class ReviewSearchParams(BaseModel):
    ip_address: str | None = None
    user_id: str | None = None
    business_id: str | None = None
    business_name: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    min_score: float | None = None
    max_score: float | None = None
    limit: int = Field(default=100, ge=1, le=2000)


class FlagUserRequest(BaseModel):
    user_id: str
    reason: str = Field(..., min_length=1, max_length=100)
    evidence: dict[str, Any] = Field(default_factory=dict)
    flagged_by: str | None = None


class ReviewFlagRequest(BaseModel):
    status: Literal["reviewed", "dismissed"]
    admin_id: str


class ExportParams(BaseModel):
    include_businesses: bool = True
    include_reviews: bool = True
    include_reports: bool = False
    date_from: datetime | None = None
    date_to: datetime | None = None
    format: Literal["json", "csv"] = "json"


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class BusinessIdResponse(BaseModel):
    business_id: str


class RatingIdResponse(BaseModel):
    rating_id: str


class ReportIdResponse(BaseModel):
    report_id: str


class ConfigIdResponse(BaseModel):
    config_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class CountResponse(BaseModel):
    count: int


class ScoreResponse(BaseModel):
    average_score: float | None = None
    total_ratings: int = 0
    very_welcoming_count: int = 0
    moderately_welcoming_count: int = 0
    not_welcoming_count: int = 0
    status: str = "neutral"


class BusinessResponse(BaseModel):
    business_id: str
    name: str
    address: str | None = None
    latitude: float
    longitude: float
    rating_count: int = 0
    score: ScoreResponse


class RatingResponse(BaseModel):
    rating_id: str
    business_id: str
    user_id: str
    user_account_type: str
    answers: dict
    responses: dict
    total_score: float
    welcoming_level: str
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RatingHistoryItem(BaseModel):
    rating_id: str
    business_id: str
    business_name: str | None = None
    total_score: float
    welcoming_level: str
    was_migrated: bool = False
    created_at: datetime | None = None


class ReviewerStatsResponse(BaseModel):
    user_id: str
    total_ratings: int
    average_score: float
    highest_score: float
    businesses_rated: int
    high_score_ratings: int
    last_rated_at: datetime | None = None


class AchievementResponse(BaseModel):
    achievement_type: str
    title: str
    description: str | None = None
    unlocked_at: datetime | None = None


class AchievementProgressResponse(BaseModel):
    achievement_type: str
    title: str
    current: float
    target: float
    completed: bool
    unlocked: bool


class AchievementsResponse(BaseModel):
    unlocked: list[AchievementResponse]
    progress: list[AchievementProgressResponse]


class ScoringProfileResponse(BaseModel):
    response_values: dict[str, float]
    question_count: int
    max_possible_score: float
    very_welcoming_threshold: float
    moderately_welcoming_threshold: float


class QuestionResponse(BaseModel):
    key: str
    text: str
    reverse_scored: bool
    order: int


class ReviewResponse(BaseModel):
    id: str
    business_id: str
    business_name: str
    business_address: str | None = None
    user_id: str
    user_account_type: str | None = None
    user_ip_address: str | None = None
    total_score: float
    welcoming_level: str
    status: str
    created_at: datetime | None = None


class SuspiciousActivityResponse(BaseModel):
    duplicate_ips: list[ReviewResponse]
    rapid_reviews: list[ReviewResponse]
    extreme_scores: list[ReviewResponse]
    total_flagged: int


class BulkRemovalResponse(BaseModel):
    success: bool
    removed_count: int
    failed_count: int
    errors: list[str]


class RatingStatisticsResponse(BaseModel):
    total_ratings: int
    active_ratings: int
    removed_ratings: int
    average_score: float | None = None
    unique_users: int
    unique_businesses: int
    by_level: dict[str, int]
    by_account_type: dict[str, int]


class ReportQueueItem(BaseModel):
    report_id: str
    business_id: str
    business_name: str
    reported_by: str
    reason: str
    reason_text: str | None = None
    description: str | None = None
    severity: str | None = None
    status: str
    submitted_at: datetime | None = None


class DeviceLedgerResponse(BaseModel):
    device_id: str
    reviewed_businesses: list[str]


class FlagIdResponse(BaseModel):
    flag_id: str


class SuspiciousFlagResponse(BaseModel):
    flag_id: str
    user_id: str
    reason: str
    evidence: dict[str, Any]
    flagged_by: str | None = None
    status: str
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    flagged_at: datetime | None = None


class AuditEntryResponse(BaseModel):
    entry_id: str
    event_type: str
    user_id: str
    user_account_type: str | None = None
    business_id: str
    rating_id: str
    ip_address: str | None = None
    total_score: float | None = None
    details: dict[str, Any]
    occurred_at: datetime


class SecurityStatisticsResponse(BaseModel):
    rating_submissions_24h: int
    rating_submissions_7d: int
    account_migrations_7d: int
    unique_raters_7d: int
    active_suspicious_flags: int
    average_ratings_per_user: float
    suspicious_activity_rate: float
