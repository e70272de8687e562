"""FastAPI routes for the Ratings bounded context.

Each route translates between Pydantic schemas (external contract) and
Protean commands (internal domain concepts). Reads go straight to the
projections and query helpers.
"""

import json

from fastapi import APIRouter, Depends, Query, Response
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ratings.achievement.unlocking import achievement_progress, user_achievements
from ratings.admin.export import ExportFormat, ExportOptions, export_data
from ratings.admin.review_search import ReviewFilter, find_suspicious_reviews, search_reviews
from ratings.api.schemas import (
    AchievementProgressResponse,
    AchievementResponse,
    AchievementsResponse,
    AuditEntryResponse,
    BulkRemovalResponse,
    BulkRemoveRatingsRequest,
    BusinessIdResponse,
    BusinessResponse,
    ConfigIdResponse,
    CountResponse,
    CreateScoringConfigRequest,
    DeviceLedgerResponse,
    ExportParams,
    FlagIdResponse,
    FlagUserRequest,
    MigrateRatingsRequest,
    QuestionResponse,
    RatingHistoryItem,
    RatingIdResponse,
    RatingResponse,
    RatingStatisticsResponse,
    RefreshScoresRequest,
    RegisterBusinessRequest,
    RemoveRatingRequest,
    ReportIdResponse,
    ReportQueueItem,
    ReviewerStatsResponse,
    ReviewFlagRequest,
    ReviewResponse,
    ReviewSearchParams,
    ReviseRatingRequest,
    ScoreResponse,
    ScoringProfileResponse,
    SecurityStatisticsResponse,
    StatusResponse,
    SubmitRatingRequest,
    SubmitReportRequest,
    SuspiciousActivityResponse,
    SuspiciousFlagResponse,
    UpdateReportStatusRequest,
    UpdateScoringConfigRequest,
    UpsertQuestionRequest,
)
from ratings.business.business import Business
from ratings.business.queries import businesses_near, score_for, search_businesses_by_name, top_rated_businesses
from ratings.business.registration import RegisterBusiness
from ratings.device.ledger import ClearDeviceReviews, ForgetReviewedBusiness, ledger_for
from ratings.projections.rating_audit_trail import RatingAuditTrail
from ratings.projections.report_queue import ReportQueue
from ratings.projections.user_rating_history import UserRatingHistory
from ratings.rating.migration import MigrateUserRatings
from ratings.rating.queries import business_ratings, rating_statistics, reviewer_stats
from ratings.rating.rating import Rating
from ratings.rating.refresh import RefreshBusinessScores
from ratings.rating.removal import BulkRemoveRatings, RemoveRating
from ratings.rating.revision import ReviseRating
from ratings.rating.submission import SubmitRating
from ratings.report.submission import SubmitBusinessReport, UpdateReportStatus
from ratings.scoring_config.active import active_survey_questions, current_scoring_profile
from ratings.scoring_config.management import (
    ActivateScoringConfiguration,
    CreateScoringConfiguration,
    InitializeDefaultScoring,
    UpdateScoringConfiguration,
    UpsertSurveyQuestion,
)
from ratings.security.audit import business_audit_trail, security_statistics, user_audit_trail
from ratings.security.flag import SuspiciousUserFlag
from ratings.security.flagging import FlagSuspiciousUser, ReviewSuspiciousUserFlag, list_flags

business_router = APIRouter(prefix="/businesses", tags=["businesses"])
rating_router = APIRouter(prefix="/ratings", tags=["ratings"])
scoring_router = APIRouter(prefix="/scoring", tags=["scoring"])
report_router = APIRouter(prefix="/reports", tags=["reports"])
admin_router = APIRouter(prefix="/admin", tags=["admin"])


def _score(business_id) -> ScoreResponse:
    record = score_for(business_id)
    if record is None:
        return ScoreResponse()
    return ScoreResponse(
        average_score=record.average_score,
        total_ratings=record.total_ratings,
        very_welcoming_count=record.very_welcoming_count,
        moderately_welcoming_count=record.moderately_welcoming_count,
        not_welcoming_count=record.not_welcoming_count,
        status=record.status,
    )


def _business(business: Business) -> BusinessResponse:
    return BusinessResponse(
        business_id=str(business.business_id),
        name=business.name,
        address=business.address,
        latitude=business.latitude,
        longitude=business.longitude,
        rating_count=business.rating_count or 0,
        score=_score(business.business_id),
    )


def _rating(rating: Rating) -> RatingResponse:
    return RatingResponse(
        rating_id=str(rating.id),
        business_id=str(rating.business_id),
        user_id=str(rating.user_id),
        user_account_type=rating.user_account_type,
        answers=rating.answer_map(),
        responses=rating.responses.as_dict(),
        total_score=rating.total_score,
        welcoming_level=rating.welcoming_level,
        status=rating.status,
        created_at=rating.created_at,
        updated_at=rating.updated_at,
    )


def _review(review) -> ReviewResponse:
    return ReviewResponse(
        id=review.id,
        business_id=review.business_id,
        business_name=review.business_name,
        business_address=review.business_address,
        user_id=review.user_id,
        user_account_type=review.user_account_type,
        user_ip_address=review.user_ip_address,
        total_score=review.total_score,
        welcoming_level=review.welcoming_level,
        status=review.status,
        created_at=review.created_at,
    )


def _flag(flag: SuspiciousUserFlag) -> SuspiciousFlagResponse:
    return SuspiciousFlagResponse(
        flag_id=str(flag.id),
        user_id=str(flag.user_id),
        reason=flag.reason,
        evidence=flag.evidence_map(),
        flagged_by=flag.flagged_by,
        status=flag.status,
        reviewed_by=flag.reviewed_by,
        reviewed_at=flag.reviewed_at,
        flagged_at=flag.flagged_at,
    )


def _audit_entry(entry: RatingAuditTrail) -> AuditEntryResponse:
    return AuditEntryResponse(
        entry_id=str(entry.entry_id),
        event_type=entry.event_type,
        user_id=str(entry.user_id),
        user_account_type=entry.user_account_type,
        business_id=str(entry.business_id),
        rating_id=str(entry.rating_id),
        ip_address=entry.ip_address,
        total_score=entry.total_score,
        details=json.loads(entry.details) if entry.details else {},
        occurred_at=entry.occurred_at,
    )


def _response_values_json(values) -> str | None:
    if values is None:
        return None
    return json.dumps(values.model_dump(exclude_none=True))


# ---------------------------------------------------------------------------
# Businesses
# ---------------------------------------------------------------------------
@business_router.post("", status_code=201, response_model=BusinessIdResponse)
async def register_business(body: RegisterBusinessRequest) -> BusinessIdResponse:
    """Register a business from the places directory (idempotent)."""
    command = RegisterBusiness(
        place_id=body.place_id,
        name=body.name,
        address=body.address,
        vicinity=body.vicinity,
        latitude=body.latitude,
        longitude=body.longitude,
        places_data=json.dumps(body.places_data) if body.places_data else None,
    )
    business_id = current_domain.process(command, asynchronous=False)
    return BusinessIdResponse(business_id=business_id)


@business_router.get("/nearby", response_model=list[BusinessResponse])
async def nearby_businesses(
    latitude: float = Query(ge=-90, le=90),
    longitude: float = Query(ge=-180, le=180),
    radius_km: float = Query(default=5, gt=0, le=50),
    limit: int = Query(default=50, ge=1, le=200),
) -> list[BusinessResponse]:
    return [_business(b) for b in businesses_near(latitude, longitude, radius_km, limit)]


@business_router.get("/top", response_model=list[BusinessResponse])
async def top_businesses(limit: int = Query(default=20, ge=1, le=100)) -> list[BusinessResponse]:
    repo = current_domain.repository_for(Business)
    results = []
    for score in top_rated_businesses(limit):
        try:
            results.append(_business(repo.get(score.business_id)))
        except ObjectNotFoundError:
            continue
    return results


@business_router.get("/search", response_model=list[BusinessResponse])
async def search_businesses(q: str = Query(min_length=1), limit: int = Query(default=20, ge=1, le=100)):
    return [_business(b) for b in search_businesses_by_name(q, limit)]


@business_router.get("/{business_id}", response_model=BusinessResponse)
async def get_business(business_id: str) -> BusinessResponse:
    business = current_domain.repository_for(Business).get(business_id)
    return _business(business)


@business_router.get("/{business_id}/ratings", response_model=list[RatingResponse])
async def get_business_ratings(business_id: str) -> list[RatingResponse]:
    current_domain.repository_for(Business).get(business_id)
    return [_rating(r) for r in business_ratings(business_id)]


# ---------------------------------------------------------------------------
# Ratings
# ---------------------------------------------------------------------------
@rating_router.post("", status_code=201, response_model=RatingIdResponse)
async def submit_rating(body: SubmitRatingRequest) -> RatingIdResponse:
    """Answer the welcoming survey for a business."""
    command = SubmitRating(
        business_id=body.business_id,
        user_id=body.user_id,
        user_account_type=body.user_account_type,
        answers=json.dumps(body.answers),
        user_ip_address=body.user_ip_address,
        device_id=body.device_id,
    )
    rating_id = current_domain.process(command, asynchronous=False)
    return RatingIdResponse(rating_id=rating_id)


@rating_router.post("/migrate", response_model=CountResponse)
async def migrate_ratings(body: MigrateRatingsRequest) -> CountResponse:
    """Move a cookie account's ratings to a full account."""
    command = MigrateUserRatings(from_user_id=body.from_user_id, to_user_id=body.to_user_id)
    migrated = current_domain.process(command, asynchronous=False)
    return CountResponse(count=migrated)


@rating_router.get("/users/{user_id}", response_model=list[RatingHistoryItem])
async def user_rating_history(user_id: str) -> list[RatingHistoryItem]:
    repo = current_domain.repository_for(UserRatingHistory)
    items = repo._dao.query.filter(user_id=user_id).order_by("-created_at").limit(None).all().items
    return [
        RatingHistoryItem(
            rating_id=str(h.rating_id),
            business_id=str(h.business_id),
            business_name=h.business_name,
            total_score=h.total_score,
            welcoming_level=h.welcoming_level,
            was_migrated=bool(h.was_migrated),
            created_at=h.created_at,
        )
        for h in items
    ]


@rating_router.get("/users/{user_id}/stats", response_model=ReviewerStatsResponse)
async def get_reviewer_stats(user_id: str) -> ReviewerStatsResponse:
    stats = reviewer_stats(user_id)
    return ReviewerStatsResponse(**stats.__dict__)


@rating_router.get("/users/{user_id}/achievements", response_model=AchievementsResponse)
async def get_achievements(user_id: str) -> AchievementsResponse:
    return AchievementsResponse(
        unlocked=[
            AchievementResponse(
                achievement_type=a.achievement_type,
                title=a.title,
                description=a.description,
                unlocked_at=a.unlocked_at,
            )
            for a in user_achievements(user_id)
        ],
        progress=[AchievementProgressResponse(**p.__dict__) for p in achievement_progress(user_id)],
    )


@rating_router.get("/{rating_id}", response_model=RatingResponse)
async def get_rating(rating_id: str) -> RatingResponse:
    return _rating(current_domain.repository_for(Rating).get(rating_id))


@rating_router.put("/{rating_id}", response_model=StatusResponse)
async def revise_rating(rating_id: str, body: ReviseRatingRequest) -> StatusResponse:
    command = ReviseRating(
        rating_id=rating_id,
        user_id=body.user_id,
        answers=json.dumps(body.answers),
        user_ip_address=body.user_ip_address,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------
@scoring_router.get("/profile", response_model=ScoringProfileResponse)
async def get_scoring_profile() -> ScoringProfileResponse:
    profile = current_scoring_profile()
    return ScoringProfileResponse(
        response_values=profile.response_values,
        question_count=profile.question_count,
        max_possible_score=profile.max_possible_score,
        very_welcoming_threshold=profile.very_welcoming_threshold,
        moderately_welcoming_threshold=profile.moderately_welcoming_threshold,
    )


@scoring_router.get("/questions", response_model=list[QuestionResponse])
async def get_questions() -> list[QuestionResponse]:
    return [
        QuestionResponse(key=q.key, text=q.text, reverse_scored=q.reverse_scored, order=q.order)
        for q in active_survey_questions()
    ]


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------
@report_router.post("", status_code=201, response_model=ReportIdResponse)
async def submit_report(body: SubmitReportRequest) -> ReportIdResponse:
    """Report a business for fake or spam reviews."""
    command = SubmitBusinessReport(
        business_id=body.business_id,
        business_name=body.business_name,
        reported_by=body.reported_by,
        reporter_account_type=body.reporter_account_type,
        reporter_email=body.reporter_email,
        reporter_ip_address=body.reporter_ip_address,
        reason=body.reason,
        description=body.description,
    )
    report_id = current_domain.process(command, asynchronous=False)
    return ReportIdResponse(report_id=report_id)


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------
@admin_router.get("/reviews", response_model=list[ReviewResponse])
async def admin_search_reviews(params: ReviewSearchParams = Depends()) -> list[ReviewResponse]:
    review_filter = ReviewFilter(**params.model_dump(exclude={"limit"}))
    return [_review(r) for r in search_reviews(review_filter, limit=params.limit)]


@admin_router.get("/reviews/suspicious", response_model=SuspiciousActivityResponse)
async def admin_suspicious_reviews() -> SuspiciousActivityResponse:
    activity = find_suspicious_reviews()
    return SuspiciousActivityResponse(
        duplicate_ips=[_review(r) for r in activity.duplicate_ips],
        rapid_reviews=[_review(r) for r in activity.rapid_reviews],
        extreme_scores=[_review(r) for r in activity.extreme_scores],
        total_flagged=activity.total_flagged,
    )


@admin_router.put("/ratings/{rating_id}/remove", response_model=StatusResponse)
async def admin_remove_rating(rating_id: str, body: RemoveRatingRequest) -> StatusResponse:
    command = RemoveRating(rating_id=rating_id, removed_by=body.removed_by, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.post("/ratings/bulk-remove", response_model=BulkRemovalResponse)
async def admin_bulk_remove(body: BulkRemoveRatingsRequest) -> BulkRemovalResponse:
    command = BulkRemoveRatings(
        rating_ids=json.dumps(body.rating_ids),
        removed_by=body.removed_by,
        reason=body.reason,
    )
    result = current_domain.process(command, asynchronous=False)
    return BulkRemovalResponse(
        success=result.success,
        removed_count=result.removed_count,
        failed_count=result.failed_count,
        errors=result.errors,
    )


@admin_router.post("/scores/refresh", response_model=CountResponse)
async def admin_refresh_scores(body: RefreshScoresRequest) -> CountResponse:
    refreshed = current_domain.process(RefreshBusinessScores(business_id=body.business_id), asynchronous=False)
    return CountResponse(count=refreshed)


@admin_router.get("/statistics", response_model=RatingStatisticsResponse)
async def admin_statistics() -> RatingStatisticsResponse:
    return RatingStatisticsResponse(**rating_statistics().__dict__)


@admin_router.post("/scoring/initialize", response_model=ConfigIdResponse)
async def admin_initialize_scoring() -> ConfigIdResponse:
    config_id = current_domain.process(InitializeDefaultScoring(), asynchronous=False)
    return ConfigIdResponse(config_id=config_id)


@admin_router.post("/scoring/configurations", status_code=201, response_model=ConfigIdResponse)
async def admin_create_scoring_config(body: CreateScoringConfigRequest) -> ConfigIdResponse:
    command = CreateScoringConfiguration(
        version=body.version,
        response_values=_response_values_json(body.response_values),
        question_count=body.question_count,
        created_by=body.created_by,
        description=body.description,
    )
    config_id = current_domain.process(command, asynchronous=False)
    return ConfigIdResponse(config_id=config_id)


@admin_router.put("/scoring/configurations/{config_id}", response_model=StatusResponse)
async def admin_update_scoring_config(config_id: str, body: UpdateScoringConfigRequest) -> StatusResponse:
    command = UpdateScoringConfiguration(
        config_id=config_id,
        response_values=_response_values_json(body.response_values),
        question_count=body.question_count,
        description=body.description,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.put("/scoring/configurations/{config_id}/activate", response_model=StatusResponse)
async def admin_activate_scoring_config(config_id: str) -> StatusResponse:
    current_domain.process(ActivateScoringConfiguration(config_id=config_id), asynchronous=False)
    return StatusResponse()


@admin_router.put("/scoring/questions/{question_key}", response_model=StatusResponse)
async def admin_upsert_question(question_key: str, body: UpsertQuestionRequest) -> StatusResponse:
    command = UpsertSurveyQuestion(
        question_key=question_key,
        text=body.text,
        reverse_scored=body.reverse_scored,
        is_active=body.is_active,
        display_order=body.display_order,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.get("/reports", response_model=list[ReportQueueItem])
async def admin_report_queue() -> list[ReportQueueItem]:
    items = current_domain.repository_for(ReportQueue)._dao.query.order_by("-submitted_at").limit(None).all().items
    return [
        ReportQueueItem(
            report_id=str(r.report_id),
            business_id=str(r.business_id),
            business_name=r.business_name,
            reported_by=str(r.reported_by),
            reason=r.reason,
            reason_text=r.reason_text,
            description=r.description,
            severity=r.severity,
            status=r.status,
            submitted_at=r.submitted_at,
        )
        for r in items
    ]


@admin_router.put("/reports/{report_id}/status", response_model=StatusResponse)
async def admin_update_report_status(report_id: str, body: UpdateReportStatusRequest) -> StatusResponse:
    command = UpdateReportStatus(
        report_id=report_id,
        status=body.status,
        admin_id=body.admin_id,
        notes=body.notes,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.get("/devices/{device_id}", response_model=DeviceLedgerResponse)
async def admin_device_ledger(device_id: str) -> DeviceLedgerResponse:
    ledger = ledger_for(device_id)
    if ledger is None:
        raise ObjectNotFoundError(f"No review ledger for device `{device_id}`")
    return DeviceLedgerResponse(device_id=device_id, reviewed_businesses=ledger.reviewed_businesses())


@admin_router.delete("/devices/{device_id}/reviews", response_model=StatusResponse)
async def admin_clear_device(device_id: str) -> StatusResponse:
    current_domain.process(ClearDeviceReviews(device_id=device_id), asynchronous=False)
    return StatusResponse()


@admin_router.delete("/devices/{device_id}/reviews/{business_id}", response_model=StatusResponse)
async def admin_forget_business(device_id: str, business_id: str) -> StatusResponse:
    command = ForgetReviewedBusiness(device_id=device_id, business_id=business_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.get("/flags", response_model=list[SuspiciousFlagResponse])
async def admin_list_flags(status: str | None = Query(default=None)) -> list[SuspiciousFlagResponse]:
    return [_flag(f) for f in list_flags(status=status)]


@admin_router.post("/flags", status_code=201, response_model=FlagIdResponse)
async def admin_flag_user(body: FlagUserRequest) -> FlagIdResponse:
    command = FlagSuspiciousUser(
        user_id=body.user_id,
        reason=body.reason,
        evidence=json.dumps(body.evidence),
        flagged_by=body.flagged_by,
    )
    flag_id = current_domain.process(command, asynchronous=False)
    return FlagIdResponse(flag_id=flag_id)


@admin_router.put("/flags/{flag_id}", response_model=StatusResponse)
async def admin_review_flag(flag_id: str, body: ReviewFlagRequest) -> StatusResponse:
    command = ReviewSuspiciousUserFlag(flag_id=flag_id, status=body.status, admin_id=body.admin_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.get("/audit/users/{user_id}", response_model=list[AuditEntryResponse])
async def admin_user_audit_trail(
    user_id: str, limit: int = Query(default=50, ge=1, le=500)
) -> list[AuditEntryResponse]:
    return [_audit_entry(e) for e in user_audit_trail(user_id, limit=limit)]


@admin_router.get("/audit/businesses/{business_id}", response_model=list[AuditEntryResponse])
async def admin_business_audit_trail(
    business_id: str, limit: int = Query(default=100, ge=1, le=500)
) -> list[AuditEntryResponse]:
    return [_audit_entry(e) for e in business_audit_trail(business_id, limit=limit)]


@admin_router.get("/security/statistics", response_model=SecurityStatisticsResponse)
async def admin_security_statistics() -> SecurityStatisticsResponse:
    return SecurityStatisticsResponse(**security_statistics().__dict__)


@admin_router.get("/export")
async def admin_export(params: ExportParams = Depends()) -> Response:
    content = export_data(ExportOptions(**params.model_dump()))
    if params.format == ExportFormat.CSV.value:
        return Response(
            content=content,
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="welcome-winks-export.csv"'},
        )
    return Response(content=content, media_type="application/json")
