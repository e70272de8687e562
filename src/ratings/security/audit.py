"""Audit trail reads and security statistics for administrators."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from protean.utils.globals import current_domain

from ratings.projections.rating_audit_trail import AuditEventType, RatingAuditTrail
from ratings.security.flag import FlagStatus, SuspiciousUserFlag


@dataclass(frozen=True)
class SecurityStatistics:
    rating_submissions_24h: int = 0
    rating_submissions_7d: int = 0
    account_migrations_7d: int = 0
    unique_raters_7d: int = 0
    active_suspicious_flags: int = 0
    average_ratings_per_user: float = 0.0
    suspicious_activity_rate: float = 0.0


def user_audit_trail(user_id, limit: int = 50) -> list[RatingAuditTrail]:
    """Newest entries first."""
    return (
        current_domain.repository_for(RatingAuditTrail)
        ._dao.query.filter(user_id=str(user_id))
        .order_by("-occurred_at")
        .limit(limit)
        .all()
        .items
    )


def business_audit_trail(business_id, limit: int = 100) -> list[RatingAuditTrail]:
    """Rating submissions for a business, newest first."""
    return (
        current_domain.repository_for(RatingAuditTrail)
        ._dao.query.filter(business_id=str(business_id), event_type=AuditEventType.RATING_SUBMISSION.value)
        .order_by("-occurred_at")
        .limit(limit)
        .all()
        .items
    )


def _entries_since(since: datetime) -> list[RatingAuditTrail]:
    entries = current_domain.repository_for(RatingAuditTrail)._dao.query.limit(None).all().items
    return [e for e in entries if _aware(e.occurred_at) >= _aware(since)]


def security_statistics(now=None) -> SecurityStatistics:
    now = _aware(now or datetime.now(UTC))
    week = _entries_since(now - timedelta(days=7))
    day_start = now - timedelta(hours=24)

    submissions_7d = [e for e in week if e.event_type == AuditEventType.RATING_SUBMISSION.value]
    submissions_24h = [e for e in submissions_7d if _aware(e.occurred_at) >= day_start]
    raters = {str(e.user_id) for e in submissions_7d}
    active_flags = len(
        current_domain.repository_for(SuspiciousUserFlag)
        ._dao.query.filter(status=FlagStatus.ACTIVE.value)
        .limit(None)
        .all()
        .items
    )

    return SecurityStatistics(
        rating_submissions_24h=len(submissions_24h),
        rating_submissions_7d=len(submissions_7d),
        account_migrations_7d=sum(1 for e in week if e.event_type == AuditEventType.ACCOUNT_MIGRATION.value),
        unique_raters_7d=len(raters),
        active_suspicious_flags=active_flags,
        average_ratings_per_user=round(len(submissions_7d) / len(raters), 2) if raters else 0.0,
        suspicious_activity_rate=round(active_flags / max(len(raters), 1), 4),
    )


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo else moment.replace(tzinfo=UTC)
