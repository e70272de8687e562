"""Admin review search over ratings enriched with business details."""

from dataclasses import dataclass
from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ratings.admin.suspicious import SuspiciousActivity, detect_suspicious_reviews
from ratings.business.business import Business
from ratings.rating.rating import Rating, RatingStatus

SUSPICIOUS_SCAN_LIMIT = 2000


@dataclass(frozen=True)
class ReviewFilter:
    ip_address: str | None = None
    user_id: str | None = None
    business_id: str | None = None
    business_name: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    min_score: float | None = None
    max_score: float | None = None
    include_removed: bool = False


@dataclass(frozen=True)
class ReviewWithBusiness:
    id: str
    business_id: str
    business_name: str
    business_address: str | None
    user_id: str
    user_account_type: str
    user_ip_address: str
    total_score: float
    welcoming_level: str
    status: str
    created_at: datetime
    updated_at: datetime | None = None


def _aware(moment):
    if moment is None:
        return None
    return moment if moment.tzinfo else moment.replace(tzinfo=UTC)


def _load_ratings(review_filter: ReviewFilter, limit: int | None) -> list[Rating]:
    criteria = {}
    if review_filter.business_id:
        criteria["business_id"] = review_filter.business_id
    if review_filter.user_id:
        criteria["user_id"] = review_filter.user_id
    if not review_filter.include_removed:
        criteria["status"] = RatingStatus.ACTIVE.value

    query = current_domain.repository_for(Rating)._dao.query
    if criteria:
        query = query.filter(**criteria)
    return query.order_by("-created_at").limit(limit).all().items


def _matches(rating: Rating, review_filter: ReviewFilter) -> bool:
    if review_filter.ip_address and review_filter.ip_address not in (rating.user_ip_address or ""):
        return False
    if review_filter.min_score is not None and rating.total_score < review_filter.min_score:
        return False
    if review_filter.max_score is not None and rating.total_score > review_filter.max_score:
        return False
    created = _aware(rating.created_at)
    if review_filter.date_from and created < _aware(review_filter.date_from):
        return False
    if review_filter.date_to and created > _aware(review_filter.date_to):
        return False
    return True


def _with_business(rating: Rating, businesses: dict) -> ReviewWithBusiness:
    business_id = str(rating.business_id)
    if business_id not in businesses:
        try:
            businesses[business_id] = current_domain.repository_for(Business).get(business_id)
        except ObjectNotFoundError:
            businesses[business_id] = None
    business = businesses[business_id]

    return ReviewWithBusiness(
        id=str(rating.id),
        business_id=business_id,
        business_name=business.name if business else "Unknown Business",
        business_address=business.address if business else None,
        user_id=str(rating.user_id),
        user_account_type=rating.user_account_type,
        user_ip_address=rating.user_ip_address,
        total_score=rating.total_score,
        welcoming_level=rating.welcoming_level,
        status=rating.status,
        created_at=rating.created_at,
        updated_at=rating.updated_at,
    )


def search_reviews(review_filter: ReviewFilter | None = None, limit: int | None = 100) -> list[ReviewWithBusiness]:
    """Newest matching reviews; the business name filter applies after enrichment."""
    review_filter = review_filter or ReviewFilter()
    businesses = {}
    reviews = [
        _with_business(r, businesses) for r in _load_ratings(review_filter, limit) if _matches(r, review_filter)
    ]
    if review_filter.business_name:
        term = review_filter.business_name.lower()
        reviews = [r for r in reviews if term in r.business_name.lower()]
    return reviews


def find_suspicious_reviews(limit: int = SUSPICIOUS_SCAN_LIMIT, now=None) -> SuspiciousActivity:
    return detect_suspicious_reviews(search_reviews(ReviewFilter(), limit=limit), now)
