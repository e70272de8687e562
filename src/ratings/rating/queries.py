"""Read-side helpers over the Rating aggregate."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, datetime

from protean.utils.globals import current_domain

from ratings.business.business import Business
from ratings.business.geo import bounding_box, haversine_miles
from ratings.rating.rating import Rating, RatingStatus
from ratings.rating.scoring import WelcomingLevel

HIGH_SCORE = 4.0
NEARBY_RATER_RADIUS_MILES = 1.0
MAX_NEARBY_RATERS = 10
KM_PER_MILE = 1.609344


@dataclass(frozen=True)
class ReviewerStats:
    user_id: str
    total_ratings: int = 0
    average_score: float = 0.0
    highest_score: float = 0.0
    businesses_rated: int = 0
    high_score_ratings: int = 0
    last_rated_at: datetime | None = None


@dataclass(frozen=True)
class RatingStatistics:
    total_ratings: int = 0
    active_ratings: int = 0
    removed_ratings: int = 0
    average_score: float | None = None
    unique_users: int = 0
    unique_businesses: int = 0
    by_level: dict = field(default_factory=dict)
    by_account_type: dict = field(default_factory=dict)


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo else moment.replace(tzinfo=UTC)


def _ratings(**filters) -> list[Rating]:
    return current_domain.repository_for(Rating)._dao.query.filter(**filters).limit(None).all().items


def active_ratings(**filters) -> list[Rating]:
    return _ratings(status=RatingStatus.ACTIVE.value, **filters)


def user_ratings(user_id) -> list[Rating]:
    """Active ratings by a user, newest first."""
    items = active_ratings(user_id=str(user_id))
    return sorted(items, key=lambda r: r.created_at, reverse=True)


def business_ratings(business_id) -> list[Rating]:
    items = active_ratings(business_id=str(business_id))
    return sorted(items, key=lambda r: r.created_at, reverse=True)


def ratings_created_since(user_id, since: datetime) -> list[Rating]:
    """Every rating the user created at or after ``since``, removed ones included, oldest first."""
    items = [r for r in _ratings(user_id=str(user_id)) if r.created_at and _aware(r.created_at) >= _aware(since)]
    return sorted(items, key=lambda r: _aware(r.created_at))


def reviewer_stats(user_id) -> ReviewerStats:
    items = active_ratings(user_id=str(user_id))
    if not items:
        return ReviewerStats(user_id=str(user_id))

    scores = [r.total_score for r in items]
    return ReviewerStats(
        user_id=str(user_id),
        total_ratings=len(items),
        average_score=round(sum(scores) / len(scores), 3),
        highest_score=max(scores),
        businesses_rated=len({str(r.business_id) for r in items}),
        high_score_ratings=sum(1 for s in scores if s >= HIGH_SCORE),
        last_rated_at=max(r.updated_at or r.created_at for r in items),
    )


def rating_statistics() -> RatingStatistics:
    items = _ratings()
    if not items:
        return RatingStatistics()

    active = [r for r in items if r.status == RatingStatus.ACTIVE.value]
    levels = Counter(r.welcoming_level for r in active)
    return RatingStatistics(
        total_ratings=len(items),
        active_ratings=len(active),
        removed_ratings=len(items) - len(active),
        average_score=round(sum(r.total_score for r in active) / len(active), 3) if active else None,
        unique_users=len({str(r.user_id) for r in active}),
        unique_businesses=len({str(r.business_id) for r in active}),
        by_level={level.value: levels.get(level.value, 0) for level in WelcomingLevel},
        by_account_type=dict(Counter(r.user_account_type for r in active)),
    )


def nearby_raters(business: Business, exclude_user_id=None) -> list[dict]:
    """Users who rated a business within a mile of ``business``, nearest first."""
    radius_km = NEARBY_RATER_RADIUS_MILES * KM_PER_MILE
    min_lat, max_lat, min_lng, max_lng = bounding_box(business.latitude, business.longitude, radius_km)
    candidates = (
        current_domain.repository_for(Business)
        ._dao.query.filter(
            latitude__gte=min_lat,
            latitude__lte=max_lat,
            longitude__gte=min_lng,
            longitude__lte=max_lng,
        )
        .limit(None)
        .all()
        .items
    )
    distances = []
    for candidate in candidates:
        miles = haversine_miles(business.latitude, business.longitude, candidate.latitude, candidate.longitude)
        if miles <= NEARBY_RATER_RADIUS_MILES:
            distances.append((miles, str(candidate.business_id)))

    raters: dict[str, float] = {}
    for miles, business_id in sorted(distances):
        for rating in active_ratings(business_id=business_id):
            uid = str(rating.user_id)
            if uid != str(exclude_user_id) and uid not in raters:
                raters[uid] = round(miles, 2)
            if len(raters) >= MAX_NEARBY_RATERS:
                break
        if len(raters) >= MAX_NEARBY_RATERS:
            break
    return [{"user_id": uid, "distance_miles": miles} for uid, miles in raters.items()]
