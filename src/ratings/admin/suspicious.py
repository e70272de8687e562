"""Suspicious review detection.

Three independent heuristics flag reviews for an administrator to look at:

- duplicate IPs: more than three reviews from one IP address
- rapid reviews: five or more reviews by one user in 24 hours, or fifteen
  or more in seven days, plus users reviewing the same business twice
- extreme scores: totals at the very ends of the scale

Detection works on any review objects exposing ``id``, ``user_id``,
``business_id``, ``user_ip_address``, ``total_score`` and ``created_at``.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from ratings.domain import logger

DUPLICATE_IP_THRESHOLD = 3
RAPID_DAILY_THRESHOLD = 5
RAPID_WEEKLY_THRESHOLD = 15
EXTREME_LOW = 1.0
EXTREME_HIGH = 4.0
IGNORED_IPS = frozenset({"0.0.0.0", "unknown", ""})


@dataclass(frozen=True)
class SuspiciousActivity:
    duplicate_ips: list = field(default_factory=list)
    rapid_reviews: list = field(default_factory=list)
    extreme_scores: list = field(default_factory=list)

    @property
    def total_flagged(self) -> int:
        return len({str(r.id) for r in self.duplicate_ips + self.rapid_reviews + self.extreme_scores})


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo else moment.replace(tzinfo=UTC)


def _unique(reviews) -> list:
    seen, result = set(), []
    for review in reviews:
        if str(review.id) not in seen:
            seen.add(str(review.id))
            result.append(review)
    return result


def duplicate_ip_reviews(reviews) -> list:
    by_ip = defaultdict(list)
    for review in reviews:
        ip = (review.user_ip_address or "").strip()
        if ip not in IGNORED_IPS:
            by_ip[ip].append(review)

    flagged = []
    for ip, group in by_ip.items():
        if len(group) > DUPLICATE_IP_THRESHOLD:
            logger.info("Suspicious IP", ip_address=ip, review_count=len(group))
            flagged.extend(group)
    return flagged


def rapid_reviews(reviews, now: datetime) -> list:
    now = _aware(now)
    day_ago = now - timedelta(hours=24)
    week_ago = now - timedelta(days=7)

    last_day, last_week = defaultdict(list), defaultdict(list)
    for review in reviews:
        created = _aware(review.created_at)
        if created >= day_ago:
            last_day[str(review.user_id)].append(review)
        if created >= week_ago:
            last_week[str(review.user_id)].append(review)

    flagged, flagged_users = [], set()
    for user_id, group in last_day.items():
        if len(group) >= RAPID_DAILY_THRESHOLD:
            flagged.extend(group)
            flagged_users.add(user_id)
    for user_id, group in last_week.items():
        if len(group) >= RAPID_WEEKLY_THRESHOLD and user_id not in flagged_users:
            flagged.extend(group)
            flagged_users.add(user_id)

    same_business = defaultdict(list)
    for review in reviews:
        same_business[(str(review.user_id), str(review.business_id))].append(review)
    for group in same_business.values():
        if len(group) > 1:
            flagged.extend(group)

    return _unique(flagged)


def extreme_score_reviews(reviews) -> list:
    return [r for r in reviews if r.total_score <= EXTREME_LOW or r.total_score >= EXTREME_HIGH]


def detect_suspicious_reviews(reviews, now: datetime | None = None) -> SuspiciousActivity:
    reviews = list(reviews)
    if not reviews:
        return SuspiciousActivity()

    activity = SuspiciousActivity(
        duplicate_ips=duplicate_ip_reviews(reviews),
        rapid_reviews=rapid_reviews(reviews, now or datetime.now(UTC)),
        extreme_scores=extreme_score_reviews(reviews),
    )
    logger.info(
        "Suspicious review analysis finished",
        analysed=len(reviews),
        duplicate_ips=len(activity.duplicate_ips),
        rapid_reviews=len(activity.rapid_reviews),
        extreme_scores=len(activity.extreme_scores),
    )
    return activity
