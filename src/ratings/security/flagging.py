"""FlagSuspiciousUser / ReviewSuspiciousUserFlag, and the activity monitor.

The monitor watches new ratings and flags users who submit more than
``EXCESSIVE_DAILY_RATINGS`` in a day. It skips users who already carry an
active flag for the same reason, so replaying an event never stacks flags.
"""

import json
from datetime import UTC, datetime, timedelta

from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from ratings.domain import logger, ratings
from ratings.rating.events import RatingSubmitted
from ratings.rating.queries import ratings_created_since
from ratings.security.flag import FlagReason, FlagStatus, SuspiciousUserFlag

EXCESSIVE_DAILY_RATINGS = 10


@ratings.command(part_of="SuspiciousUserFlag")
class FlagSuspiciousUser:
    user_id = Identifier(required=True)
    reason = String(required=True, max_length=100)
    evidence = Text()  # JSON object
    flagged_by = String(max_length=255)


@ratings.command(part_of="SuspiciousUserFlag")
class ReviewSuspiciousUserFlag:
    flag_id = Identifier(required=True)
    status = String(required=True)
    admin_id = String(max_length=255)


def active_flags_for(user_id, reason=None) -> list[SuspiciousUserFlag]:
    criteria = {"user_id": str(user_id), "status": FlagStatus.ACTIVE.value}
    if reason:
        criteria["reason"] = reason
    return current_domain.repository_for(SuspiciousUserFlag)._dao.query.filter(**criteria).limit(None).all().items


def list_flags(status=None, limit: int = 100) -> list[SuspiciousUserFlag]:
    """Flags newest first, optionally narrowed to one status."""
    query = current_domain.repository_for(SuspiciousUserFlag)._dao.query
    if status:
        query = query.filter(status=status)
    return query.order_by("-flagged_at").limit(limit).all().items


def _evidence(raw) -> dict:
    if not raw:
        return {}
    try:
        evidence = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError:
        raise ValidationError({"evidence": ["Evidence must be a JSON object"]}) from None
    if not isinstance(evidence, dict):
        raise ValidationError({"evidence": ["Evidence must be a JSON object"]})
    return evidence


@ratings.command_handler(part_of=SuspiciousUserFlag)
class SuspiciousUserFlagHandler:
    @handle(FlagSuspiciousUser)
    def flag_user(self, command):
        flag = SuspiciousUserFlag.raise_flag(
            user_id=command.user_id,
            reason=command.reason,
            evidence=_evidence(command.evidence),
            flagged_by=command.flagged_by,
        )
        current_domain.repository_for(SuspiciousUserFlag).add(flag)

        logger.warning("User flagged", flag_id=str(flag.id), user_id=str(command.user_id), reason=command.reason)
        return str(flag.id)

    @handle(ReviewSuspiciousUserFlag)
    def review_flag(self, command):
        repo = current_domain.repository_for(SuspiciousUserFlag)
        flag = repo.get(command.flag_id)
        flag.review(command.status, admin_id=command.admin_id)
        repo.add(flag)

        logger.info("Flag reviewed", flag_id=str(flag.id), status=flag.status, admin_id=command.admin_id)


def check_rating_activity(user_id, now=None) -> SuspiciousUserFlag | None:
    """Flag the user when their last 24 hours hold too many ratings."""
    now = now or datetime.now(UTC)
    recent = ratings_created_since(user_id, now - timedelta(hours=24))
    if len(recent) <= EXCESSIVE_DAILY_RATINGS:
        return None

    reason = FlagReason.EXCESSIVE_RATING_ACTIVITY.value
    if active_flags_for(user_id, reason=reason):
        return None

    flag = SuspiciousUserFlag.raise_flag(
        user_id=user_id,
        reason=reason,
        evidence={"ratings_in_24h": len(recent), "threshold": EXCESSIVE_DAILY_RATINGS},
        flagged_by="system",
    )
    current_domain.repository_for(SuspiciousUserFlag).add(flag)
    logger.warning("Excessive rating activity", user_id=str(user_id), ratings_in_24h=len(recent))
    return flag


@ratings.event_handler(part_of=SuspiciousUserFlag, stream_category="ratings::rating")
class RatingActivityMonitor:
    @handle(RatingSubmitted)
    def on_rating_submitted(self, event: RatingSubmitted) -> None:
        check_rating_activity(event.user_id)
