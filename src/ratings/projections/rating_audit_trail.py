"""RatingAuditTrail — one entry per rating lifecycle event.

Entry ids are derived from the rating, event type and event time, so a
replayed event overwrites its own entry instead of adding another.
"""

import json
from enum import Enum

from protean.core.projector import on
from protean.fields import DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from ratings.domain import ratings
from ratings.rating.events import RatingMigrated, RatingRemoved, RatingRevised, RatingSubmitted
from ratings.rating.rating import Rating


class AuditEventType(Enum):
    RATING_SUBMISSION = "rating_submission"
    RATING_REVISION = "rating_revision"
    RATING_REMOVAL = "rating_removal"
    ACCOUNT_MIGRATION = "account_migration"


@ratings.projection
class RatingAuditTrail:
    entry_id = Identifier(identifier=True, required=True)
    event_type = String(choices=AuditEventType, required=True)
    user_id = Identifier(required=True)
    user_account_type = String()
    business_id = Identifier(required=True)
    rating_id = Identifier(required=True)
    ip_address = String(max_length=64)
    total_score = Float()
    details = Text()  # JSON
    occurred_at = DateTime(required=True)


def _record(event_type: AuditEventType, event, occurred_at, user_id, details=None, **fields):
    current_domain.repository_for(RatingAuditTrail).add(
        RatingAuditTrail(
            entry_id=f"{event.rating_id}:{event_type.value}:{occurred_at.isoformat()}",
            event_type=event_type.value,
            user_id=user_id,
            business_id=event.business_id,
            rating_id=event.rating_id,
            details=json.dumps(details or {}),
            occurred_at=occurred_at,
            **fields,
        )
    )


@ratings.projector(projector_for=RatingAuditTrail, aggregates=[Rating])
class RatingAuditTrailProjector:
    @on(RatingSubmitted)
    def on_rating_submitted(self, event):
        _record(
            AuditEventType.RATING_SUBMISSION,
            event,
            event.submitted_at,
            event.user_id,
            details={"welcoming_level": event.welcoming_level, "answers": json.loads(event.answers)},
            user_account_type=event.user_account_type,
            ip_address=event.user_ip_address,
            total_score=event.total_score,
        )

    @on(RatingRevised)
    def on_rating_revised(self, event):
        _record(
            AuditEventType.RATING_REVISION,
            event,
            event.revised_at,
            event.user_id,
            details={"welcoming_level": event.welcoming_level, "previous_total_score": event.previous_total_score},
            total_score=event.total_score,
        )

    @on(RatingRemoved)
    def on_rating_removed(self, event):
        _record(
            AuditEventType.RATING_REMOVAL,
            event,
            event.removed_at,
            event.user_id,
            details={"removed_by": event.removed_by, "reason": event.reason},
            total_score=event.total_score,
        )

    @on(RatingMigrated)
    def on_rating_migrated(self, event):
        _record(
            AuditEventType.ACCOUNT_MIGRATION,
            event,
            event.migrated_at,
            event.to_user_id,
            details={"from_user_id": str(event.from_user_id)},
        )
