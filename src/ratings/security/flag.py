"""SuspiciousUserFlag aggregate — an account held back from rating.

An active flag blocks the user from submitting ratings until an
administrator reviews or dismisses it.

State Machine:
    ACTIVE → REVIEWED | DISMISSED
    REVIEWED, DISMISSED → (terminal)
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text

from ratings.domain import ratings
from ratings.security.events import SuspiciousUserFlagged, SuspiciousUserFlagReviewed


class FlagStatus(Enum):
    ACTIVE = "active"
    REVIEWED = "reviewed"
    DISMISSED = "dismissed"


class FlagReason(Enum):
    EXCESSIVE_RATING_ACTIVITY = "excessive_rating_activity"
    MANUAL = "manual"


_VALID_TRANSITIONS = {
    FlagStatus.ACTIVE: {FlagStatus.REVIEWED, FlagStatus.DISMISSED},
    FlagStatus.REVIEWED: set(),
    FlagStatus.DISMISSED: set(),
}


@ratings.aggregate
class SuspiciousUserFlag:
    user_id = Identifier(required=True)
    reason = String(required=True, max_length=100)
    evidence = Text()  # JSON
    flagged_by = String(max_length=255)
    status = String(choices=FlagStatus, default=FlagStatus.ACTIVE.value)
    reviewed_by = String(max_length=255)
    reviewed_at = DateTime()
    flagged_at = DateTime()

    @classmethod
    def raise_flag(cls, user_id, reason, evidence: dict | None = None, flagged_by=None):
        now = datetime.now(UTC)
        flag = cls(
            user_id=user_id,
            reason=reason,
            evidence=json.dumps(evidence or {}),
            flagged_by=flagged_by,
            status=FlagStatus.ACTIVE.value,
            flagged_at=now,
        )
        flag.raise_(
            SuspiciousUserFlagged(
                flag_id=str(flag.id),
                user_id=str(user_id),
                reason=reason,
                evidence=flag.evidence,
                flagged_by=flagged_by,
                flagged_at=now,
            )
        )
        return flag

    @property
    def is_active(self) -> bool:
        return FlagStatus(self.status) == FlagStatus.ACTIVE

    def evidence_map(self) -> dict:
        return json.loads(self.evidence) if self.evidence else {}

    def review(self, status, admin_id=None):
        current = FlagStatus(self.status)
        try:
            target = FlagStatus(status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown flag status: {status}"]}) from None
        if target not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

        now = datetime.now(UTC)
        self.status = target.value
        self.reviewed_by = admin_id
        self.reviewed_at = now

        self.raise_(
            SuspiciousUserFlagReviewed(
                flag_id=str(self.id),
                user_id=str(self.user_id),
                previous_status=current.value,
                status=target.value,
                reviewed_by=admin_id,
                reviewed_at=now,
            )
        )
