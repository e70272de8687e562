"""Rating aggregate (CQRS) — one user's survey answers about one business.

The raw answers are kept alongside the per-question scores so a rating can
be re-scored when the scoring configuration changes.

State Machine:
    ACTIVE → REMOVED
    REMOVED → (terminal)
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String, Text, ValueObject

from ratings.domain import ratings
from ratings.rating.events import RatingMigrated, RatingRemoved, RatingRevised, RatingSubmitted
from ratings.rating.scoring import (
    QUESTION_KEYS,
    SURVEY_QUESTIONS,
    ScoringProfile,
    default_profile,
    score_answers,
    total_score,
    validate_scores,
    welcoming_level,
)

UNKNOWN_IP = "0.0.0.0"


class RatingStatus(Enum):
    ACTIVE = "Active"
    REMOVED = "Removed"


class AccountType(Enum):
    FULL = "full"
    COOKIE = "cookie"
    ANONYMOUS = "anonymous"


@ratings.value_object(part_of="Rating")
class SurveyResponses:
    """Per-question scores after reverse scoring."""

    trump_welcome = Float()
    obama_welcome = Float()
    person_of_color_comfort = Float()
    lgbtq_safety = Float()
    undocumented_safety = Float()
    firearm_normal = Float()

    @classmethod
    def from_scores(cls, scores: dict) -> "SurveyResponses":
        return cls(**{key: scores.get(key) for key in QUESTION_KEYS})

    def as_dict(self) -> dict:
        return {key: getattr(self, key) for key in QUESTION_KEYS if getattr(self, key) is not None}


@ratings.aggregate
class Rating:
    business_id = Identifier(required=True)
    user_id = Identifier(required=True)
    user_account_type = String(choices=AccountType, default=AccountType.ANONYMOUS.value)

    responses = ValueObject(SurveyResponses, required=True)
    answers = Text(required=True)  # JSON: {question_key: option}
    total_score = Float(required=True)
    welcoming_level = String(required=True, max_length=50)

    user_ip_address = String(max_length=64, default=UNKNOWN_IP)
    status = String(choices=RatingStatus, default=RatingStatus.ACTIVE.value)

    # Cookie → full account migration
    original_user_id = Identifier()
    migrated_at = DateTime()

    # Moderation
    removed_by = String(max_length=255)
    removal_reason = Text()
    removed_at = DateTime()

    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_score_cannot_be_negative(self):
        if self.total_score is not None and self.total_score < 0:
            raise ValidationError({"total_score": ["Total score cannot be negative"]})

    @staticmethod
    def _score(answers, questions, profile):
        scores = score_answers(answers, questions, profile)
        validate_scores(scores, profile.yes_value)
        total = total_score(scores)
        return scores, total, welcoming_level(total, profile).value

    @classmethod
    def submit(
        cls,
        business_id,
        user_id,
        answers: dict,
        user_account_type=AccountType.ANONYMOUS.value,
        user_ip_address=None,
        questions=SURVEY_QUESTIONS,
        profile: ScoringProfile | None = None,
    ):
        """Score the answers and create a new active rating."""
        profile = profile or default_profile()
        scores, total, level = cls._score(answers, questions, profile)
        now = datetime.now(UTC)

        rating = cls(
            business_id=business_id,
            user_id=user_id,
            user_account_type=user_account_type,
            responses=SurveyResponses.from_scores(scores),
            answers=json.dumps(answers),
            total_score=total,
            welcoming_level=level,
            user_ip_address=user_ip_address or UNKNOWN_IP,
            status=RatingStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )
        rating.raise_(
            RatingSubmitted(
                rating_id=str(rating.id),
                business_id=str(business_id),
                user_id=str(user_id),
                user_account_type=rating.user_account_type,
                answers=rating.answers,
                total_score=total,
                welcoming_level=level,
                user_ip_address=rating.user_ip_address,
                submitted_at=now,
            )
        )
        return rating

    @property
    def is_active(self) -> bool:
        return RatingStatus(self.status) == RatingStatus.ACTIVE

    def answer_map(self) -> dict:
        return json.loads(self.answers) if self.answers else {}

    def revise(self, answers: dict, user_ip_address=None, questions=SURVEY_QUESTIONS, profile=None):
        """Replace the answers with a fresh survey and re-score."""
        if not self.is_active:
            raise ValidationError({"status": ["Removed ratings cannot be revised"]})

        profile = profile or default_profile()
        scores, total, level = self._score(answers, questions, profile)
        previous_total = self.total_score
        now = datetime.now(UTC)

        with atomic_change(self):
            self.responses = SurveyResponses.from_scores(scores)
            self.answers = json.dumps(answers)
            self.total_score = total
            self.welcoming_level = level
            if user_ip_address:
                self.user_ip_address = user_ip_address
            self.updated_at = now

        self.raise_(
            RatingRevised(
                rating_id=str(self.id),
                business_id=str(self.business_id),
                user_id=str(self.user_id),
                answers=self.answers,
                previous_total_score=previous_total,
                total_score=total,
                welcoming_level=level,
                revised_at=now,
            )
        )

    def remove(self, removed_by, reason=None):
        if not self.is_active:
            raise ValidationError({"status": ["Rating has already been removed"]})

        now = datetime.now(UTC)
        self.status = RatingStatus.REMOVED.value
        self.removed_by = removed_by
        self.removal_reason = reason
        self.removed_at = now
        self.updated_at = now

        self.raise_(
            RatingRemoved(
                rating_id=str(self.id),
                business_id=str(self.business_id),
                user_id=str(self.user_id),
                total_score=self.total_score,
                removed_by=removed_by,
                reason=reason,
                removed_at=now,
            )
        )

    def migrate_to(self, user_id):
        """Hand the rating over to a full account."""
        if str(user_id) == str(self.user_id):
            raise ValidationError({"user_id": ["Rating already belongs to this user"]})

        now = datetime.now(UTC)
        from_user_id = str(self.user_id)

        with atomic_change(self):
            if not self.original_user_id:
                self.original_user_id = from_user_id
            self.user_id = user_id
            self.user_account_type = AccountType.FULL.value
            self.migrated_at = now
            self.updated_at = now

        self.raise_(
            RatingMigrated(
                rating_id=str(self.id),
                business_id=str(self.business_id),
                from_user_id=from_user_id,
                to_user_id=str(user_id),
                migrated_at=now,
            )
        )
