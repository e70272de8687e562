"""Scoring configuration aggregates.

A ScoringConfiguration holds the response values and the derived maximum
score and welcoming thresholds. Exactly one configuration is active at a
time; activating one deactivates the rest (enforced by the command
handlers, which see every configuration).

SurveyQuestionConfig rows let the survey wording, ordering and reverse
scoring be changed without a release.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text, ValueObject

from ratings.domain import ratings
from ratings.rating.scoring import DEFAULT_RESPONSE_VALUES, SURVEY_QUESTIONS, ScoringProfile, build_profile
from ratings.scoring_config.events import (
    ScoringConfigurationActivated,
    ScoringConfigurationCreated,
    ScoringConfigurationUpdated,
    SurveyQuestionConfigured,
)


@ratings.value_object(part_of="ScoringConfiguration")
class ResponseValues:
    """Numeric value of each answer option."""

    yes = Float(required=True, default=DEFAULT_RESPONSE_VALUES["yes"])
    probably = Float(required=True, default=DEFAULT_RESPONSE_VALUES["probably"])
    probably_not = Float(required=True, default=DEFAULT_RESPONSE_VALUES["probably_not"])
    no = Float(required=True, default=DEFAULT_RESPONSE_VALUES["no"])

    @invariant.post
    def values_must_be_ordered(self):
        values = [self.yes, self.probably, self.probably_not, self.no]
        if any(v is None for v in values):
            return
        if any(v < 0 for v in values):
            raise ValidationError({"response_values": ["Response values cannot be negative"]})
        if not (self.yes >= self.probably >= self.probably_not >= self.no):
            raise ValidationError({"response_values": ["Response values must decrease from Yes to No"]})

    def as_dict(self) -> dict:
        return {
            "yes": self.yes,
            "probably": self.probably,
            "probably_not": self.probably_not,
            "no": self.no,
        }


@ratings.aggregate
class ScoringConfiguration:
    version = String(required=True, max_length=50)
    is_active = Boolean(default=False)
    response_values = ValueObject(ResponseValues, required=True)
    question_count = Integer(default=len(SURVEY_QUESTIONS))
    max_possible_score = Float()
    very_welcoming_threshold = Float()
    moderately_welcoming_threshold = Float()
    created_by = String(max_length=255)
    description = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def question_count_must_be_positive(self):
        if self.question_count is not None and self.question_count < 1:
            raise ValidationError({"question_count": ["At least one question is required"]})

    @classmethod
    def create(cls, version, response_values=None, question_count=None, created_by=None, description=None):
        now = datetime.now(UTC)
        values = ResponseValues(**{**DEFAULT_RESPONSE_VALUES, **(response_values or {})})
        profile = build_profile(values.as_dict(), question_count)

        config = cls(
            version=version,
            is_active=True,
            response_values=values,
            question_count=profile.question_count,
            max_possible_score=profile.max_possible_score,
            very_welcoming_threshold=profile.very_welcoming_threshold,
            moderately_welcoming_threshold=profile.moderately_welcoming_threshold,
            created_by=created_by,
            description=description,
            created_at=now,
            updated_at=now,
        )
        config.raise_(
            ScoringConfigurationCreated(
                config_id=str(config.id),
                version=version,
                max_possible_score=config.max_possible_score,
                very_welcoming_threshold=config.very_welcoming_threshold,
                moderately_welcoming_threshold=config.moderately_welcoming_threshold,
                created_by=created_by,
                created_at=now,
            )
        )
        return config

    def update(self, response_values=None, question_count=None, description=None):
        """Change values, question count or description, recomputing the derived scores."""
        now = datetime.now(UTC)

        with atomic_change(self):
            if description is not None:
                self.description = description
            if response_values is not None or question_count is not None:
                values = ResponseValues(**{**self.response_values.as_dict(), **(response_values or {})})
                profile = build_profile(values.as_dict(), question_count or self.question_count)
                self.response_values = values
                self.question_count = profile.question_count
                self.max_possible_score = profile.max_possible_score
                self.very_welcoming_threshold = profile.very_welcoming_threshold
                self.moderately_welcoming_threshold = profile.moderately_welcoming_threshold
            self.updated_at = now

        self.raise_(
            ScoringConfigurationUpdated(
                config_id=str(self.id),
                max_possible_score=self.max_possible_score,
                very_welcoming_threshold=self.very_welcoming_threshold,
                moderately_welcoming_threshold=self.moderately_welcoming_threshold,
                question_count=self.question_count,
                updated_at=now,
            )
        )

    def activate(self):
        now = datetime.now(UTC)
        self.is_active = True
        self.updated_at = now
        self.raise_(
            ScoringConfigurationActivated(
                config_id=str(self.id),
                version=self.version,
                activated_at=now,
            )
        )

    def deactivate(self):
        self.is_active = False
        self.updated_at = datetime.now(UTC)

    def to_profile(self) -> ScoringProfile:
        return ScoringProfile(
            response_values=self.response_values.as_dict(),
            question_count=self.question_count,
            max_possible_score=self.max_possible_score,
            very_welcoming_threshold=self.very_welcoming_threshold,
            moderately_welcoming_threshold=self.moderately_welcoming_threshold,
        )


@ratings.aggregate
class SurveyQuestionConfig:
    question_key = String(required=True, max_length=100, unique=True)
    text = Text(required=True)
    reverse_scored = Boolean(default=False)
    is_active = Boolean(default=True)
    display_order = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def text_must_not_be_empty(self):
        if self.text is not None and not self.text.strip():
            raise ValidationError({"text": ["Question text cannot be empty"]})

    @classmethod
    def define(cls, question_key, text, reverse_scored=False, is_active=True, display_order=0):
        now = datetime.now(UTC)
        question = cls(
            question_key=question_key,
            text=text,
            reverse_scored=reverse_scored,
            is_active=is_active,
            display_order=display_order,
            created_at=now,
            updated_at=now,
        )
        question._configured(now)
        return question

    def revise(self, text=None, reverse_scored=None, is_active=None, display_order=None):
        now = datetime.now(UTC)
        with atomic_change(self):
            if text is not None:
                self.text = text
            if reverse_scored is not None:
                self.reverse_scored = reverse_scored
            if is_active is not None:
                self.is_active = is_active
            if display_order is not None:
                self.display_order = display_order
            self.updated_at = now
        self._configured(now)

    def _configured(self, now):
        self.raise_(
            SurveyQuestionConfigured(
                question_id=str(self.id),
                question_key=self.question_key,
                reverse_scored=self.reverse_scored,
                is_active=self.is_active,
                display_order=self.display_order,
                configured_at=now,
            )
        )
