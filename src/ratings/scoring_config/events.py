"""Domain events for scoring configuration changes."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from ratings.domain import ratings


@ratings.event(part_of="ScoringConfiguration")
class ScoringConfigurationCreated:
    __version__ = 1

    config_id = Identifier(required=True)
    version = String(required=True)
    max_possible_score = Float(required=True)
    very_welcoming_threshold = Float(required=True)
    moderately_welcoming_threshold = Float(required=True)
    created_by = String()
    created_at = DateTime(required=True)


@ratings.event(part_of="ScoringConfiguration")
class ScoringConfigurationUpdated:
    __version__ = 1

    config_id = Identifier(required=True)
    max_possible_score = Float(required=True)
    very_welcoming_threshold = Float(required=True)
    moderately_welcoming_threshold = Float(required=True)
    question_count = Integer(required=True)
    updated_at = DateTime(required=True)


@ratings.event(part_of="ScoringConfiguration")
class ScoringConfigurationActivated:
    __version__ = 1

    config_id = Identifier(required=True)
    version = String(required=True)
    activated_at = DateTime(required=True)


@ratings.event(part_of="SurveyQuestionConfig")
class SurveyQuestionConfigured:
    __version__ = 1

    question_id = Identifier(required=True)
    question_key = String(required=True)
    reverse_scored = Boolean(required=True)
    is_active = Boolean(required=True)
    display_order = Integer(required=True)
    configured_at = DateTime(required=True)
