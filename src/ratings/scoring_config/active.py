"""Lookup of the scoring parameters currently in force.

Both lookups fall back to the built-in defaults so that ratings can be
scored before any configuration has been seeded.
"""

from protean.utils.globals import current_domain

from ratings.rating.scoring import SURVEY_QUESTIONS, ScoringProfile, SurveyQuestion, default_profile
from ratings.scoring_config.scoring_config import ScoringConfiguration, SurveyQuestionConfig


def active_configuration() -> ScoringConfiguration | None:
    repo = current_domain.repository_for(ScoringConfiguration)
    active = repo._dao.query.filter(is_active=True).all().items
    return active[0] if active else None


def current_scoring_profile() -> ScoringProfile:
    config = active_configuration()
    if config is None:
        return default_profile()
    return config.to_profile()


def active_survey_questions() -> tuple[SurveyQuestion, ...]:
    repo = current_domain.repository_for(SurveyQuestionConfig)
    configured = [q for q in repo._dao.query.all().items if q.is_active]
    if not configured:
        return SURVEY_QUESTIONS

    return tuple(
        SurveyQuestion(
            key=q.question_key,
            text=q.text,
            reverse_scored=bool(q.reverse_scored),
            order=q.display_order,
        )
        for q in sorted(configured, key=lambda q: (q.display_order, q.question_key))
    )
