"""Scoring configuration commands.

CreateScoringConfiguration / ActivateScoringConfiguration keep a single
configuration active. InitializeDefaultScoring seeds the default
configuration and the six survey questions when nothing is active yet.
"""

import json

from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from ratings.domain import logger, ratings
from ratings.rating.scoring import SURVEY_QUESTIONS
from ratings.scoring_config.scoring_config import ScoringConfiguration, SurveyQuestionConfig

DEFAULT_VERSION = "1.0"


@ratings.command(part_of="ScoringConfiguration")
class CreateScoringConfiguration:
    version = String(required=True, max_length=50)
    response_values = Text()  # JSON: {"yes": 0.833, "probably": 0.56, ...}
    question_count = Integer()
    created_by = String(max_length=255)
    description = Text()


@ratings.command(part_of="ScoringConfiguration")
class ActivateScoringConfiguration:
    config_id = Identifier(required=True)


@ratings.command(part_of="ScoringConfiguration")
class UpdateScoringConfiguration:
    config_id = Identifier(required=True)
    response_values = Text()
    question_count = Integer()
    description = Text()


@ratings.command(part_of="ScoringConfiguration")
class InitializeDefaultScoring:
    created_by = String(max_length=255, default="system")


@ratings.command(part_of="SurveyQuestionConfig")
class UpsertSurveyQuestion:
    question_key = String(required=True, max_length=100)
    text = Text()
    reverse_scored = Boolean()
    is_active = Boolean()
    display_order = Integer()


def _all_configurations():
    return current_domain.repository_for(ScoringConfiguration)._dao.query.all().items


def _deactivate_others(repo, keep_id):
    for config in _all_configurations():
        if str(config.id) != str(keep_id) and config.is_active:
            config.deactivate()
            repo.add(config)


@ratings.command_handler(part_of=ScoringConfiguration)
class ScoringConfigurationHandler:
    @handle(CreateScoringConfiguration)
    def create_configuration(self, command):
        repo = current_domain.repository_for(ScoringConfiguration)
        config = ScoringConfiguration.create(
            version=command.version,
            response_values=json.loads(command.response_values) if command.response_values else None,
            question_count=command.question_count,
            created_by=command.created_by,
            description=command.description,
        )
        _deactivate_others(repo, config.id)
        repo.add(config)

        logger.info(
            "Scoring configuration created",
            config_id=str(config.id),
            version=config.version,
            max_possible_score=config.max_possible_score,
        )
        return str(config.id)

    @handle(ActivateScoringConfiguration)
    def activate_configuration(self, command):
        repo = current_domain.repository_for(ScoringConfiguration)
        config = repo.get(command.config_id)
        _deactivate_others(repo, config.id)
        config.activate()
        repo.add(config)

    @handle(UpdateScoringConfiguration)
    def update_configuration(self, command):
        repo = current_domain.repository_for(ScoringConfiguration)
        config = repo.get(command.config_id)
        config.update(
            response_values=json.loads(command.response_values) if command.response_values else None,
            question_count=command.question_count,
            description=command.description,
        )
        repo.add(config)

    @handle(InitializeDefaultScoring)
    def initialize_defaults(self, command):
        repo = current_domain.repository_for(ScoringConfiguration)
        active = [c for c in _all_configurations() if c.is_active]
        if active:
            return str(active[0].id)

        config = ScoringConfiguration.create(
            version=DEFAULT_VERSION,
            created_by=command.created_by,
            description="Initial Welcome Winks scoring configuration",
        )
        repo.add(config)

        question_repo = current_domain.repository_for(SurveyQuestionConfig)
        existing_keys = {q.question_key for q in question_repo._dao.query.all().items}
        for question in SURVEY_QUESTIONS:
            if question.key in existing_keys:
                continue
            question_repo.add(
                SurveyQuestionConfig.define(
                    question_key=question.key,
                    text=question.text,
                    reverse_scored=question.reverse_scored,
                    display_order=question.order,
                )
            )

        logger.info("Default scoring initialized", config_id=str(config.id))
        return str(config.id)


@ratings.command_handler(part_of=SurveyQuestionConfig)
class SurveyQuestionHandler:
    @handle(UpsertSurveyQuestion)
    def upsert_question(self, command):
        repo = current_domain.repository_for(SurveyQuestionConfig)
        existing = repo._dao.query.filter(question_key=command.question_key).all().items

        if existing:
            question = existing[0]
            question.revise(
                text=command.text,
                reverse_scored=command.reverse_scored,
                is_active=command.is_active,
                display_order=command.display_order,
            )
        else:
            if not command.text:
                raise ValidationError({"text": ["Question text is required for a new survey question"]})
            question = SurveyQuestionConfig.define(
                question_key=command.question_key,
                text=command.text,
                reverse_scored=bool(command.reverse_scored),
                is_active=command.is_active if command.is_active is not None else True,
                display_order=command.display_order or 0,
            )
        repo.add(question)
        return str(question.id)
