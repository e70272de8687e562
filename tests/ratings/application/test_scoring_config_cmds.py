"""Application tests for scoring configuration commands."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from ratings.business.registration import RegisterBusiness
from ratings.rating.rating import Rating
from ratings.rating.submission import SubmitRating
from ratings.scoring_config.active import active_configuration, active_survey_questions, current_scoring_profile
from ratings.scoring_config.management import (
    ActivateScoringConfiguration,
    CreateScoringConfiguration,
    InitializeDefaultScoring,
    UpdateScoringConfiguration,
    UpsertSurveyQuestion,
)
from ratings.scoring_config.scoring_config import ScoringConfiguration, SurveyQuestionConfig

MOST_WELCOMING = {
    "trump_welcome": "No",
    "obama_welcome": "Yes",
    "person_of_color_comfort": "Yes",
    "lgbtq_safety": "Yes",
    "undocumented_safety": "Yes",
    "firearm_normal": "No",
}


def _create(version, **overrides):
    return current_domain.process(CreateScoringConfiguration(version=version, **overrides), asynchronous=False)


class TestDefaultsWithoutConfiguration:
    def test_profile_falls_back_to_defaults(self):
        assert active_configuration() is None
        assert current_scoring_profile().max_possible_score == pytest.approx(4.998)

    def test_questions_fall_back_to_built_in_survey(self):
        keys = [q.key for q in active_survey_questions()]
        assert keys[0] == "trump_welcome"
        assert len(keys) == 6


class TestInitializeDefaultScoring:
    def test_seeds_configuration_and_questions(self):
        config_id = current_domain.process(InitializeDefaultScoring(), asynchronous=False)

        config = current_domain.repository_for(ScoringConfiguration).get(config_id)
        assert config.is_active is True
        assert config.version == "1.0"
        assert config.created_by == "system"

        questions = current_domain.repository_for(SurveyQuestionConfig)._dao.query.all().items
        assert len(questions) == 6
        assert [q.key for q in active_survey_questions()][-1] == "firearm_normal"

    def test_is_idempotent(self):
        first = current_domain.process(InitializeDefaultScoring(), asynchronous=False)
        second = current_domain.process(InitializeDefaultScoring(), asynchronous=False)
        assert first == second
        assert len(current_domain.repository_for(SurveyQuestionConfig)._dao.query.all().items) == 6


class TestCreateScoringConfiguration:
    def test_new_configuration_becomes_the_only_active_one(self):
        first = _create("1.0")
        second = _create("2.0", response_values=json.dumps({"yes": 1.0}))

        repo = current_domain.repository_for(ScoringConfiguration)
        assert repo.get(first).is_active is False
        assert repo.get(second).is_active is True
        assert str(active_configuration().id) == second
        assert current_scoring_profile().max_possible_score == 6.0

    def test_invalid_values_rejected(self):
        with pytest.raises(ValidationError):
            _create("bad", response_values=json.dumps({"yes": 0.1, "probably": 0.5}))


class TestActivateScoringConfiguration:
    def test_switch_back(self):
        first = _create("1.0")
        _create("2.0")

        current_domain.process(ActivateScoringConfiguration(config_id=first), asynchronous=False)
        active = current_domain.repository_for(ScoringConfiguration)._dao.query.filter(is_active=True).all().items
        assert [str(c.id) for c in active] == [first]


class TestUpdateScoringConfiguration:
    def test_update_values(self):
        config_id = _create("1.0")
        current_domain.process(
            UpdateScoringConfiguration(config_id=config_id, response_values=json.dumps({"yes": 1.0}), question_count=5),
            asynchronous=False,
        )
        config = current_domain.repository_for(ScoringConfiguration).get(config_id)
        assert config.max_possible_score == 5.0
        assert config.question_count == 5


class TestUpsertSurveyQuestion:
    def test_new_question_needs_text(self):
        with pytest.raises(ValidationError):
            current_domain.process(UpsertSurveyQuestion(question_key="new_question"), asynchronous=False)

    def test_creates_question(self):
        current_domain.process(
            UpsertSurveyQuestion(
                question_key="wheelchair_access",
                text="Could a wheelchair user get around easily?",
                display_order=7,
            ),
            asynchronous=False,
        )
        keys = [q.key for q in active_survey_questions()]
        assert keys == ["wheelchair_access"]

    def test_revises_existing_question(self):
        current_domain.process(InitializeDefaultScoring(), asynchronous=False)
        current_domain.process(
            UpsertSurveyQuestion(question_key="firearm_normal", is_active=False),
            asynchronous=False,
        )
        keys = [q.key for q in active_survey_questions()]
        assert "firearm_normal" not in keys
        assert len(keys) == 5


class TestRatingsUseActiveConfiguration:
    def test_rating_scored_with_active_values(self):
        _create("2.0", response_values=json.dumps({"yes": 1.0}))
        current_domain.process(
            RegisterBusiness(place_id="place-cfg-1", name="Config Cafe", latitude=40.0, longitude=-74.0),
            asynchronous=False,
        )
        rating_id = current_domain.process(
            SubmitRating(business_id="place-cfg-1", user_id="user-cfg-1", answers=json.dumps(MOST_WELCOMING)),
            asynchronous=False,
        )
        rating = current_domain.repository_for(Rating).get(rating_id)
        assert rating.total_score == 6.0
        assert rating.welcoming_level == "very-welcoming"

    def test_inactive_question_not_asked(self):
        current_domain.process(InitializeDefaultScoring(), asynchronous=False)
        current_domain.process(UpsertSurveyQuestion(question_key="firearm_normal", is_active=False), asynchronous=False)
        current_domain.process(
            RegisterBusiness(place_id="place-cfg-2", name="Config Diner", latitude=40.0, longitude=-74.0),
            asynchronous=False,
        )
        answers = {k: v for k, v in MOST_WELCOMING.items() if k != "firearm_normal"}
        rating_id = current_domain.process(
            SubmitRating(business_id="place-cfg-2", user_id="user-cfg-2", answers=json.dumps(answers)),
            asynchronous=False,
        )
        assert current_domain.repository_for(Rating).get(rating_id).responses.firearm_normal is None
