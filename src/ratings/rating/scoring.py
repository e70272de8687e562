"""Winks Score arithmetic.

Each survey question is answered with one of four options. Options map to
numeric values (Yes = 0.833 by default, so six questions sum to 5.0).
Reverse-scored questions are flipped (``yes - value``): answering "Yes" to
"Would a person carrying a firearm be normal here?" counts against the
business.

The total of the per-question scores is classified against two thresholds,
70% and 30% of the maximum possible score.

Everything in this module is pure; the active scoring configuration is
looked up by ``ratings.scoring_config.active``.
"""

from dataclasses import dataclass, field
from enum import Enum

from protean.exceptions import ValidationError

VERY_WELCOMING_RATIO = 0.7
MODERATELY_WELCOMING_RATIO = 0.3


class ResponseOption(Enum):
    YES = "Yes"
    PROBABLY = "Probably"
    PROBABLY_NOT = "ProbablyNot"
    NO = "No"


class WelcomingLevel(Enum):
    VERY_WELCOMING = "very-welcoming"
    MODERATELY_WELCOMING = "moderately-welcoming"
    NOT_WELCOMING = "not-welcoming"


DEFAULT_RESPONSE_VALUES = {
    "yes": 0.833,
    "probably": 0.56,
    "probably_not": 0.28,
    "no": 0.0,
}

_OPTION_KEYS = {
    ResponseOption.YES: "yes",
    ResponseOption.PROBABLY: "probably",
    ResponseOption.PROBABLY_NOT: "probably_not",
    ResponseOption.NO: "no",
}


@dataclass(frozen=True)
class SurveyQuestion:
    key: str
    text: str
    reverse_scored: bool
    order: int


SURVEY_QUESTIONS = (
    SurveyQuestion(
        key="trump_welcome",
        text="Would President Trump be welcome in this establishment?",
        reverse_scored=True,
        order=1,
    ),
    SurveyQuestion(
        key="obama_welcome",
        text="Would President Obama be welcome in this establishment?",
        reverse_scored=False,
        order=2,
    ),
    SurveyQuestion(
        key="person_of_color_comfort",
        text="Would a person of color feel comfortable in this establishment?",
        reverse_scored=False,
        order=3,
    ),
    SurveyQuestion(
        key="lgbtq_safety",
        text="Would a member of the LGBTQ community feel safe in this establishment?",
        reverse_scored=False,
        order=4,
    ),
    SurveyQuestion(
        key="undocumented_safety",
        text="Would an undocumented individual feel safe in this establishment?",
        reverse_scored=False,
        order=5,
    ),
    SurveyQuestion(
        key="firearm_normal",
        text="Would a person carrying a firearm be normal in this establishment?",
        reverse_scored=True,
        order=6,
    ),
)

QUESTION_KEYS = tuple(q.key for q in SURVEY_QUESTIONS)


@dataclass(frozen=True)
class ScoringProfile:
    """Numeric parameters of one scoring configuration."""

    response_values: dict = field(default_factory=lambda: dict(DEFAULT_RESPONSE_VALUES))
    question_count: int = len(SURVEY_QUESTIONS)
    max_possible_score: float = len(SURVEY_QUESTIONS) * DEFAULT_RESPONSE_VALUES["yes"]
    very_welcoming_threshold: float = len(SURVEY_QUESTIONS) * DEFAULT_RESPONSE_VALUES["yes"] * VERY_WELCOMING_RATIO
    moderately_welcoming_threshold: float = (
        len(SURVEY_QUESTIONS) * DEFAULT_RESPONSE_VALUES["yes"] * MODERATELY_WELCOMING_RATIO
    )

    @property
    def yes_value(self) -> float:
        return self.response_values["yes"]


def build_profile(response_values: dict | None = None, question_count: int | None = None) -> ScoringProfile:
    """Derive max score and thresholds from response values and question count."""
    values = dict(DEFAULT_RESPONSE_VALUES)
    if response_values:
        values.update({k: v for k, v in response_values.items() if v is not None})
    count = question_count or len(SURVEY_QUESTIONS)
    max_score = count * values["yes"]
    return ScoringProfile(
        response_values=values,
        question_count=count,
        max_possible_score=max_score,
        very_welcoming_threshold=max_score * VERY_WELCOMING_RATIO,
        moderately_welcoming_threshold=max_score * MODERATELY_WELCOMING_RATIO,
    )


def default_profile() -> ScoringProfile:
    return build_profile()


def response_value(option, profile: ScoringProfile | None = None) -> float:
    """Numeric value of an answer option."""
    profile = profile or default_profile()
    try:
        option = ResponseOption(option)
    except ValueError:
        raise ValidationError({"answers": [f"Unknown response option: {option}"]}) from None
    return profile.response_values[_OPTION_KEYS[option]]


def question_score(value: float, reverse_scored: bool, yes_value: float = DEFAULT_RESPONSE_VALUES["yes"]) -> float:
    if reverse_scored:
        return yes_value - value
    return value


def score_answers(answers: dict, questions=SURVEY_QUESTIONS, profile: ScoringProfile | None = None) -> dict:
    """Turn ``{question key: option}`` into ``{question key: score}``.

    Every question must be answered and no unknown question keys are allowed.
    """
    profile = profile or default_profile()
    known = {q.key for q in questions}

    unknown = sorted(set(answers) - known)
    if unknown:
        raise ValidationError({"answers": [f"Unknown survey question: {key}" for key in unknown]})

    missing = [q.key for q in questions if answers.get(q.key) is None]
    if missing:
        raise ValidationError({"answers": ["Please answer all questions"] + [f"Missing answer: {k}" for k in missing]})

    return {
        q.key: question_score(response_value(answers[q.key], profile), q.reverse_scored, profile.yes_value)
        for q in questions
    }


def validate_scores(scores: dict, yes_value: float = DEFAULT_RESPONSE_VALUES["yes"]) -> None:
    for key, value in scores.items():
        if not isinstance(value, int | float) or value < 0 or value > yes_value:
            raise ValidationError({"responses": [f"Invalid score for {key}: must be between 0 and {yes_value}"]})


def total_score(scores: dict) -> float:
    return round(sum(scores.values()), 3)


def welcoming_level(total: float, profile: ScoringProfile | None = None) -> WelcomingLevel:
    profile = profile or default_profile()
    if total >= profile.very_welcoming_threshold:
        return WelcomingLevel.VERY_WELCOMING
    if total >= profile.moderately_welcoming_threshold:
        return WelcomingLevel.MODERATELY_WELCOMING
    return WelcomingLevel.NOT_WELCOMING


def level_label(level: WelcomingLevel) -> str:
    """Human readable label, e.g. "Very Welcoming"."""
    return {
        WelcomingLevel.VERY_WELCOMING: "Very Welcoming",
        WelcomingLevel.MODERATELY_WELCOMING: "Moderately Welcoming",
        WelcomingLevel.NOT_WELCOMING: "Not Welcoming",
    }[WelcomingLevel(level)]


def convert_legacy_score(
    legacy_score: float,
    reverse_scored: bool,
    yes_value: float = DEFAULT_RESPONSE_VALUES["yes"],
) -> float:
    """Map the old -2..+2 answer scale onto 0..yes."""
    scaled = (legacy_score + 2) / 4 * yes_value
    return question_score(scaled, reverse_scored, yes_value)


@dataclass(frozen=True)
class ScoreSummary:
    total_ratings: int = 0
    average_score: float | None = None
    very_welcoming: int = 0
    moderately_welcoming: int = 0
    not_welcoming: int = 0


def summarize(ratings) -> ScoreSummary:
    """Aggregate ``(total_score, welcoming_level)`` pairs for one business."""
    ratings = list(ratings)
    if not ratings:
        return ScoreSummary()

    levels = [WelcomingLevel(level).value for _, level in ratings]
    return ScoreSummary(
        total_ratings=len(ratings),
        average_score=round(sum(score for score, _ in ratings) / len(ratings), 3),
        very_welcoming=levels.count(WelcomingLevel.VERY_WELCOMING.value),
        moderately_welcoming=levels.count(WelcomingLevel.MODERATELY_WELCOMING.value),
        not_welcoming=levels.count(WelcomingLevel.NOT_WELCOMING.value),
    )
