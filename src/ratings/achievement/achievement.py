"""Achievement aggregate and unlock rules.

Rules are evaluated against a user's reviewer statistics after every new
rating. Each achievement type unlocks at most once per user.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, String, Text

from ratings.achievement.events import AchievementUnlocked
from ratings.domain import ratings

PERFECT_SCORE = 5.0


class AchievementType(Enum):
    HIGH_SCORER = "high_scorer"
    FREQUENT_RATER = "frequent_rater"
    EXPLORER = "explorer"
    COMMUNITY_CONTRIBUTOR = "community_contributor"
    PERFECT_SCORE = "perfect_score"


@dataclass(frozen=True)
class AchievementRule:
    achievement_type: AchievementType
    title: str
    target: float
    metric: str

    def current_value(self, stats) -> float:
        return getattr(stats, self.metric) or 0

    def target_for(self, max_possible_score=PERFECT_SCORE) -> float:
        if self.achievement_type == AchievementType.PERFECT_SCORE:
            # Default response values top out at 4.998.
            return min(self.target, round(max_possible_score, 3))
        return self.target

    def is_met(self, stats, max_possible_score=PERFECT_SCORE) -> bool:
        if stats.total_ratings == 0:
            return False
        return self.current_value(stats) >= self.target_for(max_possible_score)

    def describe(self, stats) -> str:
        if self.achievement_type == AchievementType.HIGH_SCORER:
            return f"Achieved an average score of {stats.average_score:.1f}/5.0"
        if self.achievement_type == AchievementType.FREQUENT_RATER:
            return f"Submitted {stats.total_ratings} ratings"
        if self.achievement_type == AchievementType.EXPLORER:
            return f"Rated {stats.businesses_rated} different businesses"
        if self.achievement_type == AchievementType.COMMUNITY_CONTRIBUTOR:
            return f"Helped {stats.high_score_ratings} businesses improve their scores"
        return "Achieved a perfect 5.0/5.0 score"


ACHIEVEMENT_RULES = (
    AchievementRule(AchievementType.HIGH_SCORER, "High Scorer", 4.0, "average_score"),
    AchievementRule(AchievementType.FREQUENT_RATER, "Frequent Rater", 10, "total_ratings"),
    AchievementRule(AchievementType.EXPLORER, "Explorer", 5, "businesses_rated"),
    AchievementRule(AchievementType.COMMUNITY_CONTRIBUTOR, "Community Contributor", 3, "high_score_ratings"),
    AchievementRule(AchievementType.PERFECT_SCORE, "Perfect Score", PERFECT_SCORE, "highest_score"),
)


@ratings.aggregate
class Achievement:
    user_id = Identifier(required=True)
    achievement_type = String(choices=AchievementType, required=True)
    title = String(required=True, max_length=100)
    description = Text()
    unlocked_at = DateTime()

    @classmethod
    def unlock(cls, user_id, rule: AchievementRule, stats):
        now = datetime.now(UTC)
        achievement = cls(
            user_id=user_id,
            achievement_type=rule.achievement_type.value,
            title=rule.title,
            description=rule.describe(stats),
            unlocked_at=now,
        )
        achievement.raise_(
            AchievementUnlocked(
                achievement_id=str(achievement.id),
                user_id=str(user_id),
                achievement_type=achievement.achievement_type,
                title=achievement.title,
                description=achievement.description,
                unlocked_at=now,
            )
        )
        return achievement
