"""Achievement evaluation — reacts to new ratings.

The handler re-reads the user's statistics, so it is safe to run more than
once for the same rating.
"""

from dataclasses import dataclass

from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from ratings.achievement.achievement import ACHIEVEMENT_RULES, Achievement
from ratings.domain import logger, ratings
from ratings.rating.events import RatingSubmitted
from ratings.rating.queries import reviewer_stats
from ratings.scoring_config.active import current_scoring_profile


@dataclass(frozen=True)
class AchievementProgress:
    achievement_type: str
    title: str
    current: float
    target: float
    completed: bool
    unlocked: bool


def unlocked_types(user_id) -> set[str]:
    repo = current_domain.repository_for(Achievement)
    return {a.achievement_type for a in repo._dao.query.filter(user_id=str(user_id)).all().items}


def user_achievements(user_id) -> list[Achievement]:
    items = current_domain.repository_for(Achievement)._dao.query.filter(user_id=str(user_id)).all().items
    return sorted(items, key=lambda a: a.unlocked_at, reverse=True)


def evaluate_achievements(user_id) -> list[Achievement]:
    """Unlock every rule the user now meets and has not unlocked yet."""
    stats = reviewer_stats(user_id)
    max_score = current_scoring_profile().max_possible_score
    already = unlocked_types(user_id)

    repo = current_domain.repository_for(Achievement)
    unlocked = []
    for rule in ACHIEVEMENT_RULES:
        if rule.achievement_type.value in already or not rule.is_met(stats, max_score):
            continue
        achievement = Achievement.unlock(user_id, rule, stats)
        repo.add(achievement)
        unlocked.append(achievement)
        logger.info("Achievement unlocked", user_id=str(user_id), achievement_type=rule.achievement_type.value)
    return unlocked


def achievement_progress(user_id) -> list[AchievementProgress]:
    stats = reviewer_stats(user_id)
    max_score = current_scoring_profile().max_possible_score
    already = unlocked_types(user_id)

    return [
        AchievementProgress(
            achievement_type=rule.achievement_type.value,
            title=rule.title,
            current=rule.current_value(stats),
            target=rule.target_for(max_score),
            completed=rule.is_met(stats, max_score),
            unlocked=rule.achievement_type.value in already,
        )
        for rule in ACHIEVEMENT_RULES
    ]


@ratings.event_handler(part_of=Achievement, stream_category="ratings::rating")
class AchievementEvaluator:
    @handle(RatingSubmitted)
    def on_rating_submitted(self, event: RatingSubmitted) -> None:
        evaluate_achievements(event.user_id)
