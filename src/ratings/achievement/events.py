from protean.fields import DateTime, Identifier, String, Text

from ratings.domain import ratings


@ratings.event(part_of="Achievement")
class AchievementUnlocked:
    """A user earned an achievement."""

    __version__ = 1

    achievement_id = Identifier(required=True)
    user_id = Identifier(required=True)
    achievement_type = String(required=True)
    title = String(required=True)
    description = Text()
    unlocked_at = DateTime(required=True)
