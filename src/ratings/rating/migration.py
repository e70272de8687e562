"""MigrateUserRatings — carry a cookie account's ratings over to a new full account."""

from protean.exceptions import ValidationError
from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from ratings.domain import logger, ratings
from ratings.rating.queries import active_ratings
from ratings.rating.rating import Rating


@ratings.command(part_of="Rating")
class MigrateUserRatings:
    from_user_id = Identifier(required=True)
    to_user_id = Identifier(required=True)


@ratings.command_handler(part_of=Rating)
class MigrateUserRatingsHandler:
    @handle(MigrateUserRatings)
    def migrate_user_ratings(self, command):
        if str(command.from_user_id) == str(command.to_user_id):
            raise ValidationError({"to_user_id": ["Cannot migrate ratings to the same user"]})

        repo = current_domain.repository_for(Rating)
        migrated = 0
        for rating in active_ratings(user_id=str(command.from_user_id)):
            rating.migrate_to(command.to_user_id)
            repo.add(rating)
            migrated += 1

        logger.info(
            "User ratings migrated",
            from_user_id=str(command.from_user_id),
            to_user_id=str(command.to_user_id),
            count=migrated,
        )
        return migrated
