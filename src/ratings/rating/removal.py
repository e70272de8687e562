"""RemoveRating / BulkRemoveRatings — administrators take ratings down.

Removal is soft: the rating stays for audit with status Removed and no
longer counts towards the business score.
"""

import json
from dataclasses import dataclass, field

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from ratings.domain import logger, ratings
from ratings.rating.rating import Rating


@dataclass(frozen=True)
class BulkRemovalResult:
    success: bool
    removed_count: int = 0
    failed_count: int = 0
    errors: list = field(default_factory=list)


@ratings.command(part_of="Rating")
class RemoveRating:
    rating_id = Identifier(required=True)
    removed_by = String(required=True, max_length=255)
    reason = Text()


@ratings.command(part_of="Rating")
class BulkRemoveRatings:
    rating_ids = Text(required=True)  # JSON array of rating ids
    removed_by = String(required=True, max_length=255)
    reason = Text()


@ratings.command_handler(part_of=Rating)
class RemoveRatingHandler:
    @handle(RemoveRating)
    def remove_rating(self, command):
        repo = current_domain.repository_for(Rating)
        rating = repo.get(command.rating_id)
        rating.remove(removed_by=command.removed_by, reason=command.reason)
        repo.add(rating)

        logger.info("Rating removed", rating_id=str(rating.id), removed_by=command.removed_by)

    @handle(BulkRemoveRatings)
    def bulk_remove_ratings(self, command):
        repo = current_domain.repository_for(Rating)
        rating_ids = json.loads(command.rating_ids)

        removed, errors = 0, []
        for rating_id in rating_ids:
            try:
                rating = repo.get(rating_id)
                rating.remove(removed_by=command.removed_by, reason=command.reason)
                repo.add(rating)
                removed += 1
            except ObjectNotFoundError:
                errors.append(f"Rating {rating_id} not found")
            except ValidationError as exc:
                errors.append(f"Rating {rating_id}: {'; '.join(m for msgs in exc.messages.values() for m in msgs)}")

        result = BulkRemovalResult(
            success=not errors,
            removed_count=removed,
            failed_count=len(errors),
            errors=errors,
        )
        logger.info(
            "Bulk rating removal finished",
            removed_by=command.removed_by,
            removed_count=result.removed_count,
            failed_count=result.failed_count,
        )
        return result
