"""UserRatingHistory — a user's active ratings with business names."""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Float, Identifier, String
from protean.utils.globals import current_domain

from ratings.business.business import Business
from ratings.domain import logger, ratings
from ratings.rating.events import RatingMigrated, RatingRemoved, RatingRevised, RatingSubmitted
from ratings.rating.rating import Rating


@ratings.projection
class UserRatingHistory:
    rating_id = Identifier(identifier=True, required=True)
    user_id = Identifier(required=True)
    business_id = Identifier(required=True)
    business_name = String(max_length=255)
    total_score = Float(required=True)
    welcoming_level = String(required=True)
    was_migrated = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()


@ratings.projector(projector_for=UserRatingHistory, aggregates=[Rating])
class UserRatingHistoryProjector:
    @on(RatingSubmitted)
    def on_rating_submitted(self, event):
        business_name = None
        try:
            business_name = current_domain.repository_for(Business).get(event.business_id).name
        except ObjectNotFoundError:
            logger.warning("Rated business is not registered", business_id=str(event.business_id))

        current_domain.repository_for(UserRatingHistory).add(
            UserRatingHistory(
                rating_id=event.rating_id,
                user_id=event.user_id,
                business_id=event.business_id,
                business_name=business_name,
                total_score=event.total_score,
                welcoming_level=event.welcoming_level,
                was_migrated=False,
                created_at=event.submitted_at,
                updated_at=event.submitted_at,
            )
        )

    @on(RatingRevised)
    def on_rating_revised(self, event):
        repo = current_domain.repository_for(UserRatingHistory)
        try:
            history = repo.get(event.rating_id)
        except ObjectNotFoundError:
            return
        history.total_score = event.total_score
        history.welcoming_level = event.welcoming_level
        history.updated_at = event.revised_at
        repo.add(history)

    @on(RatingRemoved)
    def on_rating_removed(self, event):
        repo = current_domain.repository_for(UserRatingHistory)
        try:
            history = repo.get(event.rating_id)
        except ObjectNotFoundError:
            return
        repo._dao.delete(history)

    @on(RatingMigrated)
    def on_rating_migrated(self, event):
        repo = current_domain.repository_for(UserRatingHistory)
        try:
            history = repo.get(event.rating_id)
        except ObjectNotFoundError:
            return
        history.user_id = event.to_user_id
        history.was_migrated = True
        history.updated_at = event.migrated_at
        repo.add(history)
