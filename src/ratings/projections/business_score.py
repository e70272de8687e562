"""BusinessScore — aggregated Winks Score per business.

Recomputed from the business's active ratings on every rating change, so a
removal or revision never leaves a stale average behind. A business without
active ratings has no record (it shows as neutral).
"""

from datetime import UTC, datetime

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from ratings.business.business import Business
from ratings.domain import logger, ratings
from ratings.rating.events import RatingMigrated, RatingRemoved, RatingRevised, RatingSubmitted
from ratings.rating.rating import Rating, RatingStatus
from ratings.rating.scoring import summarize


@ratings.projection
class BusinessScore:
    business_id = Identifier(identifier=True, required=True)
    business_name = String(max_length=255)
    latitude = Float()
    longitude = Float()
    average_score = Float(default=0.0)
    total_ratings = Integer(default=0)
    very_welcoming_count = Integer(default=0)
    moderately_welcoming_count = Integer(default=0)
    not_welcoming_count = Integer(default=0)
    status = String(default="rated")
    last_updated = DateTime()


def active_ratings_for(business_id) -> list[Rating]:
    return (
        current_domain.repository_for(Rating)
        ._dao.query.filter(business_id=str(business_id), status=RatingStatus.ACTIVE.value)
        .limit(None)
        .all()
        .items
    )


def rebuild_business_score(business_id) -> BusinessScore | None:
    """Bring the BusinessScore record of one business in line with its active ratings."""
    repo = current_domain.repository_for(BusinessScore)
    summary = summarize((r.total_score, r.welcoming_level) for r in active_ratings_for(business_id))

    try:
        record = repo.get(str(business_id))
    except ObjectNotFoundError:
        record = None

    if summary.total_ratings == 0:
        if record is not None:
            repo._dao.delete(record)
        return None

    if record is None:
        record = BusinessScore(business_id=str(business_id))
        try:
            business = current_domain.repository_for(Business).get(str(business_id))
            record.business_name = business.name
            record.latitude = business.latitude
            record.longitude = business.longitude
        except ObjectNotFoundError:
            logger.warning("Scored business is not registered", business_id=str(business_id))

    record.average_score = summary.average_score
    record.total_ratings = summary.total_ratings
    record.very_welcoming_count = summary.very_welcoming
    record.moderately_welcoming_count = summary.moderately_welcoming
    record.not_welcoming_count = summary.not_welcoming
    record.status = "rated"
    record.last_updated = datetime.now(UTC)
    repo.add(record)
    return record


@ratings.projector(projector_for=BusinessScore, aggregates=[Rating])
class BusinessScoreProjector:
    @on(RatingSubmitted)
    def on_rating_submitted(self, event):
        rebuild_business_score(event.business_id)

    @on(RatingRevised)
    def on_rating_revised(self, event):
        rebuild_business_score(event.business_id)

    @on(RatingRemoved)
    def on_rating_removed(self, event):
        rebuild_business_score(event.business_id)

    @on(RatingMigrated)
    def on_rating_migrated(self, event):
        rebuild_business_score(event.business_id)
