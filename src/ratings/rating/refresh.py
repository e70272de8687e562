"""RefreshBusinessScores — rebuild BusinessScore records from the ratings table."""

from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from ratings.domain import logger, ratings
from ratings.projections.business_score import BusinessScore, rebuild_business_score
from ratings.rating.queries import active_ratings
from ratings.rating.rating import Rating


@ratings.command(part_of="Rating")
class RefreshBusinessScores:
    business_id = Identifier()  # all businesses when omitted


@ratings.command_handler(part_of=Rating)
class RefreshBusinessScoresHandler:
    @handle(RefreshBusinessScores)
    def refresh_business_scores(self, command):
        if command.business_id:
            business_ids = {str(command.business_id)}
        else:
            scored = current_domain.repository_for(BusinessScore)._dao.query.limit(None).all().items
            business_ids = {str(r.business_id) for r in active_ratings()} | {str(s.business_id) for s in scored}

        for business_id in sorted(business_ids):
            rebuild_business_score(business_id)

        logger.info("Business scores refreshed", count=len(business_ids))
        return len(business_ids)
