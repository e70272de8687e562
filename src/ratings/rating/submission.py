"""SubmitRating — a user answers the welcoming survey for a business.

One active rating per user per business: a second submission from the same
user revises the first. Cookie accounts are additionally limited per
device through the DeviceReviewLedger. Flagged accounts cannot rate, and
each user may create at most five new ratings an hour.
"""

import json

from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from ratings.business.business import Business
from ratings.device.ledger import DeviceReviewLedger, ledger_for
from ratings.domain import logger, ratings
from ratings.projections.business_score import active_ratings_for
from ratings.rating.queries import nearby_raters
from ratings.rating.rating import AccountType, Rating
from ratings.rating.scoring import summarize
from ratings.scoring_config.active import active_survey_questions, current_scoring_profile
from ratings.security.guard import ensure_not_flagged, ensure_within_rate_limit


@ratings.command(part_of="Rating")
class SubmitRating:
    business_id = Identifier(required=True)
    user_id = Identifier(required=True)
    user_account_type = String(default=AccountType.ANONYMOUS.value)
    answers = Text(required=True)  # JSON: {question_key: "Yes" | "Probably" | "ProbablyNot" | "No"}
    user_ip_address = String(max_length=64)
    device_id = Identifier()


def parse_answers(raw) -> dict:
    try:
        answers = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError:
        raise ValidationError({"answers": ["Answers must be a JSON object"]}) from None
    if not isinstance(answers, dict):
        raise ValidationError({"answers": ["Answers must be a JSON object"]})
    return answers


@ratings.command_handler(part_of=Rating)
class SubmitRatingHandler:
    @handle(SubmitRating)
    def submit_rating(self, command):
        business_repo = current_domain.repository_for(Business)
        business = business_repo.get(command.business_id)
        ensure_not_flagged(command.user_id)

        ledger = ledger_for(command.device_id) if command.device_id else None
        if ledger is not None and ledger.has_reviewed(command.business_id):
            raise ValidationError({"device": ["This device has already reviewed this business"]})

        answers = parse_answers(command.answers)
        profile = current_scoring_profile()
        questions = active_survey_questions()

        existing = active_ratings_for(command.business_id)
        previous = summarize((r.total_score, r.welcoming_level) for r in existing)

        own = [r for r in existing if str(r.user_id) == str(command.user_id)]
        if own:
            rating = own[0]
            rating.revise(answers, command.user_ip_address, questions, profile)
            after = [(r.total_score, r.welcoming_level) for r in existing]
        else:
            ensure_within_rate_limit(command.user_id)
            rating = Rating.submit(
                business_id=command.business_id,
                user_id=command.user_id,
                answers=answers,
                user_account_type=command.user_account_type,
                user_ip_address=command.user_ip_address,
                questions=questions,
                profile=profile,
            )
            after = [(r.total_score, r.welcoming_level) for r in existing] + [
                (rating.total_score, rating.welcoming_level)
            ]

        # Rating reads must finish before the new rating is tracked
        raters = nearby_raters(business, exclude_user_id=command.user_id)
        current_domain.repository_for(Rating).add(rating)

        if command.device_id:
            ledger = ledger or DeviceReviewLedger.open(command.device_id)
            ledger.mark_reviewed(command.business_id, command.user_id)
            current_domain.repository_for(DeviceReviewLedger).add(ledger)

        current = summarize(after)
        business.record_rating(
            rating_id=rating.id,
            user_id=command.user_id,
            total_score=rating.total_score,
            welcoming_level=rating.welcoming_level,
            previous_average=previous.average_score,
            new_average=current.average_score,
            total_ratings=current.total_ratings,
            nearby_raters=raters,
        )
        business_repo.add(business)

        logger.info(
            "Rating submitted",
            rating_id=str(rating.id),
            business_id=str(command.business_id),
            total_score=rating.total_score,
            welcoming_level=rating.welcoming_level,
            revised=bool(own),
        )
        return str(rating.id)
