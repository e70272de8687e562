"""ReviseRating — the author answers the survey again."""

from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from ratings.domain import ratings
from ratings.rating.rating import Rating
from ratings.rating.submission import parse_answers
from ratings.scoring_config.active import active_survey_questions, current_scoring_profile


@ratings.command(part_of="Rating")
class ReviseRating:
    rating_id = Identifier(required=True)
    user_id = Identifier(required=True)
    answers = Text(required=True)
    user_ip_address = String(max_length=64)


@ratings.command_handler(part_of=Rating)
class ReviseRatingHandler:
    @handle(ReviseRating)
    def revise_rating(self, command):
        repo = current_domain.repository_for(Rating)
        rating = repo.get(command.rating_id)

        if str(rating.user_id) != str(command.user_id):
            raise ValidationError({"user_id": ["Only the author can revise a rating"]})

        rating.revise(
            parse_answers(command.answers),
            user_ip_address=command.user_ip_address,
            questions=active_survey_questions(),
            profile=current_scoring_profile(),
        )
        repo.add(rating)
