"""Business aggregate.

Businesses are identified by their places directory id and registered the
first time someone looks at or rates them. Scores are not stored here; the
BusinessScore projection aggregates the active ratings.
"""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from ratings.business.events import BusinessRated, BusinessRegistered
from ratings.business.geo import valid_coordinates
from ratings.domain import ratings

DEFAULT_NAME = "Unknown Business"
DEFAULT_ADDRESS = "Unknown Address"
MAX_NEARBY_RATERS = 10

# Places payload keys worth keeping; the rest is provider noise.
_PLACES_FIELDS = (
    "place_id",
    "name",
    "vicinity",
    "formatted_address",
    "types",
    "rating",
    "user_ratings_total",
    "price_level",
    "business_status",
    "website",
    "formatted_phone_number",
)


def sanitize_places_data(data: dict | None) -> dict:
    if not data:
        return {}
    return {key: data[key] for key in _PLACES_FIELDS if data.get(key) is not None}


@ratings.aggregate
class Business:
    business_id = Identifier(identifier=True, required=True)
    name = String(required=True, max_length=255)
    address = String(max_length=500)
    latitude = Float(required=True)
    longitude = Float(required=True)
    places_data = Text()  # JSON, sanitized places payload
    rating_count = Integer(default=0)
    last_rated_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def coordinates_must_be_valid(self):
        if not valid_coordinates(self.latitude, self.longitude):
            raise ValidationError({"location": ["Latitude must be within ±90 and longitude within ±180"]})

    @classmethod
    def register(cls, place_id, latitude, longitude, name=None, address=None, vicinity=None, places_data=None):
        if not place_id:
            raise ValidationError({"place_id": ["Place id is required"]})

        now = datetime.now(UTC)
        business = cls(
            business_id=place_id,
            name=(name or "").strip() or DEFAULT_NAME,
            address=(address or "").strip() or (vicinity or "").strip() or DEFAULT_ADDRESS,
            latitude=latitude,
            longitude=longitude,
            places_data=json.dumps(sanitize_places_data(places_data)),
            rating_count=0,
            created_at=now,
            updated_at=now,
        )
        business.raise_(
            BusinessRegistered(
                business_id=str(business.business_id),
                name=business.name,
                address=business.address,
                latitude=business.latitude,
                longitude=business.longitude,
                registered_at=now,
            )
        )
        return business

    def record_rating(
        self,
        rating_id,
        user_id,
        total_score,
        welcoming_level,
        new_average,
        total_ratings,
        previous_average=None,
        nearby_raters=None,
    ):
        now = datetime.now(UTC)
        self.rating_count = (self.rating_count or 0) + 1
        self.last_rated_at = now
        self.updated_at = now

        nearby = [r for r in (nearby_raters or []) if str(r["user_id"]) != str(user_id)][:MAX_NEARBY_RATERS]
        self.raise_(
            BusinessRated(
                business_id=str(self.business_id),
                business_name=self.name,
                rating_id=str(rating_id),
                user_id=str(user_id),
                total_score=total_score,
                welcoming_level=welcoming_level,
                previous_average=previous_average,
                new_average=new_average,
                total_ratings=total_ratings,
                latitude=self.latitude,
                longitude=self.longitude,
                nearby_raters=json.dumps(nearby),
                rated_at=now,
            )
        )

    def places_details(self) -> dict:
        return json.loads(self.places_data) if self.places_data else {}
