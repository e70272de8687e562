"""Domain events for the Business aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from ratings.domain import ratings


@ratings.event(part_of="Business")
class BusinessRegistered:
    """A business from the places directory was added to Welcome Winks."""

    __version__ = 1

    business_id = Identifier(required=True)
    name = String(required=True)
    address = String()
    latitude = Float(required=True)
    longitude = Float(required=True)
    registered_at = DateTime(required=True)


@ratings.event(part_of="Business")
class BusinessRated:
    """A rating was recorded against a business.

    Carries the before/after business average so downstream consumers can
    tell the rater how the score moved, and the raters of nearby businesses.
    """

    __version__ = 1

    business_id = Identifier(required=True)
    business_name = String(required=True)
    rating_id = Identifier(required=True)
    user_id = Identifier(required=True)
    total_score = Float(required=True)
    welcoming_level = String(required=True)
    previous_average = Float()
    new_average = Float(required=True)
    total_ratings = Integer(required=True)
    latitude = Float()
    longitude = Float()
    nearby_raters = Text()  # JSON: [{user_id, distance_miles}]
    rated_at = DateTime(required=True)
