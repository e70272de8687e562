"""RegisterBusiness — add a places directory entry to Welcome Winks.

Registration is idempotent: registering a known place id returns it
without touching the stored business.
"""

import json

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from ratings.business.business import Business
from ratings.domain import logger, ratings


@ratings.command(part_of="Business")
class RegisterBusiness:
    place_id = Identifier(required=True)
    name = String(max_length=255)
    address = String(max_length=500)
    vicinity = String(max_length=500)
    latitude = Float()
    longitude = Float()
    places_data = Text()  # JSON payload from the places directory


@ratings.command_handler(part_of=Business)
class RegisterBusinessHandler:
    @handle(RegisterBusiness)
    def register_business(self, command):
        repo = current_domain.repository_for(Business)

        try:
            existing = repo.get(command.place_id)
            return str(existing.business_id)
        except ObjectNotFoundError:
            pass

        if command.latitude is None or command.longitude is None:
            raise ValidationError({"location": ["Business coordinates are required"]})

        business = Business.register(
            place_id=command.place_id,
            name=command.name,
            address=command.address,
            vicinity=command.vicinity,
            latitude=command.latitude,
            longitude=command.longitude,
            places_data=json.loads(command.places_data) if command.places_data else None,
        )
        repo.add(business)

        logger.info("Business registered", business_id=str(business.business_id), name=business.name)
        return str(business.business_id)
