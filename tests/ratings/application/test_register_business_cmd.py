"""Application tests for the RegisterBusiness command handler."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from ratings.business.business import Business
from ratings.business.registration import RegisterBusiness


def _register(**overrides):
    defaults = {
        "place_id": "place-reg-1",
        "name": "Neighbourhood Books",
        "address": "22 Elm St",
        "latitude": 41.8781,
        "longitude": -87.6298,
    }
    defaults.update(overrides)
    return current_domain.process(RegisterBusiness(**defaults), asynchronous=False)


class TestRegisterBusiness:
    def test_persists_business(self):
        business_id = _register()
        assert business_id == "place-reg-1"

        business = current_domain.repository_for(Business).get(business_id)
        assert business.name == "Neighbourhood Books"
        assert business.latitude == 41.8781

    def test_registration_is_idempotent(self):
        _register(place_id="place-reg-2", name="First Name")
        business_id = _register(place_id="place-reg-2", name="Second Name")

        assert business_id == "place-reg-2"
        business = current_domain.repository_for(Business).get("place-reg-2")
        assert business.name == "First Name"

    def test_known_place_needs_no_coordinates(self):
        _register(place_id="place-reg-3")
        assert _register(place_id="place-reg-3", latitude=None, longitude=None) == "place-reg-3"

    def test_coordinates_required_for_new_place(self):
        with pytest.raises(ValidationError) as exc:
            _register(place_id="place-reg-4", latitude=None, longitude=None)
        assert "coordinates are required" in str(exc.value)

    def test_places_data_stored_sanitized(self):
        _register(
            place_id="place-reg-5",
            places_data=json.dumps({"types": ["store"], "user_ratings_total": 12, "photos": [{"ref": "x"}]}),
        )
        business = current_domain.repository_for(Business).get("place-reg-5")
        assert business.places_details() == {"types": ["store"], "user_ratings_total": 12}

    def test_invalid_coordinates_rejected(self):
        with pytest.raises(ValidationError):
            _register(place_id="place-reg-6", latitude=120.0)
