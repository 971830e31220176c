from types import SimpleNamespace

import pytest
from geopy.exc import GeocoderServiceError

from geo.geocoder import LocationFix, LocationUnavailable, fixed_provider, place_provider, unavailable_provider


class FakeGeolocator:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.queries = []

    def geocode(self, query, **kwargs):
        self.queries.append((query, kwargs))
        if self.error:
            raise self.error
        return self.result


def test_place_provider_returns_fix():
    location = SimpleNamespace(
        latitude=-0.0917,
        longitude=34.768,
        raw={"address": {"city": "Kisumu", "county": "Kisumu County", "country": "Kenya"}},
    )
    locator = FakeGeolocator(result=location)

    fix = place_provider("  Kisumu ", locator)()

    assert fix == LocationFix(-0.0917, 34.768, "Kisumu, Kisumu County, Kenya")
    assert locator.queries == [("Kisumu", {"addressdetails": True})]


def test_blank_place_is_unavailable():
    locator = FakeGeolocator()
    with pytest.raises(LocationUnavailable) as exc:
        place_provider("   ", locator)()
    assert exc.value.reason == "unavailable"
    assert locator.queries == []


def test_no_match_is_denied():
    with pytest.raises(LocationUnavailable) as exc:
        place_provider("Atlantis", FakeGeolocator(result=None))()
    assert exc.value.reason == "denied"


def test_service_error_is_denied_and_not_retried():
    locator = FakeGeolocator(error=GeocoderServiceError("503"))
    with pytest.raises(LocationUnavailable) as exc:
        place_provider("Kisumu", locator)()
    assert exc.value.reason == "denied"
    assert len(locator.queries) == 1


def test_fixed_and_unavailable_providers():
    assert fixed_provider(1, 2, "x")() == LocationFix(1.0, 2.0, "x")
    with pytest.raises(LocationUnavailable) as exc:
        unavailable_provider()
    assert exc.value.reason == "unavailable"
