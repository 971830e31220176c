import os
from dataclasses import dataclass
from typing import Callable, Optional

from geopy.exc import GeopyError
from geopy.geocoders import Nominatim
from geopy.extra.rate_limiter import RateLimiter

from logger import logger

GEOCODER_USER_AGENT = os.getenv("GEOCODER_USER_AGENT", "schistocare_risk_assessment")


@dataclass(frozen=True)
class LocationFix:
    latitude: float
    longitude: float
    label: str = ""


class LocationUnavailable(Exception):
    """Raised by a location provider that cannot produce a position.

    reason is "unavailable" when there is no way to get a position at all,
    "denied" when the lookup was refused or failed.
    """

    def __init__(self, reason: str = "denied", detail: str = ""):
        super().__init__(detail or reason)
        self.reason = reason
        self.detail = detail


# A provider answers one "where am I?" question, once.
LocationProvider = Callable[[], LocationFix]


def _label_from_raw(raw: dict, fallback: str) -> str:
    address_parts = raw.get('address', {}) if raw else {}
    city = address_parts.get('city') or address_parts.get('town') or address_parts.get('village') or address_parts.get('municipality') or fallback
    county = address_parts.get('state') or address_parts.get('county') or ''
    country = address_parts.get('country') or ''
    return ", ".join(p for p in (city, county, country) if p)


def place_provider(query: str, geolocator: Optional[Nominatim] = None) -> LocationProvider:
    """Provider that geocodes a place name typed by the user.

    A blank query means there is nothing to locate with. Lookups are not retried.
    """

    def provide() -> LocationFix:
        if not query or not query.strip():
            raise LocationUnavailable("unavailable", "No place name given")

        locator = geolocator or Nominatim(user_agent=GEOCODER_USER_AGENT)
        geocode = RateLimiter(locator.geocode, min_delay_seconds=1, max_retries=0, swallow_exceptions=False)
        try:
            location = geocode(query.strip(), addressdetails=True)
        except GeopyError as e:
            logger.warning(f"Geocoding failed for {query!r}: {e}")
            raise LocationUnavailable("denied", str(e)) from e

        if not location:
            raise LocationUnavailable("denied", f"No match for {query!r}")

        return LocationFix(
            latitude=location.latitude,
            longitude=location.longitude,
            label=_label_from_raw(location.raw, query.strip()),
        )

    return provide


def fixed_provider(latitude: float, longitude: float, label: str = "") -> LocationProvider:
    def provide() -> LocationFix:
        return LocationFix(float(latitude), float(longitude), label)

    return provide


def unavailable_provider() -> LocationFix:
    raise LocationUnavailable("unavailable", "Location capability not available")
