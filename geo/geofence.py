from __future__ import annotations

from dataclasses import dataclass
from math import radians, cos, sin, atan2, sqrt
from typing import List, Sequence


EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class HotspotZone:
    name: str
    lat: float
    lon: float
    radius_km: float

    def model_dump(self) -> dict:
        return {
            "name": self.name,
            "lat": self.lat,
            "lon": self.lon,
            "radius_km": self.radius_km,
        }


@dataclass(frozen=True)
class ZoneMatch:
    zone_name: str = ""
    near_risk_zone: bool = False


# Known schistosomiasis hotspots in Kenya (approximate centers).
# Order matters: the first zone containing a point wins.
KENYAN_RISK_ZONES: List[HotspotZone] = [
    HotspotZone("Lake Victoria Basin (Kisumu/Homa Bay)", -0.100, 34.750, 80),
    HotspotZone("Mwea Irrigation Scheme", -0.716, 37.360, 25),
    HotspotZone("Coast (Kwale/Msambweni)", -4.170, 39.450, 40),
    HotspotZone("Lake Baringo", 0.630, 36.050, 15),
    HotspotZone("Lake Naivasha", -0.770, 36.420, 15),
    HotspotZone("Taveta / Lake Jipe", -3.580, 37.750, 20),
]


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points."""
    dlat = radians(lat2 - lat1)
    dlon = radians(lon2 - lon1)
    a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def match_zone(lat: float, lon: float, zones: Sequence[HotspotZone] = KENYAN_RISK_ZONES) -> ZoneMatch:
    """Return the first zone (in declaration order) whose circle contains the point.

    Overlapping zones are not ranked by distance.
    """
    for zone in zones:
        if haversine_km(lat, lon, zone.lat, zone.lon) <= zone.radius_km:
            return ZoneMatch(zone_name=zone.name, near_risk_zone=True)
    return ZoneMatch()


def distances_to_zones(lat: float, lon: float, zones: Sequence[HotspotZone] = KENYAN_RISK_ZONES) -> List[dict]:
    items = []
    for zone in zones:
        d = haversine_km(lat, lon, zone.lat, zone.lon)
        items.append({**zone.model_dump(), "distance_km": d, "inside": d <= zone.radius_km})
    items.sort(key=lambda x: x["distance_km"])
    return items
