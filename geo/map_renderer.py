import folium

from geo.geofence import KENYAN_RISK_ZONES

# Roughly centers the map on Kenya when no position is known
DEFAULT_CENTER = (0.0236, 37.9062)


def create_map(lat=None, lon=None, zones=KENYAN_RISK_ZONES, highlight=""):
    center = (lat, lon) if lat is not None and lon is not None else DEFAULT_CENTER
    m = folium.Map(location=list(center), zoom_start=9 if lat is not None else 6)

    if lat is not None and lon is not None:
        folium.Marker(
            [lat, lon],
            popup="Your location",
            icon=folium.Icon(color="blue")
        ).add_to(m)

    # Hotspots (folium radius is in meters)
    for zone in zones:
        folium.Circle(
            location=[zone.lat, zone.lon],
            radius=zone.radius_km * 1000,
            color="red" if zone.name == highlight else "orange",
            fill=True,
            fill_opacity=0.3,
            tooltip=f"{zone.name} ({zone.radius_km:.0f} km)",
        ).add_to(m)

    return m
