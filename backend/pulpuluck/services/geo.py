import math

from pulpuluck.core.config import settings
from pulpuluck.models.fountain_model import GeoPoint

EARTH_RADIUS_METERS = 6_371_000


def distance(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points in metres (haversine)."""
    lat1_rad = math.radians(a.lat)
    lat2_rad = math.radians(b.lat)

    dlat = math.radians(b.lat - a.lat)
    dlng = math.radians(b.lng - a.lng)

    h = (
        math.sin(dlat / 2.0) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlng / 2.0) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_METERS * c


def walking_duration(distance_m: float, speed_mps: float | None = None) -> float:
    """Seconds needed to walk ``distance_m`` at a steady pace (1.4 m/s by default)."""
    return distance_m / (speed_mps or settings.WALKING_SPEED_MPS)
