from pydantic import BaseModel
from typing import Optional

from pulpuluck.models.fountain_model import GeoPoint, NearestResult
from pulpuluck.models.route_model import Route

# Browser geolocation error codes
PERMISSION_DENIED = 1
POSITION_UNAVAILABLE = 2
TIMEOUT = 3

class LocationReport(BaseModel):
    """What the positioning capability returned: coordinates or an error code."""
    lat: Optional[float] = None
    lng: Optional[float] = None
    code: Optional[int] = None
    message: Optional[str] = None

class LocateOutcome(BaseModel):
    user_location: GeoPoint
    nearest: Optional[NearestResult] = None
    route: Optional[Route] = None
