from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Optional

WIKIMEDIA_FILE_PATH_URL = "https://commons.wikimedia.org/wiki/Special:FilePath/{filename}?width=300"

class GeoPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

# A point along a route path
RoutePoint = GeoPoint

class Fountain(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    location: GeoPoint
    display_name: Optional[str] = None
    attributes: Dict[str, str] = {}

    @property
    def access(self) -> Optional[str]:
        return self.attributes.get("access")

    @property
    def fee(self) -> Optional[str]:
        return self.attributes.get("fee")

    @property
    def image_url(self) -> Optional[str]:
        """Direct image link, or a thumbnail URL built from a Wikimedia Commons file name."""
        commons = self.attributes.get("wikimedia_commons")
        if commons and not commons.startswith("http"):
            filename = commons.removeprefix("File:")
            return WIKIMEDIA_FILE_PATH_URL.format(filename=quote(filename, safe=""))
        return self.attributes.get("image") or commons

class NearestResult(BaseModel):
    fountain: Fountain
    distance_m: float = Field(..., ge=0)
