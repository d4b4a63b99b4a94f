from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from pulpuluck.models.fountain_model import RoutePoint

class RouteSource(str, Enum):
    PROVIDER = "provider"
    FALLBACK = "fallback"  # straight line, provider unavailable

class Route(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: List[RoutePoint] = Field(..., min_length=2)
    distance_m: float = Field(..., ge=0)
    duration_s: float = Field(..., ge=0)
    source: RouteSource = RouteSource.PROVIDER

    @property
    def duration_minutes(self) -> int:
        return round(self.duration_s / 60)

    @property
    def is_fallback(self) -> bool:
        return self.source == RouteSource.FALLBACK
