"""
The "locate me" action: find where the user is, pick the nearest fountain
from the current fountain set and fetch a walking route to it.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Sequence

from pulpuluck.core.config import settings
from pulpuluck.core.exceptions import LocationErrorReason, LocationUnavailable
from pulpuluck.core.logger import logs
from pulpuluck.models.fountain_model import Fountain, GeoPoint
from pulpuluck.models.location_model import (
    PERMISSION_DENIED,
    TIMEOUT,
    LocateOutcome,
    LocationReport,
)
from pulpuluck.services.nearest import find_nearest
from pulpuluck.services.Routing_service import RoutingService

PositionSource = Callable[[], Awaitable[GeoPoint]]

ERROR_CODE_REASONS = {
    PERMISSION_DENIED: LocationErrorReason.PERMISSION_DENIED,
    TIMEOUT: LocationErrorReason.TIMEOUT,
}


def position_from_report(report: LocationReport) -> GeoPoint:
    """
    Converts what the positioning capability reported into a GeoPoint.
    Error codes map onto LocationUnavailable reasons; anything unrecognised,
    missing or out of range counts as an unavailable position.
    """
    if report.code is not None:
        reason = ERROR_CODE_REASONS.get(report.code, LocationErrorReason.POSITION_UNAVAILABLE)
        raise LocationUnavailable(reason, report.message)

    if report.lat is None or report.lng is None:
        raise LocationUnavailable(LocationErrorReason.POSITION_UNAVAILABLE)

    try:
        return GeoPoint(lat=report.lat, lng=report.lng)
    except ValueError as e:
        raise LocationUnavailable(LocationErrorReason.POSITION_UNAVAILABLE, str(e)) from e


def static_position(report: LocationReport) -> PositionSource:
    """Position source for a report that is already in hand."""
    async def _position() -> GeoPoint:
        return position_from_report(report)
    return _position


def summary(outcome: LocateOutcome) -> str:
    """Notification text for a finished locate action."""
    if outcome.route is not None:
        return f"{round(outcome.route.distance_m)}m away • {outcome.route.duration_minutes} min walk"
    if outcome.nearest is not None:
        return f"{round(outcome.nearest.distance_m)}m away"
    return "No fountains loaded yet"


class LocatorService:
    def __init__(self, routing: RoutingService | None = None):
        self.routing = routing or RoutingService()
        self.location_timeout = settings.LOCATION_TIMEOUT_SECONDS
        self._latest_request = 0

    async def current_position(self, position_source: PositionSource) -> GeoPoint:
        try:
            return await asyncio.wait_for(position_source(), timeout=self.location_timeout)
        except asyncio.TimeoutError as e:
            raise LocationUnavailable(LocationErrorReason.TIMEOUT) from e

    async def locate(self, position_source: PositionSource, fountains: Sequence[Fountain]) -> LocateOutcome | None:
        """
        Runs one locate action against a fixed fountain set.

        Returns None when a newer locate call started while this one was
        waiting, so callers only ever apply the latest result.
        Raises LocationUnavailable when the position cannot be determined.
        """
        self._latest_request += 1
        request_id = self._latest_request

        try:
            position = await self.current_position(position_source)
        except LocationUnavailable as e:
            logs.log(logging.WARNING, f"Location error: {e.reason.value}", extra={"detail": e.detail})
            raise

        # Snapshot the set so the scan sees one fetch cycle
        candidates = tuple(fountains)
        nearest = find_nearest(position, candidates)
        if nearest is None:
            logs.log(logging.INFO, "No fountains available to search")
            return LocateOutcome(user_location=position)

        logs.log(
            logging.INFO,
            f"Nearest fountain {nearest.fountain.id} at {nearest.distance_m:.0f}m",
            extra={"lat": position.lat, "lng": position.lng}
        )
        route = await self.routing.fetch_walking_route(position, nearest.fountain.location)

        if request_id != self._latest_request:
            logs.log(logging.INFO, f"Discarding stale locate result #{request_id}")
            return None

        return LocateOutcome(user_location=position, nearest=nearest, route=route)
