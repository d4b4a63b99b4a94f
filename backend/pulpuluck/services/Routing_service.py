import asyncio
import httpx
import logging
from typing import Any

from pulpuluck.core.config import settings
from pulpuluck.core.logger import logs
from pulpuluck.models.fountain_model import GeoPoint
from pulpuluck.models.route_model import Route, RouteSource
from pulpuluck.services.geo import distance, walking_duration

class NoRouteFound(Exception):
    """OSRM answered but gave nothing usable."""

class RoutingService:
    """
    Walking directions from the public OSRM server. Any routing problem
    (timeout, HTTP error, empty answer) ends in a straight-line route, so
    fetch_walking_route always returns a Route.
    """
    def __init__(self, client: httpx.AsyncClient | None = None):
        self.client = client
        self.base_url = settings.OSRM_URL.rstrip("/")
        self.timeout = settings.ROUTE_TIMEOUT_SECONDS

    async def fetch_walking_route(self, start: GeoPoint, end: GeoPoint) -> Route:
        try:
            # Hard limit on the whole exchange, not just each socket operation
            route = await asyncio.wait_for(self._fetch_from_osrm(start, end), timeout=self.timeout)
            logs.log(logging.INFO, f"Route found: {route.distance_m:.0f}m, {route.duration_s:.0f}s")
            return route
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logs.log(logging.WARNING, f"OSRM request timed out after {self.timeout}s")
        except Exception as e:
            # Bad JSON or an odd payload, non-finite numbers included
            logs.log(logging.ERROR, f"Error fetching walking route: {str(e)}")

        logs.log(logging.INFO, "Using fallback route")
        return self.straight_line_route(start, end)

    @staticmethod
    def straight_line_route(start: GeoPoint, end: GeoPoint) -> Route:
        distance_m = round(distance(start, end))
        return Route(
            path=[start, end],
            distance_m=distance_m,
            duration_s=round(walking_duration(distance_m)),
            source=RouteSource.FALLBACK
        )

    async def _fetch_from_osrm(self, start: GeoPoint, end: GeoPoint) -> Route:
        # OSRM wants longitude,latitude
        coordinates = f"{start.lng},{start.lat};{end.lng},{end.lat}"
        endpoint = f"{self.base_url}/route/v1/foot/{coordinates}"
        params = {
            "geometries": "geojson",
            "overview": "full",
            "steps": "false",
        }
        headers = {"Accept": "application/json"}

        if self.client is not None:
            response = await self.client.get(endpoint, params=params, headers=headers, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(endpoint, params=params, headers=headers)

        response.raise_for_status()
        return self._parse_response(response.json())

    @staticmethod
    def _parse_response(payload: Any) -> Route:
        routes = payload.get("routes") or []
        if not routes:
            raise NoRouteFound("No routes found between the points")

        first = routes[0]
        path = [GeoPoint(lat=coord[1], lng=coord[0]) for coord in first["geometry"]["coordinates"]]
        if len(path) < 2:
            raise NoRouteFound("Route geometry unavailable")

        return Route(
            path=path,
            distance_m=round(float(first["distance"])),
            duration_s=round(float(first["duration"])),
            source=RouteSource.PROVIDER
        )
