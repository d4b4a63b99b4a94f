import asyncio
import httpx
import logging
from typing import List

from pydantic import ValidationError

from pulpuluck.core.config import settings
from pulpuluck.core.exceptions import DataUnavailable
from pulpuluck.core.logger import logs
from pulpuluck.models.fountain_model import Fountain, GeoPoint

PLACEHOLDER_NAME = "Drinking Fountain"

def build_overpass_query() -> str:
    """Overpass QL for every drinking_water amenity inside the city bounding box."""
    bbox = f"{settings.BBOX_MIN_LAT},{settings.BBOX_MIN_LON},{settings.BBOX_MAX_LAT},{settings.BBOX_MAX_LON}"
    return f"""
    [out:json][timeout:{settings.OVERPASS_QUERY_TIMEOUT}];
    (
      node["amenity"="drinking_water"]({bbox});
      way["amenity"="drinking_water"]({bbox});
      relation["amenity"="drinking_water"]({bbox});
    );
    out geom;
    """

def normalize_elements(elements: list) -> List[Fountain]:
    """
    Turns raw Overpass elements into Fountains, keeping provider order.
    Elements without a usable lat/lon pair are dropped, as are repeated ids.
    """
    fountains = []
    seen_ids = set()

    for element in elements:
        lat = element.get("lat")
        lon = element.get("lon")
        if lat is None or lon is None:
            continue

        fountain_id = str(element["id"])
        if fountain_id in seen_ids:
            logs.log(logging.WARNING, f"Skipping duplicate fountain id {fountain_id}")
            continue

        tags = element.get("tags") or {}
        try:
            fountain = Fountain(
                id=fountain_id,
                location=GeoPoint(lat=lat, lng=lon),
                # Get English name preferentially
                display_name=tags.get("name:en") or tags.get("name") or PLACEHOLDER_NAME,
                attributes={str(k): str(v) for k, v in tags.items()}
            )
        except ValidationError as e:
            logs.log(logging.WARNING, f"Skipping fountain {fountain_id} with invalid data: {e.error_count()} errors")
            continue
        seen_ids.add(fountain_id)
        fountains.append(fountain)

    return fountains

class FountainService:
    def __init__(self, store, client: httpx.AsyncClient | None = None):
        self.store = store
        self.client = client
        self.overpass_url = settings.OVERPASS_URL

    async def fetch_fountains(self) -> List[Fountain]:
        """
        Fetches the city's fountains from Overpass. On success the result
        replaces the cached snapshot; on failure the snapshot is returned
        instead, and DataUnavailable is raised when there is none.
        """
        try:
            fountains = await self._fetch_from_overpass()
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
            logs.log(logging.ERROR, f"Overpass API failed: {str(e)}")
            cached = await self.store.read()
            if cached is None:
                raise DataUnavailable("Failed to load drinking fountain data") from e
            logs.log(logging.WARNING, f"Serving {len(cached)} fountains from snapshot")
            return cached

        if not await self.store.write(fountains):
            logs.log(logging.WARNING, "Fountain snapshot was not updated")

        logs.log(logging.INFO, f"Fetched {len(fountains)} fountains from Overpass")
        return fountains

    async def fetch_fountains_with_retry(self, retries: int | None = None, delay: float | None = None) -> List[Fountain]:
        """
        fetch_fountains for the map screen: retries when neither Overpass nor
        the snapshot has data, doubling the wait each time.
        """
        retries = settings.FOUNTAIN_FETCH_RETRIES if retries is None else retries
        delay = settings.FOUNTAIN_RETRY_DELAY_SECONDS if delay is None else delay

        for attempt in range(retries + 1):
            try:
                return await self.fetch_fountains()
            except DataUnavailable:
                if attempt == retries:
                    raise
                wait = delay * 2 ** attempt
                logs.log(logging.WARNING, f"No fountain data, retrying in {wait}s ({attempt + 1}/{retries})")
                await asyncio.sleep(wait)

    async def _fetch_from_overpass(self) -> List[Fountain]:
        if self.client is not None:
            return await self._query(self.client)
        async with httpx.AsyncClient(timeout=settings.OVERPASS_TIMEOUT_SECONDS) as client:
            return await self._query(client)

    async def _query(self, client: httpx.AsyncClient) -> List[Fountain]:
        response = await client.post(
            self.overpass_url,
            data={"data": build_overpass_query()}
        )
        response.raise_for_status()
        data = response.json()
        return normalize_elements(data["elements"])
