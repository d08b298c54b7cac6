"""OpenStreetMap Nominatim geocoder and location resolution."""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, Optional, Protocol

import httpx

from crp.config import Settings
from crp.location.gazetteer import extract_location
from crp.models import GeocodeHit, LocationResolution
from crp.utils.logging import get_logger


logger = get_logger(__name__)


CITY_NAME = "Delhi"
CITY_CENTER_LAT = 28.6139
CITY_CENTER_LNG = 77.2090
CITY_DISPLAY_NAME = "Delhi, India"


class Geocoder(Protocol):
    """Anything that can turn a place name into coordinates."""

    async def geocode(self, place_name: str) -> Optional[GeocodeHit]:
        """Return the best hit, or None when nothing was found."""


class RateLimiter:
    """Enforce a minimum spacing between consecutive calls."""

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_call: Optional[float] = None
        self._lock = asyncio.Lock()

    async def wait(self) -> None:
        async with self._lock:
            if self._last_call is not None:
                remaining = self.min_interval - (self._clock() - self._last_call)
                if remaining > 0:
                    await self._sleep(remaining)
            self._last_call = self._clock()


class NominatimGeocoder:
    """Minimal async client for the Nominatim search endpoint."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or Settings()
        self._transport = transport

    async def geocode(self, place_name: str) -> Optional[GeocodeHit]:
        if not place_name:
            return None

        query = f"{place_name}, {CITY_DISPLAY_NAME}"
        params = {
            "q": query,
            "format": "json",
            "limit": 1,
            "countrycodes": "in",
            "addressdetails": 1,
        }
        # Nominatim's usage policy requires an identifying User-Agent.
        headers = {"User-Agent": self.settings.nominatim_user_agent}

        try:
            async with httpx.AsyncClient(
                base_url=self.settings.nominatim_base_url,
                timeout=self.settings.geocode_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get("/search", params=params, headers=headers)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("geocode.failed place=%s error=%s", place_name, exc)
            return None

        if not payload:
            logger.warning("geocode.no_results place=%s", place_name)
            return None

        result = payload[0]
        try:
            return GeocodeHit(
                lat=float(result["lat"]),
                lng=float(result["lon"]),
                display_name=result.get("display_name") or query,
                bounding_box=result.get("boundingbox"),
            )
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("geocode.bad_payload place=%s error=%s", place_name, exc)
            return None


def city_center(locality_name: str = CITY_NAME) -> LocationResolution:
    """City-centre fallback that keeps an extracted name when there is one."""
    display_name = (
        CITY_DISPLAY_NAME if locality_name == CITY_NAME else f"{locality_name}, {CITY_DISPLAY_NAME}"
    )
    return LocationResolution(
        locality_name=locality_name,
        lat=CITY_CENTER_LAT,
        lng=CITY_CENTER_LNG,
        display_name=display_name,
        geocoded=False,
    )


async def resolve_location(
    text: str,
    geocoder: Geocoder,
    limiter: Optional[RateLimiter] = None,
) -> LocationResolution:
    """Extract a locality from text and geocode it, falling back to the city centre."""
    locality_name = extract_location(text)
    if not locality_name:
        logger.info("location.unresolved fallback=%s", CITY_NAME)
        return city_center()

    if limiter is not None:
        await limiter.wait()

    try:
        hit = await geocoder.geocode(locality_name)
    except Exception as exc:  # geocoding is best effort
        logger.warning("location.geocode_error locality=%s error=%s", locality_name, exc)
        hit = None

    if hit is None:
        return city_center(locality_name)

    return LocationResolution(
        locality_name=locality_name,
        lat=hit.lat,
        lng=hit.lng,
        display_name=hit.display_name,
        geocoded=True,
        bounding_box=hit.bounding_box,
    )
