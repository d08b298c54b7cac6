import asyncio

import httpx

from crp.location import NominatimGeocoder, RateLimiter, resolve_location
from crp.location.geocode import CITY_CENTER_LAT, CITY_CENTER_LNG
from crp.models import GeocodeHit
from fakes import FakeClock


class StubGeocoder:
    def __init__(self, hit=None, error=None):
        self.hit = hit
        self.error = error
        self.calls = []

    async def geocode(self, place_name):
        self.calls.append(place_name)
        if self.error:
            raise self.error
        return self.hit


def test_nominatim_parses_first_result(settings):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        seen["agent"] = request.headers["user-agent"]
        return httpx.Response(
            200,
            json=[
                {
                    "lat": "28.6219",
                    "lon": "77.0910",
                    "display_name": "Janakpuri, West Delhi, India",
                    "boundingbox": ["28.6", "28.7", "77.0", "77.1"],
                }
            ],
        )

    geocoder = NominatimGeocoder(settings, transport=httpx.MockTransport(handler))
    hit = asyncio.run(geocoder.geocode("Janakpuri"))

    assert hit == GeocodeHit(
        lat=28.6219,
        lng=77.0910,
        display_name="Janakpuri, West Delhi, India",
        bounding_box=["28.6", "28.7", "77.0", "77.1"],
    )
    assert seen["params"]["q"] == "Janakpuri, Delhi, India"
    assert seen["params"]["countrycodes"] == "in"
    assert seen["agent"] == settings.nominatim_user_agent


def test_nominatim_empty_and_error_results_return_none(settings):
    empty = NominatimGeocoder(
        settings, transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[]))
    )
    failing = NominatimGeocoder(
        settings, transport=httpx.MockTransport(lambda request: httpx.Response(503))
    )
    assert asyncio.run(empty.geocode("Nowhere")) is None
    assert asyncio.run(failing.geocode("Janakpuri")) is None


def test_resolve_location_uses_geocoder_hit():
    geocoder = StubGeocoder(GeocodeHit(lat=28.59, lng=77.04, display_name="Dwarka, Delhi"))
    resolution = asyncio.run(resolve_location("No water in Dwarka", geocoder))
    assert resolution.locality_name == "Dwarka"
    assert resolution.geocoded is True
    assert (resolution.lat, resolution.lng) == (28.59, 77.04)


def test_resolve_location_keeps_name_when_geocoding_fails():
    geocoder = StubGeocoder(error=httpx.ConnectTimeout("timed out"))
    resolution = asyncio.run(resolve_location("Pothole in Saket", geocoder))
    assert resolution.locality_name == "Saket"
    assert resolution.geocoded is False
    assert (resolution.lat, resolution.lng) == (CITY_CENTER_LAT, CITY_CENTER_LNG)


def test_resolve_location_without_locality_skips_geocoder():
    geocoder = StubGeocoder()
    resolution = asyncio.run(resolve_location("the road is broken", geocoder))
    assert resolution.locality_name == "Delhi"
    assert resolution.display_name == "Delhi, India"
    assert resolution.geocoded is False
    assert geocoder.calls == []


def test_rate_limiter_spaces_consecutive_calls():
    clock = FakeClock()
    limiter = RateLimiter(1.1, clock=clock, sleep=clock.sleep)

    async def run():
        await limiter.wait()
        clock.now += 0.3
        await limiter.wait()
        clock.now += 5
        await limiter.wait()

    asyncio.run(run())
    assert len(clock.sleeps) == 1
    assert abs(clock.sleeps[0] - 0.8) < 1e-9
