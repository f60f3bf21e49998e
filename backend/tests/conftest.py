import asyncio
import json
from typing import Optional

import httpx
import pytest

from routefinder import config

SVNIT = (72.77, 21.16)
STATION = (72.83, 21.20)

PLACES = {
    "SVNIT": SVNIT,
    "Surat Railway Station": STATION,
    "Adajan": (72.79, 21.19),
}

DEFAULT_ROUTES = {
    "driving-car": (900, 8000),
    "cycling-regular": (1500, 7800),
    "foot-walking": (5400, 7000),
    "public-transport": 400,  # ORS rejects unknown profiles
}


def ors_body(duration: float, distance: float, coords: Optional[list] = None) -> dict:
    return {
        "type": "FeatureCollection",
        "features": [{
            "type": "Feature",
            "geometry": {
                "type": "LineString",
                "coordinates": coords or [list(SVNIT), [72.80, 21.18], list(STATION)],
            },
            "properties": {"summary": {"distance": distance, "duration": duration}},
        }],
    }


class FakeProviders:
    """In-process Nominatim + OpenRouteService served through httpx.MockTransport.

    ``places`` maps a place name to (lon, lat), an int status code, an
    exception instance, a raw JSON body or raw bytes. ``routes`` maps a mode id to
    (duration_s, distance_m), an int status code, an exception instance
    a raw JSON body or raw bytes.
    """

    def __init__(self, places=None, routes=None):
        self.places = dict(PLACES if places is None else places)
        self.routes = dict(DEFAULT_ROUTES if routes is None else routes)
        self.geocode_calls: list[str] = []
        self.route_calls: list[str] = []
        self.route_requests: list[httpx.Request] = []
        self.route_delays: dict[str, float] = {}
        self.on_route = None  # optional async hook(mode_id)
        self.on_geocode = None  # optional async hook(place)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/search":
            return await self._geocode(request)
        if request.url.path.startswith("/v2/directions/"):
            return await self._directions(request)
        return httpx.Response(404)

    async def _geocode(self, request: httpx.Request) -> httpx.Response:
        query = request.url.params["q"]
        suffix = f", {config.GEOCODER_REGION}"
        place = query[: -len(suffix)] if query.endswith(suffix) else query
        self.geocode_calls.append(place)
        if self.on_geocode:
            await self.on_geocode(place)

        spec = self.places.get(place)
        if spec is None:
            return httpx.Response(200, json=[])
        if isinstance(spec, bytes):
            return httpx.Response(200, content=spec)
        if isinstance(spec, Exception):
            raise spec
        if isinstance(spec, int):
            return httpx.Response(spec)
        if isinstance(spec, tuple):
            lon, lat = spec
            return httpx.Response(200, json=[{"lon": str(lon), "lat": str(lat), "display_name": place}])
        return httpx.Response(200, json=spec)

    async def _directions(self, request: httpx.Request) -> httpx.Response:
        mode_id = request.url.path.split("/")[3]
        self.route_calls.append(mode_id)
        self.route_requests.append(request)
        if self.on_route:
            await self.on_route(mode_id)
        if mode_id in self.route_delays:
            await asyncio.sleep(self.route_delays[mode_id])

        spec = self.routes.get(mode_id, 404)
        if isinstance(spec, bytes):
            return httpx.Response(200, content=spec)
        if isinstance(spec, Exception):
            raise spec
        if isinstance(spec, int):
            return httpx.Response(spec, json={"error": {"code": 2003, "message": "rejected"}})
        if isinstance(spec, tuple):
            return httpx.Response(200, json=ors_body(*spec))
        return httpx.Response(200, json=spec)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


def request_json(request: httpx.Request) -> dict:
    return json.loads(request.content)


def run_with_client(providers: FakeProviders, make_coro):
    """Run ``make_coro(client)`` on a fresh loop with a client bound to ``providers``."""
    async def _run():
        async with providers.client() as client:
            return await make_coro(client)
    return asyncio.run(_run())


@pytest.fixture(autouse=True)
def ors_key(monkeypatch):
    monkeypatch.setenv("ORS_API_KEY", "test-ors-key")
    return "test-ors-key"


@pytest.fixture
def providers():
    return FakeProviders()
