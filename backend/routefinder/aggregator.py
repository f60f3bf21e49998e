"""Multi-modal route aggregation.

Geocodes both endpoints, then fans out one directions lookup per
transportation mode and folds the successes into a keyed result set.
"""

import asyncio
import logging
from typing import Optional

import httpx

from routefinder import geocoder, mode_router
from routefinder.errors import GeocodingError, NoRouteFoundError, ValidationError
from routefinder.models import (
    Coordinate,
    RouteQuery,
    RouteResults,
    RouteSummary,
    RouteUnavailable,
    TransportMode,
)
from routefinder.transport_modes import TRANSPORT_MODES

logger = logging.getLogger("routefinder.aggregator")


async def _geocode_endpoints(
    origin_place: str,
    destination_place: str,
    http_client: Optional[httpx.AsyncClient] = None,
) -> tuple[Coordinate, Coordinate]:
    """Resolve both endpoints concurrently. Any failure is fatal."""
    origin_result, destination_result = await asyncio.gather(
        geocoder.resolve(origin_place, http_client=http_client),
        geocoder.resolve(destination_place, http_client=http_client),
        return_exceptions=True,
    )

    # Origin errors win when both fail, independent of completion order
    for endpoint, result in (("origin", origin_result), ("destination", destination_result)):
        if isinstance(result, GeocodingError):
            raise result.for_endpoint(endpoint)
        if isinstance(result, BaseException):
            raise result

    return origin_result, destination_result


async def find_routes(
    origin_place: str,
    destination_place: str,
    http_client: Optional[httpx.AsyncClient] = None,
    modes: Optional[list[TransportMode]] = None,
) -> RouteResults:
    """Find one route per transportation mode between two place names.

    Every mode lookup is awaited before the result set is built; modes
    whose lookup failed are left out of ``routes`` and listed in
    ``unavailable``.

    Raises:
        ValidationError: either place name is empty.
        NotFoundError / ProviderError: an endpoint could not be geocoded.
        NoRouteFoundError: no mode produced a route.
    """
    if modes is None:
        modes = TRANSPORT_MODES

    origin_name = (origin_place or "").strip()
    destination_name = (destination_place or "").strip()
    if not origin_name or not destination_name:
        raise ValidationError("Both a starting point and a destination are required")

    origin, destination = await _geocode_endpoints(
        origin_name, destination_name, http_client=http_client
    )

    logger.info(
        f"Fetching {len(modes)} modes for '{origin_name}' -> '{destination_name}'"
    )
    results = await asyncio.gather(*[
        mode_router.fetch_route(mode, origin, destination, http_client=http_client)
        for mode in modes
    ], return_exceptions=True)

    # gather keeps submission order, so the fold follows catalog order
    routes: dict[str, RouteSummary] = {}
    unavailable: dict[str, str] = {}
    for mode, result in zip(modes, results):
        if isinstance(result, RouteSummary):
            routes[mode.id] = result
        elif isinstance(result, RouteUnavailable):
            unavailable[mode.id] = result.reason
        elif isinstance(result, BaseException):
            logger.warning(f"Route lookup for {mode.id} failed: {type(result).__name__}: {result}")
            unavailable[mode.id] = f"Unexpected error: {type(result).__name__}"

    if unavailable:
        logger.info(f"Modes unavailable: {', '.join(unavailable)}")

    if not routes:
        raise NoRouteFoundError()

    return RouteResults(
        origin=origin,
        destination=destination,
        origin_name=origin_name,
        destination_name=destination_name,
        routes=routes,
        unavailable=unavailable,
    )


async def find_routes_for_query(
    query: RouteQuery,
    http_client: Optional[httpx.AsyncClient] = None,
    modes: Optional[list[TransportMode]] = None,
) -> RouteResults:
    return await find_routes(
        query.origin, query.destination, http_client=http_client, modes=modes
    )
