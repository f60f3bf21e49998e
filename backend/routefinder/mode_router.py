"""Per-mode directions lookups against OpenRouteService."""

import logging
from typing import Optional, Union

import httpx
from routefinder.config import ORS_BASE_URL, get_ors_api_key, has_ors_api_key
from routefinder.models import Coordinate, RouteSummary, RouteUnavailable, TransportMode

logger = logging.getLogger("routefinder.mode_router")


class _NoRoute(Exception):
    pass


async def _directions(
    mode_id: str,
    origin: Coordinate,
    destination: Coordinate,
    http_client: Optional[httpx.AsyncClient] = None,
) -> dict:
    """POST a GeoJSON directions request and return the decoded body."""
    url = f"{ORS_BASE_URL}/v2/directions/{mode_id}/geojson"
    body = {"coordinates": [origin.as_pair(), destination.as_pair()]}
    headers = {
        "Authorization": get_ors_api_key(),
        "Content-Type": "application/json",
    }

    if http_client:
        resp = await http_client.post(url, json=body, headers=headers)
    else:
        async with httpx.AsyncClient(timeout=10.0) as client:
            resp = await client.post(url, json=body, headers=headers)
    resp.raise_for_status()
    return resp.json()


def _parse_route(mode_id: str, data: dict) -> RouteSummary:
    """Normalize the first returned feature into a RouteSummary."""
    features = data.get("features") or []
    if not features:
        raise _NoRoute("provider returned no routes")

    feature = features[0]
    coords = feature["geometry"]["coordinates"]
    if not coords:
        raise _NoRoute("route has no geometry")
    summary = feature["properties"]["summary"]
    # ORS omits zero-valued summary fields
    return RouteSummary(
        mode=mode_id,
        geometry=[Coordinate(lng=float(c[0]), lat=float(c[1])) for c in coords],
        distance_m=float(summary.get("distance", 0.0)),
        duration_s=float(summary.get("duration", 0.0)),
    )


async def fetch_route(
    mode: Union[TransportMode, str],
    origin: Coordinate,
    destination: Coordinate,
    http_client: Optional[httpx.AsyncClient] = None,
) -> Union[RouteSummary, RouteUnavailable]:
    """Fetch one mode's route. Any failure comes back as RouteUnavailable."""
    mode_id = mode.id if isinstance(mode, TransportMode) else mode

    if not has_ors_api_key():
        logger.warning(f"ORS_API_KEY not configured, {mode_id} route unavailable")
        return RouteUnavailable(mode=mode_id, reason="Directions credential not configured")

    try:
        data = await _directions(mode_id, origin, destination, http_client=http_client)
        route = _parse_route(mode_id, data)
    except httpx.HTTPStatusError as e:
        logger.warning(f"Directions request rejected for {mode_id}: HTTP {e.response.status_code}")
        return RouteUnavailable(mode=mode_id, reason=f"Provider returned HTTP {e.response.status_code}")
    except httpx.HTTPError as e:
        logger.warning(f"Directions request failed for {mode_id}: {type(e).__name__}: {e}")
        return RouteUnavailable(mode=mode_id, reason=f"Network error: {type(e).__name__}")
    except _NoRoute as e:
        logger.warning(f"No route for {mode_id}: {e}")
        return RouteUnavailable(mode=mode_id, reason=str(e))
    except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
        logger.warning(f"Malformed directions response for {mode_id}: {type(e).__name__}: {e}")
        return RouteUnavailable(mode=mode_id, reason="Malformed provider response")
    except Exception as e:
        logger.warning(f"Directions lookup for {mode_id} failed unexpectedly: {type(e).__name__}: {e}")
        return RouteUnavailable(mode=mode_id, reason=f"Unexpected error: {type(e).__name__}")

    logger.info(
        f"Route for {mode_id}: {route.distance_m:.0f} m, {route.duration_s:.0f} s, "
        f"{len(route.geometry)} points"
    )
    return route
