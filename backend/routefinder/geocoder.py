"""Place name -> coordinate lookup against Nominatim."""

import logging
from typing import Optional

import httpx

from routefinder.config import GEOCODER_REGION, NOMINATIM_URL, NOMINATIM_USER_AGENT
from routefinder.errors import NotFoundError, ProviderError, ValidationError
from routefinder.models import Coordinate

logger = logging.getLogger("routefinder.geocoder")


async def _search(
    query: str,
    http_client: Optional[httpx.AsyncClient] = None,
) -> list:
    url = f"{NOMINATIM_URL}/search"
    params = {"q": query, "format": "json", "limit": 1}
    headers = {"User-Agent": NOMINATIM_USER_AGENT}

    if http_client:
        resp = await http_client.get(url, params=params, headers=headers)
    else:
        async with httpx.AsyncClient(timeout=10.0) as client:
            resp = await client.get(url, params=params, headers=headers)
    resp.raise_for_status()
    data = resp.json()
    if not isinstance(data, list):
        raise ValueError(f"expected a list of matches, got {type(data).__name__}")
    return data


async def resolve(
    place_name: str,
    http_client: Optional[httpx.AsyncClient] = None,
    region: str = GEOCODER_REGION,
) -> Coordinate:
    """Resolve a free-text place name to a coordinate.

    The configured region is appended to every lookup and only the
    top-ranked match is used.

    Raises:
        ValidationError: the name is empty after trimming.
        NotFoundError: the provider returned no match.
        ProviderError: the request failed or the match was unusable.
    """
    place = (place_name or "").strip()
    if not place:
        raise ValidationError("Place name must not be empty")

    query = f"{place}, {region}" if region else place
    try:
        matches = await _search(query, http_client=http_client)
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Geocoding request failed for '{place}': {type(e).__name__}: {e}")
        raise ProviderError(place, f"Geocoding provider error: {e}") from e
    except Exception as e:
        logger.warning(f"Geocoding lookup failed unexpectedly for '{place}': {type(e).__name__}: {e}")
        raise ProviderError(place, f"Geocoding provider error: {type(e).__name__}") from e

    if not matches:
        logger.info(f"No geocoding match for '{place}'")
        raise NotFoundError(place)

    match = matches[0]
    try:
        coord = Coordinate(lng=float(match["lon"]), lat=float(match["lat"]))
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Unusable geocoding match for '{place}': {match!r}")
        raise ProviderError(place, "Geocoding provider returned an invalid location") from e

    logger.info(f"Geocoded '{place}' -> ({coord.lng}, {coord.lat})")
    return coord
