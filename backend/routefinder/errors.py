"""Error taxonomy for route lookups.

Geocoding errors are fatal to a query. Per-mode routing failures never
surface here; the mode router turns them into ``RouteUnavailable`` values.
"""
from typing import Optional

ENDPOINT_LABELS = {"origin": "starting point", "destination": "destination"}


class RouteFinderError(Exception):
    """Base class for errors that end a route query."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RouteFinderError):
    """Empty or malformed user input, rejected before any network call."""

    status_code = 400


class GeocodingError(RouteFinderError):
    """A place name could not be turned into a coordinate."""

    def __init__(self, place: str, message: str, endpoint: Optional[str] = None):
        super().__init__(message)
        self.place = place
        self.endpoint = endpoint

    def for_endpoint(self, endpoint: str) -> "GeocodingError":
        self.endpoint = endpoint
        return self

    @property
    def user_message(self) -> str:
        if self.endpoint:
            label = ENDPOINT_LABELS.get(self.endpoint, self.endpoint)
            return f"Could not resolve the {label} '{self.place}': {self.message}"
        return f"Could not resolve '{self.place}': {self.message}"


class NotFoundError(GeocodingError):
    status_code = 404

    def __init__(self, place: str, endpoint: Optional[str] = None):
        super().__init__(place, f"Location not found: {place}", endpoint)


class ProviderError(GeocodingError):
    status_code = 502


class NoRouteFoundError(RouteFinderError):
    """Geocoding worked but no transportation mode returned a route."""

    status_code = 404

    def __init__(self, message: str = "No routes available between these points"):
        super().__init__(message)


class SessionNotFoundError(RouteFinderError):
    status_code = 404

    def __init__(self, session_id: str):
        super().__init__(f"Session '{session_id}' not found")
        self.session_id = session_id


def user_message(error: RouteFinderError) -> str:
    """Message shown to the user for a failed query."""
    if isinstance(error, GeocodingError):
        return error.user_message
    return error.message
