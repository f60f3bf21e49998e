"""Selected-route state and the derivations the display layer reads.

Durations are compared on whole minutes, the same figure the user sees,
and ties go to the earlier mode in the catalog.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from routefinder.errors import RouteFinderError, user_message
from routefinder.models import RouteQuery, RouteResults, RouteSummary, TransportMode
from routefinder.transport_modes import mode_ids

logger = logging.getLogger("routefinder.selection")

STATUS_IDLE = "idle"
STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_FAILED = "failed"


def _catalog_order(
    routes: dict[str, RouteSummary],
    modes: Optional[list[TransportMode]] = None,
) -> list[str]:
    """Keys of ``routes`` in catalog order; unknown keys keep insertion order at the end."""
    catalog = mode_ids(modes)
    ordered = [mode_id for mode_id in catalog if mode_id in routes]
    ordered.extend(mode_id for mode_id in routes if mode_id not in catalog)
    return ordered


def default_selection(
    routes: dict[str, RouteSummary],
    modes: Optional[list[TransportMode]] = None,
) -> str:
    """The fastest mode; the first in catalog order on a tie."""
    ordered = _catalog_order(routes, modes)
    if not ordered:
        raise ValueError("Cannot pick a default from an empty result set")

    fastest = ordered[0]
    for mode_id in ordered[1:]:
        if routes[mode_id].duration_min < routes[fastest].duration_min:
            fastest = mode_id
    return fastest


def is_fastest(mode_id: str, routes: dict[str, RouteSummary]) -> bool:
    """True if no other mode is strictly faster. Ties make several modes fastest."""
    route = routes.get(mode_id)
    if route is None:
        return False
    return all(other.duration_min >= route.duration_min for other in routes.values())


def rank_modes(
    routes: dict[str, RouteSummary],
    modes: Optional[list[TransportMode]] = None,
) -> list[str]:
    """Mode ids from fastest to slowest."""
    # sorted() is stable, so catalog order breaks ties
    return sorted(_catalog_order(routes, modes), key=lambda m: routes[m].duration_min)


def format_duration(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes} mins"
    hours = minutes // 60
    mins = minutes % 60
    return f"{hours}h {mins}m"


def format_distance(route: RouteSummary) -> str:
    return f"{route.distance_km} km"


@dataclass
class SelectionState:
    """Query, results and selected mode for one display client.

    Each external event has one transition: ``submit`` when a query is
    sent, ``settle``/``fail`` when its lookup finishes and ``select`` when
    the user picks a mode. Every submit issues a new token; a settle or
    fail carrying an older token is discarded.
    """

    status: str = STATUS_IDLE
    query: Optional[RouteQuery] = None
    results: Optional[RouteResults] = None
    selected: Optional[str] = None
    error: Optional[str] = None
    token: int = 0
    modes: Optional[list[TransportMode]] = field(default=None, repr=False)

    @property
    def routes(self) -> dict[str, RouteSummary]:
        return self.results.routes if self.results else {}

    def is_current(self, token: int) -> bool:
        return token == self.token

    def submit(self, query: RouteQuery) -> int:
        self.token += 1
        self.status = STATUS_LOADING
        self.query = query
        self.results = None
        self.selected = None
        self.error = None
        return self.token

    def settle(self, token: int, results: RouteResults) -> bool:
        if not self.is_current(token):
            logger.info(f"Discarding stale results for query #{token} (current #{self.token})")
            return False

        self.results = results
        self.error = None
        self.selected = default_selection(results.routes, self.modes) if results.routes else None
        self.status = STATUS_READY
        return True

    def fail(self, token: int, error: RouteFinderError) -> bool:
        if not self.is_current(token):
            logger.info(f"Discarding stale failure for query #{token} (current #{self.token})")
            return False

        self.results = None
        self.selected = None
        self.error = user_message(error)
        self.status = STATUS_FAILED
        return True

    def select(self, mode_id: str) -> bool:
        """Select an available mode. Unavailable modes are ignored."""
        if mode_id not in self.routes:
            return False
        self.selected = mode_id
        return True
