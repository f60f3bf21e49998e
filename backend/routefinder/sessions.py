"""Route sessions: one selection state per display client.

A session can have several queries in flight. Only the most recently
submitted one may commit its results.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional

import httpx

from routefinder.aggregator import find_routes
from routefinder.config import SESSION_MAX_AGE_SECONDS
from routefinder.errors import RouteFinderError, SessionNotFoundError
from routefinder.models import RouteQuery, RouteResults, SessionView
from routefinder.selection import SelectionState
from routefinder.views import build_route_view

logger = logging.getLogger("routefinder.sessions")


@dataclass
class RouteSession:
    session_id: str
    state: SelectionState = field(default_factory=SelectionState)
    last_used_at: float = field(default_factory=time.time)

    def touch(self) -> None:
        self.last_used_at = time.time()

    async def run_query(
        self,
        query: RouteQuery,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> Optional[RouteResults]:
        """Run a query and commit it unless a newer one was submitted meanwhile.

        Returns the results if they were committed, None if they went stale.
        Query errors are recorded on the state and re-raised when current.
        """
        self.touch()
        token = self.state.submit(query)
        try:
            results = await find_routes(
                query.origin, query.destination, http_client=http_client
            )
        except RouteFinderError as e:
            if self.state.fail(token, e):
                raise
            return None

        if not self.state.settle(token, results):
            return None
        return results

    def select(self, mode_id: str) -> bool:
        self.touch()
        return self.state.select(mode_id)

    def view(self) -> SessionView:
        state = self.state
        return SessionView(
            session_id=self.session_id,
            status=state.status,
            query=state.query,
            error=state.error,
            view=build_route_view(state.results, state.selected) if state.routes else None,
        )


class RouteSessionManager:
    """Holds all live route sessions."""

    def __init__(self):
        self.sessions: dict[str, RouteSession] = {}

    def create_session(self) -> RouteSession:
        session = RouteSession(session_id=str(uuid.uuid4())[:12])
        self.sessions[session.session_id] = session
        logger.info(f"Route session created: {session.session_id}")
        return session

    def get_session(self, session_id: str) -> RouteSession:
        session = self.sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def end_session(self, session_id: str) -> bool:
        session = self.sessions.pop(session_id, None)
        if session:
            logger.info(f"Route session ended: {session_id}")
            return True
        return False

    def cleanup_stale_sessions(self, max_age_sec: float = SESSION_MAX_AGE_SECONDS) -> int:
        """Remove sessions idle for longer than max_age_sec. Returns count removed."""
        now = time.time()
        stale = [
            sid for sid, s in self.sessions.items()
            if now - s.last_used_at > max_age_sec
        ]
        for sid in stale:
            del self.sessions[sid]
        if stale:
            logger.info(f"Cleaned up {len(stale)} stale route sessions")
        return len(stale)
