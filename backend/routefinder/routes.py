import logging

from fastapi import APIRouter, HTTPException

from routefinder.errors import RouteFinderError, SessionNotFoundError, user_message
from routefinder.models import RouteQuery, RouteView, SelectRequest, SessionView, TransportMode
from routefinder.transport_modes import TRANSPORT_MODES

logger = logging.getLogger("routefinder.routes")

router = APIRouter()


def _get_state():
    from routefinder.main import app_state
    return app_state


def _http_error(error: RouteFinderError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=user_message(error))


def _get_session(session_id: str):
    try:
        return _get_state()["sessions"].get_session(session_id)
    except RouteFinderError as e:
        raise _http_error(e)


@router.get("/health")
async def health():
    return {"status": "ok", "service": "RouteFinder API"}


@router.get("/modes", response_model=list[TransportMode])
async def get_modes():
    """Transportation mode catalog, in display order."""
    return TRANSPORT_MODES


@router.post("/routes", response_model=RouteView)
async def get_routes(request: RouteQuery):
    """Find routes for every mode and select the fastest."""
    from routefinder.aggregator import find_routes_for_query
    from routefinder.views import build_route_view

    state = _get_state()
    try:
        results = await find_routes_for_query(request, http_client=state.get("http_client"))
    except RouteFinderError as e:
        logger.info(f"Route query failed: {e.message}")
        raise _http_error(e)

    return build_route_view(results)


@router.post("/sessions", response_model=SessionView)
async def create_session():
    state = _get_state()
    sessions = state["sessions"]
    sessions.cleanup_stale_sessions()
    return sessions.create_session().view()


@router.get("/sessions/{session_id}", response_model=SessionView)
async def get_session(session_id: str):
    return _get_session(session_id).view()


@router.delete("/sessions/{session_id}")
async def end_session(session_id: str):
    ended = _get_state()["sessions"].end_session(session_id)
    if not ended:
        raise _http_error(SessionNotFoundError(session_id))
    return {"status": "ended", "session_id": session_id}


@router.post("/sessions/{session_id}/query", response_model=SessionView)
async def query_session(session_id: str, request: RouteQuery):
    """Run a query in a session. A newer query in the same session wins."""
    session = _get_session(session_id)
    try:
        await session.run_query(request, http_client=_get_state().get("http_client"))
    except RouteFinderError as e:
        logger.info(f"Session {session_id} query failed: {e.message}")
        raise _http_error(e)
    return session.view()


@router.post("/sessions/{session_id}/select", response_model=SessionView)
async def select_mode(session_id: str, request: SelectRequest):
    """Select a mode. Modes without a route are ignored."""
    session = _get_session(session_id)
    if not session.select(request.mode):
        logger.info(f"Session {session_id}: ignored selection of unavailable mode {request.mode}")
    return session.view()
