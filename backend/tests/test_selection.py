import random

import pytest

from routefinder.errors import NotFoundError
from routefinder.models import Coordinate, RouteQuery, RouteResults, RouteSummary
from routefinder.selection import (
    STATUS_FAILED,
    STATUS_IDLE,
    STATUS_LOADING,
    STATUS_READY,
    SelectionState,
    default_selection,
    format_distance,
    format_duration,
    is_fastest,
    rank_modes,
)
from routefinder.transport_modes import mode_ids

ORIGIN = Coordinate(lng=72.77, lat=21.16)
DESTINATION = Coordinate(lng=72.83, lat=21.20)


def summary(mode, duration_s, distance_m=1000.0):
    return RouteSummary(
        mode=mode,
        geometry=[ORIGIN, DESTINATION],
        distance_m=distance_m,
        duration_s=duration_s,
    )


def results_for(durations: dict) -> RouteResults:
    return RouteResults(
        origin=ORIGIN,
        destination=DESTINATION,
        origin_name="SVNIT",
        destination_name="Surat Railway Station",
        routes={mode: summary(mode, seconds) for mode, seconds in durations.items()},
    )


@pytest.mark.parametrize("minutes, expected", [
    (0, "0 mins"),
    (45, "45 mins"),
    (59, "59 mins"),
    (60, "1h 0m"),
    (90, "1h 30m"),
    (125, "2h 5m"),
])
def test_format_duration(minutes, expected):
    assert format_duration(minutes) == expected


def test_format_distance_uses_one_decimal():
    assert format_distance(summary("driving-car", 900, 8000)) == "8.0 km"
    assert format_distance(summary("driving-car", 900, 12345)) == "12.3 km"


def test_duration_minutes_round_half_up():
    assert summary("driving-car", 450).duration_min == 8
    assert summary("driving-car", 449).duration_min == 7
    assert summary("driving-car", 900).duration_min == 15


def test_default_selection_picks_minimum_duration():
    routes = results_for({
        "driving-car": 900,
        "cycling-regular": 600,
        "foot-walking": 3000,
    }).routes

    assert default_selection(routes) == "cycling-regular"


def test_default_selection_breaks_ties_by_catalog_order():
    # Inserted out of catalog order on purpose
    routes = results_for({
        "foot-walking": 600,
        "cycling-regular": 600,
        "driving-car": 1200,
    }).routes

    assert default_selection(routes) == "cycling-regular"


def test_default_selection_compares_displayed_minutes():
    # 14.6 and 15.4 minutes both show as 15
    routes = results_for({"driving-car": 924, "cycling-regular": 876}).routes

    assert default_selection(routes) == "driving-car"


def test_default_selection_rejects_empty_set():
    with pytest.raises(ValueError):
        default_selection({})


def test_is_fastest_allows_ties():
    routes = results_for({
        "driving-car": 900,
        "cycling-regular": 900,
        "foot-walking": 2400,
    }).routes

    assert is_fastest("driving-car", routes)
    assert is_fastest("cycling-regular", routes)
    assert not is_fastest("foot-walking", routes)
    assert not is_fastest("public-transport", routes)


def test_rank_modes_orders_by_duration_then_catalog():
    routes = results_for({
        "public-transport": 1200,
        "foot-walking": 3000,
        "cycling-regular": 1200,
        "driving-car": 600,
    }).routes

    assert rank_modes(routes) == [
        "driving-car", "cycling-regular", "public-transport", "foot-walking"
    ]


def test_default_selection_is_present_and_minimal_for_random_sets():
    rng = random.Random(1234)
    for _ in range(200):
        chosen = rng.sample(mode_ids(), rng.randint(1, 4))
        routes = results_for({m: rng.choice([300, 600, 600, 900, 3600, 5400]) for m in chosen}).routes

        selected = default_selection(routes)

        assert selected in routes
        assert all(r.duration_min >= routes[selected].duration_min for r in routes.values())
        assert is_fastest(selected, routes)


# --- SelectionState ---


def _query(origin="SVNIT", destination="Surat Railway Station"):
    return RouteQuery(origin=origin, destination=destination)


def test_new_state_is_idle():
    state = SelectionState()

    assert state.status == STATUS_IDLE
    assert state.routes == {}
    assert state.selected is None


def test_settle_selects_fastest_mode():
    state = SelectionState()
    token = state.submit(_query())

    assert state.status == STATUS_LOADING
    assert state.settle(token, results_for({"driving-car": 900, "foot-walking": 3000}))
    assert state.status == STATUS_READY
    assert state.selected == "driving-car"


def test_select_only_accepts_available_modes():
    state = SelectionState()
    token = state.submit(_query())
    state.settle(token, results_for({"driving-car": 900, "foot-walking": 3000}))

    assert state.select("foot-walking")
    assert state.selected == "foot-walking"

    assert not state.select("public-transport")
    assert not state.select("hovercraft")
    assert state.selected == "foot-walking"


def test_select_before_results_is_a_no_op():
    state = SelectionState()

    assert not state.select("driving-car")
    assert state.selected is None


def test_submit_resets_previous_results():
    state = SelectionState()
    token = state.submit(_query())
    state.settle(token, results_for({"driving-car": 900}))

    state.submit(_query("Adajan"))

    assert state.status == STATUS_LOADING
    assert state.results is None
    assert state.selected is None
    assert state.query.origin == "Adajan"


def test_stale_results_do_not_overwrite_newer_commit():
    state = SelectionState()
    token_a = state.submit(_query("SVNIT"))
    token_b = state.submit(_query("Adajan"))

    assert state.settle(token_b, results_for({"cycling-regular": 600}))
    assert not state.settle(token_a, results_for({"driving-car": 300}))

    assert state.selected == "cycling-regular"
    assert set(state.routes) == {"cycling-regular"}
    assert state.query.origin == "Adajan"


def test_stale_failure_is_ignored():
    state = SelectionState()
    token_a = state.submit(_query("Atlantis"))
    token_b = state.submit(_query())
    state.settle(token_b, results_for({"driving-car": 900}))

    assert not state.fail(token_a, NotFoundError("Atlantis", endpoint="origin"))
    assert state.status == STATUS_READY
    assert state.error is None


def test_fail_records_endpoint_message():
    state = SelectionState()
    token = state.submit(_query("Atlantis"))

    assert state.fail(token, NotFoundError("Atlantis", endpoint="origin"))
    assert state.status == STATUS_FAILED
    assert "starting point" in state.error
    assert "Atlantis" in state.error
    assert state.routes == {}
