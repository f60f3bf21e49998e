"""Display payloads built from a result set and the selected mode."""

from typing import Optional

from routefinder.config import MAP_CENTER, MAP_ZOOM
from routefinder.models import (
    MapMarker,
    MapView,
    ModeCard,
    RouteLayer,
    RouteResults,
    RouteView,
    SelectedRouteView,
    TransportMode,
)
from routefinder.selection import (
    default_selection,
    format_distance,
    format_duration,
    is_fastest,
    rank_modes,
)
from routefinder.transport_modes import TRANSPORT_MODES, get_mode_config

SELECTED_WEIGHT, SELECTED_OPACITY = 6, 0.9
UNSELECTED_WEIGHT, UNSELECTED_OPACITY = 3, 0.4
FALLBACK_COLOR = "#6B7280"


def build_mode_cards(
    results: RouteResults,
    selected_mode: str,
    modes: Optional[list[TransportMode]] = None,
) -> list[ModeCard]:
    """One card per catalog mode, available or not."""
    cards = []
    for mode in modes if modes is not None else TRANSPORT_MODES:
        route = results.routes.get(mode.id)
        if route is None:
            cards.append(ModeCard(
                mode=mode.id,
                name=mode.name,
                icon=mode.icon,
                color=mode.color,
                available=False,
                unavailable_text="Route not available",
            ))
            continue

        cards.append(ModeCard(
            mode=mode.id,
            name=mode.name,
            icon=mode.icon,
            color=mode.color,
            available=True,
            selected=mode.id == selected_mode,
            fastest=is_fastest(mode.id, results.routes),
            duration_min=route.duration_min,
            duration_text=format_duration(route.duration_min),
            distance_km=route.distance_km,
            distance_text=format_distance(route),
        ))
    return cards


def build_map_view(results: RouteResults, selected_mode: str) -> MapView:
    layers = []
    for mode_id, route in results.routes.items():
        mode = get_mode_config(mode_id)
        selected = mode_id == selected_mode
        layers.append(RouteLayer(
            mode=mode_id,
            positions=[c.as_latlng() for c in route.geometry],
            color=mode.color if mode else FALLBACK_COLOR,
            weight=SELECTED_WEIGHT if selected else UNSELECTED_WEIGHT,
            opacity=SELECTED_OPACITY if selected else UNSELECTED_OPACITY,
            selected=selected,
        ))

    markers = [
        MapMarker(role="start", label=results.origin_name, position=results.origin.as_latlng()),
        MapMarker(
            role="destination",
            label=results.destination_name,
            position=results.destination.as_latlng(),
        ),
    ]
    return MapView(center=list(MAP_CENTER), zoom=MAP_ZOOM, layers=layers, markers=markers)


def build_route_view(
    results: RouteResults,
    selected_mode: Optional[str] = None,
    modes: Optional[list[TransportMode]] = None,
) -> RouteView:
    if selected_mode not in results.routes:
        selected_mode = default_selection(results.routes, modes)

    route = results.routes[selected_mode]
    mode = get_mode_config(selected_mode)
    name = mode.name if mode else selected_mode
    icon = f"{mode.icon} " if mode else ""

    return RouteView(
        selected_mode=selected_mode,
        ranking=rank_modes(results.routes, modes),
        results=results,
        cards=build_mode_cards(results, selected_mode, modes),
        selected=SelectedRouteView(
            mode=selected_mode,
            title=f"{icon}{name} Route",
            description=mode.description if mode else "",
            duration_text=format_duration(route.duration_min),
            distance_text=format_distance(route),
        ),
        map=build_map_view(results, selected_mode),
    )
