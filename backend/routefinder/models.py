from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Coordinate(BaseModel):
    """A (longitude, latitude) pair as returned by the geocoder."""

    model_config = ConfigDict(frozen=True)

    lng: float = Field(..., ge=-180.0, le=180.0)
    lat: float = Field(..., ge=-90.0, le=90.0)

    def as_pair(self) -> list[float]:
        return [self.lng, self.lat]

    def as_latlng(self) -> list[float]:
        return [self.lat, self.lng]


class TransportMode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str  # directions provider profile, e.g. "driving-car"
    name: str
    icon: str
    color: str
    description: str


class RouteSummary(BaseModel):
    mode: str
    geometry: list[Coordinate]
    distance_m: float = Field(..., ge=0.0)
    duration_s: float = Field(..., ge=0.0)

    @computed_field
    @property
    def distance_km(self) -> str:
        return f"{self.distance_m / 1000:.1f}"

    @computed_field
    @property
    def duration_min(self) -> int:
        # Half-up, so 7.5 minutes reads as 8
        return int(math.floor(self.duration_s / 60 + 0.5))


class RouteUnavailable(BaseModel):
    """A mode whose lookup failed. Never stored in a result set."""

    mode: str
    reason: str


class RouteQuery(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    origin: str = Field(..., alias="from")
    destination: str = Field(..., alias="to")


class RouteResults(BaseModel):
    origin: Coordinate
    destination: Coordinate
    origin_name: str
    destination_name: str
    routes: dict[str, RouteSummary]  # mode id -> summary, catalog order
    unavailable: dict[str, str] = Field(default_factory=dict)  # mode id -> reason


# --- Display view models ---


class ModeCard(BaseModel):
    mode: str
    name: str
    icon: str
    color: str
    available: bool
    selected: bool = False
    fastest: bool = False
    duration_min: Optional[int] = None
    duration_text: Optional[str] = None
    distance_km: Optional[str] = None
    distance_text: Optional[str] = None
    unavailable_text: Optional[str] = None


class SelectedRouteView(BaseModel):
    mode: str
    title: str
    description: str
    duration_text: str
    distance_text: str


class RouteLayer(BaseModel):
    mode: str
    positions: list[list[float]]  # [lat, lng]
    color: str
    weight: int
    opacity: float
    selected: bool


class MapMarker(BaseModel):
    role: str  # "start" or "destination"
    label: str
    position: list[float]  # [lat, lng]


class MapView(BaseModel):
    center: list[float]
    zoom: int
    layers: list[RouteLayer] = Field(default_factory=list)
    markers: list[MapMarker] = Field(default_factory=list)


class RouteView(BaseModel):
    """Everything the display layer needs to render one result set."""

    selected_mode: str
    ranking: list[str]
    results: RouteResults
    cards: list[ModeCard]
    selected: SelectedRouteView
    map: MapView


class SessionView(BaseModel):
    session_id: str
    status: str  # "idle", "loading", "ready", "failed"
    query: Optional[RouteQuery] = None
    error: Optional[str] = None
    view: Optional[RouteView] = None


class SelectRequest(BaseModel):
    mode: str
