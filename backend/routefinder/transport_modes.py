"""Static catalog of transportation modes, in display and tie-break order."""
from typing import Optional

from routefinder.models import TransportMode

TRANSPORT_MODES: list[TransportMode] = [
    TransportMode(
        id="driving-car",
        name="Car",
        icon="\U0001F697",
        color="#2563eb",
        description="Fastest route by car",
    ),
    TransportMode(
        id="cycling-regular",
        name="Bicycle",
        icon="\U0001F6B2",
        color="#059669",
        description="Bike-friendly route",
    ),
    TransportMode(
        id="foot-walking",
        name="Walking",
        icon="\U0001F6B6\u200d\u2642\ufe0f",
        color="#dc2626",
        description="Pedestrian route",
    ),
    TransportMode(
        id="public-transport",
        name="Bus/Transit",
        icon="\U0001F68C",
        color="#f59e0b",
        description="Public transportation route",
    ),
]

_MODES_BY_ID = {mode.id: mode for mode in TRANSPORT_MODES}


def get_mode_config(mode_id: str) -> Optional[TransportMode]:
    return _MODES_BY_ID.get(mode_id)


def mode_ids(modes: Optional[list[TransportMode]] = None) -> list[str]:
    return [mode.id for mode in (modes if modes is not None else TRANSPORT_MODES)]
