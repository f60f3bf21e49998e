"""
Configuration settings for the route finder backend.

Values come from the environment (``backend/.env`` is loaded by ``main``);
the defaults reproduce the Surat deployment.
"""
import os

# Geocoding (Nominatim)
NOMINATIM_URL = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org")
NOMINATIM_USER_AGENT = os.getenv(
    "NOMINATIM_USER_AGENT", "RouteFinder/0.1 (multi-modal route finder)"
)  # Required by Nominatim ToS
GEOCODER_REGION = os.getenv("GEOCODER_REGION", "Surat, India")

# Directions (OpenRouteService)
ORS_BASE_URL = os.getenv("ORS_BASE_URL", "https://api.openrouteservice.org")
ORS_KEY_PLACEHOLDER = "your-ors-api-key-here"

# Shared HTTP client
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "12.0"))
HTTP_MAX_CONNECTIONS = 50
HTTP_MAX_KEEPALIVE = 20

# Display defaults
MAP_CENTER = (21.1702, 72.8311)  # (lat, lng)
MAP_ZOOM = 13

# Sessions
SESSION_MAX_AGE_SECONDS = float(os.getenv("SESSION_MAX_AGE_SECONDS", "3600"))


def get_ors_api_key() -> str:
    return os.getenv("ORS_API_KEY", "")


def has_ors_api_key() -> bool:
    key = get_ors_api_key()
    return bool(key) and key != ORS_KEY_PLACEHOLDER
