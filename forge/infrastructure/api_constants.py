"""
API endpoint constants and configuration.

External API endpoint paths live here so a different elevation service
(or API version) only needs changes in one place.
"""


# Open-Elevation compatible API Endpoints
class ElevationAPIEndpoints:
    """Elevation API endpoint paths."""

    BASE = "/api/v1"

    LOOKUP = f"{BASE}/lookup"


# API Configuration Constants
class APIConstants:
    """General API configuration constants."""

    # HTTP Headers
    CONTENT_TYPE_JSON = "application/json"

    # Maximum points per elevation lookup request
    MAX_LOOKUP_LOCATIONS = 100
