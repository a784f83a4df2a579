"""Client utilities for the Google Places API."""

import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://maps.googleapis.com/maps/api/place"


class GooglePlacesError(RuntimeError):
    """Raised when the Places API returns a non-successful response."""


def nearby_search(
    latitude: float,
    longitude: float,
    radius_m: int,
    api_key: str,
    keyword: Optional[str] = None,
    timeout: float = 10,
) -> Dict[str, Any]:
    if not api_key:
        raise GooglePlacesError("GOOGLE_API_KEY is required for place searches")
    params: Dict[str, Any] = {
        "location": f"{latitude},{longitude}",
        "radius": radius_m,
        "key": api_key,
    }
    if keyword:
        params["keyword"] = keyword
    response = _SESSION.get(f"{_BASE_URL}/nearbysearch/json", params=params, timeout=timeout)
    response.raise_for_status()
    payload = response.json()
    status = payload.get("status")
    if status not in {"OK", "ZERO_RESULTS"}:
        logger.error("nearby_search failed: status=%s, error_message=%s", status, payload.get("error_message"))
        raise GooglePlacesError(payload.get("error_message") or status)
    return payload
