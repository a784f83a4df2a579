"""Client for the listings backend's per-domain nearby search endpoints."""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from localfinder.core.taxonomy import Domain
from localfinder.etl.transform import extract_items, to_provider_records
from localfinder.models import Coordinate, ProviderRecord

logger = logging.getLogger(__name__)


class NearbyApiError(RuntimeError):
    """Raised when a nearby endpoint fails or reports an unsuccessful search."""


@dataclass(frozen=True)
class Endpoint:
    path: str
    radius_param: str = "distance"
    sends_subcategory: bool = False


ENDPOINTS: Mapping[Domain, Endpoint] = MappingProxyType(
    {
        Domain.FOOD: Endpoint("getNearby"),
        Domain.HOSPITAL: Endpoint("getNearbyHealthcare"),
        Domain.HOTEL: Endpoint("getNearbyhotelTravel"),
        Domain.BEAUTY: Endpoint("getnearbybeautyworkers"),
        Domain.REAL_ESTATE: Endpoint("getNearbyRealEstates", radius_param="range"),
        Domain.SHOPPING: Endpoint("getNearbyShoppingRetail"),
        Domain.EDUCATION: Endpoint("getNearbyEducation"),
        Domain.INDUSTRIAL: Endpoint("getNearbyIndustrialServices"),
        Domain.AUTOMOTIVE: Endpoint("getNearbyAutomotive"),
        Domain.WORKER_GENERIC: Endpoint("getNearbyWorkers", radius_param="range", sends_subcategory=True),
    }
)


def _build_session() -> requests.Session:
    session = requests.Session()
    retries = Retry(
        total=3,
        backoff_factor=1,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET",),
    )
    session.mount("http://", HTTPAdapter(max_retries=retries))
    session.mount("https://", HTTPAdapter(max_retries=retries))
    return session


_SESSION = _build_session()


def build_params(
    endpoint: Endpoint,
    coordinate: Coordinate,
    radius_km: float,
    subcategory: Optional[str] = None,
) -> Dict[str, Any]:
    params: Dict[str, Any] = {
        "latitude": coordinate.latitude,
        "longitude": coordinate.longitude,
        endpoint.radius_param: radius_km,
    }
    if endpoint.sends_subcategory and subcategory:
        params["subcategory"] = subcategory
    return params


def search_nearby(
    domain: Domain,
    coordinate: Coordinate,
    radius_km: float,
    base_url: str,
    subcategory: Optional[str] = None,
    timeout: float = 10,
) -> List[ProviderRecord]:
    """Call the domain's nearby endpoint and return records in backend order."""
    endpoint = ENDPOINTS.get(domain)
    if endpoint is None:
        raise NearbyApiError(f"No nearby endpoint for domain {domain.value}")
    if not base_url:
        raise NearbyApiError("NEARBY_API_BASE_URL is required for live searches")
    if radius_km <= 0:
        raise ValueError("radius must be positive")

    url = f"{base_url.rstrip('/')}/{endpoint.path}"
    params = build_params(endpoint, coordinate, radius_km, subcategory)
    logger.info("GET %s params=%s", url, params)

    try:
        response = _SESSION.get(url, params=params, timeout=timeout)
    except requests.RequestException as exc:
        raise NearbyApiError(f"nearby search failed: {exc}") from exc

    if not (200 <= response.status_code < 300):
        logger.error("Nearby API returned non-2xx status (%s): %s", response.status_code, response.text[:500])
        raise NearbyApiError(f"HTTP {response.status_code} from {endpoint.path}")

    try:
        payload = response.json()
    except ValueError as exc:
        raise NearbyApiError(f"{endpoint.path} returned a non-JSON body") from exc

    if isinstance(payload, dict) and payload.get("success") is False:
        raise NearbyApiError(payload.get("message") or f"{endpoint.path} reported an unsuccessful search")

    records = to_provider_records(extract_items(payload))
    logger.info("Parsed %s listings from %s", len(records), endpoint.path)
    return records
