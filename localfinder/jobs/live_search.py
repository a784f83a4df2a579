"""Wire a classified route to the live search source the composer should call."""

import asyncio
import logging
from typing import List, Optional, Tuple

from localfinder.core.catalog import static_entries_for
from localfinder.core.classifier import Classification, classify_domain
from localfinder.core.composer import LiveFetch, ResultsComposer, ResultsView
from localfinder.core.config import Settings, get_settings
from localfinder.core.taxonomy import Domain
from localfinder.etl.transform import from_places_result
from localfinder.models import Coordinate, ProviderRecord
from localfinder.vendors import google_places, nearby_api

logger = logging.getLogger(__name__)


def _search_places(classification: Classification, settings: Settings, origin: Coordinate, radius_km: float) -> List[ProviderRecord]:
    keyword = classification.route_slug.replace("-", " ") or None
    payload = google_places.nearby_search(
        latitude=origin.latitude,
        longitude=origin.longitude,
        radius_m=int(radius_km * 1000),
        api_key=settings.google_api_key,
        keyword=keyword,
        timeout=settings.request_timeout,
    )
    records = []
    for result in payload.get("results", []):
        record = from_places_result(result)
        if record is not None:
            records.append(record)
    logger.info("Places nearby search returned %d results for keyword=%s", len(records), keyword)
    return records


def _search_backend(classification: Classification, settings: Settings, origin: Coordinate, radius_km: float) -> List[ProviderRecord]:
    return nearby_api.search_nearby(
        classification.domain,
        origin,
        radius_km,
        base_url=settings.api_base_url,
        subcategory=classification.route_slug or None,
        timeout=settings.request_timeout,
    )


def live_fetch_for(classification: Classification, settings: Optional[Settings] = None) -> LiveFetch:
    """Return an async ``(origin, radius_km) -> records`` callable for the route.

    Place-generic routes search Google Places; every other domain calls its
    backend endpoint. The blocking HTTP call runs in a worker thread so the
    event loop is never blocked.
    """
    settings = settings or get_settings()
    search = _search_places if classification.domain is Domain.PLACE_GENERIC else _search_backend

    async def fetch(origin: Coordinate, radius_km: float) -> List[ProviderRecord]:
        return await asyncio.to_thread(search, classification, settings, origin, radius_km)

    return fetch


async def resolve_nearby(
    label: str,
    coordinate: Optional[Coordinate],
    radius_km: Optional[float] = None,
    settings: Optional[Settings] = None,
) -> Tuple[Classification, ResultsView]:
    """Classify ``label`` and run one screen visit to its final view.

    Without a coordinate the screen ends in LOCATION_DENIED and only the static
    section is populated.
    """
    settings = settings or get_settings()
    radius_km = settings.default_radius_km if radius_km is None else radius_km
    classification = classify_domain(label)
    composer = ResultsComposer(
        static_entries_for(classification),
        live_fetch_for(classification, settings),
        radius_km,
        presets=settings.radius_presets_km,
    )
    try:
        if coordinate is None:
            composer.deny_location("Location was not provided.")
        else:
            await composer.set_location(coordinate)
        return classification, composer.view
    finally:
        composer.close()
