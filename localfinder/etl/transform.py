"""Utilities for transforming backend and Google Places payloads into ProviderRecords."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from localfinder.models import Coordinate, ProviderRecord

logger = logging.getLogger(__name__)

_NAME_KEYS = ("name", "businessName", "hospitalName", "hotelName", "title", "shopName")
_IGNORE_TYPES = {"point_of_interest", "establishment", "political", "premise"}
_OPEN_STATUSES = {"active", "open", "true", "1", "yes"}
_CLOSED_STATUSES = {"inactive", "closed", "false", "0", "no"}


def extract_items(payload: Any) -> List[Dict[str, Any]]:
    """The nearby endpoints wrap their arrays inconsistently; accept all known envelopes."""
    if isinstance(payload, list):
        items = payload
    elif isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, list):
            items = data
        elif isinstance(payload.get("result"), list):
            items = payload["result"]
        elif isinstance(data, dict) and isinstance(data.get("data"), list):
            items = data["data"]
        elif isinstance(data, dict):
            items = [data]
        else:
            items = []
    else:
        items = []
    return [item for item in items if isinstance(item, dict)]


def to_provider_record(raw: Dict[str, Any], source: str = "live") -> Optional[ProviderRecord]:
    """Build a ProviderRecord from a backend listing; None when it has no usable name."""
    name = _first_text(raw, _NAME_KEYS)
    if not name:
        logger.debug("Skipping listing without a name: %s", str(raw)[:200])
        return None

    address = _strip_or_none(raw.get("address")) or _join_address(raw.get("area"), raw.get("city"), raw.get("state"))
    coordinate = _coordinate(raw.get("latitude"), raw.get("longitude"))
    if coordinate is None and isinstance(raw.get("location"), dict):
        coordinate = _coordinate(raw["location"].get("latitude"), raw["location"].get("longitude"))

    return ProviderRecord(
        id=_strip_or_none(raw.get("_id") or raw.get("id")),
        name=name,
        address=address,
        coordinate=coordinate,
        rating=_safe_float(raw.get("rating")),
        review_count=_safe_int(raw.get("reviewCount") or raw.get("user_ratings_total") or raw.get("reviews")),
        is_open=_open_flag(raw.get("status")),
        phones=_text_tuple(raw.get("phone"), raw.get("alternatePhone"), raw.get("phones")),
        tags=_tags(raw.get("services")) + _tags(raw.get("tags")),
        source=source,
        raw_snapshot=raw,
    )


def from_places_result(result: Dict[str, Any]) -> Optional[ProviderRecord]:
    """Build a ProviderRecord from a Google Places Nearby Search result."""
    name = _strip_or_none(result.get("name"))
    if not name:
        return None

    location = (result.get("geometry") or {}).get("location") or {}
    opening_hours = result.get("opening_hours") or {}
    open_now = opening_hours.get("open_now")

    return ProviderRecord(
        id=_strip_or_none(result.get("place_id")),
        name=name,
        address=_strip_or_none(result.get("vicinity") or result.get("formatted_address")),
        coordinate=_coordinate(location.get("lat"), location.get("lng")),
        rating=_safe_float(result.get("rating")),
        review_count=_safe_int(result.get("user_ratings_total")),
        is_open=open_now if isinstance(open_now, bool) else None,
        phones=_text_tuple(result.get("formatted_phone_number")),
        tags=tuple(t for t in result.get("types", []) if t not in _IGNORE_TYPES),
        source="live",
        raw_snapshot=result,
    )


def to_provider_records(items: Iterable[Dict[str, Any]], source: str = "live") -> List[ProviderRecord]:
    records = []
    for raw in items:
        record = to_provider_record(raw, source=source)
        if record is not None:
            records.append(record)
    return records


def _first_text(raw: Dict[str, Any], keys: Iterable[str]) -> Optional[str]:
    for key in keys:
        value = _strip_or_none(raw.get(key))
        if value:
            return value
    return None


def _join_address(*parts: Any) -> Optional[str]:
    cleaned = [p for p in (_strip_or_none(part) for part in parts) if p]
    return ", ".join(cleaned) or None


def _coordinate(latitude: Any, longitude: Any) -> Optional[Coordinate]:
    lat = _safe_float(latitude)
    lon = _safe_float(longitude)
    if lat is None or lon is None:
        return None
    try:
        return Coordinate(lat, lon)
    except ValueError:
        logger.debug("Discarding out-of-range coordinate %s,%s", lat, lon)
        return None


def _open_flag(status: Any) -> Optional[bool]:
    if isinstance(status, bool):
        return status
    if isinstance(status, str):
        lowered = status.strip().lower()
        if lowered in _OPEN_STATUSES:
            return True
        if lowered in _CLOSED_STATUSES:
            return False
    return None


def _tags(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(t for t in (_strip_or_none(item) for item in value) if t)


def _text_tuple(*values: Any) -> Tuple[str, ...]:
    collected: List[str] = []
    for value in values:
        if isinstance(value, (list, tuple)):
            collected.extend(v for v in (_strip_or_none(item) for item in value) if v)
        else:
            text = _strip_or_none(value)
            if text:
                collected.append(text)
    return tuple(dict.fromkeys(collected))


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value_str = str(value).strip()
    return value_str or None


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None or value == "":
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, (int, float)):
        try:
            return int(value)
        except (ValueError, OverflowError):
            return None

    if isinstance(value, str):
        digits = "".join(ch for ch in value if ch.isdigit())
        if digits:
            try:
                return int(digits)
            except ValueError:
                return None
    return None
