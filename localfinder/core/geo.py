"""Great-circle distance, distance labels and radius filtering."""

import math
from typing import Iterable, List, Optional, Sequence

from localfinder.models import Coordinate, ProviderRecord

EARTH_RADIUS_KM = 6371.0


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance between two coordinates in kilometers."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Floating point can push h a hair outside [0, 1] for antipodal points.
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def format_distance(km: float) -> str:
    """``"350 m"`` below one kilometer, ``"1.2 km"`` otherwise."""
    if not math.isfinite(km) or km < 0:
        raise ValueError(f"distance must be a finite, non-negative number, got {km!r}")
    if km < 1:
        return f"{round(km * 1000)} m"
    return f"{km:.1f} km"


def record_distance(origin: Coordinate, record: ProviderRecord) -> Optional[float]:
    if record.coordinate is None:
        return None
    return distance_km(origin, record.coordinate)


def validate_radius(radius_km: float, presets: Sequence[float]) -> float:
    if radius_km not in presets:
        allowed = ", ".join(f"{value:g}" for value in presets)
        raise ValueError(f"radius must be one of {allowed} km, got {radius_km:g}")
    return float(radius_km)


def within_radius(
    origin: Coordinate,
    records: Iterable[ProviderRecord],
    radius_km: float,
    include_unlocated: bool = False,
) -> List[ProviderRecord]:
    """Keep records no farther than ``radius_km`` from ``origin``, in input order."""
    kept: List[ProviderRecord] = []
    for record in records:
        distance = record_distance(origin, record)
        if distance is None:
            if include_unlocated:
                kept.append(record)
            continue
        if distance <= radius_km:
            kept.append(record)
    return kept


def rank_by_distance(
    origin: Coordinate,
    records: Iterable[ProviderRecord],
    include_unlocated: bool = False,
) -> List[ProviderRecord]:
    """Sort located records nearest first; unlocated ones trail unranked when kept."""
    located = []
    unlocated = []
    for record in records:
        distance = record_distance(origin, record)
        if distance is None:
            unlocated.append(record)
        else:
            located.append((distance, record))

    located.sort(key=lambda item: item[0])
    ranked = [record for _, record in located]
    if include_unlocated:
        ranked.extend(unlocated)
    return ranked
