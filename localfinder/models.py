"""Core data models shared by the classification and nearby-results engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")


@dataclass(frozen=True, slots=True)
class ProviderRecord:
    """Normalized snapshot of a listing from the static catalog or a live search."""

    name: str
    id: Optional[str] = None
    address: Optional[str] = None
    coordinate: Optional[Coordinate] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    is_open: Optional[bool] = None
    phones: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    source: str = "live"
    raw_snapshot: Optional[Dict[str, Any]] = field(default=None, repr=False, compare=False, hash=False)
