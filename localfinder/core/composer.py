"""Compose a screen's results feed from the static catalog and a live nearby search.

The view has two independent slots. The static slot is filled synchronously
when the composer is created and is never reordered; the live slot follows the
location and fetch lifecycle::

    AWAITING_LOCATION -> FETCHING_LIVE -> LIVE_READY
                                       -> LIVE_FAILED
    AWAITING_LOCATION -> LOCATION_DENIED

Every fetch is tagged with a ticket. Changing the radius or the route, denying
the location or closing the screen bumps the generation, so results from an
older fetch are dropped when they arrive.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
)

from localfinder.core.config import get_settings
from localfinder.core.geo import format_distance, record_distance, validate_radius, within_radius
from localfinder.models import Coordinate, ProviderRecord

logger = logging.getLogger(__name__)

DEFAULT_LOCATION_BANNER = "Unable to retrieve your location."

LiveFetch = Callable[[Coordinate, float], Awaitable[Sequence[ProviderRecord]]]
Locate = Callable[[], Awaitable[Coordinate]]
Listener = Callable[["ResultsView"], None]


class LocationUnavailable(RuntimeError):
    """Raised by a location capability when the user's position cannot be read."""


class ResultsState(Enum):
    AWAITING_LOCATION = "awaiting_location"
    FETCHING_LIVE = "fetching_live"
    LIVE_READY = "live_ready"
    LIVE_FAILED = "live_failed"
    LOCATION_DENIED = "location_denied"
    CLOSED = "closed"


TERMINAL_STATES = frozenset(
    {ResultsState.LIVE_READY, ResultsState.LIVE_FAILED, ResultsState.LOCATION_DENIED, ResultsState.CLOSED}
)


@dataclass(frozen=True)
class ListingEntry:
    record: ProviderRecord
    distance_km: Optional[float] = None

    @property
    def distance_text(self) -> Optional[str]:
        if self.distance_km is None:
            return None
        return format_distance(self.distance_km)

    def to_dict(self) -> Dict[str, Any]:
        record = self.record
        coordinate = record.coordinate
        return {
            "id": record.id,
            "name": record.name,
            "address": record.address,
            "latitude": coordinate.latitude if coordinate else None,
            "longitude": coordinate.longitude if coordinate else None,
            "rating": record.rating,
            "review_count": record.review_count,
            "is_open": record.is_open,
            "phones": list(record.phones),
            "tags": list(record.tags),
            "source": record.source,
            "distance_km": self.distance_km,
            "distance_text": self.distance_text,
        }


@dataclass(frozen=True)
class Section:
    entries: Tuple[ListingEntry, ...] = ()
    loading: bool = False
    error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.entries and not self.loading and self.error is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entries": [entry.to_dict() for entry in self.entries],
            "loading": self.loading,
            "error": self.error,
        }


@dataclass(frozen=True)
class ResultsView:
    state: ResultsState
    static: Section
    live: Section
    radius_km: float
    location: Optional[Coordinate] = None
    banner: Optional[str] = None

    def entries(self) -> Iterator[ListingEntry]:
        """Static entries first, then live entries, each in their own order."""
        yield from self.static.entries
        yield from self.live.entries

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "radius_km": self.radius_km,
            "location": (
                {"latitude": self.location.latitude, "longitude": self.location.longitude}
                if self.location
                else None
            ),
            "banner": self.banner,
            "static": self.static.to_dict(),
            "live": self.live.to_dict(),
        }


@dataclass(frozen=True)
class _Ticket:
    screen_id: int
    generation: int


class ResultsComposer:
    """Owns the ResultsView of a single screen instance."""

    _screen_ids = itertools.count(1)

    def __init__(
        self,
        static_catalog: Iterable[ProviderRecord],
        live_fetch: LiveFetch,
        radius_km: float,
        *,
        presets: Optional[Sequence[float]] = None,
        include_unlocated: bool = True,
    ) -> None:
        self._presets = tuple(presets) if presets is not None else get_settings().radius_presets_km
        self._radius_km = validate_radius(radius_km, self._presets)
        self._static_records = tuple(static_catalog)
        self._live_fetch = live_fetch
        self._include_unlocated = include_unlocated
        self._screen_id = next(self._screen_ids)
        self._generation = 0
        self._location: Optional[Coordinate] = None
        self._state = ResultsState.AWAITING_LOCATION
        self._live = Section()
        self._banner: Optional[str] = None
        self._listeners: List[Listener] = []
        self._view = self._build_view()

    @property
    def view(self) -> ResultsView:
        return self._view

    @property
    def screen_id(self) -> int:
        return self._screen_id

    @property
    def closed(self) -> bool:
        return self._state is ResultsState.CLOSED

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def start(self, locate: Locate) -> ResultsView:
        """Acquire the user's location, then fetch live results."""
        if self.closed:
            return self._view
        try:
            coordinate = await locate()
        except LocationUnavailable as exc:
            self.deny_location(str(exc) or None)
            return self._view
        except Exception as exc:  # noqa: BLE001
            logger.warning("Location lookup failed for screen=%s: %s", self._screen_id, exc)
            self.deny_location()
            return self._view
        return await self.set_location(coordinate)

    async def set_location(self, coordinate: Coordinate) -> ResultsView:
        if self.closed:
            return self._view
        self._location = coordinate
        self._banner = None
        return await self.refresh()

    def deny_location(self, reason: Optional[str] = None) -> ResultsView:
        if self.closed:
            return self._view
        self._generation += 1
        self._location = None
        self._state = ResultsState.LOCATION_DENIED
        self._banner = reason or DEFAULT_LOCATION_BANNER
        self._live = Section()
        logger.info("Location unavailable for screen=%s: %s", self._screen_id, self._banner)
        self._publish()
        return self._view

    async def refresh(self) -> ResultsView:
        """Discard the live slot and fetch it again for the current radius and route."""
        if self.closed:
            return self._view
        if self._location is None:
            logger.debug("refresh() on screen=%s skipped: no location yet", self._screen_id)
            return self._view

        self._generation += 1
        ticket = _Ticket(self._screen_id, self._generation)
        origin = self._location
        radius_km = self._radius_km
        fetch = self._live_fetch

        self._state = ResultsState.FETCHING_LIVE
        self._live = Section(loading=True)
        self._publish()

        try:
            records = await fetch(origin, radius_km)
        except Exception as exc:  # noqa: BLE001
            if not self._is_current(ticket):
                logger.debug("Ignoring failure of stale fetch %s: %s", ticket, exc)
                return self._view
            logger.warning("Live fetch failed for screen=%s radius=%s: %s", self._screen_id, radius_km, exc)
            self._state = ResultsState.LIVE_FAILED
            self._live = Section(error=str(exc) or exc.__class__.__name__)
            self._publish()
            return self._view

        if not self._is_current(ticket):
            logger.info("Discarding stale live results for screen=%s generation=%s", ticket.screen_id, ticket.generation)
            return self._view

        kept = within_radius(origin, records or (), radius_km, include_unlocated=self._include_unlocated)
        logger.info("Live results for screen=%s: %d of %d within %g km", self._screen_id, len(kept), len(records or ()), radius_km)
        self._state = ResultsState.LIVE_READY
        self._live = Section(entries=self._entries(kept))
        self._publish()
        return self._view

    async def change_radius(self, radius_km: float) -> ResultsView:
        radius_km = validate_radius(radius_km, self._presets)
        if self.closed or radius_km == self._radius_km:
            return self._view
        self._radius_km = radius_km
        return await self._restart()

    async def change_route(self, static_catalog: Iterable[ProviderRecord], live_fetch: LiveFetch) -> ResultsView:
        if self.closed:
            return self._view
        self._static_records = tuple(static_catalog)
        self._live_fetch = live_fetch
        return await self._restart()

    def close(self) -> None:
        """Tear the screen down; results still in flight are dropped on arrival."""
        if self.closed:
            return
        self._generation += 1
        self._state = ResultsState.CLOSED
        self._live = Section()
        self._publish()
        self._listeners.clear()

    async def _restart(self) -> ResultsView:
        if self._location is not None:
            return await self.refresh()
        # No location yet: drop anything stale and wait for one.
        self._generation += 1
        self._live = Section()
        self._publish()
        return self._view

    def _is_current(self, ticket: _Ticket) -> bool:
        return not self.closed and ticket == _Ticket(self._screen_id, self._generation)

    def _entries(self, records: Iterable[ProviderRecord]) -> Tuple[ListingEntry, ...]:
        origin = self._location
        return tuple(
            ListingEntry(record, record_distance(origin, record) if origin is not None else None)
            for record in records
        )

    def _build_view(self) -> ResultsView:
        return ResultsView(
            state=self._state,
            static=Section(entries=self._entries(self._static_records)),
            live=self._live,
            radius_km=self._radius_km,
            location=self._location,
            banner=self._banner,
        )

    def _publish(self) -> None:
        self._view = self._build_view()
        for listener in list(self._listeners):
            listener(self._view)


async def compose_results(
    static_catalog: Iterable[ProviderRecord],
    live_fetch: LiveFetch,
    radius_km: float,
    locate: Locate,
    **options: Any,
) -> AsyncIterator[ResultsView]:
    """Yield each ResultsView of a fresh screen until it reaches a terminal state."""
    composer = ResultsComposer(static_catalog, live_fetch, radius_km, **options)
    queue: "asyncio.Queue[ResultsView]" = asyncio.Queue()
    composer.subscribe(queue.put_nowait)

    yield composer.view
    task = asyncio.create_task(composer.start(locate))
    try:
        while True:
            view = await queue.get()
            yield view
            if view.state in TERMINAL_STATES:
                break
        await task
    finally:
        if not task.done():
            composer.close()
            task.cancel()
