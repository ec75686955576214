"""
Search orchestrator.

Sequences origin resolution, places search and ranking for one search run,
and owns the state the presentation layer reads: status, status text,
ordered places, focused place, map region and the location alert.

Runs are tagged with a generation number. Starting a search or clearing
bumps the generation; a run may only publish while its generation is the
current one, so a superseded run's late result is dropped.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from coffee_finder.config.settings import SearchSettings, get_settings
from coffee_finder.core.exceptions import (
    EmptyResultNotice,
    GeocodeError,
    LocationUnavailableError,
    PlaceNotFoundError,
    SearchError,
)
from coffee_finder.core.metrics import record_outcome, record_search_latency, record_superseded
from coffee_finder.models.search import (
    Coordinate,
    FailureReason,
    MapRegion,
    OriginSource,
    RankedPlace,
    SearchOrigin,
    SearchRun,
    SearchState,
    SearchStatus,
)
from coffee_finder.services import status_text
from coffee_finder.services.geocoder import Geocoder
from coffee_finder.services.location_provider import (
    AuthorizationChanged,
    FixFailed,
    FixReceived,
    LocationEvent,
    LocationProvider,
)
from coffee_finder.services.navigation_launcher import NavigationLauncher, MapsUrlNavigationLauncher
from coffee_finder.services.places_client import PlacesSearchClient
from coffee_finder.services.ranking import rank

logger = logging.getLogger(__name__)

StateListener = Callable[[SearchState], None]


class SearchOrchestrator:
    """Runs ranked coffee searches and publishes their state."""

    def __init__(
        self,
        geocoder: Geocoder,
        location_provider: LocationProvider,
        places_client: PlacesSearchClient,
        launcher: Optional[NavigationLauncher] = None,
        config: Optional[SearchSettings] = None,
    ):
        self.geocoder = geocoder
        self.location_provider = location_provider
        self.places_client = places_client
        self.launcher = launcher or MapsUrlNavigationLauncher()
        self.config = config or get_settings().search

        self._lock = asyncio.Lock()
        self._generation = 0
        self._run: Optional[SearchRun] = None
        self._status = SearchStatus.idle()
        self._status_text: Optional[str] = None
        self._places: List[RankedPlace] = []
        self._focused: Optional[RankedPlace] = None
        self._region: Optional[MapRegion] = None
        self._alert_message: Optional[str] = None
        self._is_searching = False
        self._listeners: List[StateListener] = []

        self._unsubscribe_location = location_provider.subscribe(self._on_location_event)

    # ── Public: read side ─────────────────────────────────────────────────────

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def current_run(self) -> Optional[SearchRun]:
        return self._run

    def snapshot(self) -> SearchState:
        return SearchState(
            status=self._status,
            status_text=self._status_text,
            places=tuple(self._places),
            focused_place=self._focused,
            region=self._region,
            alert_message=self._alert_message,
            is_searching=self._is_searching,
            generation=self._generation,
        )

    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    # ── Public: actions ───────────────────────────────────────────────────────

    async def search(self, postal_code: Optional[str] = None) -> SearchState:
        """
        Run one search and return the state it published.

        A non-blank ``postal_code`` is geocoded; otherwise the device
        location is used, waiting briefly for a fresh fix if none is known.
        Failures end in a failed status; they are never raised, including
        unexpected errors from a backend.
        """
        async with self._lock:
            if self._run is not None and self._is_searching:
                record_superseded()
                logger.info(
                    "Superseding in-flight search run",
                    extra={"generation": self._run.generation},
                )
            self._generation += 1
            run = SearchRun(generation=self._generation, postal_code=postal_code)
            self._run = run
            self._is_searching = True

        with record_search_latency():
            try:
                await self._execute(run)
            except Exception as e:
                self._finish(run, SearchStatus.failed(FailureReason.SEARCH, "Unexpected error"))
                logger.error(
                    f"Search run crashed: {type(e).__name__}: {e}",
                    exc_info=True,
                    extra={"generation": run.generation},
                )

        return self.snapshot()

    def clear(self) -> SearchState:
        """Drop results and return to idle; any in-flight run is superseded."""
        self._generation += 1
        self._run = None
        self._places = []
        self._focused = None
        self._status = SearchStatus.idle()
        self._status_text = None
        self._is_searching = False
        logger.info("Search results cleared", extra={"generation": self._generation})
        self._notify()
        return self.snapshot()

    def focus(self, place_id: str) -> RankedPlace:
        """Select a place from the current results and recenter on it."""
        place = self._find_place(place_id)
        self._focused = place
        self._region = MapRegion(place.coordinate, self.config.span_meters)
        self._notify()
        return place

    def open_directions(self, place_id: str) -> Tuple[RankedPlace, str]:
        """Hand a place to the navigation launcher in driving mode; returns it with the link used."""
        place = self._find_place(place_id)
        url = self.launcher.launch(place.coordinate, place.name, mode="driving")
        return place, url

    def use_my_location(self) -> None:
        self._status_text = status_text.GETTING_LOCATION
        self.location_provider.request_fresh_fix()
        self._notify()

    def dismiss_alert(self) -> None:
        self._alert_message = None
        self._notify()

    def close(self) -> None:
        self._unsubscribe_location()
        self._listeners.clear()

    # ── Private: pipeline ─────────────────────────────────────────────────────

    async def _execute(self, run: SearchRun) -> None:
        try:
            origin = await self._resolve_origin(run)
        except GeocodeError as e:
            self._finish(run, SearchStatus.failed(FailureReason.GEOCODE, e.message))
            return
        except LocationUnavailableError as e:
            if self._finish(run, SearchStatus.failed(FailureReason.NO_ORIGIN, e.message)):
                self._alert_message = status_text.NO_ORIGIN_ALERT
                self._notify()
            return

        if not self._publish(run, origin=origin, region=MapRegion(origin.coordinate, self.config.span_meters)):
            return
        if not self._publish(run, status=SearchStatus.searching()):
            return

        try:
            candidates = await self.places_client.search(
                self.config.category, origin.coordinate, self.config.radius_miles
            )
        except SearchError as e:
            self._finish(run, SearchStatus.failed(FailureReason.SEARCH, e.message))
            return

        run.candidates = candidates
        reference = self._reference_point(origin)
        places = rank(
            candidates,
            reference,
            self.config.radius_miles,
            default_name=self.config.default_place_name,
        )
        run.places = places

        if not places:
            notice = EmptyResultNotice(self.config.radius_miles)
            logger.info(notice.message, extra={"generation": run.generation, "candidates": len(candidates)})
            self._finish(run, SearchStatus.empty(), places=[])
            return

        self._finish(run, SearchStatus.success(len(places)), places=places)

    async def _resolve_origin(self, run: SearchRun) -> SearchOrigin:
        postal_code = (run.postal_code or "").strip()
        if postal_code:
            self._publish(run, status=SearchStatus.resolving_origin(postal_code))
            coordinate = await self.geocoder.resolve(postal_code)
            return SearchOrigin(coordinate, OriginSource.POSTAL_CODE, postal_code)

        known = self.location_provider.current_location()
        if known is not None:
            return SearchOrigin(known, OriginSource.DEVICE_LOCATION)

        self._publish(run, status=SearchStatus.resolving_origin())
        fix = await self.location_provider.wait_for_fix(
            self.config.location_fix_timeout_seconds, request=True
        )
        if fix is None:
            # a fix may have landed outside the wait window
            fix = self.location_provider.current_location()
        if fix is None:
            raise LocationUnavailableError(
                "No postal code given and no device location available",
                details={"timeout_seconds": self.config.location_fix_timeout_seconds},
            )
        return SearchOrigin(fix, OriginSource.DEVICE_LOCATION)

    def _reference_point(self, origin: SearchOrigin) -> Coordinate:
        device = self.location_provider.current_location()
        if self.config.prefer_device_reference and device is not None:
            return device
        return origin.coordinate

    # ── Private: publishing ───────────────────────────────────────────────────

    def _is_current(self, run: SearchRun) -> bool:
        return run.generation == self._generation

    def _publish(
        self,
        run: SearchRun,
        status: Optional[SearchStatus] = None,
        origin: Optional[SearchOrigin] = None,
        region: Optional[MapRegion] = None,
    ) -> bool:
        if not self._is_current(run):
            logger.info(
                "Discarding update from superseded run",
                extra={"generation": run.generation, "current_generation": self._generation},
            )
            return False

        if origin is not None:
            run.origin = origin
        if region is not None:
            self._region = region
        if status is not None:
            run.status = status
            self._status = status
            self._status_text = status_text.describe(status, self.config.radius_miles)
            logger.info(
                f"Search status: {status.kind.value}",
                extra={"generation": run.generation, "status": status.kind.value},
            )
        self._notify()
        return True

    def _finish(
        self,
        run: SearchRun,
        status: SearchStatus,
        places: Optional[List[RankedPlace]] = None,
    ) -> bool:
        if not self._is_current(run):
            logger.info(
                "Discarding result from superseded run",
                extra={"generation": run.generation, "current_generation": self._generation},
            )
            return False

        if places is not None:
            self._places = list(places)
            self._focused = self._places[0] if self._places else None
        self._is_searching = False
        record_outcome(status.kind.value)
        elapsed = datetime.now(timezone.utc) - run.started_at
        logger.info(
            "Search run finished",
            extra={
                "generation": run.generation,
                "status": status.kind.value,
                "places": len(self._places),
                "elapsed_ms": round(elapsed.total_seconds() * 1000, 1),
            },
        )
        return self._publish(run, status=status)

    def _notify(self) -> None:
        if not self._listeners:
            return
        state = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("State listener raised")

    def _find_place(self, place_id: str) -> RankedPlace:
        for place in self._places:
            if place.id == place_id:
                return place
        raise PlaceNotFoundError(place_id)

    # ── Private: location events ──────────────────────────────────────────────

    def _on_location_event(self, event: LocationEvent) -> None:
        if isinstance(event, AuthorizationChanged):
            self._status_text = status_text.authorization_advisory(event.state)
        elif isinstance(event, FixReceived):
            if self._region is None:
                self._region = MapRegion(event.coordinate, self.config.span_meters)
            self._status_text = status_text.LOCATION_UPDATED
        elif isinstance(event, FixFailed):
            self._alert_message = status_text.FIX_FAILED_ALERT
        self._notify()
