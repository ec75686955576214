"""
Device location provider.

Wraps an OS-level location service that pushes typed events. The provider
keeps the last known fix, republishes events to subscribers, and lets the
orchestrator wait a bounded time for a fresh fix.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from coffee_finder.models.search import AuthorizationState, Coordinate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthorizationChanged:
    state: AuthorizationState


@dataclass(frozen=True)
class FixReceived:
    coordinate: Coordinate


@dataclass(frozen=True)
class FixFailed:
    reason: str


LocationEvent = Union[AuthorizationChanged, FixReceived, FixFailed]
LocationListener = Callable[[LocationEvent], None]


class LocationService(ABC):
    """OS location service. Results come back as events, never return values."""

    @abstractmethod
    def attach(self, handler: LocationListener) -> None:
        """Register the sink that receives this service's events."""
        ...

    @abstractmethod
    def request_one_time_fix(self) -> None:
        ...

    @abstractmethod
    def request_authorization(self) -> None:
        ...

    @abstractmethod
    def authorization_state(self) -> AuthorizationState:
        ...


class PushLocationService(LocationService):
    """
    Location service fed from outside, e.g. a client posting fixes over HTTP.

    Requests are only counted; the client answers them by pushing events.
    """

    def __init__(self, initial_state: AuthorizationState = AuthorizationState.NOT_DETERMINED):
        self._handler: Optional[LocationListener] = None
        self._state = initial_state
        self.pending_fix_requests = 0
        self.authorization_requests = 0

    def attach(self, handler: LocationListener) -> None:
        self._handler = handler

    def request_one_time_fix(self) -> None:
        self.pending_fix_requests += 1
        logger.debug(f"Fix requested ({self.pending_fix_requests} pending)")

    def request_authorization(self) -> None:
        self.authorization_requests += 1

    def authorization_state(self) -> AuthorizationState:
        return self._state

    def push(self, event: LocationEvent) -> None:
        if isinstance(event, AuthorizationChanged):
            self._state = event.state
        elif isinstance(event, (FixReceived, FixFailed)):
            self.pending_fix_requests = max(self.pending_fix_requests - 1, 0)
        if self._handler is not None:
            self._handler(event)


class LocationProvider:
    """Owns the last known device coordinate."""

    def __init__(self, service: Optional[LocationService] = None):
        self.service = service or PushLocationService()
        self._last_known: Optional[Coordinate] = None
        self._listeners: List[LocationListener] = []
        self._waiters: List[asyncio.Future] = []
        self.service.attach(self.handle_event)

    @property
    def authorization_state(self) -> AuthorizationState:
        return self.service.authorization_state()

    def current_location(self) -> Optional[Coordinate]:
        """Last known fix, or None when no fix has arrived yet."""
        return self._last_known

    def request_permission(self) -> None:
        if self.authorization_state == AuthorizationState.NOT_DETERMINED:
            self.service.request_authorization()

    def request_fresh_fix(self) -> None:
        self.service.request_one_time_fix()

    def subscribe(self, listener: LocationListener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def handle_event(self, event: LocationEvent) -> None:
        if isinstance(event, FixReceived):
            self._last_known = event.coordinate
            self._resolve_waiters(event.coordinate)
            logger.info(
                "Device fix received",
                extra={"latitude": event.coordinate.latitude, "longitude": event.coordinate.longitude},
            )
        elif isinstance(event, FixFailed):
            self._resolve_waiters(None)
            logger.warning(f"Device fix failed: {event.reason}")
        elif isinstance(event, AuthorizationChanged):
            logger.info(f"Location authorization changed to {event.state.value}")

        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Location listener raised")

    async def wait_for_fix(self, timeout: float, request: bool = False) -> Optional[Coordinate]:
        """
        Wait up to ``timeout`` seconds for the next fix.

        With ``request`` set, a one-time fix is requested after the waiter
        is registered, so a service that answers synchronously is still
        heard. Returns None on timeout or when the fix attempt fails.
        Timing out does not cancel the underlying request; a late fix
        still updates the last known coordinate.
        """
        loop = asyncio.get_running_loop()
        waiter = loop.create_future()
        self._waiters.append(waiter)
        try:
            if request:
                self.request_fresh_fix()
            return await asyncio.wait_for(waiter, timeout)
        except asyncio.TimeoutError:
            logger.info(f"No device fix within {timeout:.2f}s")
            return None
        finally:
            if waiter in self._waiters:
                self._waiters.remove(waiter)

    def _resolve_waiters(self, coordinate: Optional[Coordinate]) -> None:
        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(coordinate)
