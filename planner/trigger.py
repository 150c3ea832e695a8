"""
Purpose: Debounced route recomputation (the trigger policy).
What it does:
Turns a stream of waypoint-list mutations into route resolutions:

IDLE -> PENDING -> RESOLVING -> (IDLE | PENDING)

- a mutation while IDLE opens a debounce window
- a mutation while PENDING cancels the running timer and opens a new window
- on expiry the *current* waypoints are read and resolved
- a mutation while RESOLVING lets the in-flight result through, then opens
  a fresh window so the latest list is always resolved eventually
- fewer than 2 waypoints delivers None without calling the resolver

Last mutation wins: intermediate lists are not guaranteed their own route.
"""

from __future__ import annotations

from enum import Enum
import logging
import threading
from typing import Callable, List, Optional, Sequence

from routing.models import RouteResult

logger = logging.getLogger(__name__)


class TriggerState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    RESOLVING = "resolving"


class RouteTrigger:
    """
    Coalesces rapid mutations into one resolution at a time.

    Collaborators are injected:
    - resolve(waypoints) -> RouteResult | None   (e.g. RouteService.resolve_route)
    - waypoints_provider() -> current ordered waypoints/coordinates
    - on_result(result)   -> consumer callback, receives None for "no route"
    - timer_factory(interval, function, args=...) -> object with start()/cancel()
      (threading.Timer by default)
    """
    def __init__(
        self,
        resolve: Callable[[Sequence], Optional[RouteResult]],
        waypoints_provider: Callable[[], Sequence],
        on_result: Optional[Callable[[Optional[RouteResult]], None]] = None,
        debounce_seconds: float = 0.5,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        if debounce_seconds < 0:
            raise ValueError("debounce_seconds must be >= 0")

        self.resolve = resolve
        self.waypoints_provider = waypoints_provider
        self.on_result = on_result
        self.debounce_seconds = debounce_seconds
        self.timer_factory = timer_factory

        self._lock = threading.Lock()
        self._state = TriggerState.IDLE
        self._timer = None
        # bumped on every new window; a timer only fires for its own generation
        self._generation = 0
        # a mutation arrived while RESOLVING
        self._dirty = False
        self._last_result: Optional[RouteResult] = None

    @property
    def state(self) -> TriggerState:
        return self._state

    @property
    def last_result(self) -> Optional[RouteResult]:
        return self._last_result

    # --- Public API ---

    def notify(self) -> None:
        """
        Report a waypoint-list mutation.
        """
        with self._lock:
            if self._state == TriggerState.RESOLVING:
                self._dirty = True
                return
            self._open_window()

    def flush(self) -> bool:
        """
        Expire the pending window now, on the calling thread.
        Returns False when nothing was pending.
        """
        with self._lock:
            if self._state != TriggerState.PENDING:
                return False
            self._cancel_timer()
            generation = self._generation
        self._fire(generation)
        return True

    def cancel(self) -> None:
        """
        Drop a pending window without resolving. An in-flight resolution
        still completes and is delivered.
        """
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            if self._state == TriggerState.PENDING:
                self._state = TriggerState.IDLE

    # --- Internals (called with the lock held unless noted) ---

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _open_window(self) -> None:
        # the superseded timer is cancelled before the next one exists
        self._cancel_timer()
        self._generation += 1
        timer = self.timer_factory(self.debounce_seconds, self._fire, args=(self._generation,))
        timer.daemon = True
        self._timer = timer
        self._state = TriggerState.PENDING
        timer.start()

    def _fire(self, generation: int) -> None:
        # runs on the timer thread (or the flush caller), lock not held
        with self._lock:
            if self._state != TriggerState.PENDING or generation != self._generation:
                return
            self._timer = None
            waypoints: List = list(self.waypoints_provider())

            if len(waypoints) < 2:
                self._state = TriggerState.IDLE
                self._last_result = None
                short_circuit = True
            else:
                self._state = TriggerState.RESOLVING
                self._dirty = False
                short_circuit = False

        if short_circuit:
            self._deliver(None)
            return

        try:
            logger.info(f"Resolving route through {len(waypoints)} waypoints")
            result = self.resolve(waypoints)
            with self._lock:
                self._last_result = result
            self._deliver(result)
        finally:
            with self._lock:
                if self._dirty:
                    self._dirty = False
                    self._open_window()
                else:
                    self._state = TriggerState.IDLE

    def _deliver(self, result: Optional[RouteResult]) -> None:
        if self.on_result is not None:
            self.on_result(result)
