"""NudgeScheduler — idle detection for a live care-mode session.

One scheduler owns at most one pending timer. Committed interactions
(fill, draw, erase) restart the countdown; when it expires a ``nudge``
event is logged and the countdown starts again.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable, Protocol

from colorcare.session.events import COMMITTED_KINDS, EventKind, PointerEvent, Session

logger = logging.getLogger(__name__)

DEFAULT_IDLE_SECONDS = 60.0


class TimerHandle(Protocol):
    """The subset of ``threading.Timer`` the scheduler relies on."""

    def start(self) -> None: ...

    def cancel(self) -> None: ...


# (interval_seconds, callback) -> unstarted timer; threading.Timer fits.
TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


def _daemon_timer(interval: float, function: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(interval, function)
    timer.daemon = True
    return timer


class SchedulerState(Enum):
    """Lifecycle state of a NudgeScheduler."""

    ARMED = "armed"
    IDLE = "idle"
    STOPPED = "stopped"


class NudgeScheduler:
    """Emit ``nudge`` events after a period without committed interaction.

    Args:
        session: Session whose log receives nudge events.
        interval_seconds: Idle time before a nudge fires.
        on_nudge: Optional callback invoked with each nudge event, outside
            the scheduler lock. Exceptions from it are logged.
        timer_factory: Builds timers; defaults to daemon ``threading.Timer``.
    """

    def __init__(
        self,
        session: Session,
        interval_seconds: float = DEFAULT_IDLE_SECONDS,
        on_nudge: Callable[[PointerEvent], None] | None = None,
        timer_factory: TimerFactory | None = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")
        self._session = session
        self._interval = interval_seconds
        self._on_nudge = on_nudge
        self._timer_factory = timer_factory or _daemon_timer
        self._lock = threading.Lock()
        self._timer: TimerHandle | None = None
        # Bumped on every arm/cancel so a superseded timer's callback is a no-op.
        self._generation = 0
        self._state = SchedulerState.STOPPED
        self._nudge_count = 0

    # --- Properties ---

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def nudge_count(self) -> int:
        """Nudges fired by this scheduler."""
        return self._nudge_count

    # --- Control ---

    def arm(self) -> None:
        """Cancel any pending timer and start a fresh countdown."""
        with self._lock:
            self._arm_locked()

    def cancel(self) -> None:
        """Cancel the pending timer without firing it."""
        with self._lock:
            self._cancel_locked()
            self._state = SchedulerState.STOPPED

    def close(self) -> None:
        """Tear down: cancel the timer. No nudges fire afterwards."""
        self.cancel()
        logger.debug("Nudge scheduler closed after %d nudge(s)", self._nudge_count)

    def on_activity(self, kind: EventKind) -> bool:
        """Restart the countdown for a committed interaction.

        Move and nudge events, and any activity while stopped, are ignored.

        Returns:
            True if the timer was re-armed.
        """
        if kind not in COMMITTED_KINDS:
            return False
        with self._lock:
            if self._state is SchedulerState.STOPPED:
                return False
            self._arm_locked()
        return True

    # --- Internals ---

    def _cancel_locked(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _arm_locked(self) -> None:
        self._cancel_locked()
        generation = self._generation
        timer = self._timer_factory(self._interval, lambda: self._fire(generation))
        self._timer = timer
        self._state = SchedulerState.ARMED
        timer.start()

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._state is not SchedulerState.ARMED:
                return
            self._state = SchedulerState.IDLE
            self._timer = None
            try:
                event = self._session.record(EventKind.NUDGE)
                self._nudge_count += 1
            except Exception as exc:
                # Timer thread: log and keep the countdown running.
                logger.warning("Could not log nudge event: %s", exc, exc_info=True)
                return
            finally:
                self._arm_locked()

        logger.info(
            "Idle for %.0fs, nudge #%d logged at %.0fms",
            self._interval, self._nudge_count, event.timestamp_ms,
        )
        if self._on_nudge is not None:
            try:
                self._on_nudge(event)
            except Exception as exc:
                logger.warning("Nudge callback failed: %s", exc, exc_info=True)

    def __repr__(self) -> str:
        return (
            f"NudgeScheduler(interval={self._interval}s, state={self._state.value}, "
            f"nudges={self._nudge_count})"
        )
