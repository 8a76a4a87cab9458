"""Pointer events, the append-only event log, and the care-mode Session."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator

Clock = Callable[[], float]


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.monotonic() * 1000.0


class EventKind(Enum):
    """Kind of a recorded pointer interaction."""

    FILL = "fill"
    DRAW = "draw"
    ERASE = "erase"
    MOVE = "move"
    NUDGE = "nudge"


# Committed interactions: classified into quadrants and reset the idle timer.
COMMITTED_KINDS = frozenset({EventKind.FILL, EventKind.DRAW, EventKind.ERASE})


@dataclass(frozen=True)
class PointerEvent:
    """A single timestamped interaction in canvas pixel space.

    Attributes:
        kind: What happened.
        timestamp_ms: Monotonic time in milliseconds.
        x: Canvas x coordinate, or None when the event has no position.
        y: Canvas y coordinate, or None when the event has no position.
    """

    kind: EventKind
    timestamp_ms: float
    x: float | None = None
    y: float | None = None

    def __post_init__(self) -> None:
        """Validate kind and position at construction time."""
        if not isinstance(self.kind, EventKind):
            raise ValueError(f"kind must be an EventKind, got {self.kind!r}")
        if (self.x is None) != (self.y is None):
            raise ValueError("x and y must both be set or both be None")
        if self.kind is EventKind.NUDGE and self.x is not None:
            raise ValueError("nudge events carry no position")

    @property
    def has_position(self) -> bool:
        return self.x is not None

    @property
    def position(self) -> tuple[float, float] | None:
        if self.x is None or self.y is None:
            return None
        return self.x, self.y

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable form: kind, timestamp and optional x/y."""
        data: dict[str, Any] = {"kind": self.kind.value, "timestamp": self.timestamp_ms}
        if self.x is not None:
            data["x"] = self.x
            data["y"] = self.y
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PointerEvent:
        """Build an event from its ``to_dict`` form.

        Raises:
            ValueError: If the kind is unknown or fields are malformed.
        """
        try:
            kind = EventKind(data["kind"])
            timestamp = float(data["timestamp"])
        except KeyError as e:
            raise ValueError(f"Event is missing required key {e.args[0]!r}") from e
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid event {data!r}: {e}") from e
        x = data.get("x")
        y = data.get("y")
        return cls(
            kind=kind,
            timestamp_ms=timestamp,
            x=float(x) if x is not None else None,
            y=float(y) if y is not None else None,
        )


class EventLog:
    """Append-only, chronologically ordered sequence of PointerEvents.

    Safe to append from the input surface and the idle timer thread at the
    same time. Readers take a ``snapshot()``; events appended afterwards
    are not part of it.
    """

    def __init__(self) -> None:
        self._events: list[PointerEvent] = []
        self._lock = threading.Lock()

    def append(self, event: PointerEvent) -> None:
        """Append an already-stamped event.

        Raises:
            ValueError: If the event is older than the last appended one.
        """
        with self._lock:
            self._append_locked(event)

    def record(
        self,
        kind: EventKind,
        clock: Clock,
        x: float | None = None,
        y: float | None = None,
    ) -> PointerEvent:
        """Stamp an interaction with ``clock`` and append it atomically.

        The clock is read under the log lock, so events recorded from
        different threads are always stamped in append order.
        """
        with self._lock:
            event = PointerEvent(kind=kind, timestamp_ms=clock(), x=x, y=y)
            self._append_locked(event)
        return event

    def _append_locked(self, event: PointerEvent) -> None:
        if self._events and event.timestamp_ms < self._events[-1].timestamp_ms:
            raise ValueError(
                f"Event at {event.timestamp_ms}ms is earlier than the last "
                f"logged event at {self._events[-1].timestamp_ms}ms"
            )
        self._events.append(event)

    def snapshot(self) -> tuple[PointerEvent, ...]:
        """Immutable copy of the events logged so far."""
        with self._lock:
            return tuple(self._events)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def __iter__(self) -> Iterator[PointerEvent]:
        return iter(self.snapshot())


class Session:
    """A care-mode coloring session: canvas size, start time and event log.

    Args:
        canvas_width: Canvas width in pixels.
        canvas_height: Canvas height in pixels.
        start_time_ms: Session start on the ``clock`` timeline. Defaults
            to the clock's current reading.
        clock: Monotonic millisecond clock used to stamp recorded events.
        started: False for a recording with no start time; ``start_time_ms``
            is then None.
    """

    def __init__(
        self,
        canvas_width: int,
        canvas_height: int,
        start_time_ms: float | None = None,
        clock: Clock | None = None,
        started: bool = True,
    ) -> None:
        if canvas_width <= 0 or canvas_height <= 0:
            raise ValueError(
                f"Canvas dimensions must be positive, got {canvas_width}x{canvas_height}"
            )
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self.clock: Clock = clock or monotonic_ms
        self.start_time_ms: float | None = None
        if started:
            self.start_time_ms = self.clock() if start_time_ms is None else start_time_ms
        self.events = EventLog()

    @classmethod
    def unstarted(cls, canvas_width: int, canvas_height: int) -> Session:
        """A session with no recorded start time (metrics cannot be computed)."""
        return cls(canvas_width, canvas_height, started=False)

    def record(
        self,
        kind: EventKind,
        x: float | None = None,
        y: float | None = None,
    ) -> PointerEvent:
        """Stamp an interaction with the session clock and append it."""
        return self.events.record(kind, self.clock, x, y)

    def add(self, event: PointerEvent) -> None:
        """Append an already-stamped event."""
        self.events.append(event)

    def __repr__(self) -> str:
        return (
            f"Session({self.canvas_width}x{self.canvas_height}, "
            f"start={self.start_time_ms}, events={len(self.events)})"
        )
