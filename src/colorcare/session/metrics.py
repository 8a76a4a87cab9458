"""Session metrics: spatial neglect, quadrant activity, tremor, timing.

Every metric is a pure function of an event sequence. ``compute_metrics``
recomputes all of them from a snapshot of the full log on each call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence

import numpy as np

from colorcare.core.exceptions import SessionStateError
from colorcare.session.events import COMMITTED_KINDS, EventKind, PointerEvent, Session

DEFAULT_TREMOR_THRESHOLD_PX = 3.0

# Reported when nothing was classified: "no data", not "balanced data".
EMPTY_QUADRANT_PERCENT = 25.0
EMPTY_NEGLECT_RATIO = 0.5

_QUADRANT_KEYS = ("topLeft", "topRight", "bottomLeft", "bottomRight")


@dataclass(frozen=True)
class MetricsConfig:
    """Tunable parameters for the metrics engine."""

    tremor_threshold_px: float = DEFAULT_TREMOR_THRESHOLD_PX

    def __post_init__(self) -> None:
        if self.tremor_threshold_px <= 0:
            raise ValueError(
                f"tremor_threshold_px must be > 0, got {self.tremor_threshold_px}"
            )


@dataclass(frozen=True)
class QuadrantCounts:
    """Raw classified-event counts per canvas quadrant."""

    top_left: int = 0
    top_right: int = 0
    bottom_left: int = 0
    bottom_right: int = 0

    @property
    def total(self) -> int:
        return self.top_left + self.top_right + self.bottom_left + self.bottom_right

    @property
    def left(self) -> int:
        return self.top_left + self.bottom_left


@dataclass(frozen=True)
class QuadrantActivity:
    """Percentage of classified events per quadrant (sums to 100)."""

    top_left: float
    top_right: float
    bottom_left: float
    bottom_right: float

    def to_dict(self) -> dict[str, float]:
        return dict(zip(_QUADRANT_KEYS, (
            self.top_left, self.top_right, self.bottom_left, self.bottom_right,
        )))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> QuadrantActivity:
        values = [_require_number(data, key) for key in _QUADRANT_KEYS]
        return cls(*values)


@dataclass(frozen=True)
class SessionMetrics:
    """Read-only snapshot of the derived session signals.

    Attributes:
        neglect_ratio: Share of classified events in the left half, in [0, 1].
        quadrant_activity: Percent distribution across the four quadrants.
        tremor_score: Share of consecutive move pairs that were micro-movements.
        total_time_seconds: Elapsed time since session start, idle gaps included.
        nudge_count: Number of idle nudges in the log.
    """

    neglect_ratio: float
    quadrant_activity: QuadrantActivity
    tremor_score: float
    total_time_seconds: float
    nudge_count: int

    def to_dict(self) -> dict[str, Any]:
        """JSON egress shape consumed by the report and storage layers."""
        return {
            "neglectRatio": self.neglect_ratio,
            "quadrantActivity": self.quadrant_activity.to_dict(),
            "tremorScore": self.tremor_score,
            "totalTimeSeconds": self.total_time_seconds,
            "nudgeCount": self.nudge_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionMetrics:
        """Validate and parse a metrics payload.

        Raises:
            ValueError: If a field is missing or not numeric.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Metrics payload must be a mapping, got {type(data).__name__}")
        quadrants = data.get("quadrantActivity")
        if not isinstance(quadrants, dict):
            raise ValueError("Invalid metrics: 'quadrantActivity' must be a mapping")
        nudge_count = _require_number(data, "nudgeCount")
        if nudge_count < 0 or nudge_count != int(nudge_count):
            raise ValueError("Invalid metrics: 'nudgeCount' must be a non-negative integer")
        return cls(
            neglect_ratio=_require_number(data, "neglectRatio"),
            quadrant_activity=QuadrantActivity.from_dict(quadrants),
            tremor_score=_require_number(data, "tremorScore"),
            total_time_seconds=_require_number(data, "totalTimeSeconds"),
            nudge_count=int(nudge_count),
        )


def _require_number(data: dict[str, Any], key: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Invalid metrics: {key!r} must be a number, got {value!r}")
    return float(value)


# --- Individual metrics ---


def count_quadrants(
    events: Iterable[PointerEvent], width: float, height: float,
) -> QuadrantCounts:
    """Classify committed, positioned events into canvas quadrants.

    ``x < width/2`` is left, ``y < height/2`` is top; ties go right/bottom.
    Move and nudge events are ignored.
    """
    mid_x = width / 2
    mid_y = height / 2
    counts = [0, 0, 0, 0]  # TL, TR, BL, BR
    for e in events:
        if e.kind not in COMMITTED_KINDS or e.x is None or e.y is None:
            continue
        right = e.x >= mid_x
        bottom = e.y >= mid_y
        counts[2 * bottom + right] += 1
    return QuadrantCounts(*counts)


def quadrant_activity(counts: QuadrantCounts) -> QuadrantActivity:
    """Convert counts to percentages; 25/25/25/25 when nothing was classified."""
    total = counts.total
    if total == 0:
        return QuadrantActivity(*(EMPTY_QUADRANT_PERCENT,) * 4)
    return QuadrantActivity(
        top_left=counts.top_left / total * 100,
        top_right=counts.top_right / total * 100,
        bottom_left=counts.bottom_left / total * 100,
        bottom_right=counts.bottom_right / total * 100,
    )


def neglect_ratio(counts: QuadrantCounts) -> float:
    """Left-half share of classified events; exactly 0.5 with no data."""
    total = counts.total
    if total == 0:
        return EMPTY_NEGLECT_RATIO
    return counts.left / total


def tremor_score(
    events: Iterable[PointerEvent],
    threshold_px: float = DEFAULT_TREMOR_THRESHOLD_PX,
) -> float:
    """Fraction of consecutive move pairs that moved more than 0 but under ``threshold_px``.

    Zero-length steps are duplicate samples, not jitter, and are not counted
    as ticks (they still count as pairs). Fewer than two moves scores 0.
    """
    coords = [(e.x, e.y) for e in events if e.kind is EventKind.MOVE and e.x is not None]
    if len(coords) < 2:
        return 0.0
    steps = np.diff(np.asarray(coords, dtype=np.float64), axis=0)
    distances = np.hypot(steps[:, 0], steps[:, 1])
    ticks = int(np.count_nonzero((distances > 0) & (distances < threshold_px)))
    return ticks / len(distances)


def nudge_count(events: Iterable[PointerEvent]) -> int:
    """Number of idle nudges in the log."""
    return sum(1 for e in events if e.kind is EventKind.NUDGE)


def elapsed_seconds(start_time_ms: float, now_ms: float) -> float:
    """Seconds between session start and ``now_ms``."""
    return (now_ms - start_time_ms) / 1000.0


# --- Aggregate ---


def compute_metrics_from_events(
    events: Sequence[PointerEvent],
    canvas_width: float,
    canvas_height: float,
    start_time_ms: float,
    now_ms: float,
    config: MetricsConfig | None = None,
) -> SessionMetrics:
    """Derive SessionMetrics from an explicit event sequence and canvas size."""
    config = config or MetricsConfig()
    counts = count_quadrants(events, canvas_width, canvas_height)
    return SessionMetrics(
        neglect_ratio=neglect_ratio(counts),
        quadrant_activity=quadrant_activity(counts),
        tremor_score=tremor_score(events, config.tremor_threshold_px),
        total_time_seconds=elapsed_seconds(start_time_ms, now_ms),
        nudge_count=nudge_count(events),
    )


def compute_metrics(
    session: Session,
    now_ms: float | None = None,
    config: MetricsConfig | None = None,
) -> SessionMetrics:
    """Compute metrics from the session's full event log.

    Safe to call repeatedly while the log grows; each call works on a
    snapshot taken at entry.

    Args:
        session: The session to analyze.
        now_ms: End of the timing window. Defaults to the session clock.
        config: Metric tunables. Uses defaults if not provided.

    Raises:
        SessionStateError: If the session has no start time.
    """
    if session.start_time_ms is None:
        raise SessionStateError("Cannot compute metrics for a session with no start time")
    events = session.events.snapshot()
    end = session.clock() if now_ms is None else now_ms
    return compute_metrics_from_events(
        events,
        session.canvas_width,
        session.canvas_height,
        session.start_time_ms,
        end,
        config,
    )
