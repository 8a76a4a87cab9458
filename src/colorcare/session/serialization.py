"""JSON serialization for recorded sessions.

A session file is a JSON object::

    {
      "canvas": {"width": 800, "height": 600},
      "start_time": 0,
      "end_time": 95000,
      "events": [{"kind": "fill", "timestamp": 120.0, "x": 10, "y": 20}, ...]
    }

``end_time`` is optional; when present it fixes the completion-time window
so metrics computed from the file are reproducible.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from colorcare.session.events import PointerEvent, Session
from colorcare.session.metrics import MetricsConfig, SessionMetrics, compute_metrics


@dataclass(frozen=True)
class RecordedSession:
    """A session loaded from disk, plus its optional end timestamp."""

    session: Session
    end_time_ms: float | None = None

    @property
    def effective_end_ms(self) -> float | None:
        """``end_time_ms``, else the last event timestamp, else the start time."""
        if self.end_time_ms is not None:
            return self.end_time_ms
        events = self.session.events.snapshot()
        if events:
            return events[-1].timestamp_ms
        return self.session.start_time_ms

    def compute_metrics(self, config: MetricsConfig | None = None) -> SessionMetrics:
        """Metrics over the recorded window, independent of the wall clock.

        Raises:
            SessionStateError: If the recording has no start time.
        """
        return compute_metrics(self.session, now_ms=self.effective_end_ms, config=config)


def session_to_dict(session: Session, end_time_ms: float | None = None) -> dict[str, Any]:
    """Serialize a session (and its full event log) to a plain dict."""
    return {
        "canvas": {"width": session.canvas_width, "height": session.canvas_height},
        "start_time": session.start_time_ms,
        "end_time": end_time_ms,
        "events": [e.to_dict() for e in session.events.snapshot()],
    }


def session_from_dict(data: dict[str, Any]) -> RecordedSession:
    """Rebuild a session from ``session_to_dict`` output.

    Raises:
        ValueError: If the document is not a mapping, is missing required
            keys, or contains invalid or out-of-order events.
    """
    if not isinstance(data, dict):
        raise ValueError(
            f"Invalid session file: expected a mapping, got {type(data).__name__}"
        )
    for key in ("canvas", "start_time", "events"):
        if key not in data:
            raise ValueError(f"Invalid session file: missing required key '{key}'")

    canvas = data["canvas"]
    try:
        width = int(canvas["width"])
        height = int(canvas["height"])
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid session file: bad canvas {canvas!r}") from e

    start = data["start_time"]
    if start is None:
        session = Session.unstarted(width, height)
    else:
        session = Session(width, height, start_time_ms=float(start))

    if not isinstance(data["events"], list):
        raise ValueError("Invalid session file: 'events' must be a list")
    for raw in data["events"]:
        session.add(PointerEvent.from_dict(raw))

    end = data.get("end_time")
    return RecordedSession(session=session, end_time_ms=float(end) if end is not None else None)


def save_session(session: Session, path: Path, end_time_ms: float | None = None) -> None:
    """Write a session to a JSON file."""
    with open(path, "w") as f:
        json.dump(session_to_dict(session, end_time_ms), f, indent=2)


def load_session(path: Path) -> RecordedSession:
    """Read a session JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the JSON is invalid or malformed.
    """
    path = Path(path)
    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid session file {path}: {e}") from e
    return session_from_dict(data)
