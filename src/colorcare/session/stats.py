"""Overview statistics and trends across stored sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Sequence

import pandas as pd

from colorcare.core.models import SessionRecord

TREND_WINDOW_DAYS = 30
TREND_MAX_SESSIONS = 20
RECENT_SESSIONS = 10


@dataclass(frozen=True)
class SessionStats:
    """Aggregate view of stored sessions.

    Averages are None when no session recorded that value. Trend series
    are oldest first; ``activity_by_date`` is sorted by date.
    """

    total_sessions: int
    total_images: int
    average_neglect_ratio: float | None
    average_tremor_index: float | None
    average_completion_time: float | None
    recent_sessions: list[SessionRecord] = field(default_factory=list)
    activity_by_date: list[dict[str, Any]] = field(default_factory=list)
    neglect_ratio_trend: list[dict[str, Any]] = field(default_factory=list)
    tremor_index_trend: list[dict[str, Any]] = field(default_factory=list)
    quadrant_trend: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalSessions": self.total_sessions,
            "totalImages": self.total_images,
            "averageNeglectRatio": self.average_neglect_ratio,
            "averageTremorIndex": self.average_tremor_index,
            "averageCompletionTime": self.average_completion_time,
            "trends": {
                "neglectRatio": self.neglect_ratio_trend,
                "tremorIndex": self.tremor_index_trend,
                "activityByDate": self.activity_by_date,
                "quadrantActivity": self.quadrant_trend,
            },
        }


def _mean_or_none(series: pd.Series) -> float | None:
    values = series.dropna()
    return float(values.mean()) if len(values) else None


def _value_trend(frame: pd.DataFrame, column: str) -> list[dict[str, Any]]:
    rows = frame[frame[column].notna()]
    return [
        {"date": d, "value": float(v)}
        for d, v in zip(rows["date"], rows[column])
    ][::-1]


def summarize_sessions(
    sessions: Sequence[SessionRecord],
    total_images: int,
    now: datetime | None = None,
) -> SessionStats:
    """Compute totals, averages and 30-day trends.

    Args:
        sessions: Stored sessions, newest first (as returned by the store).
        total_images: Number of images in the gallery.
        now: Naive UTC reference time for the trend window (timestamps are
            stored in UTC). Defaults to the current time.

    Returns:
        SessionStats summarizing the sessions.
    """
    if not sessions:
        return SessionStats(
            total_sessions=0,
            total_images=total_images,
            average_neglect_ratio=None,
            average_tremor_index=None,
            average_completion_time=None,
        )

    frame = pd.DataFrame({
        "created_at": pd.to_datetime([s.created_at for s in sessions]),
        "neglect_ratio": pd.Series([s.neglect_ratio for s in sessions], dtype="float64"),
        "tremor_index": pd.Series([s.tremor_index for s in sessions], dtype="float64"),
        "completion_time": pd.Series([s.completion_time for s in sessions], dtype="float64"),
        "quadrant_data": [s.quadrant_data for s in sessions],
    })
    frame["date"] = frame["created_at"].dt.strftime("%Y-%m-%d")

    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    recent = frame[frame["created_at"] >= pd.Timestamp(now - timedelta(days=TREND_WINDOW_DAYS))]

    activity = recent.groupby("date").size().sort_index()
    latest = recent.head(TREND_MAX_SESSIONS)

    quadrants = latest[latest["quadrant_data"].notna()]
    quadrant_trend = [
        {
            "date": d,
            "topLeft": q.get("topLeft", 0),
            "topRight": q.get("topRight", 0),
            "bottomLeft": q.get("bottomLeft", 0),
            "bottomRight": q.get("bottomRight", 0),
        }
        for d, q in zip(quadrants["date"], quadrants["quadrant_data"])
    ][::-1]

    return SessionStats(
        total_sessions=len(frame),
        total_images=total_images,
        average_neglect_ratio=_mean_or_none(frame["neglect_ratio"]),
        average_tremor_index=_mean_or_none(frame["tremor_index"]),
        average_completion_time=_mean_or_none(frame["completion_time"]),
        recent_sessions=list(sessions[:RECENT_SESSIONS]),
        activity_by_date=[{"date": d, "count": int(c)} for d, c in activity.items()],
        neglect_ratio_trend=_value_trend(latest, "neglect_ratio"),
        tremor_index_trend=_value_trend(latest, "tremor_index"),
        quadrant_trend=quadrant_trend,
    )
