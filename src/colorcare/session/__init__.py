"""ColorCare Session — event log, metrics, idle nudges and the session controller."""

from colorcare.session.controller import FinalizedSession, Mode, SessionController
from colorcare.session.events import EventKind, EventLog, PointerEvent, Session
from colorcare.session.metrics import (
    MetricsConfig,
    QuadrantActivity,
    SessionMetrics,
    compute_metrics,
    compute_metrics_from_events,
)
from colorcare.session.nudge import NudgeScheduler, SchedulerState
from colorcare.session.serialization import RecordedSession, load_session, save_session

__all__ = [
    "EventKind",
    "EventLog",
    "FinalizedSession",
    "MetricsConfig",
    "Mode",
    "NudgeScheduler",
    "PointerEvent",
    "QuadrantActivity",
    "RecordedSession",
    "SchedulerState",
    "Session",
    "SessionController",
    "SessionMetrics",
    "compute_metrics",
    "compute_metrics_from_events",
    "load_session",
    "save_session",
]
