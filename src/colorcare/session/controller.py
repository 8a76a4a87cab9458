"""SessionController — ties canvas activity, metrics, nudges and storage together.

In fun mode interactions are not tracked. In care mode each loaded canvas
gets a fresh ``Session`` and an armed ``NudgeScheduler``; finalizing
computes metrics, asks the reporter for a caregiver summary and saves
the artwork (and the session record) to the gallery.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable

from colorcare.session.events import Clock, EventKind, PointerEvent, Session
from colorcare.session.metrics import SessionMetrics, compute_metrics
from colorcare.session.nudge import NudgeScheduler, TimerFactory

if TYPE_CHECKING:
    from colorcare.config import AppConfig
    from colorcare.core import GalleryStore
    from colorcare.report import ReportGenerator

logger = logging.getLogger(__name__)


class Mode(Enum):
    """Activity mode: untracked play or tracked care session."""

    FUN = "fun"
    CARE = "care"


@dataclass(frozen=True)
class FinalizedSession:
    """Outcome of ``SessionController.finalize``.

    ``metrics`` is None outside care mode. ``analysis`` is None when no
    reporter is configured or generation failed. The ids are None when
    nothing was stored.
    """

    metrics: SessionMetrics | None
    analysis: str | None
    image_id: str | None
    session_id: int | None


class SessionController:
    """Client-side flow for one canvas at a time.

    Args:
        store: Gallery that receives finalized artwork and sessions.
        reporter: Generates caregiver summaries and encouragement.
        config: Application config. Uses defaults if not provided.
        clock: Millisecond clock for new sessions.
        timer_factory: Timer factory passed to each NudgeScheduler.
        on_encouragement: Called with each encouragement message produced
            after a nudge.
    """

    def __init__(
        self,
        store: GalleryStore | None = None,
        reporter: ReportGenerator | None = None,
        config: AppConfig | None = None,
        clock: Clock | None = None,
        timer_factory: TimerFactory | None = None,
        on_encouragement: Callable[[str], None] | None = None,
    ) -> None:
        if config is None:
            from colorcare.config import AppConfig

            config = AppConfig()
        self._store = store
        self._reporter = reporter
        self._config = config
        self._clock = clock
        self._timer_factory = timer_factory
        self._on_encouragement = on_encouragement
        self._lock = threading.RLock()
        self._mode = Mode.FUN
        self._canvas: tuple[int, int] | None = None
        self._session: Session | None = None
        self._scheduler: NudgeScheduler | None = None
        self.last_encouragement: str | None = None

    # --- Properties ---

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def session(self) -> Session | None:
        """The live care session, if any."""
        return self._session

    @property
    def scheduler(self) -> NudgeScheduler | None:
        return self._scheduler

    # --- Lifecycle ---

    def switch_mode(self, mode: Mode) -> None:
        """Change mode, discarding any live session.

        Entering care mode with a canvas already loaded starts a new session.
        """
        with self._lock:
            self._teardown()
            self._mode = mode
            if mode is Mode.CARE and self._canvas is not None:
                self._start(*self._canvas)
        logger.debug("Switched to %s mode", mode.value)

    def load_template(self, width: int, height: int) -> None:
        """Load a new canvas. In care mode this starts a new session."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")
        with self._lock:
            self._teardown()
            self._canvas = (width, height)
            if self._mode is Mode.CARE:
                self._start(width, height)

    def close(self) -> None:
        """Stop any pending nudge timer."""
        with self._lock:
            self._teardown()

    def __enter__(self) -> SessionController:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # --- Interaction ---

    def record(
        self,
        kind: EventKind,
        x: float | None = None,
        y: float | None = None,
    ) -> PointerEvent | None:
        """Log an interaction on the live session.

        Returns:
            The recorded event, or None when no care session is live.
        """
        with self._lock:
            session, scheduler = self._session, self._scheduler
        if session is None:
            return None
        event = session.record(kind, x, y)
        if scheduler is not None:
            scheduler.on_activity(kind)
        return event

    def metrics(self, now_ms: float | None = None) -> SessionMetrics | None:
        """Current metrics of the live session, or None outside care mode."""
        session = self._session
        if session is None:
            return None
        return compute_metrics(session, now_ms=now_ms, config=self._config.metrics)

    def encouragement(self) -> str | None:
        """Fetch an encouragement message. Failures are logged and yield None."""
        if self._reporter is None:
            return None
        try:
            text = self._reporter.encourage()
        except Exception as exc:
            logger.warning("Could not generate encouragement: %s", exc, exc_info=True)
            return None
        self.last_encouragement = text
        if self._on_encouragement is not None:
            self._on_encouragement(text)
        return text

    def finalize(self, image_png: bytes, context: str | None = None) -> FinalizedSession:
        """Finish the current canvas: compute, analyze, store and reset.

        Args:
            image_png: PNG snapshot of the finished artwork.
            context: Optional description of what was colored.

        Returns:
            FinalizedSession. A failed analysis does not prevent the
            metrics from being returned or stored.

        Raises:
            GalleryError, OSError: If storing fails. Nothing is kept for this canvas
                and care mode still gets a fresh session with an armed timer.
        """
        with self._lock:
            metrics = self.metrics()
            if self._scheduler is not None:
                self._scheduler.cancel()

        analysis = None
        image_id = session_id = None
        try:
            if metrics is not None and self._reporter is not None:
                try:
                    analysis = self._reporter.analyze(metrics, context)
                except Exception as exc:
                    logger.warning("Session analysis failed: %s", exc, exc_info=True)
            if self._store is not None:
                image_id, session_id = self._save(self._store, image_png, metrics, analysis)
        finally:
            with self._lock:
                self._teardown()
                if self._mode is Mode.CARE and self._canvas is not None:
                    self._start(*self._canvas)

        return FinalizedSession(
            metrics=metrics, analysis=analysis, image_id=image_id, session_id=session_id,
        )

    # --- Internals ---

    def _save(
        self,
        store: GalleryStore,
        image_png: bytes,
        metrics: SessionMetrics | None,
        analysis: str | None,
    ) -> tuple[str, int | None]:
        """Store the artwork and its session row; neither is kept without the other."""
        image = store.add_image(image_png, kind="artwork")
        session_id = None
        if metrics is not None:
            try:
                session_id = store.add_session(image.id, metrics, ai_insight=analysis).id
            except Exception:
                store.delete_image(image.id)
                raise
        logger.info("Saved artwork %s (session %s)", image.id, session_id)
        return image.id, session_id

    def _start(self, width: int, height: int) -> None:
        self._session = Session(width, height, clock=self._clock)
        self._scheduler = NudgeScheduler(
            self._session,
            interval_seconds=self._config.nudge.interval_seconds,
            on_nudge=self._handle_nudge,
            timer_factory=self._timer_factory,
        )
        self._scheduler.arm()
        logger.debug("Started care session on %dx%d canvas", width, height)

    def _teardown(self) -> None:
        if self._scheduler is not None:
            self._scheduler.close()
        self._scheduler = None
        self._session = None

    def _handle_nudge(self, event: PointerEvent) -> None:
        self.encouragement()
