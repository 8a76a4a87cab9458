"""Tests for colorcare.session.controller."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from colorcare.config import AppConfig, NudgeConfig
from colorcare.core import GalleryStore
from colorcare.core.exceptions import GalleryError
from colorcare.report.backends import ReportError
from colorcare.session.controller import Mode, SessionController
from colorcare.session.events import EventKind


class FakeReporter:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.analyzed = []
        self.encouraged = 0

    def analyze(self, metrics, context=None):
        if self.fail:
            raise ReportError("model offline")
        self.analyzed.append((metrics, context))
        return "Balanced attention. Steady hand. Engaged throughout."

    def encourage(self):
        if self.fail:
            raise ReportError("model offline")
        self.encouraged += 1
        return "You're doing wonderfully, keep going!"


@pytest.fixture
def store(tmp_path: Path) -> GalleryStore:
    s = GalleryStore.create(tmp_path / "test.colorcare", name="Test")
    yield s
    s.close()


@pytest.fixture
def reporter() -> FakeReporter:
    return FakeReporter()


@pytest.fixture
def controller(store, reporter, clock, timers) -> SessionController:
    ctrl = SessionController(
        store=store, reporter=reporter, clock=clock, timer_factory=timers,
    )
    yield ctrl
    ctrl.close()


class TestModes:
    def test_starts_in_fun_mode(self, controller):
        assert controller.mode is Mode.FUN
        controller.load_template(800, 600)
        assert controller.session is None
        assert controller.record(EventKind.FILL, 1, 1) is None
        assert controller.metrics() is None

    def test_care_mode_starts_session(self, controller):
        controller.switch_mode(Mode.CARE)
        assert controller.session is None
        controller.load_template(800, 600)
        assert controller.session is not None
        assert controller.scheduler.state.value == "armed"

    def test_switching_to_care_with_canvas(self, controller):
        controller.load_template(800, 600)
        controller.switch_mode(Mode.CARE)
        assert controller.session.canvas_width == 800

    def test_switching_to_fun_stops_session(self, controller, timers):
        controller.switch_mode(Mode.CARE)
        controller.load_template(800, 600)
        controller.switch_mode(Mode.FUN)
        assert controller.session is None
        assert timers.pending == []

    def test_new_template_discards_session(self, controller):
        controller.switch_mode(Mode.CARE)
        controller.load_template(800, 600)
        controller.record(EventKind.FILL, 10, 10)
        controller.load_template(400, 300)
        assert len(controller.session.events) == 0
        assert controller.session.canvas_width == 400

    def test_invalid_canvas(self, controller):
        with pytest.raises(ValueError):
            controller.load_template(0, 10)


class TestCareSession:
    def test_record_and_metrics(self, controller, clock):
        controller.switch_mode(Mode.CARE)
        controller.load_template(800, 600)
        for x, y in [(100, 100), (700, 500), (50, 50)]:
            clock.advance(1000)
            controller.record(EventKind.FILL, x, y)
        m = controller.metrics()
        assert m.neglect_ratio == pytest.approx(2 / 3)
        assert m.total_time_seconds == pytest.approx(3.0)

    def test_idle_nudge_fetches_encouragement(self, store, reporter, timers, clock):
        messages = []
        ctrl = SessionController(
            store, reporter=reporter, clock=clock, timer_factory=timers,
            on_encouragement=messages.append,
        )
        ctrl.switch_mode(Mode.CARE)
        ctrl.load_template(800, 600)
        timers.advance(60_000, clock)
        assert ctrl.metrics().nudge_count == 1
        assert reporter.encouraged == 1
        assert messages == [ctrl.last_encouragement]
        ctrl.close()

    def test_activity_postpones_nudge(self, controller, timers, clock):
        controller.switch_mode(Mode.CARE)
        controller.load_template(800, 600)
        timers.advance(50_000, clock)
        controller.record(EventKind.DRAW, 5, 5)
        timers.advance(50_000, clock)
        assert controller.metrics().nudge_count == 0

    def test_custom_interval(self, store, clock, timers):
        config = AppConfig(nudge=NudgeConfig(interval_seconds=10))
        with SessionController(store, config=config, clock=clock, timer_factory=timers) as ctrl:
            ctrl.switch_mode(Mode.CARE)
            ctrl.load_template(100, 100)
            timers.advance(25_000, clock)
            assert ctrl.metrics().nudge_count == 2

    def test_encouragement_failure_logged(self, store, clock, timers, caplog):
        ctrl = SessionController(
            store, reporter=FakeReporter(fail=True), clock=clock, timer_factory=timers,
        )
        ctrl.switch_mode(Mode.CARE)
        ctrl.load_template(100, 100)
        with caplog.at_level(logging.WARNING, logger="colorcare.session.controller"):
            timers.advance(60_000, clock)
        assert "model offline" in caplog.text
        assert ctrl.metrics().nudge_count == 1
        ctrl.close()

    def test_encouragement_without_reporter(self, store):
        assert SessionController(store).encouragement() is None


class TestFinalize:
    def test_care_session_saved(self, controller, store, reporter, png_bytes, clock):
        controller.switch_mode(Mode.CARE)
        controller.load_template(800, 600)
        clock.advance(90_000)
        controller.record(EventKind.FILL, 100, 100)

        result = controller.finalize(png_bytes, context="a sunflower")

        assert result.metrics.neglect_ratio == 1.0
        assert result.analysis.startswith("Balanced")
        assert reporter.analyzed[0][1] == "a sunflower"
        assert store.read_image_bytes(result.image_id) == png_bytes
        [saved] = store.get_sessions()
        assert saved.id == result.session_id
        assert saved.completion_time == 90
        assert saved.ai_insight == result.analysis
        assert saved.quadrant_data["topLeft"] == 100.0

    def test_resets_session(self, controller, png_bytes):
        controller.switch_mode(Mode.CARE)
        controller.load_template(800, 600)
        controller.record(EventKind.FILL, 1, 1)
        before = controller.session
        controller.finalize(png_bytes)
        assert controller.session is not before
        assert len(controller.session.events) == 0

    def test_fun_mode_saves_artwork_only(self, controller, store, reporter, png_bytes):
        controller.load_template(800, 600)
        result = controller.finalize(png_bytes)
        assert result.metrics is None
        assert result.analysis is None
        assert result.session_id is None
        assert store.count_images(kind="artwork") == 1
        assert reporter.analyzed == []

    def test_report_failure_keeps_metrics(self, store, clock, timers, png_bytes, caplog):
        ctrl = SessionController(
            store, reporter=FakeReporter(fail=True), clock=clock, timer_factory=timers,
        )
        ctrl.switch_mode(Mode.CARE)
        ctrl.load_template(100, 100)
        ctrl.record(EventKind.FILL, 10, 10)
        with caplog.at_level(logging.WARNING, logger="colorcare.session.controller"):
            result = ctrl.finalize(png_bytes)
        assert result.metrics is not None
        assert result.analysis is None
        assert store.get_sessions()[0].ai_insight is None
        assert "analysis failed" in caplog.text
        ctrl.close()

    def test_without_store(self, clock, timers, png_bytes):
        with SessionController(clock=clock, timer_factory=timers) as ctrl:
            ctrl.switch_mode(Mode.CARE)
            ctrl.load_template(100, 100)
            result = ctrl.finalize(png_bytes)
        assert result.metrics is not None
        assert result.image_id is None
        assert result.session_id is None

    def test_failed_save_restarts_session(
        self, controller, store, png_bytes, timers, clock, monkeypatch,
    ):
        def broken_add_image(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(store, "add_image", broken_add_image)
        controller.switch_mode(Mode.CARE)
        controller.load_template(800, 600)
        controller.record(EventKind.FILL, 10, 10)
        before = controller.session

        with pytest.raises(OSError, match="disk full"):
            controller.finalize(png_bytes)

        assert controller.session is not before
        assert controller.scheduler.state.value == "armed"
        controller.record(EventKind.DRAW, 20, 20)
        timers.advance(180_000, clock)
        kinds = [e.kind for e in controller.session.events.snapshot()]
        assert kinds.count(EventKind.NUDGE) == 3

    def test_failed_session_row_removes_artwork(self, controller, store, png_bytes, monkeypatch):
        def broken_add_session(*args, **kwargs):
            raise GalleryError("sessions table is locked")

        monkeypatch.setattr(store, "add_session", broken_add_session)
        controller.switch_mode(Mode.CARE)
        controller.load_template(800, 600)
        controller.record(EventKind.FILL, 10, 10)

        with pytest.raises(GalleryError):
            controller.finalize(png_bytes)

        assert store.count_images() == 0
        assert controller.session is not None
