"""Shared fixtures for CLI module tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from colorcare.core import GalleryStore
from colorcare.session.events import EventKind, Session
from colorcare.session.metrics import compute_metrics
from colorcare.session.serialization import save_session


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def gallery(tmp_path: Path) -> GalleryStore:
    """Create a fresh gallery for CLI testing."""
    store = GalleryStore.create(tmp_path / "test.colorcare", name="Test")
    yield store
    store.close()


@pytest.fixture
def gallery_path(gallery: GalleryStore) -> Path:
    """Path to the test gallery."""
    return gallery.path


@pytest.fixture
def recorded_session(clock) -> Session:
    """The 800x600 reference session: two top-left fills, one bottom-right, jittery moves."""
    session = Session(800, 600, clock=clock)
    for kind, x, y in [
        (EventKind.FILL, 100, 100),
        (EventKind.FILL, 700, 500),
        (EventKind.DRAW, 50, 50),
        (EventKind.MOVE, 10, 10),
        (EventKind.MOVE, 11, 10),
        (EventKind.MOVE, 11, 11),
        (EventKind.MOVE, 50, 50),
    ]:
        clock.advance(10)
        session.record(kind, x, y)
    clock.advance(10)
    session.record(EventKind.NUDGE)
    return session


@pytest.fixture
def session_file(recorded_session: Session, tmp_path: Path) -> Path:
    path = tmp_path / "session.json"
    save_session(recorded_session, path, end_time_ms=120_000.0)
    return path


@pytest.fixture
def gallery_with_sessions(gallery: GalleryStore, recorded_session: Session, png_bytes: bytes) -> GalleryStore:
    """Gallery holding one artwork with two recorded sessions."""
    metrics = compute_metrics(recorded_session, now_ms=120_000.0)
    image = gallery.add_image(png_bytes)
    gallery.add_session(image.id, metrics, ai_insight="Steady and engaged.")
    gallery.add_session(image.id, metrics)
    return gallery
