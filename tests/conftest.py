"""Shared test fixtures for ColorCare."""

from __future__ import annotations

import io
from typing import Callable

import numpy as np
import pytest
from PIL import Image


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class FakeTimer:
    """Timer that only fires when the test says so."""

    def __init__(self, interval: float, function: Callable[[], None]) -> None:
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def pending(self) -> bool:
        return self.started and not self.cancelled


class FakeTimers:
    """Timer factory that records every timer it builds.

    ``advance(ms, clock)`` moves the clock and fires due timers in order,
    the way real timers would over that span of idle time.
    """

    def __init__(self) -> None:
        self.created: list[FakeTimer] = []
        self._due: dict[int, float] = {}

    def __call__(self, interval: float, function: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(interval, function)
        self.created.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        return [t for t in self.created if t.pending]

    def advance(self, ms: float, clock: FakeClock) -> None:
        end = clock.now + ms
        while True:
            live = [t for t in self.created if t.pending]
            for t in live:
                self._due.setdefault(id(t), clock.now + t.interval * 1000.0)
            due = sorted(
                (self._due[id(t)], i, t) for i, t in enumerate(self.created)
                if t.pending and self._due[id(t)] <= end
            )
            if not due:
                break
            when, _, timer = due[0]
            clock.now = when
            timer.cancelled = True
            timer.function()
        clock.now = end


def encode(pixels: np.ndarray, fmt: str = "PNG", mode: str | None = None) -> bytes:
    img = Image.fromarray(pixels)
    if mode is not None:
        img = img.convert(mode)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def timers() -> FakeTimers:
    return FakeTimers()


@pytest.fixture
def make_image_bytes() -> Callable[..., bytes]:
    """Factory: (width, height, fmt="PNG", mode=None) -> encoded image with a dark square."""

    def _make(width: int, height: int, fmt: str = "PNG", mode: str | None = None) -> bytes:
        pixels = np.full((height, width, 3), 230, dtype=np.uint8)
        pixels[height // 4: 3 * height // 4, width // 4: 3 * width // 4] = 20
        return encode(pixels, fmt=fmt, mode=mode)

    return _make


@pytest.fixture
def png_bytes(make_image_bytes) -> bytes:
    return make_image_bytes(64, 48)
