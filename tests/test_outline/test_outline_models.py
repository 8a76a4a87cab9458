"""Tests for colorcare.outline.models."""

from __future__ import annotations

import numpy as np
import pytest

from colorcare.outline.models import OutlineConfig, RawImage


class TestOutlineConfig:
    def test_defaults(self):
        config = OutlineConfig()
        assert config.low_threshold == 20.0
        assert config.high_threshold == 40.0
        assert config.max_dimension == 2000
        assert config.sigma == pytest.approx(1.1)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            OutlineConfig().low_threshold = 5.0  # type: ignore[misc]

    @pytest.mark.parametrize("kwargs", [
        {"low_threshold": -1.0},
        {"low_threshold": 50.0, "high_threshold": 40.0},
        {"max_dimension": 0},
        {"sigma": -0.5},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            OutlineConfig(**kwargs)


class TestRawImage:
    def test_shape_properties(self):
        image = RawImage(np.zeros((3, 5, 4), dtype=np.uint8), "RGBA")
        assert image.height == 3
        assert image.width == 5
        assert image.channels == 4
        assert image.size == (5, 3)

    def test_single_channel(self):
        assert RawImage(np.zeros((3, 5), dtype=np.uint8), "L").channels == 1

    def test_rejects_1d(self):
        with pytest.raises(ValueError):
            RawImage(np.zeros(5, dtype=np.uint8), "L")

    def test_read_only(self):
        image = RawImage(np.zeros((2, 2), dtype=np.uint8), "L")
        with pytest.raises(ValueError):
            image.pixels[0, 0] = 1
