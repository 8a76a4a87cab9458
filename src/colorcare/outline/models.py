"""Data models for the outline extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

DEFAULT_LOW_THRESHOLD = 20.0
DEFAULT_HIGH_THRESHOLD = 40.0
DEFAULT_MAX_DIMENSION = 2000
DEFAULT_SIGMA = 1.1


@dataclass(frozen=True)
class OutlineConfig:
    """Tunable parameters for outline extraction.

    Thresholds are on the 0-255 luminance scale. Images whose longer side
    exceeds ``max_dimension`` are downscaled before edge detection.
    """

    low_threshold: float = DEFAULT_LOW_THRESHOLD
    high_threshold: float = DEFAULT_HIGH_THRESHOLD
    max_dimension: int = DEFAULT_MAX_DIMENSION
    sigma: float = DEFAULT_SIGMA

    def __post_init__(self) -> None:
        """Validate thresholds and bounds at construction time."""
        if self.low_threshold < 0:
            raise ValueError(
                f"low_threshold must be >= 0, got {self.low_threshold}"
            )
        if self.high_threshold < self.low_threshold:
            raise ValueError(
                f"high_threshold ({self.high_threshold}) must be >= "
                f"low_threshold ({self.low_threshold})"
            )
        if self.max_dimension < 1:
            raise ValueError(
                f"max_dimension must be >= 1, got {self.max_dimension}"
            )
        if self.sigma < 0:
            raise ValueError(f"sigma must be >= 0, got {self.sigma}")


@dataclass(frozen=True)
class RawImage:
    """An immutable 8-bit raster plus its color model.

    ``pixels`` has shape (H, W) for single-channel images or (H, W, C)
    otherwise. The array is marked read-only on construction; stages build
    new arrays instead of writing into it.
    """

    pixels: np.ndarray
    color_model: str

    def __post_init__(self) -> None:
        if self.pixels.ndim not in (2, 3):
            raise ValueError(
                f"pixels must be 2D or 3D, got {self.pixels.ndim}D"
            )
        self.pixels.flags.writeable = False

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def channels(self) -> int:
        return 1 if self.pixels.ndim == 2 else int(self.pixels.shape[2])

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) of the image."""
        return self.width, self.height
