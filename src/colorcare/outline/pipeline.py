"""Outline extraction: photo bytes -> black-line-on-white PNG bytes.

The pipeline is linear. Each stage takes a RawImage and returns a new one:

    normalize -> bound -> to_grayscale -> detect_edges -> invert -> expand_channels

``extract_outline`` wraps the stages with decoding and PNG encoding.
"""

from __future__ import annotations

import logging

import numpy as np

from colorcare.core.exceptions import ProcessingError
from colorcare.outline.codec import decode_image, encode_png
from colorcare.outline.models import OutlineConfig, RawImage

logger = logging.getLogger(__name__)

EDGE_VALUE = 0
BACKGROUND_VALUE = 255


def _check(image: RawImage, stage: str, channels: int | None = None) -> RawImage:
    """Raise ProcessingError unless ``image`` holds non-empty uint8 data."""
    if image.width == 0 or image.height == 0:
        raise ProcessingError(stage, f"zero-area image ({image.width}x{image.height})")
    if image.pixels.dtype != np.uint8:
        raise ProcessingError(stage, f"expected uint8 pixels, got {image.pixels.dtype}")
    if channels is not None and image.channels != channels:
        raise ProcessingError(
            stage, f"expected {channels} channel(s), got {image.channels}"
        )
    return image


def normalize(image: RawImage) -> RawImage:
    """Strip any alpha channel and force a 3-channel RGB representation."""
    _check(image, "normalize")
    px = image.pixels
    if px.ndim == 2:
        rgb = np.stack([px, px, px], axis=-1)
    elif px.shape[2] in (1, 2):
        # L or LA: drop alpha, replicate luminance
        rgb = np.repeat(px[:, :, :1], 3, axis=2)
    else:
        rgb = px[:, :, :3].copy()
    return _check(RawImage(rgb, "RGB"), "normalize", channels=3)


def scaled_size(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """Target (width, height) after bounding the longer side to ``max_dimension``.

    Sizes already within bounds are returned unchanged.
    """
    if width <= max_dimension and height <= max_dimension:
        return width, height
    scale = min(max_dimension / width, max_dimension / height)
    return int(round(width * scale)), int(round(height * scale))


def bound(image: RawImage, max_dimension: int) -> RawImage:
    """Uniformly downscale so neither side exceeds ``max_dimension``."""
    from skimage.transform import resize

    new_w, new_h = scaled_size(image.width, image.height, max_dimension)
    if (new_w, new_h) == image.size:
        return image
    if new_w == 0 or new_h == 0:
        raise ProcessingError(
            "bound",
            f"scaling {image.width}x{image.height} to fit {max_dimension}px "
            f"gives zero-area image ({new_w}x{new_h})",
        )

    logger.debug(
        "Downscaling %dx%d -> %dx%d", image.width, image.height, new_w, new_h,
    )
    out_shape = (new_h, new_w) + image.pixels.shape[2:]
    resized = resize(
        image.pixels, out_shape, order=1, anti_aliasing=True, preserve_range=True,
    )
    pixels = np.clip(np.rint(resized), 0, 255).astype(np.uint8)
    return _check(RawImage(pixels, image.color_model), "bound")


def to_grayscale(image: RawImage) -> RawImage:
    """Reduce RGB to single-channel Rec.709 luminance on a 0-255 scale."""
    from skimage.color import rgb2gray

    _check(image, "grayscale", channels=3)
    gray = rgb2gray(image.pixels)  # float in [0, 1]
    pixels = np.clip(np.rint(gray * 255.0), 0, 255).astype(np.uint8)
    return _check(RawImage(pixels, "L"), "grayscale", channels=1)


def detect_edges(
    image: RawImage,
    low_threshold: float,
    high_threshold: float,
    sigma: float,
) -> RawImage:
    """Canny edge mask: 255 where an edge was detected, 0 elsewhere.

    Thresholds apply to the gradient magnitude of the 0-255 luminance
    image, so the input is handed to scikit-image as float in that range.
    """
    from skimage.feature import canny

    _check(image, "edges", channels=1)
    edges = canny(
        image.pixels.astype(np.float64),
        sigma=sigma,
        low_threshold=low_threshold,
        high_threshold=high_threshold,
    )
    pixels = np.where(edges, 255, 0).astype(np.uint8)
    logger.debug(
        "Canny(%.1f, %.1f) marked %d of %d pixels as edges",
        low_threshold, high_threshold, int(np.count_nonzero(edges)), edges.size,
    )
    return _check(RawImage(pixels, "L"), "edges", channels=1)


def invert(image: RawImage) -> RawImage:
    """Flip a mask so edges are near-black on a near-white background."""
    _check(image, "invert", channels=1)
    return _check(RawImage(255 - image.pixels, "L"), "invert", channels=1)


def expand_channels(image: RawImage) -> RawImage:
    """Replicate a single-channel image across R, G and B."""
    _check(image, "expand", channels=1)
    px = image.pixels
    return _check(RawImage(np.stack([px, px, px], axis=-1), "RGB"), "expand", channels=3)


def run_stages(image: RawImage, config: OutlineConfig | None = None) -> RawImage:
    """Run every pipeline stage on a decoded image.

    Args:
        image: Decoded input in any supported color model.
        config: Thresholds and size bound. Uses defaults if not provided.

    Returns:
        3-channel RGB outline image.

    Raises:
        ProcessingError: If any stage produces invalid pixel data.
    """
    config = config or OutlineConfig()
    rgb = normalize(image)
    bounded = bound(rgb, config.max_dimension)
    gray = to_grayscale(bounded)
    edges = detect_edges(
        gray, config.low_threshold, config.high_threshold, config.sigma,
    )
    return expand_channels(invert(edges))


def extract_outline(data: bytes, config: OutlineConfig | None = None) -> bytes:
    """Convert PNG/JPEG photo bytes into a PNG coloring-template outline.

    Deterministic and side-effect free; identical input bytes always give
    pixel-identical output.

    Args:
        data: Encoded PNG or JPEG bytes.
        config: Thresholds and size bound. Uses defaults if not provided.

    Returns:
        PNG bytes of a 3-channel black-line-on-white image with the same
        aspect ratio as the (possibly downscaled) input.

    Raises:
        DecodeError: If ``data`` is not a supported image.
        ProcessingError: If an intermediate stage produces invalid data.
    """
    image = decode_image(data)
    outline = run_stages(image, config)
    logger.info(
        "Extracted outline %dx%d from %dx%d %s input",
        outline.width, outline.height, image.width, image.height, image.color_model,
    )
    return encode_png(outline)
