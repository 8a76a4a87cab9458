"""PNG/JPEG decoding, PNG encoding and URL ingress via Pillow."""

from __future__ import annotations

import io
import logging
import urllib.error
import urllib.request

import numpy as np
from PIL import Image, UnidentifiedImageError

from colorcare.core.exceptions import DecodeError, ProcessingError
from colorcare.outline.models import RawImage

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("PNG", "JPEG")

# Modes whose pixels map directly onto uint8 arrays
_NATIVE_MODES = frozenset({"L", "LA", "RGB", "RGBA"})

# 16-bit grayscale modes; scaled down to 8 bits instead of clipped
_WIDE_GRAY_MODES = frozenset({"I", "I;16", "I;16B", "I;16L", "I;16N"})

_URL_SCHEMES = ("http://", "https://")


def decode_image(data: bytes) -> RawImage:
    """Decode PNG or JPEG bytes into a RawImage.

    The pixel data is kept in the file's own color model (e.g. "RGBA",
    "L"); normalization happens in the pipeline. Palette images are
    expanded to RGB(A) and 16-bit grayscale is scaled down to 8-bit "L".

    Args:
        data: Encoded image bytes.

    Returns:
        RawImage with uint8 pixels.

    Raises:
        DecodeError: If the bytes are empty or not a supported raster.
    """
    if not data:
        raise DecodeError("empty input")
    try:
        with Image.open(io.BytesIO(data), formats=SUPPORTED_FORMATS) as img:
            img.load()
            if img.mode in _WIDE_GRAY_MODES:
                wide = np.asarray(img, dtype=np.int64)
                pixels = (np.clip(wide, 0, 65535) >> 8).astype(np.uint8)
                mode = "L"
            else:
                if img.mode not in _NATIVE_MODES:
                    has_alpha = "A" in img.getbands() or "transparency" in img.info
                    img = img.convert("RGBA" if has_alpha else "RGB")
                mode = img.mode
                pixels = np.asarray(img, dtype=np.uint8).copy()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DecodeError(str(e)) from e

    logger.debug("Decoded %s image %dx%d", mode, pixels.shape[1], pixels.shape[0])
    return RawImage(pixels=pixels, color_model=mode)


def encode_png(image: RawImage) -> bytes:
    """Encode an RGB or grayscale RawImage as opaque PNG bytes.

    Raises:
        ProcessingError: If the image cannot be encoded.
    """
    if image.channels not in (1, 3):
        raise ProcessingError("encode", f"unsupported channel count {image.channels}")
    if image.pixels.dtype != np.uint8:
        raise ProcessingError("encode", f"expected uint8 pixels, got {image.pixels.dtype}")
    buf = io.BytesIO()
    try:
        Image.fromarray(np.ascontiguousarray(image.pixels)).save(buf, format="PNG")
    except (OSError, ValueError) as e:
        raise ProcessingError("encode", str(e)) from e
    return buf.getvalue()


def fetch_image_bytes(url: str, timeout: float = 30.0) -> bytes:
    """Download the bytes behind an http(s) image URL.

    Args:
        url: Absolute http or https URL.
        timeout: Socket timeout in seconds.

    Returns:
        Response body bytes (not yet decoded).

    Raises:
        ValueError: If the URL scheme is not http or https.
        DecodeError: If the resource cannot be fetched.
    """
    if not url.lower().startswith(_URL_SCHEMES):
        raise ValueError(f"Only http(s) URLs are supported: {url!r}")
    try:
        with urllib.request.urlopen(url, timeout=timeout) as resp:
            return resp.read()
    except (urllib.error.URLError, OSError) as e:
        raise DecodeError(f"failed to fetch {url}: {e}") from e


def is_url(source: str) -> bool:
    """True when ``source`` looks like an http(s) URL rather than a path."""
    return source.lower().startswith(_URL_SCHEMES)
