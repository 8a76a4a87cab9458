"""ColorCare Outline — photo to coloring-template conversion."""

from colorcare.outline.codec import decode_image, encode_png, fetch_image_bytes, is_url
from colorcare.outline.models import OutlineConfig, RawImage
from colorcare.outline.pipeline import extract_outline, run_stages

__all__ = [
    "OutlineConfig",
    "RawImage",
    "decode_image",
    "encode_png",
    "extract_outline",
    "fetch_image_bytes",
    "is_url",
    "run_stages",
]
