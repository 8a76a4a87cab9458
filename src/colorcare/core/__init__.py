"""ColorCare Core — GalleryStore, schema, models, exceptions."""

from colorcare.core.exceptions import (
    ColorCareError,
    DecodeError,
    GalleryError,
    GalleryNotFoundError,
    ImageNotFoundError,
    OutlineError,
    ProcessingError,
    SchemaVersionError,
    SessionNotFoundError,
    SessionStateError,
)
from colorcare.core.gallery_store import GalleryStore
from colorcare.core.models import GalleryImage, SessionRecord

__all__ = [
    "GalleryStore",
    "GalleryImage",
    "SessionRecord",
    "ColorCareError",
    "OutlineError",
    "DecodeError",
    "ProcessingError",
    "SessionStateError",
    "GalleryError",
    "GalleryNotFoundError",
    "ImageNotFoundError",
    "SessionNotFoundError",
    "SchemaVersionError",
]
