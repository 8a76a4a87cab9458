"""Exception classes for ColorCare."""


class ColorCareError(Exception):
    """Base exception for all ColorCare errors."""


# --- Outline pipeline ---


class OutlineError(ColorCareError):
    """Base exception for outline extraction failures."""


class DecodeError(OutlineError):
    """Raised when input bytes are not a decodable PNG or JPEG image."""

    def __init__(self, reason: str | None = None) -> None:
        msg = f"Could not decode image: {reason}" if reason else "Could not decode image"
        super().__init__(msg)
        self.reason = reason


class ProcessingError(OutlineError):
    """Raised when a pipeline stage produces invalid or empty pixel data."""

    def __init__(self, stage: str | None = None, reason: str | None = None) -> None:
        if stage and reason:
            msg = f"Outline stage '{stage}' failed: {reason}"
        elif stage:
            msg = f"Outline stage '{stage}' failed"
        else:
            msg = "Outline processing failed"
        super().__init__(msg)
        self.stage = stage
        self.reason = reason


# --- Sessions ---


class SessionStateError(ColorCareError):
    """Raised when a session is used in a state that violates its contract."""


# --- Gallery store ---


class GalleryError(ColorCareError):
    """Base exception for gallery storage errors."""


class GalleryNotFoundError(GalleryError):
    """Raised when opening a nonexistent .colorcare directory."""

    def __init__(self, path: str | None = None) -> None:
        msg = f"Gallery not found: {path}" if path else "Gallery not found"
        super().__init__(msg)
        self.path = path


class ImageNotFoundError(GalleryError):
    """Raised when referencing an unknown gallery image."""

    def __init__(self, image_id: str | None = None) -> None:
        msg = f"Image not found: {image_id}" if image_id else "Image not found"
        super().__init__(msg)
        self.image_id = image_id


class SessionNotFoundError(GalleryError):
    """Raised when referencing an unknown stored session."""

    def __init__(self, session_id: int | None = None) -> None:
        msg = "Session not found"
        if session_id is not None:
            msg += f": {session_id}"
        super().__init__(msg)
        self.session_id = session_id


class SchemaVersionError(GalleryError):
    """Raised when the gallery database was written by an incompatible version."""

    def __init__(self, found: str, expected: str) -> None:
        super().__init__(
            f"Gallery schema version {found} is not compatible with {expected}"
        )
        self.found = found
        self.expected = expected
