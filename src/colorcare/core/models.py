"""Data models for stored gallery images and care-mode sessions."""

from __future__ import annotations

from dataclasses import dataclass, field

IMAGE_KINDS = frozenset({"artwork", "template", "template_input"})


@dataclass(frozen=True)
class GalleryImage:
    """A PNG stored in the gallery."""

    id: str
    storage_path: str
    kind: str
    created_at: str
    user_id: str | None = None


@dataclass(frozen=True)
class SessionRecord:
    """Persisted metrics of one finalized care-mode session."""

    id: int
    image_id: str
    created_at: str
    completion_time: int | None = None
    neglect_ratio: float | None = None
    tremor_index: float | None = None
    nudge_count: int | None = None
    quadrant_data: dict[str, float] | None = field(default=None, compare=False)
    ai_insight: str | None = None
    user_id: str | None = None
