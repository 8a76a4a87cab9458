"""GalleryStore — local persistence for gallery images and session metrics."""

from __future__ import annotations

import logging
import sqlite3
import threading
import uuid
from dataclasses import asdict
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

from colorcare.core import queries
from colorcare.core.exceptions import GalleryError, GalleryNotFoundError
from colorcare.core.models import IMAGE_KINDS, GalleryImage, SessionRecord
from colorcare.core.schema import create_schema, open_database

if TYPE_CHECKING:
    from colorcare.session.metrics import SessionMetrics

logger = logging.getLogger(__name__)


class GalleryStore:
    """Central interface for a ColorCare gallery.

    A gallery is a .colorcare directory containing:
    - gallery.db (SQLite metadata for images and sessions)
    - images/ (PNG files, one per gallery image)
    """

    def __init__(self, path: Path, conn: sqlite3.Connection) -> None:
        self._path = path
        self._conn = conn
        # The nudge timer thread and the caller may both reach the store.
        self._lock = threading.RLock()

    # --- Lifecycle ---

    @classmethod
    def create(cls, path: Path, name: str = "") -> GalleryStore:
        """Create a new .colorcare gallery directory."""
        path = Path(path)
        if path.exists():
            raise GalleryError(f"Path already exists: {path}")
        path.mkdir(parents=True)
        (path / "images").mkdir()
        conn = create_schema(path / "gallery.db", name=name)
        return cls(path, conn)

    @classmethod
    def open(cls, path: Path) -> GalleryStore:
        """Open an existing .colorcare gallery directory."""
        path = Path(path)
        if not path.exists() or not (path / "gallery.db").exists():
            raise GalleryNotFoundError(str(path))
        conn = open_database(path / "gallery.db")
        (path / "images").mkdir(exist_ok=True)
        return cls(path, conn)

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None  # type: ignore[assignment]

    def __enter__(self) -> GalleryStore:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"GalleryStore({self._path!r})"

    # --- Properties ---

    @property
    def path(self) -> Path:
        return self._path

    @property
    def name(self) -> str:
        return queries.get_gallery_name(self._conn)

    @property
    def db_path(self) -> Path:
        return self._path / "gallery.db"

    @property
    def images_path(self) -> Path:
        return self._path / "images"

    # --- Images ---

    def add_image(
        self,
        png_bytes: bytes,
        kind: str = "artwork",
        user_id: str | None = None,
    ) -> GalleryImage:
        """Store PNG bytes under a freshly generated image ID.

        Raises:
            ValueError: If ``kind`` is unknown or ``png_bytes`` is empty.
        """
        if kind not in IMAGE_KINDS:
            raise ValueError(
                f"Unknown image kind {kind!r}. Supported: {sorted(IMAGE_KINDS)}"
            )
        if not png_bytes:
            raise ValueError("png_bytes must not be empty")

        image_id = uuid.uuid4().hex
        storage_path = f"images/{kind}_{image_id}.png"
        target = self._path / storage_path
        target.write_bytes(png_bytes)
        with self._lock:
            try:
                image = queries.insert_image(
                    self._conn, image_id, storage_path, kind=kind, user_id=user_id,
                )
            except sqlite3.Error:
                target.unlink(missing_ok=True)
                raise
        logger.debug("Stored %s image %s (%d bytes)", kind, image_id, len(png_bytes))
        return image

    def get_image(self, image_id: str) -> GalleryImage:
        with self._lock:
            return queries.select_image(self._conn, image_id)

    def get_images(self, kind: str | None = None) -> list[GalleryImage]:
        """All images, newest first."""
        with self._lock:
            return queries.select_images(self._conn, kind=kind)

    def count_images(self, kind: str | None = None) -> int:
        with self._lock:
            return queries.count_images(self._conn, kind=kind)

    def read_image_bytes(self, image_id: str) -> bytes:
        """Return the stored PNG bytes of an image."""
        image = self.get_image(image_id)
        return (self._path / image.storage_path).read_bytes()

    def delete_image(self, image_id: str) -> None:
        """Delete an image, its file, and any sessions recorded against it."""
        with self._lock:
            image = queries.select_image(self._conn, image_id)
            queries.delete_image(self._conn, image_id)
        (self._path / image.storage_path).unlink(missing_ok=True)
        logger.debug("Deleted image %s", image_id)

    def clear_images(self) -> int:
        """Delete every image. Returns the number removed."""
        images = self.get_images()
        for image in images:
            self.delete_image(image.id)
        return len(images)

    # --- Sessions ---

    def add_session(
        self,
        image_id: str,
        metrics: SessionMetrics,
        ai_insight: str | None = None,
        user_id: str | None = None,
    ) -> SessionRecord:
        """Persist finalized session metrics keyed by the saved image.

        Completion time is stored in whole seconds.

        Raises:
            ImageNotFoundError: If ``image_id`` is not in the gallery.
        """
        with self._lock:
            session_id = queries.insert_session(
                self._conn,
                image_id,
                completion_time=int(round(metrics.total_time_seconds)),
                neglect_ratio=float(metrics.neglect_ratio),
                tremor_index=float(metrics.tremor_score),
                nudge_count=int(metrics.nudge_count),
                quadrant_data=metrics.quadrant_activity.to_dict(),
                ai_insight=ai_insight,
                user_id=user_id,
            )
            return queries.select_session(self._conn, session_id)

    def get_session(self, session_id: int) -> SessionRecord:
        """Look up one stored session.

        Raises:
            SessionNotFoundError: If no session has that ID.
        """
        with self._lock:
            return queries.select_session(self._conn, session_id)

    def get_sessions(self, image_id: str | None = None) -> list[SessionRecord]:
        """All sessions, newest first."""
        with self._lock:
            return queries.select_sessions(self._conn, image_id=image_id)

    def get_sessions_frame(self) -> pd.DataFrame:
        """Sessions as a DataFrame with one column per quadrant."""
        rows = []
        for record in self.get_sessions():
            row = asdict(record)
            quad = row.pop("quadrant_data") or {}
            for key in ("topLeft", "topRight", "bottomLeft", "bottomRight"):
                row[f"quadrant_{key}"] = quad.get(key)
            rows.append(row)
        columns = [
            "id", "image_id", "created_at", "completion_time", "neglect_ratio",
            "tremor_index", "nudge_count", "quadrant_topLeft", "quadrant_topRight",
            "quadrant_bottomLeft", "quadrant_bottomRight", "ai_insight", "user_id",
        ]
        return pd.DataFrame(rows, columns=columns)

    def export_sessions_csv(self, path: Path) -> int:
        """Write all sessions to CSV. Returns the number of rows written."""
        frame = self.get_sessions_frame()
        frame.to_csv(path, index=False)
        return len(frame)
