"""SQL query functions for the ColorCare gallery.

All functions take an open sqlite3.Connection as the first argument.
"""

from __future__ import annotations

import json
import sqlite3

from colorcare.core.exceptions import ImageNotFoundError, SessionNotFoundError
from colorcare.core.models import GalleryImage, SessionRecord

# ---------------------------------------------------------------------------
# Gallery
# ---------------------------------------------------------------------------


def get_gallery_name(conn: sqlite3.Connection) -> str:
    row = conn.execute("SELECT name FROM gallery LIMIT 1").fetchone()
    return row["name"] if row else ""


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------


def _row_to_image(r: sqlite3.Row) -> GalleryImage:
    """Convert a database row to a GalleryImage."""
    return GalleryImage(
        id=r["id"],
        storage_path=r["storage_path"],
        kind=r["kind"],
        created_at=r["created_at"],
        user_id=r["user_id"],
    )


def insert_image(
    conn: sqlite3.Connection,
    image_id: str,
    storage_path: str,
    kind: str = "artwork",
    user_id: str | None = None,
) -> GalleryImage:
    """Insert an image row. Returns the stored record."""
    conn.execute(
        "INSERT INTO gallery_images (id, storage_path, kind, user_id) VALUES (?, ?, ?, ?)",
        (image_id, storage_path, kind, user_id),
    )
    conn.commit()
    return select_image(conn, image_id)


def select_image(conn: sqlite3.Connection, image_id: str) -> GalleryImage:
    row = conn.execute(
        "SELECT id, storage_path, kind, user_id, created_at "
        "FROM gallery_images WHERE id = ?",
        (image_id,),
    ).fetchone()
    if row is None:
        raise ImageNotFoundError(image_id)
    return _row_to_image(row)


def select_images(
    conn: sqlite3.Connection, kind: str | None = None,
) -> list[GalleryImage]:
    """Images newest first, optionally filtered by kind."""
    sql = "SELECT id, storage_path, kind, user_id, created_at FROM gallery_images"
    params: tuple = ()
    if kind is not None:
        sql += " WHERE kind = ?"
        params = (kind,)
    sql += " ORDER BY created_at DESC, rowid DESC"
    return [_row_to_image(r) for r in conn.execute(sql, params).fetchall()]


def count_images(conn: sqlite3.Connection, kind: str | None = None) -> int:
    if kind is None:
        return conn.execute("SELECT COUNT(*) FROM gallery_images").fetchone()[0]
    return conn.execute(
        "SELECT COUNT(*) FROM gallery_images WHERE kind = ?", (kind,),
    ).fetchone()[0]


def delete_image(conn: sqlite3.Connection, image_id: str) -> None:
    """Delete an image row and (via cascade) its sessions."""
    cur = conn.execute("DELETE FROM gallery_images WHERE id = ?", (image_id,))
    conn.commit()
    if cur.rowcount == 0:
        raise ImageNotFoundError(image_id)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


def _row_to_session(r: sqlite3.Row) -> SessionRecord:
    quad = r["quadrant_data"]
    return SessionRecord(
        id=r["id"],
        image_id=r["image_id"],
        created_at=r["created_at"],
        completion_time=r["completion_time"],
        neglect_ratio=r["neglect_ratio"],
        tremor_index=r["tremor_index"],
        nudge_count=r["nudge_count"],
        quadrant_data=json.loads(quad) if quad else None,
        ai_insight=r["ai_insight"],
        user_id=r["user_id"],
    )


def insert_session(
    conn: sqlite3.Connection,
    image_id: str,
    completion_time: int | None = None,
    neglect_ratio: float | None = None,
    tremor_index: float | None = None,
    nudge_count: int | None = None,
    quadrant_data: dict[str, float] | None = None,
    ai_insight: str | None = None,
    user_id: str | None = None,
) -> int:
    """Insert a session row. Returns the session ID.

    Raises:
        ImageNotFoundError: If ``image_id`` is not in the gallery.
    """
    try:
        cur = conn.execute(
            "INSERT INTO sessions (image_id, completion_time, neglect_ratio, "
            "tremor_index, nudge_count, quadrant_data, ai_insight, user_id) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (
                image_id,
                completion_time,
                neglect_ratio,
                tremor_index,
                nudge_count,
                json.dumps(quadrant_data) if quadrant_data is not None else None,
                ai_insight,
                user_id,
            ),
        )
        conn.commit()
    except sqlite3.IntegrityError:
        conn.rollback()
        raise ImageNotFoundError(image_id)
    return cur.lastrowid  # type: ignore[return-value]


_SESSION_COLUMNS = (
    "id, image_id, completion_time, neglect_ratio, tremor_index, nudge_count, "
    "quadrant_data, ai_insight, user_id, created_at"
)


def select_session(conn: sqlite3.Connection, session_id: int) -> SessionRecord:
    row = conn.execute(
        f"SELECT {_SESSION_COLUMNS} FROM sessions WHERE id = ?", (session_id,),
    ).fetchone()
    if row is None:
        raise SessionNotFoundError(session_id)
    return _row_to_session(row)


def select_sessions(
    conn: sqlite3.Connection, image_id: str | None = None,
) -> list[SessionRecord]:
    """Sessions newest first, optionally for one image."""
    sql = f"SELECT {_SESSION_COLUMNS} FROM sessions"
    params: tuple = ()
    if image_id is not None:
        sql += " WHERE image_id = ?"
        params = (image_id,)
    sql += " ORDER BY created_at DESC, id DESC"
    return [_row_to_session(r) for r in conn.execute(sql, params).fetchall()]
