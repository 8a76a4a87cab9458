"""SQLite schema creation and database opening for ColorCare galleries."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from colorcare.core.exceptions import GalleryNotFoundError, SchemaVersionError

_SCHEMA_SQL = """\
PRAGMA journal_mode = WAL;
PRAGMA synchronous = NORMAL;
PRAGMA foreign_keys = ON;

CREATE TABLE IF NOT EXISTS gallery (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL DEFAULT '',
    colorcare_version TEXT NOT NULL DEFAULT '1.0.0',
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS gallery_images (
    id TEXT PRIMARY KEY,
    storage_path TEXT NOT NULL UNIQUE,
    kind TEXT NOT NULL DEFAULT 'artwork',
    user_id TEXT,
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now')),
    CHECK(kind IN ('artwork', 'template', 'template_input'))
);

CREATE TABLE IF NOT EXISTS sessions (
    id INTEGER PRIMARY KEY,
    image_id TEXT NOT NULL REFERENCES gallery_images(id) ON DELETE CASCADE,
    completion_time INTEGER,
    neglect_ratio REAL,
    tremor_index REAL,
    nudge_count INTEGER,
    quadrant_data TEXT,
    ai_insight TEXT,
    user_id TEXT,
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
);

CREATE INDEX IF NOT EXISTS idx_images_created ON gallery_images(created_at);
CREATE INDEX IF NOT EXISTS idx_sessions_image ON sessions(image_id);
CREATE INDEX IF NOT EXISTS idx_sessions_created ON sessions(created_at);
"""

EXPECTED_TABLES = frozenset({"gallery", "gallery_images", "sessions"})

EXPECTED_INDEXES = frozenset({
    "idx_images_created", "idx_sessions_image", "idx_sessions_created",
})

EXPECTED_VERSION = "1.0.0"


def _configure(conn: sqlite3.Connection) -> None:
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    conn.execute("PRAGMA synchronous = NORMAL")
    conn.execute("PRAGMA foreign_keys = ON")


def create_schema(db_path: Path, name: str = "") -> sqlite3.Connection:
    """Create a new gallery database with the full schema.

    Args:
        db_path: Path to the SQLite database file (will be created).
        name: Gallery name.

    Returns:
        An open connection to the new database.
    """
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.executescript(_SCHEMA_SQL)
    conn.execute(
        "INSERT INTO gallery (name, colorcare_version) VALUES (?, ?)",
        (name, EXPECTED_VERSION),
    )
    conn.commit()
    return conn


def open_database(db_path: Path) -> sqlite3.Connection:
    """Open an existing gallery database.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        An open connection with WAL mode and foreign keys enabled.

    Raises:
        GalleryNotFoundError: If the database file does not exist.
        SchemaVersionError: If the stored major.minor version differs.
    """
    if not db_path.exists():
        raise GalleryNotFoundError(str(db_path))
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    _configure(conn)

    row = conn.execute("SELECT colorcare_version FROM gallery LIMIT 1").fetchone()
    if row is not None:
        stored = row["colorcare_version"]
        if stored.split(".")[:2] != EXPECTED_VERSION.split(".")[:2]:
            conn.close()
            raise SchemaVersionError(stored, EXPECTED_VERSION)

    # Fills in anything missing from partially created databases
    conn.executescript(_SCHEMA_SQL)
    return conn
