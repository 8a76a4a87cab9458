"""Tests for colorcare.core.schema."""

import sqlite3

import pytest

from colorcare.core.exceptions import GalleryNotFoundError, SchemaVersionError
from colorcare.core.schema import (
    EXPECTED_INDEXES,
    EXPECTED_TABLES,
    EXPECTED_VERSION,
    create_schema,
    open_database,
)


class TestCreateSchema:
    def test_creates_database_file(self, db_path):
        conn = create_schema(db_path, name="Test")
        assert db_path.exists()
        conn.close()

    def test_all_tables_exist(self, db_conn):
        rows = db_conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
        ).fetchall()
        assert {r["name"] for r in rows} >= EXPECTED_TABLES

    def test_all_indexes_exist(self, db_conn):
        rows = db_conn.execute(
            "SELECT name FROM sqlite_master WHERE type='index' AND name LIKE 'idx_%'"
        ).fetchall()
        assert {r["name"] for r in rows} >= EXPECTED_INDEXES

    def test_wal_mode(self, db_conn):
        assert db_conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"

    def test_foreign_keys_enabled(self, db_conn):
        assert db_conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1

    def test_gallery_row(self, db_conn):
        row = db_conn.execute("SELECT name, colorcare_version FROM gallery").fetchone()
        assert row["name"] == "Test Gallery"
        assert row["colorcare_version"] == EXPECTED_VERSION

    def test_image_kind_checked(self, db_conn):
        with pytest.raises(sqlite3.IntegrityError):
            db_conn.execute(
                "INSERT INTO gallery_images (id, storage_path, kind) VALUES ('a', 'a.png', 'sketch')"
            )


class TestOpenDatabase:
    def test_open_existing(self, db_path):
        create_schema(db_path, name="Test").close()
        conn = open_database(db_path)
        assert conn.execute("SELECT name FROM gallery").fetchone()["name"] == "Test"
        assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
        conn.close()

    def test_open_nonexistent_raises(self, tmp_path):
        with pytest.raises(GalleryNotFoundError):
            open_database(tmp_path / "nope.db")

    def test_incompatible_version(self, db_path):
        conn = create_schema(db_path)
        conn.execute("UPDATE gallery SET colorcare_version = '2.0.0'")
        conn.commit()
        conn.close()
        with pytest.raises(SchemaVersionError):
            open_database(db_path)

    def test_patch_version_accepted(self, db_path):
        conn = create_schema(db_path)
        conn.execute("UPDATE gallery SET colorcare_version = '1.0.7'")
        conn.commit()
        conn.close()
        open_database(db_path).close()
