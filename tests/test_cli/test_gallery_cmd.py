"""Tests for colorcare gallery command."""

import json
from pathlib import Path

from click.testing import CliRunner

from colorcare.cli.main import cli
from colorcare.core import GalleryStore


class TestGalleryList:
    def test_empty(self, runner: CliRunner, gallery_path: Path):
        result = runner.invoke(cli, ["gallery", "-g", str(gallery_path), "list"])
        assert result.exit_code == 0
        assert "No images found." in result.output

    def test_json_newest_first(self, runner: CliRunner, gallery: GalleryStore, png_bytes: bytes):
        first = gallery.add_image(png_bytes)
        second = gallery.add_image(png_bytes, kind="template")
        result = runner.invoke(cli, ["gallery", "-g", str(gallery.path), "list", "--format", "json"])
        assert result.exit_code == 0, result.output
        rows = json.loads(result.output)
        assert [r["id"] for r in rows] == [second.id, first.id]
        assert rows[0]["kind"] == "template"

    def test_filter_kind(self, runner: CliRunner, gallery: GalleryStore, png_bytes: bytes):
        gallery.add_image(png_bytes)
        template = gallery.add_image(png_bytes, kind="template")
        result = runner.invoke(cli, [
            "gallery", "-g", str(gallery.path), "list", "--kind", "template", "--format", "csv",
        ])
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert len(lines) == 2
        assert lines[1].startswith(template.id)


class TestGalleryAdd:
    def test_add(self, runner: CliRunner, gallery: GalleryStore, png_bytes: bytes, tmp_path: Path):
        image_file = tmp_path / "art.png"
        image_file.write_bytes(png_bytes)
        result = runner.invoke(cli, ["gallery", "-g", str(gallery.path), "add", str(image_file)])
        assert result.exit_code == 0, result.output
        assert "Added artwork:" in result.output
        [image] = gallery.get_images()
        assert gallery.read_image_bytes(image.id) == png_bytes

    def test_add_empty_file(self, runner: CliRunner, gallery_path: Path, tmp_path: Path):
        image_file = tmp_path / "empty.png"
        image_file.write_bytes(b"")
        result = runner.invoke(cli, ["gallery", "-g", str(gallery_path), "add", str(image_file)])
        assert result.exit_code == 1


class TestGalleryDelete:
    def test_delete(self, runner: CliRunner, gallery: GalleryStore, png_bytes: bytes):
        image = gallery.add_image(png_bytes)
        result = runner.invoke(cli, ["gallery", "-g", str(gallery.path), "delete", image.id])
        assert result.exit_code == 0
        assert "Deleted image:" in result.output
        assert gallery.count_images() == 0

    def test_delete_missing(self, runner: CliRunner, gallery_path: Path):
        result = runner.invoke(cli, ["gallery", "-g", str(gallery_path), "delete", "nope"])
        assert result.exit_code == 1
        assert "nope" in result.output


class TestGalleryClear:
    def test_clear_yes(self, runner: CliRunner, gallery: GalleryStore, png_bytes: bytes):
        for _ in range(3):
            gallery.add_image(png_bytes)
        result = runner.invoke(cli, ["gallery", "-g", str(gallery.path), "clear", "--yes"])
        assert result.exit_code == 0
        assert "Deleted 3 image(s)" in result.output
        assert gallery.count_images() == 0

    def test_clear_declined(self, runner: CliRunner, gallery: GalleryStore, png_bytes: bytes):
        gallery.add_image(png_bytes)
        result = runner.invoke(cli, ["gallery", "-g", str(gallery.path), "clear"], input="n\n")
        assert result.exit_code == 0
        assert "Aborted." in result.output
        assert gallery.count_images() == 1

    def test_clear_confirmed(self, runner: CliRunner, gallery: GalleryStore, png_bytes: bytes):
        gallery.add_image(png_bytes)
        result = runner.invoke(cli, ["gallery", "-g", str(gallery.path), "clear"], input="y\n")
        assert result.exit_code == 0
        assert gallery.count_images() == 0


class TestGalleryErrors:
    def test_nonexistent_gallery(self, runner: CliRunner):
        result = runner.invoke(cli, ["gallery", "-g", "/nonexistent", "list"])
        assert result.exit_code != 0

    def test_not_a_gallery(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(cli, ["gallery", "-g", str(tmp_path), "list"])
        assert result.exit_code == 1
        assert "No gallery found" in result.output
