"""Tests for bucket storage and public URL handling."""

from pathlib import Path

import pytest

from catalog_admin.core.config import get_settings
from catalog_admin.core.errors import StorageError
from catalog_admin.services import storage


def _object_file(bucket, name):
    return Path(get_settings().storage_root) / bucket / name


class TestPublicUrls:
    def test_build_public_url(self):
        url = storage.build_public_url("product-images", "pump front.png")
        assert url == "http://testserver/storage/v1/object/public/product-images/pump%20front.png"

    def test_path_from_url_strips_bucket(self):
        url = "https://cdn.acme.io/storage/v1/object/public/product-images/2024/pump%20front.png"
        assert storage.object_path_from_url(url, "product-images") == "2024/pump front.png"

    def test_path_from_url_for_other_bucket_keeps_prefix(self):
        url = "http://testserver/storage/v1/object/public/product-charts/curve.png"
        assert storage.object_path_from_url(url, "product-images") == "product-charts/curve.png"

    @pytest.mark.parametrize("url", ["", "http://testserver/static/pump.png", "not a url"])
    def test_invalid_url(self, url):
        with pytest.raises(StorageError):
            storage.object_path_from_url(url, "product-images")


class TestUploadAndDelete:
    def test_upload_then_delete(self):
        url = storage.upload_file(b"png-bytes", "Pump.PNG", "product-images")
        path = storage.object_path_from_url(url, "product-images")
        assert path.endswith(".png")
        assert _object_file("product-images", path).read_bytes() == b"png-bytes"

        storage.delete_file(url, "product-images")
        assert not _object_file("product-images", path).exists()

    def test_explicit_name_never_overwrites(self):
        storage.upload_file(b"first", "manual.pdf", "product-documents", file_name="fixed-manual.pdf")
        with pytest.raises(StorageError):
            storage.upload_file(b"second", "manual.pdf", "product-documents", file_name="fixed-manual.pdf")
        assert _object_file("product-documents", "fixed-manual.pdf").read_bytes() == b"first"

    def test_upload_many(self):
        urls = storage.upload_files([("a.jpg", b"a"), ("b.jpg", b"b")], "product-dimensions")
        assert len(urls) == 2
        assert len(set(urls)) == 2

    def test_unknown_bucket(self):
        with pytest.raises(StorageError):
            storage.upload_file(b"data", "x.png", "not-a-bucket")

    def test_path_traversal_rejected(self):
        with pytest.raises(StorageError):
            storage.upload_file(b"data", "x.png", "product-images", file_name="../escape.png")

    def test_delete_missing_object(self):
        url = storage.build_public_url("product-images", "never-uploaded.png")
        with pytest.raises(StorageError):
            storage.delete_file(url, "product-images")

    def test_ensure_buckets_creates_every_bucket(self):
        storage.ensure_buckets()
        for bucket in storage.BUCKET_NAMES:
            assert (Path(get_settings().storage_root) / bucket).is_dir()


class TestFileHelpers:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("photo.JPG", "image"),
            ("http://testserver/storage/v1/object/public/product-images/a.webp", "image"),
            ("install.mp4", "video"),
            ("manual.pdf", "document"),
            ("no-extension", "document"),
        ],
    )
    def test_get_file_type(self, name, expected):
        assert storage.get_file_type(name) == expected

    @pytest.mark.parametrize(
        "size, expected",
        [(0, "0 Bytes"), (512, "512 Bytes"), (1024, "1 KB"), (1536, "1.5 KB"), (5 * 1024 * 1024, "5 MB")],
    )
    def test_format_file_size(self, size, expected):
        assert storage.format_file_size(size) == expected

    def test_validate_file_size(self):
        valid, error = storage.validate_file("big.pdf", 3 * 1024 * 1024, max_size_mb=2)
        assert not valid
        assert error == "File size must be less than 2MB"

    def test_validate_file_type(self):
        valid, error = storage.validate_file("notes.txt", 10, allowed_types=["pdf", "docx"])
        assert not valid
        assert "pdf, docx" in error
        assert storage.validate_file("manual.PDF", 10, allowed_types=["pdf"]) == (True, None)
