"""
Unit tests for the cover image upload service.
"""
import io
import os
import re

import pytest
from PIL import Image

from podsite.exceptions import ValidationFailed
from podsite.services.media_service import (
    LocalBlobStorage,
    MediaService,
    UploadTooLarge,
    compress_image,
    generate_cover_pathname,
    shrink_for_upload,
)


def make_png(width: int = 64, height: int = 32, noise: bool = False) -> bytes:
    """Encode a test image; noise makes it incompressible."""
    if noise:
        image = Image.frombytes("RGB", (width, height), os.urandom(width * height * 3))
    else:
        image = Image.new("RGBA", (width, height), (200, 30, 30, 255))
    output = io.BytesIO()
    image.save(output, format="PNG")
    return output.getvalue()


@pytest.fixture
def storage(tmp_path):
    return LocalBlobStorage(tmp_path / "media", "/media")


class TestCompressImage:
    """Test compress_image / shrink_for_upload"""

    def test_downscales_wide_images_to_jpeg(self):
        data = compress_image(make_png(2400, 1200), max_width=1200, quality=80)

        with Image.open(io.BytesIO(data)) as image:
            assert image.format == "JPEG"
            assert image.size == (1200, 600)

    def test_narrow_images_keep_size(self):
        data = compress_image(make_png(300, 200))

        with Image.open(io.BytesIO(data)) as image:
            assert image.size == (300, 200)

    def test_undecodable_data_rejected(self):
        with pytest.raises(ValidationFailed):
            compress_image(b"definitely not an image")

    def test_decompression_bomb_rejected(self, monkeypatch):
        """
        Given: An image whose pixel count is over twice Pillow's limit
        When: Compressing it
        Then: ValidationFailed instead of a leaked DecompressionBombError
        """
        data = make_png(64, 32)
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

        with pytest.raises(ValidationFailed):
            compress_image(data)

    def test_bomb_upload_rejected_before_storage(self, storage, tmp_path, monkeypatch):
        service = MediaService(storage, compress_threshold=0)
        data = make_png(64, 32)
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

        with pytest.raises(ValidationFailed):
            service.upload_cover(data, "image/png")

        assert not (tmp_path / "media").exists()

    def test_small_uploads_untouched(self):
        original = make_png()

        data, recompressed = shrink_for_upload(original, threshold=1024 * 1024)

        assert data == original
        assert not recompressed

    def test_large_uploads_recompressed(self):
        original = make_png(1600, 800, noise=True)

        data, recompressed = shrink_for_upload(original, threshold=len(original) // 2)

        assert recompressed
        assert len(data) < len(original)


class TestBlobStorage:
    """Test LocalBlobStorage"""

    def test_put_writes_file_and_returns_url(self, storage, tmp_path):
        url = storage.put("episode-covers/1-abc123.png", b"bytes", "image/png")

        assert url == "/media/episode-covers/1-abc123.png"
        assert (tmp_path / "media" / "episode-covers" / "1-abc123.png").read_bytes() == b"bytes"

    def test_path_traversal_rejected(self, storage):
        with pytest.raises(ValidationFailed):
            storage.put("../escape.png", b"bytes", "image/png")


class TestCoverPathname:
    """Test generate_cover_pathname"""

    def test_format(self):
        pathname = generate_cover_pathname("image/png", now_ms=1717200000000)

        assert re.fullmatch(r"episode-covers/1717200000000-[a-z0-9]{6}\.png", pathname)

    def test_svg_extension(self):
        assert generate_cover_pathname("image/svg+xml").endswith(".svg")


class TestUploadCover:
    """Test MediaService.upload_cover"""

    def test_small_image_stored_as_is(self, storage, tmp_path):
        """
        Given: A small PNG upload
        When: Uploading it
        Then: It is stored unchanged under episode-covers/ and its URL returned
        """
        data = make_png()
        service = MediaService(storage)

        url = service.upload_cover(data, "image/png")

        assert url.startswith("/media/episode-covers/")
        assert url.endswith(".png")
        stored = tmp_path / "media" / url[len("/media/"):]
        assert stored.read_bytes() == data

    def test_large_image_recompressed_to_jpeg(self, storage):
        data = make_png(1600, 800, noise=True)
        service = MediaService(storage, compress_threshold=len(data) // 2)

        url = service.upload_cover(data, "image/png")

        assert url.endswith(".jpeg")

    def test_non_image_rejected(self, storage):
        with pytest.raises(ValidationFailed, match="image"):
            MediaService(storage).upload_cover(b"%PDF-1.4", "application/pdf")

    def test_empty_body_rejected(self, storage):
        with pytest.raises(ValidationFailed):
            MediaService(storage).upload_cover(b"", "image/png")

    def test_oversized_upload_rejected(self, storage):
        service = MediaService(storage, max_upload_bytes=1024)

        with pytest.raises(UploadTooLarge):
            service.upload_cover(b"x" * 2048, "image/png")
