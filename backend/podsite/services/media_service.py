"""
Media Service - cover image uploads

1. compress_image() - downscale + re-encode large images with Pillow
2. BlobStorage.put() - store bytes and return a public URL
3. MediaService.upload_cover() - validate, compress and store an upload

Dependency: pip install Pillow
"""
import io
import secrets
import string
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from loguru import logger
from PIL import Image, UnidentifiedImageError

from podsite.config import (
    COMPRESS_THRESHOLD_BYTES,
    IMAGE_MAX_WIDTH,
    IMAGE_QUALITY,
    MAX_UPLOAD_BYTES,
    MEDIA_BASE_URL,
    MEDIA_ROOT,
)
from podsite.exceptions import StoreError, ValidationFailed

COVER_PREFIX = "episode-covers"
DEFAULT_CONTENT_TYPE = "image/jpeg"

# Second, harsher pass when the first one is still over the threshold
FALLBACK_MAX_WIDTH = 800
FALLBACK_QUALITY = 60

_ID_ALPHABET = string.ascii_lowercase + string.digits


class UploadTooLarge(ValidationFailed):
    """Upload exceeds media.max_upload_bytes."""

    error_type = "payload_too_large"


# ==================== Image Compression ====================


def _encode_jpeg(image: Image.Image, max_width: int, quality: int) -> bytes:
    # Intermediate images are closed as soon as they are encoded
    if image.width > max_width:
        height = round(image.height * max_width / image.width)
        with image.resize((max_width, height), Image.Resampling.LANCZOS) as resized:
            return _encode_jpeg(resized, max_width, quality)
    if image.mode not in ("RGB", "L"):
        with image.convert("RGB") as converted:
            return _encode_jpeg(converted, max_width, quality)

    output = io.BytesIO()
    image.save(output, format="JPEG", quality=quality, optimize=True)
    return output.getvalue()


def compress_image(data: bytes, max_width: int = IMAGE_MAX_WIDTH, quality: int = IMAGE_QUALITY) -> bytes:
    """
    Downscale to max_width (keeping aspect ratio) and re-encode as JPEG.

    Args:
        data: Encoded image bytes
        max_width: Width limit in pixels
        quality: JPEG quality (1-95)

    Returns:
        bytes: JPEG bytes

    Raises:
        ValidationFailed: Data is not a decodable image, or its pixel count
            trips Pillow's decompression bomb limit
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            return _encode_jpeg(image, max_width, quality)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ValidationFailed(f"Could not decode image: {e}") from e


def shrink_for_upload(data: bytes, threshold: int = COMPRESS_THRESHOLD_BYTES) -> tuple[bytes, bool]:
    """
    Compress images above threshold, retrying once at a smaller size.

    Returns:
        tuple[bytes, bool]: (data, whether it was re-encoded as JPEG)
    """
    if len(data) <= threshold:
        return data, False

    compressed = compress_image(data)
    if len(compressed) > threshold:
        logger.debug("Image still above threshold after first pass, compressing more")
        compressed = compress_image(data, FALLBACK_MAX_WIDTH, FALLBACK_QUALITY)

    logger.info(f"Compressed cover image: {len(data)} -> {len(compressed)} bytes")
    return compressed, True


# ==================== Blob Storage ====================


class BlobStorage(ABC):
    """put(bytes) -> URL"""

    @abstractmethod
    def put(self, pathname: str, data: bytes, content_type: str) -> str:
        """Store data under pathname and return its public URL."""


class LocalBlobStorage(BlobStorage):
    """
    Stores blobs as files under root and serves them from base_url.

    Attributes:
        root: Directory files are written to
        base_url: URL prefix the root directory is mounted at
    """

    def __init__(self, root: Union[str, Path] = MEDIA_ROOT, base_url: str = MEDIA_BASE_URL):
        self.root = Path(root)
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"

    def put(self, pathname: str, data: bytes, content_type: str) -> str:
        target = (self.root / pathname).resolve()
        if self.root.resolve() not in target.parents:
            raise ValidationFailed(f"Invalid blob path: {pathname}")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to write blob {pathname}: {e}")
            raise StoreError(f"Failed to store upload: {e}") from e

        return self.base_url + pathname


# ==================== Upload Flow ====================


def generate_cover_pathname(content_type: str, now_ms: Optional[int] = None) -> str:
    """episode-covers/{millis}-{6 random chars}.{ext}"""
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    random_id = "".join(secrets.choice(_ID_ALPHABET) for _ in range(6))
    extension = content_type.split("/", 1)[1] if "/" in content_type else ""
    extension = extension.split(";", 1)[0].split("+", 1)[0].strip() or "jpg"
    return f"{COVER_PREFIX}/{timestamp}-{random_id}.{extension}"


class MediaService:
    """
    Cover image upload service.

    Attributes:
        storage: Blob storage collaborator
        max_upload_bytes: Hard size limit on the raw upload
        compress_threshold: Size above which images are recompressed
    """

    def __init__(
        self,
        storage: BlobStorage,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
        compress_threshold: int = COMPRESS_THRESHOLD_BYTES,
    ):
        self.storage = storage
        self.max_upload_bytes = max_upload_bytes
        self.compress_threshold = compress_threshold

    def upload_cover(self, data: bytes, content_type: Optional[str]) -> str:
        """
        Validate, compress and store a cover image.

        Raises:
            ValidationFailed: Empty body or non-image content type
            UploadTooLarge: Body above max_upload_bytes

        Returns:
            str: Public URL of the stored image
        """
        content_type = (content_type or DEFAULT_CONTENT_TYPE).split(";", 1)[0].strip().lower()
        if not content_type.startswith("image/"):
            raise ValidationFailed("Please upload an image file")
        if not data:
            raise ValidationFailed("Upload body is empty")
        if len(data) > self.max_upload_bytes:
            limit_mb = self.max_upload_bytes // (1024 * 1024)
            raise UploadTooLarge(f"Image must be less than {limit_mb}MB")

        data, recompressed = shrink_for_upload(data, self.compress_threshold)
        if recompressed:
            content_type = "image/jpeg"

        pathname = generate_cover_pathname(content_type)
        url = self.storage.put(pathname, data, content_type)
        logger.info(f"Stored cover image: {pathname} ({len(data)} bytes)")
        return url
