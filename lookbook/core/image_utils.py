"""Image helpers for item photos.

Covers the small amount of image handling lookbook does itself: unpacking
data URLs, shrinking photos before they are sent for suggestions, and naming
uploads in object storage.
"""

import base64
import binascii
import io
import time
from typing import cast
from uuid import uuid4

from PIL import Image
from PIL.Image import Image as PILImage

DATA_URL_PREFIX = "data:"
DEFAULT_EXTENSION = "jpg"


def split_data_url(image_data: str) -> tuple[str | None, str]:
    """Split a data URL into its media type and base64 payload.

    Plain base64 (no ``data:`` header) is returned unchanged with a None
    media type.

    Example:
        >>> split_data_url("data:image/png;base64,iVBOR...")
        ('image/png', 'iVBOR...')
    """
    if not image_data.startswith(DATA_URL_PREFIX) or "," not in image_data:
        return None, image_data
    header, payload = image_data.split(",", 1)
    media_type = header[len(DATA_URL_PREFIX) :].split(";", 1)[0] or None
    return media_type, payload


def decode_base64(image_data_b64: str) -> bytes:
    """Decode base64, tolerating missing padding.

    Raises:
        binascii.Error: If the data is not valid base64 even after padding.
    """
    try:
        return base64.b64decode(image_data_b64, validate=True)
    except binascii.Error:
        padded = image_data_b64
        while len(padded) % 4:
            padded += "="
        return base64.b64decode(padded)


def detect_media_type(image_data_b64: str) -> str:
    """Identify the MIME type of a base64 image from its contents.

    Raises:
        binascii.Error: If the data is not valid base64.
        PIL.UnidentifiedImageError: If the bytes are not a recognised image.
        PIL.Image.DecompressionBombError: If the image exceeds Pillow's pixel limit.
    """
    img: PILImage = Image.open(io.BytesIO(decode_base64(image_data_b64)))
    return Image.MIME.get(img.format or "", "application/octet-stream")


def compress_image(
    image_data_b64: str,
    max_size: tuple[int, int] = (1024, 1024),
    quality: int = 80,
) -> str:
    """Shrink a photo to fit max_size and re-encode it as JPEG.

    Aspect ratio is preserved and small images are never upscaled.

    Args:
        image_data_b64: The base64-encoded image data.
        max_size: Maximum dimensions (width, height) in pixels.
        quality: JPEG quality level from 1-100.

    Returns:
        The base64-encoded JPEG.

    Raises:
        binascii.Error: If the input is not valid base64 data after padding.
        PIL.UnidentifiedImageError: If the bytes are not a recognised image.
    """
    img: PILImage = Image.open(io.BytesIO(decode_base64(image_data_b64)))

    # JPEG has no alpha or palette modes
    if img.mode not in ("RGB", "L"):
        img = img.convert("RGB")

    ratio = min(max_size[0] / img.size[0], max_size[1] / img.size[1], 1.0)
    new_size = cast(tuple[int, int], tuple(max(1, int(x * ratio)) for x in img.size))
    if new_size != img.size:
        img = img.resize(new_size, Image.Resampling.LANCZOS)

    buffer = io.BytesIO()
    img.save(buffer, format="JPEG", quality=quality, optimize=True)
    return base64.b64encode(buffer.getvalue()).decode("utf-8")


def build_storage_path(
    vendor_id: str,
    filename: str,
    timestamp_ms: int | None = None,
) -> str:
    """Object-storage key for an uploaded item photo.

    Keys look like ``<vendor_id>/<millis>-<random>.<ext>``; the extension is
    taken from the uploaded filename and falls back to ``jpg``.
    """
    _, dot, ext = filename.rpartition(".")
    extension = ext.lower() if dot and ext else DEFAULT_EXTENSION
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{vendor_id}/{timestamp_ms}-{uuid4().hex[:10]}.{extension}"
