"""Image compression adapter.

Shrinks an image into a bounding box and re-encodes it with a quality
factor before it is uploaded. The function is stateless and safe to call
once per attempt from any worker thread.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import PurePath

from PIL import Image, ImageOps, UnidentifiedImageError

from imgup.core.exceptions import CompressionFailure
from imgup.models.upload import ImageFile
from imgup.uploaders.constants import (
    DEFAULT_IMAGE_FORMAT,
    DEFAULT_MAX_HEIGHT,
    DEFAULT_MAX_WIDTH,
    DEFAULT_QUALITY,
)

logger = logging.getLogger(__name__)

# Pillow format name -> (file extension, content type)
OUTPUT_FORMATS = {
    "WEBP": (".webp", "image/webp"),
    "JPEG": (".jpg", "image/jpeg"),
    "PNG": (".png", "image/png"),
}

# Formats that cannot store an alpha channel
_OPAQUE_FORMATS = {"JPEG"}


@dataclass(frozen=True)
class CompressionSettings:
    """Fixed compression parameters applied to every attempt."""

    max_width: int = DEFAULT_MAX_WIDTH
    max_height: int = DEFAULT_MAX_HEIGHT
    quality: float = DEFAULT_QUALITY
    image_format: str = DEFAULT_IMAGE_FORMAT


def _output_name(name: str, extension: str) -> str:
    stem = PurePath(name).stem or "image"
    return f"{stem}{extension}"


def _prepare_mode(image: Image.Image, image_format: str) -> Image.Image:
    """Convert palette/CMYK/etc. images to a mode the output format can encode."""
    has_alpha = image.mode in ("RGBA", "LA") or (
        image.mode == "P" and "transparency" in image.info
    )
    if has_alpha and image_format not in _OPAQUE_FORMATS:
        return image.convert("RGBA") if image.mode != "RGBA" else image
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


def compress_image(
    file: ImageFile,
    *,
    max_width: int = DEFAULT_MAX_WIDTH,
    max_height: int = DEFAULT_MAX_HEIGHT,
    quality: float = DEFAULT_QUALITY,
    image_format: str = DEFAULT_IMAGE_FORMAT,
) -> ImageFile:
    """Resize an image to fit max_width x max_height and re-encode it.

    The aspect ratio is preserved and images are never upscaled. EXIF
    orientation is applied before resizing so rotated photos stay upright.

    Args:
        file: Source image (JPEG or PNG).
        max_width: Maximum output width in pixels.
        max_height: Maximum output height in pixels.
        quality: Quality factor in (0, 1].
        image_format: Output format ("WEBP", "JPEG" or "PNG").

    Returns:
        The compressed image, renamed with the output format's extension.

    Raises:
        CompressionFailure: If the source cannot be decoded or encoded.
    """
    image_format = image_format.upper()
    if image_format not in OUTPUT_FORMATS:
        raise CompressionFailure(file.name, f"unsupported output format {image_format}")
    extension, content_type = OUTPUT_FORMATS[image_format]

    try:
        with Image.open(io.BytesIO(file.content)) as source:
            image = ImageOps.exif_transpose(source)
            image.thumbnail((max_width, max_height), Image.Resampling.LANCZOS)
            image = _prepare_mode(image, image_format)

            buffer = io.BytesIO()
            image.save(
                buffer,
                format=image_format,
                quality=max(1, min(100, round(quality * 100))),
                optimize=True,
            )
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise CompressionFailure(file.name, str(e)) from e

    compressed = ImageFile(
        name=_output_name(file.name, extension),
        content=buffer.getvalue(),
        content_type=content_type,
    )
    logger.debug(
        "Compressed %s: %d -> %d bytes (%s)",
        file.name,
        file.size,
        compressed.size,
        image_format,
    )
    return compressed
