# src/media/mime.py — v1
"""MIME type detection for image payloads.

Content sniffing (Pillow) first, extension guessing second,
application/octet-stream last. Detection never raises.
"""

from __future__ import annotations

import io
import logging
import mimetypes
import os
from pathlib import Path

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"

# Mapping of extensions to MIME types
_MIME_MAP: dict[str, str] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".tiff": "image/tiff",
    ".tif": "image/tiff",
    ".heic": "image/heic",
    ".heif": "image/heif",
}

_EXTENSION_MAP: dict[str, str] = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/webp": ".webp",
    "image/gif": ".gif",
    "image/bmp": ".bmp",
    "image/tiff": ".tiff",
    "image/heic": ".heic",
    "image/heif": ".heif",
}


def detect_mime_type(source: bytes | str | Path) -> str:
    """Detect the MIME type of raw bytes or of a file name.

    Args:
        source: Image bytes, or a path/filename (the file need not exist).

    Returns:
        A MIME type string; ``application/octet-stream`` when nothing matched.
    """
    if isinstance(source, (bytes, bytearray)):
        return _sniff(io.BytesIO(bytes(source))) or DEFAULT_MIME_TYPE

    name = str(source)
    if os.path.isfile(name):
        sniffed = _sniff(name)
        if sniffed:
            return sniffed
    return guess_mime_from_name(name) or DEFAULT_MIME_TYPE


def guess_mime_from_name(name: str) -> str | None:
    """Extension-based guess; None when the extension is unknown."""
    ext = Path(name).suffix.lower()
    if ext in _MIME_MAP:
        return _MIME_MAP[ext]
    guessed, _ = mimetypes.guess_type(name)
    return guessed


def extension_for_mime(mime_type: str) -> str:
    """Preferred file extension (with dot) for a MIME type, ``.bin`` if unknown."""
    mime_type = mime_type.split(";", 1)[0].strip().lower()
    if mime_type in _EXTENSION_MAP:
        return _EXTENSION_MAP[mime_type]
    return mimetypes.guess_extension(mime_type) or ".bin"


def _sniff(fp: io.BytesIO | str) -> str | None:
    try:
        with Image.open(fp) as img:
            fmt = img.format
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError):
        return None
    if fmt is None:
        return None
    mime = Image.MIME.get(fmt.upper())
    if mime is None:
        logger.debug("Pillow recognised format %s without a MIME mapping", fmt)
    return mime
