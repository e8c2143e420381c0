# src/media/storage.py — v1
"""One-shot helper that writes generated images into a directory."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from llmapi.llm.errors import IOFailureError
from llmapi.media.mime import detect_mime_type, extension_for_mime

logger = logging.getLogger(__name__)


def save_images_to_output_dir(images: Sequence[bytes], output_dir: str | Path) -> list[Path]:
    """Write images as image_000.<ext>, image_001.<ext>, ...

    Numbering restarts at 000 on every call; existing files with the same
    name are overwritten. The extension follows the sniffed MIME type.

    Args:
        images: Raw image payloads.
        output_dir: Target directory (created if missing).

    Returns:
        Written paths, in input order.

    Raises:
        IOFailureError: If the directory or a file cannot be written.
    """
    out = Path(output_dir).expanduser()
    try:
        out.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IOFailureError(f"Failed to create output directory {out}: {e}") from e

    saved: list[Path] = []
    for index, data in enumerate(images):
        ext = extension_for_mime(detect_mime_type(data))
        path = out / f"image_{index:03d}{ext}"
        try:
            path.write_bytes(data)
        except OSError as e:
            raise IOFailureError(f"Failed to write image file {path}: {e}") from e
        saved.append(path)

    logger.info("Saved %d image(s) to %s", len(saved), out)
    return saved
