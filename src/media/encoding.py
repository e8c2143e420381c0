# src/media/encoding.py — v2
"""Base64 helpers and image source loading (local file or HTTP URL).

Loading either returns the complete payload or raises IOFailureError;
nothing is ever partially encoded.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from pathlib import Path

import httpx

from llmapi.config.settings import Settings
from llmapi.llm.errors import DecodeError, IOFailureError
from llmapi.media.mime import detect_mime_type, guess_mime_from_name

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT_S = 30.0

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[^,]*)?;base64,", re.IGNORECASE)


def is_http_url(value: str) -> bool:
    """True for ``http://`` and ``https://`` references."""
    return value.startswith(("http://", "https://"))


def encode_base64(data: bytes) -> str:
    """Standard base64 (with padding) as ASCII text."""
    return base64.b64encode(data).decode("ascii")


def decode_base64(text: str) -> bytes:
    """Strictly decode standard base64; embedded whitespace is ignored.

    Raises:
        DecodeError: If the text is not valid base64.
    """
    compact = "".join(text.split())
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Invalid base64 payload: {e}") from e


def split_data_uri(value: str) -> tuple[str | None, str]:
    """Split ``data:<mime>;base64,<payload>`` into (mime, payload).

    Plain base64 text is returned unchanged with a None MIME type.
    """
    match = _DATA_URI_RE.match(value)
    if not match:
        return None, value
    return match.group("mime"), value[match.end():]


def read_image_file(path: str | Path) -> bytes:
    """Read a whole local file."""
    try:
        return Path(path).expanduser().read_bytes()
    except OSError as e:
        raise IOFailureError(f"Failed to read image file {path}: {e}") from e


def fetch_image_bytes(
    url: str,
    timeout: float = DEFAULT_FETCH_TIMEOUT_S,
    transport: httpx.BaseTransport | None = None,
) -> tuple[bytes, str | None]:
    """Blocking GET of a remote image.

    Returns:
        (body, content_type header or None).

    Raises:
        IOFailureError: On transport failure or non-2xx status.
    """
    try:
        with httpx.Client(transport=transport, timeout=timeout, follow_redirects=True) as client:
            response = client.get(url)
            response.raise_for_status()
    except httpx.HTTPError as e:
        raise IOFailureError(f"Failed to fetch image {url}: {e}") from e
    logger.debug("Fetched image: url=%s, bytes=%d", url, len(response.content))
    return response.content, response.headers.get("content-type")


async def fetch_image_bytes_async(
    url: str,
    timeout: float = DEFAULT_FETCH_TIMEOUT_S,
    transport: httpx.AsyncBaseTransport | None = None,
) -> tuple[bytes, str | None]:
    """Awaitable twin of fetch_image_bytes."""
    try:
        async with httpx.AsyncClient(
            transport=transport, timeout=timeout, follow_redirects=True,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
    except httpx.HTTPError as e:
        raise IOFailureError(f"Failed to fetch image {url}: {e}") from e
    logger.debug("Fetched image: url=%s, bytes=%d", url, len(response.content))
    return response.content, response.headers.get("content-type")


def resolve_mime(data: bytes, name: str | None = None, declared: str | None = None) -> str:
    """Pick a MIME type: sniffed content, then declared type, then file name."""
    sniffed = detect_mime_type(data)
    if sniffed != "application/octet-stream":
        return sniffed
    if declared:
        return declared.split(";", 1)[0].strip().lower()
    if name:
        return guess_mime_from_name(name) or sniffed
    return sniffed


def encode_image_to_base64(
    source: str,
    timeout: float | None = None,
    transport: httpx.BaseTransport | None = None,
    settings: Settings | None = None,
) -> tuple[str, str]:
    """Load a local path or URL and return (base64, mime_type).

    Without an explicit ``timeout`` a URL fetch is bounded by
    ``settings.image_fetch_timeout_s``.
    """
    if is_http_url(source):
        if timeout is None:
            timeout = (settings or Settings()).image_fetch_timeout_s
        data, content_type = fetch_image_bytes(source, timeout=timeout, transport=transport)
        return encode_base64(data), resolve_mime(data, name=source, declared=content_type)
    data = read_image_file(source)
    return encode_base64(data), resolve_mime(data, name=source)
