"""
Base64 text codec for the GitHub contents API.

The contents API carries file bodies as base64 with embedded newlines.
Encoding has a direct path and a chunked streaming path used when the
payload exceeds ``DIRECT_ENCODE_LIMIT``. Decoding tries strict UTF-8,
then a looser legacy decode, and finally hands back the raw payload.
"""

import base64
import binascii
import io

from sitesmith.logging import get_logger

logger = get_logger("codec")

# Largest UTF-8 payload (in bytes) encoded in a single call
DIRECT_ENCODE_LIMIT = 1024 * 1024

# Must be a multiple of 3 so chunk outputs concatenate without padding
STREAM_CHUNK_SIZE = 3 * 64 * 1024


class PayloadTooLargeError(ValueError):
    """Raised by the direct encoder when the payload exceeds its limit."""


def _encode_direct(data: bytes, limit: int) -> str:
    if len(data) > limit:
        raise PayloadTooLargeError(f"{len(data)} bytes exceeds direct limit of {limit}")
    return base64.b64encode(data).decode("ascii")


def _encode_streaming(data: bytes, chunk_size: int = STREAM_CHUNK_SIZE) -> str:
    source = io.BytesIO(data)
    out = io.StringIO()
    while True:
        chunk = source.read(chunk_size)
        if not chunk:
            break
        out.write(base64.b64encode(chunk).decode("ascii"))
    return out.getvalue()


def encode_base64(text: str, direct_limit: int = DIRECT_ENCODE_LIMIT) -> str:
    """
    Encode text as base64 of its UTF-8 bytes.

    Args:
        text: Text to encode
        direct_limit: Byte size above which the streaming encoder is used

    Returns:
        Base64 string without line breaks
    """
    data = text.encode("utf-8")
    try:
        return _encode_direct(data, direct_limit)
    except PayloadTooLargeError:
        logger.debug("Direct encode refused %d bytes, streaming instead", len(data))
        return _encode_streaming(data)


def decode_base64(payload: str | None) -> str:
    """
    Decode a base64 payload from the contents API into text.

    Args:
        payload: Base64 content, possibly wrapped with newlines

    Returns:
        Decoded text, or the raw payload if it is not decodable at all
    """
    if not payload:
        return ""

    compact = "".join(payload.split())
    try:
        raw = base64.b64decode(compact, validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        logger.debug("Strict decode failed, trying legacy decode")

    try:
        raw = base64.b64decode(compact + "=" * (-len(compact) % 4))
    except binascii.Error:
        logger.warning("Content is not valid base64, returning it undecoded")
        return payload

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("latin-1")
