"""Binary payload <-> base64 text, plus media type sniffing for previews."""
import base64
import binascii
import logging

from app.core.exceptions import DecodeError

logger = logging.getLogger(__name__)

# (signature prefix, media type)
_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
)


def encode_image(payload: bytes) -> str:
    return base64.b64encode(payload).decode("ascii")


def decode_image(text: str) -> bytes:
    """Strictly decode base64 text. Raises DecodeError instead of returning garbage."""
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError, ValueError) as e:
        logger.error(f"Stored image data is not valid base64: {e}")
        raise DecodeError(f"Invalid base64 image data: {e}") from e


def guess_media_type(payload: bytes, default: str = "image/png") -> str:
    for signature, media_type in _SIGNATURES:
        if payload.startswith(signature):
            return media_type
    if payload[:4] == b"RIFF" and payload[8:12] == b"WEBP":
        return "image/webp"
    return default
