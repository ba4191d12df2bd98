"""Base64 contract and media type sniffing."""
import pytest

from app.core.encoding import decode_image, encode_image, guess_media_type
from app.core.exceptions import DecodeError
from conftest import JPEG_BYTES, PNG_BYTES


@pytest.mark.parametrize("payload", [b"", b"\x00", bytes(range(256)), PNG_BYTES])
def test_decode_reverses_encode(payload):
    assert decode_image(encode_image(payload)) == payload


def test_encode_produces_standard_base64_text():
    assert encode_image(b"hello") == "aGVsbG8="


@pytest.mark.parametrize("text", ["not base64!", "abc", "aGVsbG8", "ümlaut"])
def test_decode_rejects_invalid_text(text):
    with pytest.raises(DecodeError):
        decode_image(text)


def test_guess_media_type_known_signatures():
    assert guess_media_type(PNG_BYTES) == "image/png"
    assert guess_media_type(JPEG_BYTES) == "image/jpeg"
    assert guess_media_type(b"GIF89a....") == "image/gif"
    assert guess_media_type(b"RIFF\x00\x00\x00\x00WEBPVP8 ") == "image/webp"


def test_guess_media_type_falls_back_to_default():
    assert guess_media_type(b"plain text") == "image/png"
    assert guess_media_type(b"", default="application/octet-stream") == "application/octet-stream"
