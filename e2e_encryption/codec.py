"""
Canonical conversions between byte buffers and transport-safe text.

Base64 uses the standard alphabet with padding, which is what ``btoa`` /
``atob`` produce in browser peers. Decoding is strict: characters outside
the alphabet and bad padding raise ``binascii.Error`` instead of being
silently dropped.
"""

from __future__ import annotations

import base64
import binascii

TEXT_ENCODING = "utf-8"


def bytes_to_base64(data: bytes) -> str:
    """Encode bytes as standard base64 text."""
    return base64.standard_b64encode(data).decode("ascii")


def base64_to_bytes(text: str) -> bytes:
    """
    Decode standard base64 text.

    Raises:
        binascii.Error: If the text is not valid base64
        TypeError: If ``text`` is not a string
    """
    if not isinstance(text, str):
        raise TypeError(f"base64 input must be str, got {type(text).__name__}")
    try:
        ascii_text = text.encode("ascii")
    except UnicodeEncodeError as e:
        raise binascii.Error("Non-ASCII character in base64 input") from e
    return base64.b64decode(ascii_text, validate=True)


def encode_text(text: str) -> bytes:
    """Encode message text as UTF-8."""
    return text.encode(TEXT_ENCODING)


def decode_text(data: bytes) -> str:
    """Decode UTF-8 bytes, rejecting invalid sequences."""
    return data.decode(TEXT_ENCODING)
