"""
Tests for base64 and text codecs.
"""

from __future__ import annotations

import binascii

import pytest

from e2e_encryption.codec import base64_to_bytes, bytes_to_base64, decode_text, encode_text


def test_base64_matches_btoa_output() -> None:
    assert bytes_to_base64(b"Hello") == "SGVsbG8="
    assert bytes_to_base64(b"") == ""
    assert base64_to_bytes("SGVsbG8=") == b"Hello"


def test_base64_covers_every_byte_value() -> None:
    data = bytes(range(256))
    assert base64_to_bytes(bytes_to_base64(data)) == data


@pytest.mark.parametrize("bad", ["SGVsbG8", "SGVs*G8=", "SGVsbG8=\n", "SGVsbG8é"])
def test_base64_rejects_malformed_input(bad: str) -> None:
    with pytest.raises(binascii.Error):
        base64_to_bytes(bad)


def test_base64_error_does_not_quote_input() -> None:
    with pytest.raises(binascii.Error) as excinfo:
        base64_to_bytes("c2VjcmV0é")
    assert "c2VjcmV0" not in str(excinfo.value)
    assert "é" not in str(excinfo.value)


def test_base64_rejects_non_string() -> None:
    with pytest.raises(TypeError):
        base64_to_bytes(b"SGVsbG8=")  # type: ignore[arg-type]


def test_text_is_utf8() -> None:
    assert encode_text("héllo 👋") == "héllo 👋".encode("utf-8")
    assert decode_text(encode_text("日本語")) == "日本語"


def test_invalid_utf8_is_rejected() -> None:
    with pytest.raises(UnicodeDecodeError):
        decode_text(b"\xff\xfe")
