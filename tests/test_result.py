"""
Tests for the Ok/Err result type and error chaining.
"""

from __future__ import annotations

import asyncio

import pytest

from e2e_encryption import (
    DecryptionError,
    E2EError,
    Err,
    KeyImportError,
    KeyRole,
    Ok,
    capture,
    err,
    ok,
)


def test_ok_carries_value() -> None:
    result = ok(42)
    assert result.is_ok and not result.is_err
    assert result.unwrap() == 42
    assert result.map(lambda v: v + 1) == Ok(43)


def test_err_carries_error_and_raises_on_unwrap() -> None:
    error = E2EError("boom")
    result = err(error)
    assert result.is_err and not result.is_ok
    assert result.map(lambda v: v) is result
    with pytest.raises(E2EError) as exc_info:
        result.unwrap()
    assert exc_info.value is error


def test_error_message_chains_cause() -> None:
    inner = ValueError("bad padding")
    outer = KeyImportError("Failed to import private key", role=KeyRole.PRIVATE, cause=inner)
    assert str(outer) == "Failed to import private key: bad padding"
    assert outer.cause is inner
    assert outer.__cause__ is inner
    assert outer.role is KeyRole.PRIVATE
    assert str(KeyRole.PUBLIC) == "public"


def test_nested_errors_render_full_chain() -> None:
    root = E2EError("engine rejected key")
    wrapped = E2EError("import failed", cause=root)
    assert str(E2EError("handshake aborted", cause=wrapped)) == (
        "handshake aborted: import failed: engine rejected key"
    )


async def test_capture_wraps_exceptions() -> None:
    async def failing() -> int:
        raise RuntimeError("engine failure")

    result = await capture(failing(), DecryptionError, "Failure while decrypting message")
    assert isinstance(result, Err)
    assert isinstance(result.error, DecryptionError)
    assert result.error.message == "Failure while decrypting message"
    assert isinstance(result.error.cause, RuntimeError)


async def test_capture_passes_role_through() -> None:
    async def failing() -> int:
        raise ValueError("not DER")

    result = await capture(failing(), KeyImportError, "Failed", role=KeyRole.PUBLIC)
    assert isinstance(result, Err)
    assert result.error.role is KeyRole.PUBLIC


async def test_capture_returns_ok() -> None:
    async def succeeding() -> str:
        return "value"

    assert await capture(succeeding(), E2EError, "unused") == Ok("value")


async def test_capture_does_not_swallow_cancellation() -> None:
    async def cancelled() -> None:
        raise asyncio.CancelledError()

    with pytest.raises(asyncio.CancelledError):
        await capture(cancelled(), E2EError, "unused")
