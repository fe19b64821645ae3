"""
Exception classes for end-to-end encryption operations.

Errors are never raised out of the public operations; they travel inside
``Err`` results (see ``result.py``). Each one carries a human-readable
message and, optionally, the underlying cause.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class KeyRole(Enum):
    """Which half of a key pair an export/import failure refers to."""

    PRIVATE = "private"
    PUBLIC = "public"

    def __str__(self) -> str:
        return self.value


class E2EError(Exception):
    """Base exception for all end-to-end encryption operations."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class ValidationError(E2EError):
    """Exported key structure is malformed (caught before any engine call)."""

    pass


class KeyGenerationError(E2EError):
    """Engine failed to generate a key pair."""

    pass


class _RoleError(E2EError):
    def __init__(
        self,
        message: str,
        role: KeyRole,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, cause)
        self.role = role


class KeyExportError(_RoleError):
    """Engine could not serialize the private or public key handle."""

    pass


class KeyImportError(_RoleError):
    """Key bytes could not be decoded or were rejected by the engine."""

    pass


class KeyAgreementError(E2EError):
    """Shared key derivation failed (wrong key usage or engine rejection)."""

    pass


class EncryptionError(E2EError):
    """Message encryption failed."""

    pass


class DecryptionError(E2EError):
    """Message is unusable: wrong key, tampered or malformed envelope."""

    pass


class SerializationError(E2EError):
    """JSON serialization or deserialization error."""

    pass


class ConfigError(E2EError):
    """Configuration error."""

    pass
