"""
Detection and migration of the legacy raw key pair format.

Early clients stored key pairs as raw 32-byte X25519 keys:

```json
{"type": "X25519", "publicKey": "<base64 raw>", "privateKey": "<base64 raw>"}
```

That format is never accepted by ``KeyPairService.import_key_pair``; it has
to be migrated to the structured SPKI/PKCS8 format first.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Literal, Mapping, Optional, Union

import pydantic
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.x25519 import (
    X25519PrivateKey,
    X25519PublicKey,
)
from pydantic import BaseModel, ConfigDict, Field, StrictStr

from .codec import base64_to_bytes
from .config import Settings
from .engine import run_engine
from .errors import KeyImportError, KeyRole, ValidationError
from .keys import (
    ExportedKeyPair,
    KeyPair,
    KeyPairService,
    PrivateKey,
    PublicKey,
    describe_validation_error,
)
from .result import Err, Ok, Result, capture

logger = logging.getLogger(__name__)


class KeyPairFormat(Enum):
    """Shape of a serialized key pair."""

    STRUCTURED = "structured"
    LEGACY_RAW = "legacy-raw"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class LegacyKeyPair(BaseModel):
    """Legacy raw key pair."""

    model_config = ConfigDict(frozen=True, hide_input_in_errors=True)

    type: Literal["X25519"]
    public_key: StrictStr = Field(alias="publicKey")
    private_key: StrictStr = Field(alias="privateKey")


def detect_key_pair_format(obj: Any) -> KeyPairFormat:
    """
    Classify a serialized key pair by its structure alone.

    Structured pairs carry ``algorithm`` and nested key objects; legacy
    pairs carry ``type`` and bare strings. Nothing is decoded.
    """
    if isinstance(obj, str):
        try:
            obj = json.loads(obj)
        except (ValueError, RecursionError):
            return KeyPairFormat.UNKNOWN
    if isinstance(obj, ExportedKeyPair):
        return KeyPairFormat.STRUCTURED
    if not isinstance(obj, Mapping):
        return KeyPairFormat.UNKNOWN

    public_key = obj.get("publicKey")
    private_key = obj.get("privateKey")
    if "algorithm" in obj and isinstance(public_key, Mapping) and isinstance(private_key, Mapping):
        return KeyPairFormat.STRUCTURED
    if "type" in obj and isinstance(public_key, str) and isinstance(private_key, str):
        return KeyPairFormat.LEGACY_RAW
    return KeyPairFormat.UNKNOWN


async def migrate_legacy_key_pair(
    obj: Union[Mapping[str, Any], str],
    settings: Optional[Settings] = None,
) -> Result[ExportedKeyPair]:
    """
    Convert a legacy raw key pair into the structured format.

    The public key must belong to the private key; a mismatch is reported
    as a public key import failure.

    Args:
        obj: Legacy key pair (mapping or JSON text)
        settings: Engine settings

    Returns:
        Ok(ExportedKeyPair), Err(ValidationError) or Err(KeyImportError)
    """
    settings = settings or Settings()

    data: Any = obj
    if isinstance(obj, str):
        try:
            data = json.loads(obj)
        except (ValueError, RecursionError) as e:
            return Err(ValidationError("Legacy key pair is not valid JSON", cause=e))
    try:
        legacy = LegacyKeyPair.model_validate(data)
    except pydantic.ValidationError as e:
        return Err(
            ValidationError(
                f"Invalid legacy key pair ({describe_validation_error(e)})",
                cause=e,
            )
        )

    private_key = await capture(
        run_engine(settings, _load_raw_private, legacy.private_key),
        KeyImportError,
        "Failed to import legacy private key",
        role=KeyRole.PRIVATE,
    )
    if isinstance(private_key, Err):
        logger.warning("%s", private_key.error.message)
        return private_key

    public_key = await capture(
        run_engine(settings, _load_raw_public, legacy.public_key, private_key.value),
        KeyImportError,
        "Failed to import legacy public key",
        role=KeyRole.PUBLIC,
    )
    if isinstance(public_key, Err):
        logger.warning("%s", public_key.error.message)
        return public_key

    key_pair = KeyPair(
        private_key=PrivateKey(private_key.value),
        public_key=PublicKey(public_key.value),
    )
    exported = await KeyPairService(settings).export(key_pair)
    if isinstance(exported, Ok):
        logger.info("Migrated legacy raw key pair to structured format")
    return exported


def _load_raw_private(value: str) -> X25519PrivateKey:
    return X25519PrivateKey.from_private_bytes(base64_to_bytes(value))


def _load_raw_public(value: str, private_key: X25519PrivateKey) -> X25519PublicKey:
    public_key = X25519PublicKey.from_public_bytes(base64_to_bytes(value))
    expected = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    actual = public_key.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    if actual != expected:
        raise ValueError("public key does not belong to the private key")
    return public_key
