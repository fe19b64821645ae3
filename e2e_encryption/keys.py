"""
X25519 key pair lifecycle.

This module provides:
- PrivateKey / PublicKey: Opaque, usage-tagged key handles
- KeyPair: A private and public key generated together
- ExportedKeyPair: The serializable, schema-validated key pair format
- KeyPairService: Generate, export, validate and import key pairs

Wire format of an exported key pair:

```json
{
  "algorithm": "X25519",
  "publicKey": {"format": "spki", "value": "<base64 DER>"},
  "privateKey": {"format": "pkcs8", "value": "<base64 DER>"}
}
```
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, FrozenSet, Literal, Mapping, Optional, Union

import pydantic
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.x25519 import (
    X25519PrivateKey,
    X25519PublicKey,
)
from pydantic import BaseModel, ConfigDict, Field, StrictStr

from .codec import base64_to_bytes, bytes_to_base64
from .config import Settings
from .engine import run_engine
from .errors import (
    KeyExportError,
    KeyGenerationError,
    KeyImportError,
    KeyRole,
    SerializationError,
    ValidationError,
)
from .result import Err, Ok, Result, capture

logger = logging.getLogger(__name__)

ALGORITHM = "X25519"
PUBLIC_KEY_FORMAT = "spki"
PRIVATE_KEY_FORMAT = "pkcs8"
DERIVE_KEY = "deriveKey"


# =============================================================================
# Key Handles
# =============================================================================


class PrivateKey:
    """
    X25519 private key handle.

    Usable only for deriving shared keys. Raw key bytes are not reachable
    through this object; the validated export path is the only way out.
    Obtain instances from ``KeyPairService``.
    """

    __slots__ = ("_engine_key", "_extractable")

    algorithm: str = ALGORITHM
    usages: FrozenSet[str] = frozenset({DERIVE_KEY})

    def __init__(self, engine_key: X25519PrivateKey, extractable: bool = True) -> None:
        if not isinstance(engine_key, X25519PrivateKey):
            raise TypeError("PrivateKey requires an X25519 private key")
        self._engine_key = engine_key
        self._extractable = extractable

    @property
    def extractable(self) -> bool:
        return self._extractable

    def __repr__(self) -> str:
        return "PrivateKey(X25519, [REDACTED])"

    def __reduce__(self) -> Any:
        raise TypeError("PrivateKey cannot be pickled; use KeyPairService.export")


class PublicKey:
    """
    X25519 public key handle.

    Carries no usages of its own; it is only ever combined with a peer's
    private key during key agreement.
    """

    __slots__ = ("_engine_key",)

    algorithm: str = ALGORITHM
    usages: FrozenSet[str] = frozenset()
    extractable: bool = True

    def __init__(self, engine_key: X25519PublicKey) -> None:
        if not isinstance(engine_key, X25519PublicKey):
            raise TypeError("PublicKey requires an X25519 public key")
        self._engine_key = engine_key

    def _spki(self) -> bytes:
        return self._engine_key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self._spki() == other._spki()

    def __hash__(self) -> int:
        return hash(self._spki())

    def __repr__(self) -> str:
        return "PublicKey(X25519)"

    def __reduce__(self) -> Any:
        raise TypeError("PublicKey cannot be pickled; use KeyPairService.export")


@dataclass(frozen=True)
class KeyPair:
    """A private and public key handle generated together."""

    private_key: PrivateKey
    public_key: PublicKey


# =============================================================================
# Serialized Format
# =============================================================================


class ExportedPublicKey(BaseModel):
    """Public key as base64 SPKI DER."""

    model_config = ConfigDict(frozen=True, hide_input_in_errors=True)

    format: Literal["spki"]
    value: StrictStr


class ExportedPrivateKey(BaseModel):
    """Private key as base64 PKCS8 DER."""

    model_config = ConfigDict(frozen=True, hide_input_in_errors=True)

    format: Literal["pkcs8"]
    value: StrictStr


class ExportedKeyPair(BaseModel):
    """
    Serializable key pair.

    The only representation of key material that crosses a storage or
    network boundary. Attributes are snake_case; the wire uses camelCase.
    """

    model_config = ConfigDict(frozen=True, hide_input_in_errors=True)

    algorithm: Literal["X25519"]
    public_key: ExportedPublicKey = Field(alias="publicKey")
    private_key: ExportedPrivateKey = Field(alias="privateKey")

    def to_dict(self) -> dict:
        """Wire-shaped dictionary (camelCase keys)."""
        return self.model_dump(by_alias=True)

    def to_json(self) -> str:
        """Serialize to JSON text."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> ExportedKeyPair:
        """
        Deserialize from JSON text.

        Raises:
            SerializationError: If the text is not JSON or does not match the schema
        """
        try:
            return cls.model_validate(json.loads(json_str))
        except (ValueError, RecursionError, pydantic.ValidationError) as e:
            raise SerializationError("Failed to deserialize exported key pair", cause=e)


def describe_validation_error(error: pydantic.ValidationError) -> str:
    """Render pydantic errors as ``path: message`` pairs."""
    parts = []
    for item in error.errors():
        path = ".".join(str(loc) for loc in item["loc"]) or "<root>"
        parts.append(f"{path}: {item['msg']}")
    return "; ".join(parts)


# =============================================================================
# Key Pair Service
# =============================================================================


class KeyPairService:
    """
    Generates, exports, validates and imports X25519 key pairs.

    Every operation returns a ``Result``; none raises for malformed input or
    engine rejection.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """
        Initialize KeyPairService.

        Args:
            settings: Engine settings (defaults apply when omitted)
        """
        self._settings = settings or Settings()

    async def generate(self, extractable: bool = True) -> Result[KeyPair]:
        """
        Generate a new X25519 key pair.

        Args:
            extractable: Whether the private key may later be exported

        Returns:
            Ok(KeyPair) or Err(KeyGenerationError)
        """
        result = await capture(
            run_engine(self._settings, _generate_engine_key),
            KeyGenerationError,
            "Failure while generating key pair",
        )
        if isinstance(result, Err):
            logger.warning("%s", result.error.message)
            return result

        engine_key = result.value
        logger.debug("Generated X25519 key pair")
        return Ok(
            KeyPair(
                private_key=PrivateKey(engine_key, extractable=extractable),
                public_key=PublicKey(engine_key.public_key()),
            )
        )

    async def export(self, key_pair: KeyPair) -> Result[ExportedKeyPair]:
        """
        Export a key pair to the structured format.

        The private key is serialized as PKCS8 DER, the public key as SPKI
        DER, both base64-encoded.

        Returns:
            Ok(ExportedKeyPair) or Err(KeyExportError) naming the failed role
        """
        private_der = await capture(
            run_engine(self._settings, _export_private, key_pair),
            KeyExportError,
            f'Failed to export private key to "{PRIVATE_KEY_FORMAT}" format',
            role=KeyRole.PRIVATE,
        )
        if isinstance(private_der, Err):
            logger.warning("%s", private_der.error.message)
            return private_der

        public_der = await capture(
            run_engine(self._settings, _export_public, key_pair),
            KeyExportError,
            f'Failed to export public key to "{PUBLIC_KEY_FORMAT}" format',
            role=KeyRole.PUBLIC,
        )
        if isinstance(public_der, Err):
            logger.warning("%s", public_der.error.message)
            return public_der

        return Ok(
            ExportedKeyPair.model_validate(
                {
                    "algorithm": ALGORITHM,
                    "publicKey": {
                        "format": PUBLIC_KEY_FORMAT,
                        "value": bytes_to_base64(public_der.value),
                    },
                    "privateKey": {
                        "format": PRIVATE_KEY_FORMAT,
                        "value": bytes_to_base64(private_der.value),
                    },
                }
            )
        )

    def validate(
        self, exported: Union[ExportedKeyPair, Mapping[str, Any], str]
    ) -> Result[ExportedKeyPair]:
        """
        Check an exported key pair against the schema.

        Accepts a model instance, a wire-shaped mapping or JSON text. Model
        instances are re-checked from their wire form.

        Returns:
            Ok(ExportedKeyPair) or Err(ValidationError)
        """
        data: Any = exported
        if isinstance(exported, ExportedKeyPair):
            data = exported.to_dict()
        elif isinstance(exported, str):
            try:
                data = json.loads(exported)
            except (ValueError, RecursionError) as e:
                return Err(ValidationError("Exported key pair is not valid JSON", cause=e))

        try:
            return Ok(ExportedKeyPair.model_validate(data))
        except pydantic.ValidationError as e:
            return Err(
                ValidationError(
                    f"Invalid exported key pair ({describe_validation_error(e)})",
                    cause=e,
                )
            )

    async def import_key_pair(
        self,
        exported: Union[ExportedKeyPair, Mapping[str, Any], str],
        extractable: bool = True,
    ) -> Result[KeyPair]:
        """
        Import an exported key pair into usable key handles.

        The input is validated first; nothing reaches the engine unless the
        format tags are correct. The private key is tagged derive-only and
        the public key carries no usages.

        Args:
            exported: Exported key pair (model, mapping or JSON text)
            extractable: Whether the imported private key may be re-exported

        Returns:
            Ok(KeyPair), Err(ValidationError) or Err(KeyImportError)
        """
        validated = self.validate(exported)
        if isinstance(validated, Err):
            logger.warning("Rejected key pair before import: %s", validated.error.message)
            return validated
        key_pair = validated.value

        private_key = await capture(
            run_engine(self._settings, _import_private, key_pair.private_key.value),
            KeyImportError,
            "Failed to import private key",
            role=KeyRole.PRIVATE,
        )
        if isinstance(private_key, Err):
            logger.warning("%s", private_key.error.message)
            return private_key

        public_key = await capture(
            run_engine(self._settings, _import_public, key_pair.public_key.value),
            KeyImportError,
            "Failed to import public key",
            role=KeyRole.PUBLIC,
        )
        if isinstance(public_key, Err):
            logger.warning("%s", public_key.error.message)
            return public_key

        logger.debug("Imported X25519 key pair")
        return Ok(
            KeyPair(
                private_key=PrivateKey(private_key.value, extractable=extractable),
                public_key=PublicKey(public_key.value),
            )
        )


# =============================================================================
# Engine Calls
# =============================================================================


def _generate_engine_key() -> X25519PrivateKey:
    return X25519PrivateKey.generate()


def _export_private(key_pair: KeyPair) -> bytes:
    key = key_pair.private_key
    if not key.extractable:
        raise ValueError("key is not extractable")
    return key._engine_key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def _export_public(key_pair: KeyPair) -> bytes:
    return key_pair.public_key._spki()


def _import_private(value: str) -> X25519PrivateKey:
    engine_key = serialization.load_der_private_key(base64_to_bytes(value), password=None)
    if not isinstance(engine_key, X25519PrivateKey):
        raise TypeError(f"expected an X25519 private key, got {type(engine_key).__name__}")
    return engine_key


def _import_public(value: str) -> X25519PublicKey:
    engine_key = serialization.load_der_public_key(base64_to_bytes(value))
    if not isinstance(engine_key, X25519PublicKey):
        raise TypeError(f"expected an X25519 public key, got {type(engine_key).__name__}")
    return engine_key
