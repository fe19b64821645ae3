"""
AES-256-GCM message encryption under a derived shared key.

This module provides:
- EncryptedMessage: Wire envelope with base64 ciphertext and iv
- MessageCipher: Encrypts and decrypts text messages

The ciphertext field holds the encrypted bytes followed by the 16-byte
authentication tag, the layout WebCrypto produces. No associated data is
bound.
"""

from __future__ import annotations

import json
import logging
import secrets
from typing import Any, Mapping, Optional, Tuple, Union

import pydantic
from pydantic import BaseModel, ConfigDict, StrictStr

from .agreement import SharedKey
from .codec import base64_to_bytes, bytes_to_base64, decode_text, encode_text
from .config import Settings
from .engine import run_engine
from .errors import DecryptionError, EncryptionError, SerializationError
from .result import Err, Ok, Result, capture

logger = logging.getLogger(__name__)

# Cryptographic constants
NONCE_SIZE: int = 12  # 96 bits (standard for AES-GCM)
TAG_SIZE: int = 16  # 128 bits (authentication tag)

ENCRYPT_FAILURE = "Failure while encrypting message"
DECRYPT_FAILURE = "Failure while decrypting message"


class EncryptedMessage(BaseModel):
    """Encrypted message envelope."""

    model_config = ConfigDict(frozen=True, hide_input_in_errors=True)

    ciphertext: StrictStr
    iv: StrictStr

    def to_dict(self) -> dict:
        return self.model_dump()

    def to_json(self) -> str:
        """Serialize envelope to JSON string."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> EncryptedMessage:
        """
        Deserialize envelope from JSON string.

        Raises:
            SerializationError: If the text is not JSON or not an envelope
        """
        try:
            return cls.model_validate(json.loads(json_str))
        except (ValueError, RecursionError, pydantic.ValidationError) as e:
            raise SerializationError("Failed to deserialize encrypted message", cause=e)


class MessageCipher:
    """
    Encrypts and decrypts text messages with one shared key.

    The key is fixed at construction. Instances hold no other state, so a
    single cipher may serve any number of concurrent calls; each encryption
    draws its own random nonce.
    """

    __slots__ = ("_shared_key", "_settings")

    def __init__(self, shared_key: SharedKey, settings: Optional[Settings] = None) -> None:
        """
        Initialize MessageCipher.

        Args:
            shared_key: Key obtained from ``KeyAgreement.derive``
            settings: Engine settings

        Raises:
            TypeError: If ``shared_key`` is not a SharedKey
        """
        if not isinstance(shared_key, SharedKey):
            raise TypeError(
                f"MessageCipher requires a SharedKey, got {type(shared_key).__name__}"
            )
        self._shared_key = shared_key
        self._settings = settings or Settings()

    def __repr__(self) -> str:
        return f"MessageCipher({self._shared_key!r})"

    async def encrypt(self, plaintext: str) -> Result[EncryptedMessage]:
        """
        Encrypt a text message.

        Args:
            plaintext: Message text (encoded as UTF-8)

        Returns:
            Ok(EncryptedMessage) or Err(EncryptionError)
        """
        result = await capture(
            run_engine(self._settings, self._seal, plaintext),
            EncryptionError,
            ENCRYPT_FAILURE,
        )
        if isinstance(result, Err):
            logger.warning("%s", result.error.message)
            return result

        nonce, ciphertext = result.value
        return Ok(
            EncryptedMessage(
                ciphertext=bytes_to_base64(ciphertext),
                iv=bytes_to_base64(nonce),
            )
        )

    async def decrypt(
        self, envelope: Union[EncryptedMessage, Mapping[str, Any], str]
    ) -> Result[str]:
        """
        Decrypt an envelope back to text.

        Every failure (malformed envelope, bad base64, wrong key, tampering)
        yields the same ``DecryptionError`` message.

        Args:
            envelope: EncryptedMessage, wire-shaped mapping, or JSON text

        Returns:
            Ok(plaintext) or Err(DecryptionError)
        """
        result = await capture(
            run_engine(self._settings, self._open, envelope),
            DecryptionError,
            DECRYPT_FAILURE,
        )
        if isinstance(result, Err):
            logger.warning("%s", DECRYPT_FAILURE)
        return result

    def _seal(self, plaintext: str) -> Tuple[bytes, bytes]:
        if not isinstance(plaintext, str):
            raise TypeError(f"plaintext must be str, got {type(plaintext).__name__}")
        nonce = secrets.token_bytes(NONCE_SIZE)
        ciphertext = self._shared_key._aead.encrypt(nonce, encode_text(plaintext), None)
        return nonce, ciphertext

    def _open(self, envelope: Union[EncryptedMessage, Mapping[str, Any], str]) -> str:
        message = _coerce_envelope(envelope)
        nonce = base64_to_bytes(message.iv)
        ciphertext = base64_to_bytes(message.ciphertext)
        if len(nonce) != NONCE_SIZE:
            raise ValueError(f"Invalid nonce size: expected {NONCE_SIZE}, got {len(nonce)}")
        if len(ciphertext) < TAG_SIZE:
            raise ValueError("Ciphertext too short")
        return decode_text(self._shared_key._aead.decrypt(nonce, ciphertext, None))


def _coerce_envelope(envelope: Union[EncryptedMessage, Mapping[str, Any], str]) -> EncryptedMessage:
    if isinstance(envelope, EncryptedMessage):
        return envelope
    if isinstance(envelope, str):
        return EncryptedMessage.from_json(envelope)
    return EncryptedMessage.model_validate(envelope)
