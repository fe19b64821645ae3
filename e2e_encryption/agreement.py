"""
Shared key derivation over Curve25519.

The 32-byte X25519 output is used directly as an AES-256-GCM key, which is
what WebCrypto's ``deriveKey`` produces for ``{name: "AES-GCM", length: 256}``.
Keys derived here therefore interoperate with browser peers.
"""

from __future__ import annotations

import logging
from typing import Any, FrozenSet, Optional

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .config import Settings
from .engine import run_engine
from .errors import KeyAgreementError
from .keys import DERIVE_KEY, PrivateKey, PublicKey
from .result import Err, Ok, Result, capture

logger = logging.getLogger(__name__)

SHARED_KEY_ALGORITHM = "AES-GCM"
SHARED_KEY_LENGTH = 256  # bits


class SharedKey:
    """
    Non-extractable AES-256-GCM key produced by key agreement.

    Holds only the AEAD engine object. There is no byte accessor and the
    key refuses pickling.
    """

    __slots__ = ("_aead",)

    algorithm: str = SHARED_KEY_ALGORITHM
    length: int = SHARED_KEY_LENGTH
    extractable: bool = False
    usages: FrozenSet[str] = frozenset({"encrypt", "decrypt"})

    def __init__(self, aead: AESGCM) -> None:
        if not isinstance(aead, AESGCM):
            raise TypeError("SharedKey requires an AESGCM engine object")
        self._aead = aead

    def __repr__(self) -> str:
        return "SharedKey(AES-GCM-256, [REDACTED])"

    def __reduce__(self) -> Any:
        raise TypeError("SharedKey is not extractable")


class KeyAgreement:
    """Derives shared keys from one private and one peer public key."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or Settings()

    async def derive(
        self, own_private_key: PrivateKey, peer_public_key: PublicKey
    ) -> Result[SharedKey]:
        """
        Derive the shared AES-GCM key.

        ``derive(a.private_key, b.public_key)`` and
        ``derive(b.private_key, a.public_key)`` yield interchangeable keys.

        Args:
            own_private_key: Our private key (must allow ``deriveKey``)
            peer_public_key: The other party's public key

        Returns:
            Ok(SharedKey) or Err(KeyAgreementError)
        """
        usage_error = _check_usages(own_private_key, peer_public_key)
        if usage_error is not None:
            logger.warning("%s", usage_error.message)
            return Err(usage_error)

        result = await capture(
            run_engine(self._settings, _derive, own_private_key, peer_public_key),
            KeyAgreementError,
            "Failure while deriving shared key",
        )
        if isinstance(result, Err):
            logger.warning("%s", result.error.message)
            return result

        logger.debug("Derived shared AES-GCM key")
        return Ok(SharedKey(result.value))


def _check_usages(
    own_private_key: object, peer_public_key: object
) -> Optional[KeyAgreementError]:
    if not isinstance(own_private_key, PrivateKey):
        return KeyAgreementError(
            f"Own key must be an X25519 private key, got {type(own_private_key).__name__}"
        )
    if DERIVE_KEY not in own_private_key.usages:
        return KeyAgreementError("Own private key does not allow key derivation")
    if not isinstance(peer_public_key, PublicKey):
        return KeyAgreementError(
            f"Peer key must be an X25519 public key, got {type(peer_public_key).__name__}"
        )
    return None


def _derive(own_private_key: PrivateKey, peer_public_key: PublicKey) -> AESGCM:
    # Raises ValueError for low-order peer points (all-zero output).
    secret = own_private_key._engine_key.exchange(peer_public_key._engine_key)
    return AESGCM(secret)
