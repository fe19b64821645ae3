"""
End-to-End Encryption Library

Peer-to-peer message encryption for a messaging application: X25519 key
agreement, AES-256-GCM authenticated encryption, and a validated key pair
format for storage and transfer.

Quick Start
-----------
```python
import asyncio
from e2e_encryption import KeyAgreement, KeyPairService, MessageCipher

async def main():
    keys = KeyPairService()
    agreement = KeyAgreement()

    alice = (await keys.generate()).unwrap()
    bob = (await keys.generate()).unwrap()

    # Each side combines its own private key with the peer's public key
    k_alice = (await agreement.derive(alice.private_key, bob.public_key)).unwrap()
    k_bob = (await agreement.derive(bob.private_key, alice.public_key)).unwrap()

    envelope = (await MessageCipher(k_alice).encrypt("Hello")).unwrap()
    result = await MessageCipher(k_bob).decrypt(envelope)
    if result.is_ok:
        print(result.value)

    # Store or transfer a key pair
    exported = (await keys.export(alice)).unwrap()
    restored = await keys.import_key_pair(exported.to_json())

asyncio.run(main())
```

Key Features
------------
- **Non-throwing API**: Every operation returns ``Ok`` or ``Err``
- **Opaque Key Handles**: Private key bytes leave only through ``export``
- **Schema Validation**: Exported key pairs are checked before decoding
- **Fresh Nonces**: 96-bit random nonce per encryption
- **WebCrypto Compatible**: SPKI/PKCS8 DER, raw X25519 output as AES key
"""

__version__ = "0.1.0"

# =============================================================================
# Result / Error Exports
# =============================================================================

from .errors import (
    ConfigError,
    DecryptionError,
    E2EError,
    EncryptionError,
    KeyAgreementError,
    KeyExportError,
    KeyGenerationError,
    KeyImportError,
    KeyRole,
    SerializationError,
    ValidationError,
)
from .result import Err, Ok, Result, capture, err, ok

# =============================================================================
# Codec / Config Exports
# =============================================================================

from .codec import base64_to_bytes, bytes_to_base64, decode_text, encode_text
from .config import Settings, configure_logging, load_settings

# =============================================================================
# Key / Agreement / Cipher Exports (Primary API)
# =============================================================================

from .keys import (
    ExportedKeyPair,
    ExportedPrivateKey,
    ExportedPublicKey,
    KeyPair,
    KeyPairService,
    PrivateKey,
    PublicKey,
)
from .legacy import (
    KeyPairFormat,
    LegacyKeyPair,
    detect_key_pair_format,
    migrate_legacy_key_pair,
)
from .agreement import KeyAgreement, SharedKey
from .cipher import NONCE_SIZE, TAG_SIZE, EncryptedMessage, MessageCipher

# =============================================================================
# Public API
# =============================================================================

__all__ = [
    # Version
    "__version__",
    # Result
    "Ok",
    "Err",
    "Result",
    "ok",
    "err",
    "capture",
    # Errors
    "E2EError",
    "ValidationError",
    "KeyGenerationError",
    "KeyExportError",
    "KeyImportError",
    "KeyRole",
    "KeyAgreementError",
    "EncryptionError",
    "DecryptionError",
    "SerializationError",
    "ConfigError",
    # Codec
    "bytes_to_base64",
    "base64_to_bytes",
    "encode_text",
    "decode_text",
    # Config
    "Settings",
    "load_settings",
    "configure_logging",
    # Keys
    "PrivateKey",
    "PublicKey",
    "KeyPair",
    "ExportedPublicKey",
    "ExportedPrivateKey",
    "ExportedKeyPair",
    "KeyPairService",
    # Legacy
    "KeyPairFormat",
    "LegacyKeyPair",
    "detect_key_pair_format",
    "migrate_legacy_key_pair",
    # Agreement
    "SharedKey",
    "KeyAgreement",
    # Cipher
    "NONCE_SIZE",
    "TAG_SIZE",
    "EncryptedMessage",
    "MessageCipher",
]
