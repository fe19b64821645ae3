"""
Pytest configuration and fixtures for end-to-end encryption tests.
"""

from __future__ import annotations

import pytest

from e2e_encryption import (
    KeyAgreement,
    KeyPair,
    KeyPairService,
    MessageCipher,
    Settings,
    SharedKey,
)


@pytest.fixture(params=[False, True], ids=["inline", "offloaded"])
def settings(request: pytest.FixtureRequest) -> Settings:
    """Run engine calls inline and in a worker thread."""
    return Settings(offload_engine=request.param)


@pytest.fixture
def key_service(settings: Settings) -> KeyPairService:
    return KeyPairService(settings)


@pytest.fixture
def agreement(settings: Settings) -> KeyAgreement:
    return KeyAgreement(settings)


@pytest.fixture
async def alice(key_service: KeyPairService) -> KeyPair:
    return (await key_service.generate()).unwrap()


@pytest.fixture
async def bob(key_service: KeyPairService) -> KeyPair:
    return (await key_service.generate()).unwrap()


@pytest.fixture
async def alice_key(agreement: KeyAgreement, alice: KeyPair, bob: KeyPair) -> SharedKey:
    """Alice's side of the Alice/Bob agreement."""
    return (await agreement.derive(alice.private_key, bob.public_key)).unwrap()


@pytest.fixture
async def bob_key(agreement: KeyAgreement, alice: KeyPair, bob: KeyPair) -> SharedKey:
    """Bob's side of the Alice/Bob agreement."""
    return (await agreement.derive(bob.private_key, alice.public_key)).unwrap()


@pytest.fixture
def alice_cipher(alice_key: SharedKey, settings: Settings) -> MessageCipher:
    return MessageCipher(alice_key, settings)


@pytest.fixture
def bob_cipher(bob_key: SharedKey, settings: Settings) -> MessageCipher:
    return MessageCipher(bob_key, settings)
