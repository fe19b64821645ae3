"""
End-to-End Encryption Benchmark CLI.

Usage:
    e2e-benchmark [--messages N]

Or run directly:
    python -m e2e_encryption.benchmark

Configuration:
    E2E_BENCHMARK_MESSAGES, E2E_OFFLOAD_ENGINE and E2E_LOG_LEVEL are read
    from the environment or a .env file.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from typing import List, Optional, Sequence

from e2e_encryption.agreement import KeyAgreement
from e2e_encryption.cipher import MessageCipher
from e2e_encryption.config import Settings, configure_logging, load_settings
from e2e_encryption.errors import ConfigError
from e2e_encryption.keys import KeyPairService
from e2e_encryption.result import Err


def _section(title: str) -> None:
    print("+" + "-" * 68 + "+")
    print(f"|  {title}" + " " * max(0, 66 - len(title)) + "|")
    print("+" + "-" * 68 + "+")


def _rate(count: int, duration: float) -> str:
    return f"{count / duration:.2f}" if duration > 0 else "inf"


async def run_benchmark(settings: Settings, message_count: int) -> int:
    """Run the benchmark. Returns a process exit code."""
    print("=== End-to-End Encryption Benchmark ===\n")
    print(f"Testing with {message_count} messages (engine offload: {settings.offload_engine})\n")

    keys = KeyPairService(settings)
    agreement = KeyAgreement(settings)

    print("=" * 70)
    print("                    BENCHMARK START")
    print("=" * 70 + "\n")

    # ========================================================================
    # Demo 1: Key pair generation
    # ========================================================================
    _section("Demo 1: X25519 Key Pair Generation")

    generate_start = time.perf_counter()
    alice = await keys.generate()
    bob = await keys.generate()
    generate_duration = time.perf_counter() - generate_start

    for result in (alice, bob):
        if isinstance(result, Err):
            print(f"[ERROR] {result.error}")
            return 1

    print("[OK] Generated key pairs for Alice and Bob")
    print(f"[PERF] Time: {generate_duration * 1000:.3f}ms | Rate: {_rate(2, generate_duration)} ops/sec\n")

    # ========================================================================
    # Demo 2: Export / import round trip
    # ========================================================================
    _section("Demo 2: Export/Import Round Trip")

    export_start = time.perf_counter()
    exported = await keys.export(alice.value)
    export_time = time.perf_counter() - export_start
    if isinstance(exported, Err):
        print(f"[ERROR] {exported.error}")
        return 1

    import_start = time.perf_counter()
    imported = await keys.import_key_pair(exported.value.to_json())
    import_time = time.perf_counter() - import_start
    if isinstance(imported, Err):
        print(f"[ERROR] {imported.error}")
        return 1

    print("[OK] Key pair exported (spki/pkcs8) and re-imported")
    print(f"[PERF] Export: {export_time * 1000:.3f}ms | Import: {import_time * 1000:.3f}ms\n")

    # ========================================================================
    # Demo 3: Key agreement in both directions
    # ========================================================================
    _section("Demo 3: Key Agreement (Alice <-> Bob)")

    derive_start = time.perf_counter()
    k_alice = await agreement.derive(imported.value.private_key, bob.value.public_key)
    k_bob = await agreement.derive(bob.value.private_key, alice.value.public_key)
    derive_duration = time.perf_counter() - derive_start

    for result in (k_alice, k_bob):
        if isinstance(result, Err):
            print(f"[ERROR] {result.error}")
            return 1

    print("[OK] Shared keys derived on both sides")
    print(f"[PERF] Time: {derive_duration * 1000:.3f}ms | Rate: {_rate(2, derive_duration)} ops/sec\n")

    # ========================================================================
    # Demo 4: Concurrent encryption / decryption
    # ========================================================================
    _section(f"Demo 4: Encrypt/Decrypt {message_count} Messages")

    alice_cipher = MessageCipher(k_alice.value, settings)
    bob_cipher = MessageCipher(k_bob.value, settings)
    messages: List[str] = [f"Message {i}: hello from Alice" for i in range(message_count)]

    encrypt_start = time.perf_counter()
    envelopes = await asyncio.gather(*(alice_cipher.encrypt(m) for m in messages))
    encrypt_duration = time.perf_counter() - encrypt_start

    failed = [e for e in envelopes if isinstance(e, Err)]
    if failed:
        print(f"[ERROR] {len(failed)} encryptions failed: {failed[0].error}")
        return 1

    decrypt_start = time.perf_counter()
    decrypted = await asyncio.gather(*(bob_cipher.decrypt(e.value) for e in envelopes))
    decrypt_duration = time.perf_counter() - decrypt_start

    mismatches = sum(
        1
        for original, result in zip(messages, decrypted)
        if isinstance(result, Err) or result.value != original
    )
    unique_ivs = len({e.value.iv for e in envelopes})

    if mismatches:
        print(f"[ERROR] {mismatches} messages did not round-trip")
        return 1

    print("[OK] All messages decrypted by the peer")
    print(f"[PERF] Encryption: {encrypt_duration * 1000:.3f}ms ({_rate(message_count, encrypt_duration)} ops/sec)")
    print(f"[PERF] Decryption: {decrypt_duration * 1000:.3f}ms ({_rate(message_count, decrypt_duration)} ops/sec)")
    print(f"[DEBUG] Unique nonces: {unique_ivs}/{message_count}\n")

    # ========================================================================
    # Summary
    # ========================================================================
    print("=" * 70)
    print("                    BENCHMARK SUMMARY")
    print("=" * 70 + "\n")

    print("+- Performance Summary ----------------------------------------------+")
    print("|                                                                    |")

    for label, rate in (
        ("Key Generation:", _rate(2, generate_duration)),
        ("Key Agreement:", _rate(2, derive_duration)),
        ("Encryption:", _rate(message_count, encrypt_duration)),
        ("Decryption:", _rate(message_count, decrypt_duration)),
    ):
        print(f"|  {label:<18} {rate} ops/sec" + " " * max(0, 37 - len(rate)) + "|")

    print("|                                                                    |")
    print("+--------------------------------------------------------------------+")

    print("\nTest Configuration:")
    print(f"  - Messages: {message_count}")
    print("  - Key agreement: X25519")
    print("  - Crypto: AES-256-GCM, 96-bit random nonce")

    print("\n" + "=" * 70)
    print("                    BENCHMARK COMPLETE")
    print("=" * 70 + "\n")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point for e2e-benchmark command."""
    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    parser = argparse.ArgumentParser(prog="e2e-benchmark", description=__doc__.splitlines()[1])
    parser.add_argument(
        "--messages",
        type=int,
        default=settings.benchmark_messages,
        help="number of messages to encrypt and decrypt",
    )
    args = parser.parse_args(argv)
    if args.messages <= 0:
        parser.error("--messages must be positive")

    configure_logging(settings)
    sys.exit(asyncio.run(run_benchmark(settings, args.messages)))


if __name__ == "__main__":
    main()
