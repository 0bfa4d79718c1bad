"""
ChaChaCrypt — Engine Verification Script

Run this to verify every engine works correctly:
    python verify_ciphers.py
"""

import os
import sys
import time

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config.settings import Settings
from core.crypto_engine import (CipherFactory, ChaChaState, StreamSession,
                                chacha_block, serialize_block,
                                quarter_round_words)

# RFC 8439 §2.4.2
SUNSCREEN = (
    b"Ladies and Gentlemen of the class of '99: If I could offer you "
    b"only one tip for the future, sunscreen would be it."
)
SUNSCREEN_CT = bytes.fromhex(
    "6e2e359a2568f98041ba0728dd0d6981e97e7aec1d4360c20a27afccfd9fae0b"
    "f91b65c5524733ab8f593dabcd62b3571639d624e65152ab8f530c359f0861d8"
    "07ca0dbf500d6a6156a38e088a22b65e52bc514d16ccf806818ce91ab7793736"
    "5af90bbf74a35be6b40b8eedf2785e42874d"
)


def known_answers() -> list[tuple[str, bool]]:
    """Return ``[(label, passed), …]`` for the RFC 8439 vectors."""
    results = []

    # §2.1.1 quarter round
    out = quarter_round_words(0x11111111, 0x01020304, 0x9b8d6f43, 0x01234567)
    results.append((
        "§2.1.1 quarter round",
        out == (0xea2a92f4, 0xcb1cf8ce, 0x4581472e, 0x5881c4bb),
    ))

    # §2.3.2 block function
    state = ChaChaState.from_bytes(
        bytes(range(32)), bytes.fromhex("000000090000004a00000000"), 1
    )
    block = serialize_block(chacha_block(state.to_words()))
    results.append((
        "§2.3.2 block function",
        block == bytes.fromhex(
            "10f1e7e4d13b5915500fdd1fa32071c4c7d1f4c733c068030422aa9ac3d46c4e"
            "d2826446079faa0914c2d705d98b02a2b5129cd1de164eb9cbd083e8a2503c4e"
        ),
    ))

    # §2.4.2 encryption
    session = StreamSession(
        bytes(range(32)), bytes.fromhex("000000000000004a00000000"), 1
    )
    results.append((
        "§2.4.2 encryption",
        session.process_bytes(SUNSCREEN) == SUNSCREEN_CT,
    ))
    return results


def main():
    print("╔══════════════════════════════════════════════════╗")
    print("║    ChaChaCrypt — Engine Verification Suite       ║")
    print("╚══════════════════════════════════════════════════╝")
    print()

    all_pass = True

    # ── Test 1: Known answers ────────────────────────────────────
    print("━━━ Test 1: RFC 8439 Known Answers ━━━━━━━━━━━━━━━━")
    for label, ok in known_answers():
        print(f"  {'✅' if ok else '❌'} {label}")
        all_pass &= ok
    print()

    key = os.urandom(32)

    # ── Test 2: Round trip ───────────────────────────────────────
    print("━━━ Test 2: Encrypt → Decrypt Round-Trip ━━━━━━━━━━")
    test_messages = [
        b"Hello, World!",
        b"",                                     # empty
        b"\x00" * 100,                            # null bytes
        b"A" * 10_000,                            # 10 KB
    ]
    for name in CipherFactory.list_ciphers():
        cipher = CipherFactory.create(name, key)
        ok = all(cipher.decrypt(cipher.encrypt(m)) == m for m in test_messages)
        print(f"  {'✅' if ok else '❌'} {name:<18s}")
        all_pass &= ok
    print()

    # ── Test 3: Engines agree ────────────────────────────────────
    print("━━━ Test 3: Pure vs Native Agreement ━━━━━━━━━━━━━━")
    if CipherFactory.is_available("CHACHA20-NATIVE"):
        nonce = os.urandom(12)
        data  = os.urandom(4096 + 17)
        pure   = CipherFactory.create("CHACHA20", key)
        native = CipherFactory.create("CHACHA20-NATIVE", key)
        ok = (pure.encrypt_with_nonce(data, nonce, 7)
              == native.encrypt_with_nonce(data, nonce, 7))
        print(f"  {'✅' if ok else '❌'} CHACHA20 == CHACHA20-NATIVE")
        all_pass &= ok
    else:
        print("  ⚠️  native engine unavailable — skipped")
    print()

    # ── Test 4: Benchmark ────────────────────────────────────────
    size = Settings.BENCHMARK_SIZE
    print(f"━━━ Test 4: Performance Benchmark ({size // 1024} KB) ━━━━━━━━━")
    data  = os.urandom(size)
    nonce = os.urandom(12)
    results = []
    for name in CipherFactory.list_ciphers():
        cipher = CipherFactory.create(name, key)
        t0 = time.perf_counter()
        cipher.encrypt_with_nonce(data, nonce)
        elapsed = time.perf_counter() - t0
        results.append((name, elapsed * 1000))
        print(f"  {name:<18s}  {elapsed * 1000:>9.1f} ms")

    results.sort(key=lambda x: x[1])
    print()
    print("━━━ Summary ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━")
    print(f"  Engines tested: {len(CipherFactory.list_ciphers())}")
    print(f"  Fastest:        {results[0][0]}")
    print(f"  Recommended:    {CipherFactory.recommend()}")
    if all_pass:
        print("  Result:         🎉 ALL TESTS PASSED")
    else:
        print("  Result:         ⚠️  SOME TESTS FAILED")
    print()
    return 0 if all_pass else 1


if __name__ == "__main__":
    sys.exit(main())
