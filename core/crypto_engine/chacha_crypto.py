"""
ChaCha20 stream cipher facades.

Designed by Daniel J. Bernstein; IETF variant per RFC 8439.

Key:     32 bytes (256 bits)
Nonce:   12 bytes (96 bits)
Counter:  4 bytes, starts at 0

No authentication: a flipped ciphertext bit flips the same plaintext
bit. Pair with a MAC if integrity matters.
"""

import os
import logging
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms
from cryptography.exceptions import UnsupportedAlgorithm

from config.settings import Settings

from .block          import check_rounds
from .errors         import InvalidCiphertext, InvalidKeyLength, \
                            InvalidNonceLength, KeystreamExhausted
from .session        import COUNTER_SPACE, StreamSession, blocks_needed
from .state          import BLOCK_SIZE
from .word           import MASK32
from .symmetric_base import SymmetricCipher

logger = logging.getLogger("ChaChaCrypt.ChaCha")

# ── Native backend probe ─────────────────────────────────────────
try:
    Cipher(algorithms.ChaCha20(bytes(32), bytes(16)), mode=None).encryptor()
    NATIVE_AVAILABLE = True
except UnsupportedAlgorithm:
    NATIVE_AVAILABLE = False
    logger.warning(
        "ChaCha20 not supported by this OpenSSL build; "
        "native backend disabled"
    )


class _ChaChaBlobMixin:
    """Shared [nonce 12B][ciphertext] framing."""
    NONCE_SIZE = Settings.NONCE_SIZE
    KEY_SIZE   = Settings.KEY_SIZE

    def _check_key(self, key: bytes):
        if len(key) != self.KEY_SIZE:
            raise InvalidKeyLength(
                f"ChaCha20 key must be {self.KEY_SIZE} bytes, got {len(key)}"
            )

    def _check_nonce(self, nonce: bytes):
        if len(nonce) != self.NONCE_SIZE:
            raise InvalidNonceLength(
                f"ChaCha20 nonce must be {self.NONCE_SIZE} bytes, "
                f"got {len(nonce)}"
            )

    def _split(self, data: bytes) -> tuple[bytes, bytes]:
        if len(data) < self.NONCE_SIZE:
            raise InvalidCiphertext(
                f"Ciphertext must start with a {self.NONCE_SIZE}-byte "
                f"nonce, got {len(data)} bytes"
            )
        return data[:self.NONCE_SIZE], data[self.NONCE_SIZE:]

    def encrypt(self, plaintext: bytes) -> bytes:
        nonce = os.urandom(self.NONCE_SIZE)
        return nonce + self.encrypt_with_nonce(plaintext, nonce)

    def decrypt(self, data: bytes) -> bytes:
        nonce, ct = self._split(data)
        return self.decrypt_with_nonce(ct, nonce)

    @property
    def key_size(self) -> int:
        return self.KEY_SIZE

    @property
    def iv_size(self) -> int:
        return self.NONCE_SIZE

    @property
    def is_aead(self) -> bool:
        return False


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Pure-Python engine
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ChaCha20Cipher(_ChaChaBlobMixin, SymmetricCipher):
    """
    ChaCha stream cipher on the in-tree engine.

    Output format:  [nonce 12B][ciphertext]

    Every message gets its own single-message StreamSession, so the
    counter always starts at ``counter`` for a given nonce. An optional
    nonce tracker refuses a nonce seen before under this key.
    """

    def __init__(self, key: bytes,
                 double_rounds: int | None = None,
                 counter: int | None = None,
                 allow_reduced_rounds: bool = False,
                 nonce_tracker=None):
        self._check_key(key)
        if double_rounds is None:
            double_rounds = Settings.DOUBLE_ROUNDS
        if counter is None:
            counter = Settings.INITIAL_COUNTER
        self._key     = key
        self._rounds  = check_rounds(double_rounds, allow_reduced_rounds)
        self._reduced = allow_reduced_rounds
        self._counter = counter
        self._tracker = nonce_tracker

    def _session(self, nonce: bytes, counter: int | None) -> StreamSession:
        self._check_nonce(nonce)
        return StreamSession(
            self._key, nonce,
            counter=self._counter if counter is None else counter,
            double_rounds=self._rounds,
            continuous=False,
            strict=True,
            allow_reduced_rounds=self._reduced,
        )

    def encrypt_with_nonce(self, plaintext: bytes, nonce: bytes,
                           counter: int | None = None) -> bytes:
        """Encrypt with a caller-chosen nonce; returns bare ciphertext."""
        ciphertext = self._session(nonce, counter).process_bytes(plaintext)
        # only a nonce that actually produced ciphertext is recorded
        if self._tracker is not None:
            self._tracker.register(self._key, nonce)
        return ciphertext

    def decrypt_with_nonce(self, ciphertext: bytes, nonce: bytes,
                           counter: int | None = None) -> bytes:
        return self._session(nonce, counter).process_bytes(ciphertext)

    @property
    def double_rounds(self) -> int:
        return self._rounds

    @property
    def cipher_name(self) -> str:
        return f"CHACHA{self._rounds * 2}"

    def info(self) -> dict:
        base = super().info()
        base["rounds"]  = self._rounds * 2
        base["backend"] = "pure-python"
        base["security_note"] = (
            "Confidentiality only. Never reuse a nonce with the same key."
        )
        return base


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  cryptography / OpenSSL engine
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class NativeChaCha20Cipher(_ChaChaBlobMixin, SymmetricCipher):
    """
    ChaCha20 through the `cryptography` library.

    Output format:  [nonce 12B][ciphertext] — byte-identical to
    ChaCha20Cipher for the same key, nonce and counter.

    OpenSSL takes a 16-byte IV: the little-endian 32-bit counter
    followed by the 96-bit nonce.
    """

    def __init__(self, key: bytes, counter: int | None = None,
                 nonce_tracker=None):
        if not NATIVE_AVAILABLE:
            raise RuntimeError(
                "ChaCha20 is not available in this OpenSSL build. "
                "Use CHACHA20 (pure-Python) instead."
            )
        self._check_key(key)
        if counter is None:
            counter = Settings.INITIAL_COUNTER
        self._key     = key
        self._counter = counter
        self._tracker = nonce_tracker

    def _check_counter(self, length: int, counter: int | None) -> int:
        if counter is None:
            counter = self._counter
        if not 0 <= counter <= MASK32:
            raise ValueError(f"Counter must fit in 32 bits, got {counter}")
        # OpenSSL would carry past 2**32 into the nonce words
        n_blocks = blocks_needed(length, BLOCK_SIZE)
        if counter + n_blocks > COUNTER_SPACE:
            raise KeystreamExhausted(
                f"Request needs {n_blocks} blocks but only "
                f"{COUNTER_SPACE - counter} remain before the counter wraps"
            )
        return counter

    def _xor(self, data: bytes, nonce: bytes, counter: int | None) -> bytes:
        self._check_nonce(nonce)
        counter = self._check_counter(len(data), counter)
        iv  = counter.to_bytes(4, "little") + nonce
        enc = Cipher(algorithms.ChaCha20(self._key, iv), mode=None).encryptor()
        return enc.update(data) + enc.finalize()

    def encrypt_with_nonce(self, plaintext: bytes, nonce: bytes,
                           counter: int | None = None) -> bytes:
        self._check_nonce(nonce)
        self._check_counter(len(plaintext), counter)
        if self._tracker is not None:
            self._tracker.register(self._key, nonce)
        return self._xor(plaintext, nonce, counter)

    def decrypt_with_nonce(self, ciphertext: bytes, nonce: bytes,
                           counter: int | None = None) -> bytes:
        return self._xor(ciphertext, nonce, counter)

    @property
    def cipher_name(self) -> str:
        return "CHACHA20-NATIVE"

    def info(self) -> dict:
        base = super().info()
        base["rounds"]  = 20
        base["backend"] = "cryptography"
        return base
