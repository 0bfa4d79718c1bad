"""
ChaCha20 stream session — counter-mode keystream generation and XOR.

Usage:
    session    = StreamSession(key, nonce)
    ciphertext = session.process_bytes(b"attack at dawn")

    # decryption is the same operation over a fresh session
    plaintext  = StreamSession(key, nonce).process_bytes(ciphertext)

A session owns exactly one ChaChaState. The counter starts at the
value given to the constructor and moves forward by one per 64-byte
block. Whether it keeps moving across calls is an explicit choice:

    continuous=True   every call continues where the previous one
                      stopped (one long stream)
    continuous=False  the session serves a single message; a second
                      call is refused instead of reusing keystream

The caller must never reuse a (key, nonce) pair for two different
messages; the session cannot detect that.
"""

import logging
import threading

from config.settings import Settings

from .block    import check_rounds, xor_stream_bytes, xor_stream_words
from .errors   import InvalidCiphertext, KeystreamExhausted
from .parallel import parallel_xor
from .state    import BLOCK_SIZE, BLOCK_WORDS, ChaChaState
from .word     import MASK32

logger = logging.getLogger("ChaChaCrypt.Session")

COUNTER_SPACE    = 1 << 32
COUNTER_POLICIES = ("raise", "wrap")


def blocks_needed(length: int, unit: int) -> int:
    """Number of keystream blocks covering *length* items."""
    return -(-length // unit)


class StreamSession:
    """ChaCha20 encryption / decryption over one key, nonce and counter."""

    def __init__(self, key: bytes, nonce: bytes,
                 counter: int | None = None,
                 double_rounds: int | None = None,
                 counter_policy: str | None = None,
                 continuous: bool | None = None,
                 strict: bool | None = None,
                 allow_reduced_rounds: bool = False):
        if counter is None:
            counter = Settings.INITIAL_COUNTER
        if double_rounds is None:
            double_rounds = Settings.DOUBLE_ROUNDS
        if counter_policy is None:
            counter_policy = Settings.COUNTER_POLICY
        if continuous is None:
            continuous = Settings.CONTINUOUS_COUNTER

        if counter_policy not in COUNTER_POLICIES:
            raise ValueError(
                f"Unknown counter policy: {counter_policy}. "
                f"Available: {list(COUNTER_POLICIES)}"
            )
        if not 0 <= counter <= MASK32:
            raise ValueError(f"Counter must fit in 32 bits, got {counter}")

        self._rounds     = check_rounds(double_rounds, allow_reduced_rounds)
        self._reduced    = allow_reduced_rounds
        self._state      = ChaChaState.from_bytes(key, nonce, counter, strict)
        self._policy     = counter_policy
        self._continuous = continuous
        # absolute block position; reaches 2**32 only under "raise"
        self._position   = counter
        self._used       = False
        self._lock       = threading.Lock()

        logger.debug(
            "Session opened (counter=%d, rounds=%d, policy=%s, continuous=%s)",
            counter, self._rounds * 2, counter_policy, continuous,
        )

    @classmethod
    def from_text(cls, passphrase: str, nonce: str, **kwargs):
        """
        Build a session from text key / nonce (UTF-8 encoded).

        Pass ``strict=False`` to accept text that is not exactly 32 / 12
        bytes long; it is then zero-padded or truncated.
        """
        return cls(passphrase.encode("utf-8"), nonce.encode("utf-8"),
                   **kwargs)

    # ── properties ───────────────────────────────────────────────

    @property
    def counter(self) -> int:
        """Counter value the next block will use."""
        return self._state.counter

    @property
    def double_rounds(self) -> int:
        return self._rounds

    @property
    def counter_policy(self) -> str:
        return self._policy

    @property
    def continuous(self) -> bool:
        return self._continuous

    @property
    def exhausted(self) -> bool:
        return self._position >= COUNTER_SPACE

    @property
    def blocks_remaining(self) -> int:
        """Blocks available before the counter would wrap."""
        return max(COUNTER_SPACE - self._position, 0)

    @property
    def state(self) -> ChaChaState:
        """Snapshot of the current state."""
        return self._state.copy()

    # ── counter management ───────────────────────────────────────

    def seek(self, counter: int):
        """
        Position the next block at *counter*.

        Rewinding re-exposes keystream that may already have been used;
        only do it to decrypt data produced from that position.
        """
        if not 0 <= counter <= MASK32:
            raise ValueError(f"Counter must fit in 32 bits, got {counter}")
        with self._lock:
            self._position      = counter
            self._state.counter = counter
            self._used          = False
        logger.debug("Session counter moved to %d", counter)

    def _reserve(self, n_blocks: int):
        """Check that *n_blocks* can be produced; call with the lock held."""
        if n_blocks == 0:
            return
        if not self._continuous and self._used:
            raise KeystreamExhausted(
                "Single-message session already used; "
                "open a new session with a fresh nonce"
            )
        if self._position + n_blocks > COUNTER_SPACE:
            if self._policy == "raise":
                raise KeystreamExhausted(
                    f"Request needs {n_blocks} blocks but only "
                    f"{self.blocks_remaining} remain before the counter "
                    f"wraps"
                )
            logger.warning(
                "Block counter wraps to 0 — keystream is being reused"
            )

    def _advance(self, n_blocks: int):
        if n_blocks == 0:
            return
        self._used = True
        if self._policy == "raise":
            self._position += n_blocks
        else:
            self._position = (self._position + n_blocks) & MASK32
        self._state.counter = self._position & MASK32

    # ── encrypt / decrypt ────────────────────────────────────────

    def process(self, words) -> list[int]:
        """
        XOR a sequence of 32-bit words with the keystream.

        Encryption and decryption are this same operation. Output has
        the input's length; an empty input leaves the counter alone.
        """
        n_blocks = blocks_needed(len(words), BLOCK_WORDS)
        with self._lock:
            self._reserve(n_blocks)
            out = xor_stream_words(
                self._state, words, self._rounds, self._reduced
            )
            self._advance(n_blocks)
        return out

    encrypt_words = process
    decrypt_words = process

    def process_bytes(self, data: bytes) -> bytes:
        """Byte-precise process(): no padding, output length == input."""
        n_blocks = blocks_needed(len(data), BLOCK_SIZE)
        with self._lock:
            self._reserve(n_blocks)
            out = xor_stream_bytes(
                self._state, bytes(data), self._rounds, self._reduced
            )
            self._advance(n_blocks)
        logger.debug(
            "Processed %d bytes (%d blocks, next counter=%d)",
            len(data), n_blocks, self._state.counter,
        )
        return out

    encrypt_bytes = process_bytes
    decrypt_bytes = process_bytes

    def process_parallel(self, data: bytes,
                         workers: int | None = None) -> bytes:
        """
        process_bytes() spread over worker threads.

        The stream is cut into disjoint counter ranges, each handled by
        its own state copy. Output is identical to process_bytes().
        """
        n_blocks = blocks_needed(len(data), BLOCK_SIZE)
        with self._lock:
            self._reserve(n_blocks)
            out = parallel_xor(
                self._state.copy(), bytes(data), self._rounds, workers,
                self._reduced,
            )
            self._advance(n_blocks)
        return out

    def keystream(self, length: int) -> bytes:
        """Raw keystream bytes (consumes counter values like encryption)."""
        return self.process_bytes(bytes(length))

    def encrypt(self, plaintext: str) -> str:
        """UTF-8 text in, lowercase hex ciphertext out."""
        return self.process_bytes(plaintext.encode("utf-8")).hex()

    def decrypt(self, ciphertext_hex: str) -> str:
        """Hex ciphertext in, UTF-8 text out."""
        try:
            data = bytes.fromhex(ciphertext_hex.strip())
        except ValueError as exc:
            raise InvalidCiphertext(f"Ciphertext is not valid hex: {exc}") \
                from exc
        plain = self.process_bytes(data)
        try:
            return plain.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidCiphertext(
                "Decrypted bytes are not UTF-8 — wrong key or nonce?"
            ) from exc

    def info(self) -> dict:
        return {
            "counter":       self.counter,
            "double_rounds": self._rounds,
            "policy":        self._policy,
            "continuous":    self._continuous,
            "remaining":     self.blocks_remaining,
            "used":          self._used,
        }
