"""
ChaCha state — named fields in, 16-word positional array out.

Positional layout (RFC 8439):

    0 – 3    constants  "expand 32-byte k"
    4 – 11   key        (8 words)
    12       counter
    13 – 15  nonce      (3 words)

The positional array only exists at the block-function boundary;
everything else talks to the named fields.
"""

import logging
import struct

from config.settings import Settings

from .errors import InvalidKeyLength, InvalidNonceLength
from .word   import MASK32

logger = logging.getLogger("ChaChaCrypt.State")

CONSTANT_TEXT = b"expand 32-byte k"
STATE_WORDS   = 16
BLOCK_SIZE    = 64                  # bytes per keystream block
BLOCK_WORDS   = STATE_WORDS


def words_from_bytes(data: bytes) -> list[int]:
    """Little-endian 32-bit words; *data* length must be a multiple of 4."""
    if len(data) % 4:
        raise ValueError(
            f"Word conversion needs a multiple of 4 bytes, got {len(data)}"
        )
    return list(struct.unpack(f"<{len(data) // 4}I", data))


def words_to_bytes(words) -> bytes:
    return struct.pack(f"<{len(words)}I", *words)


CONSTANT_WORDS = tuple(words_from_bytes(CONSTANT_TEXT))


def _fit(material: bytes, size: int) -> bytes:
    return material[:size].ljust(size, b"\x00")


class ChaChaState:
    """
    One cipher state: fixed constants, key and nonce plus a counter.

    Only ``counter`` is expected to change during the lifetime of the
    object, and only by the owning session.
    """

    __slots__ = ("constants", "key", "nonce", "counter")

    def __init__(self, key_words, nonce_words, counter: int = 0):
        if len(key_words) != 8:
            raise InvalidKeyLength(
                f"ChaCha20 key must be 8 words, got {len(key_words)}"
            )
        if len(nonce_words) != 3:
            raise InvalidNonceLength(
                f"ChaCha20 nonce must be 3 words, got {len(nonce_words)}"
            )
        self.constants = CONSTANT_WORDS
        self.key       = tuple(w & MASK32 for w in key_words)
        self.nonce     = tuple(w & MASK32 for w in nonce_words)
        self.counter   = counter & MASK32

    # ── construction ─────────────────────────────────────────────

    @classmethod
    def from_bytes(cls, key: bytes, nonce: bytes, counter: int = 0,
                   strict: bool | None = None) -> "ChaChaState":
        """
        Build a state from raw key / nonce bytes.

        With ``strict`` (the default from Settings) the key must be
        exactly 32 bytes and the nonce exactly 12. In lenient mode short
        material is right-padded with zero bytes and long material is
        right-truncated; that collapses distinct inputs onto one key,
        so it is logged as a warning.
        """
        if strict is None:
            strict = Settings.STRICT_KEY_LENGTH

        if len(key) != Settings.KEY_SIZE:
            if strict:
                raise InvalidKeyLength(
                    f"ChaCha20 key must be {Settings.KEY_SIZE} bytes, "
                    f"got {len(key)}"
                )
            logger.warning(
                "Key is %d bytes; padding/truncating to %d",
                len(key), Settings.KEY_SIZE,
            )
            key = _fit(key, Settings.KEY_SIZE)

        if len(nonce) != Settings.NONCE_SIZE:
            if strict:
                raise InvalidNonceLength(
                    f"ChaCha20 nonce must be {Settings.NONCE_SIZE} bytes, "
                    f"got {len(nonce)}"
                )
            logger.warning(
                "Nonce is %d bytes; padding/truncating to %d",
                len(nonce), Settings.NONCE_SIZE,
            )
            nonce = _fit(nonce, Settings.NONCE_SIZE)

        return cls(words_from_bytes(key), words_from_bytes(nonce), counter)

    @classmethod
    def from_words(cls, words) -> "ChaChaState":
        """Rebuild named fields from a 16-word positional array."""
        if len(words) != STATE_WORDS:
            raise ValueError(
                f"ChaCha state must be 16 words, got {len(words)}"
            )
        if tuple(words[0:4]) != CONSTANT_WORDS:
            raise ValueError("State words 0-3 are not the ChaCha constants")
        return cls(words[4:12], words[13:16], words[12])

    # ── serialization ────────────────────────────────────────────

    def to_words(self) -> list[int]:
        """Positional 16-word array consumed by the block function."""
        return [
            *self.constants,
            *self.key,
            self.counter,
            *self.nonce,
        ]

    def copy(self) -> "ChaChaState":
        return ChaChaState(self.key, self.nonce, self.counter)

    def with_counter(self, counter: int) -> "ChaChaState":
        """Independent copy positioned at *counter*."""
        return ChaChaState(self.key, self.nonce, counter)

    def __eq__(self, other):
        if not isinstance(other, ChaChaState):
            return NotImplemented
        return self.to_words() == other.to_words()

    def __repr__(self):
        # never render key material
        return (
            f"ChaChaState(counter={self.counter}, "
            f"nonce={words_to_bytes(self.nonce).hex()})"
        )
