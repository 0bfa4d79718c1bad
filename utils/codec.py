"""
Text / bytes / word / hex conversions around the cipher core.

Words are little-endian 32-bit ints, the layout the ChaCha state uses.
Converting text to words pads the UTF-8 bytes with zero bytes up to a
4-byte boundary; converting back strips that padding again.
"""

from core.crypto_engine.state import words_from_bytes, words_to_bytes

PAD_BYTE = b"\x00"


# ── text ⇄ bytes ─────────────────────────────────────────────────
def text_to_bytes(text: str) -> bytes:
    return text.encode("utf-8")


def bytes_to_text(data: bytes) -> str:
    return data.decode("utf-8")


# ── bytes ⇄ words ────────────────────────────────────────────────
def bytes_to_words(data: bytes) -> list[int]:
    """Zero-pad *data* to a multiple of 4 bytes, then split into words."""
    remainder = len(data) % 4
    if remainder:
        data = data + PAD_BYTE * (4 - remainder)
    return words_from_bytes(data)


def words_to_bytes_trimmed(words) -> bytes:
    """Inverse of bytes_to_words; trailing zero padding is removed."""
    return words_to_bytes(words).rstrip(PAD_BYTE)


# ── text ⇄ words ─────────────────────────────────────────────────
def text_to_words(text: str) -> list[int]:
    return bytes_to_words(text_to_bytes(text))


def words_to_text(words) -> str:
    return bytes_to_text(words_to_bytes_trimmed(words))


# ── hex ──────────────────────────────────────────────────────────
def bytes_to_hex(data: bytes) -> str:
    return data.hex()


def hex_to_bytes(value: str) -> bytes:
    """Parse hex, ignoring surrounding whitespace; ValueError if invalid."""
    return bytes.fromhex(value.strip())


def words_to_hex(words) -> str:
    return words_to_bytes(words).hex()


def hex_to_words(value: str) -> list[int]:
    data = hex_to_bytes(value)
    if len(data) % 4:
        raise ValueError(
            f"Hex word stream must encode a multiple of 4 bytes, "
            f"got {len(data)}"
        )
    return words_from_bytes(data)
