import pytest

from core.crypto_engine.errors import InvalidKeyLength, InvalidNonceLength
from core.crypto_engine.state  import (ChaChaState, CONSTANT_WORDS,
                                       words_from_bytes, words_to_bytes)

RFC_KEY   = bytes(range(32))
RFC_NONCE = bytes.fromhex("000000090000004a00000000")


def test_constant_words():
    assert CONSTANT_WORDS == (0x61707865, 0x3320646E, 0x79622D32, 0x6B206574)


def test_positional_layout_matches_rfc8439():
    state = ChaChaState.from_bytes(RFC_KEY, RFC_NONCE, counter=1)
    assert state.to_words() == [
        0x61707865, 0x3320646E, 0x79622D32, 0x6B206574,
        0x03020100, 0x07060504, 0x0B0A0908, 0x0F0E0D0C,
        0x13121110, 0x17161514, 0x1B1A1918, 0x1F1E1D1C,
        0x00000001, 0x09000000, 0x4A000000, 0x00000000,
    ]


def test_counter_defaults_to_zero():
    state = ChaChaState.from_bytes(RFC_KEY, RFC_NONCE)
    assert state.counter == 0
    assert state.to_words()[12] == 0


def test_strict_lengths():
    with pytest.raises(InvalidKeyLength):
        ChaChaState.from_bytes(b"short", RFC_NONCE, strict=True)
    with pytest.raises(InvalidNonceLength):
        ChaChaState.from_bytes(RFC_KEY, b"\x00" * 8, strict=True)
    # still catchable as ValueError
    with pytest.raises(ValueError):
        ChaChaState.from_bytes(RFC_KEY + b"x", RFC_NONCE, strict=True)


def test_lenient_pads_with_zero_bytes(caplog):
    state = ChaChaState.from_bytes(b"abc", b"n", strict=False)
    assert state.key == (0x00636261, 0, 0, 0, 0, 0, 0, 0)
    assert state.nonce == (0x6E, 0, 0)
    assert "padding/truncating" in caplog.text


def test_lenient_truncation_collapses_long_keys():
    a = ChaChaState.from_bytes(RFC_KEY + b"tail-a", RFC_NONCE, strict=False)
    b = ChaChaState.from_bytes(RFC_KEY + b"tail-b", RFC_NONCE, strict=False)
    assert a == b == ChaChaState.from_bytes(RFC_KEY, RFC_NONCE)


def test_from_words_round_trip():
    state = ChaChaState.from_bytes(RFC_KEY, RFC_NONCE, counter=7)
    assert ChaChaState.from_words(state.to_words()) == state


def test_from_words_rejects_bad_layout():
    words = ChaChaState.from_bytes(RFC_KEY, RFC_NONCE).to_words()
    with pytest.raises(ValueError):
        ChaChaState.from_words(words[:15])
    words[0] ^= 1
    with pytest.raises(ValueError):
        ChaChaState.from_words(words)


def test_with_counter_is_independent():
    state = ChaChaState.from_bytes(RFC_KEY, RFC_NONCE, counter=3)
    other = state.with_counter(9)
    other.counter = 10
    assert state.counter == 3
    assert other.key == state.key and other.nonce == state.nonce


def test_counter_is_masked_to_32_bits():
    state = ChaChaState.from_bytes(RFC_KEY, RFC_NONCE).with_counter(1 << 32)
    assert state.counter == 0


def test_repr_hides_key():
    state = ChaChaState.from_bytes(RFC_KEY, RFC_NONCE)
    assert RFC_KEY.hex()[:16] not in repr(state)
    assert RFC_NONCE.hex() in repr(state)


def test_word_byte_conversion_is_little_endian():
    assert words_from_bytes(b"\x01\x02\x03\x04") == [0x04030201]
    assert words_to_bytes([0x04030201]) == b"\x01\x02\x03\x04"
    with pytest.raises(ValueError):
        words_from_bytes(b"\x01\x02\x03")
