import logging

import pytest

from core.crypto_engine.block  import (quarter_round, quarter_round_words,
                                       double_round, chacha_block,
                                       serialize_block, check_rounds,
                                       xor_stream_bytes, xor_stream_words,
                                       COLUMN_ROUND, DIAGONAL_ROUND)
from core.crypto_engine.errors import InsecureRoundCount
from core.crypto_engine.parallel import parallel_xor
from core.crypto_engine.state  import ChaChaState
from core.crypto_engine.word   import sub_mod, xor, rotate_right


def _keystream(key: bytes, nonce: bytes, counter: int) -> bytes:
    state = ChaChaState.from_bytes(key, nonce, counter)
    return serialize_block(chacha_block(state.to_words()))


# ── quarter round ────────────────────────────────────────────────

def test_quarter_round_rfc8439_2_1_1():
    assert quarter_round_words(
        0x11111111, 0x01020304, 0x9B8D6F43, 0x01234567
    ) == (0xEA2A92F4, 0xCB1CF8CE, 0x4581472E, 0x5881C4BB)


def test_quarter_round_on_state_rfc8439_2_2_1():
    x = [
        0x879531E0, 0xC5ECF37D, 0x516461B1, 0xC9A62F8A,
        0x44C20EF3, 0x3390AF7F, 0xD9FC690B, 0x2A5F714C,
        0x53372767, 0xB00A5631, 0x974C541A, 0x359E9963,
        0x5C971061, 0x3D631689, 0x2098D9D6, 0x91DBD320,
    ]
    quarter_round(x, 2, 7, 8, 13)
    assert x == [
        0x879531E0, 0xC5ECF37D, 0xBDB886DC, 0xC9A62F8A,
        0x44C20EF3, 0x3390AF7F, 0xD9FC690B, 0xCFACAFD2,
        0xE46BEA80, 0xB00A5631, 0x974C541A, 0x359E9963,
        0x5C971061, 0xCCC07C79, 0x2098D9D6, 0x91DBD320,
    ]


def test_quarter_round_steps_can_be_undone():
    a, b, c, d = quarter_round_words(1, 2, 3, 4)
    # run the twelve steps backwards
    b = xor(rotate_right(b, 7), c);   c = sub_mod(c, d)
    d = xor(rotate_right(d, 8), a);   a = sub_mod(a, b)
    b = xor(rotate_right(b, 12), c);  c = sub_mod(c, d)
    d = xor(rotate_right(d, 16), a);  a = sub_mod(a, b)
    assert (a, b, c, d) == (1, 2, 3, 4)


def test_round_index_groups():
    assert COLUMN_ROUND == ((0, 4, 8, 12), (1, 5, 9, 13),
                            (2, 6, 10, 14), (3, 7, 11, 15))
    assert DIAGONAL_ROUND == ((0, 5, 10, 15), (1, 6, 11, 12),
                              (2, 7, 8, 13), (3, 4, 9, 14))


def test_double_round_touches_every_word():
    x = list(range(1, 17))
    double_round(x)
    assert all(after != before for after, before in zip(x, range(1, 17)))


# ── block function ───────────────────────────────────────────────

def test_block_rfc8439_2_3_2():
    assert _keystream(
        bytes(range(32)), bytes.fromhex("000000090000004a00000000"), 1
    ) == bytes.fromhex(
        "10f1e7e4d13b5915500fdd1fa32071c4c7d1f4c733c068030422aa9ac3d46c4e"
        "d2826446079faa0914c2d705d98b02a2b5129cd1de164eb9cbd083e8a2503c4e"
    )


@pytest.mark.parametrize("key, counter, expected", [
    # RFC 8439 A.1 test vector #1
    (bytes(32), 0,
     "76b8e0ada0f13d90405d6ae55386bd28bdd219b8a08ded1aa836efcc8b770dc7"
     "da41597c5157488d7724e03fb8d84a376a43b8f41518a11cc387b669b2ee6586"),
    # A.1 #2
    (bytes(32), 1,
     "9f07e7be5551387a98ba977c732d080dcb0f29a048e3656912c6533e32ee7aed"
     "29b721769ce64e43d57133b074d839d531ed1f28510afb45ace10a1f4b794d6f"),
    # A.1 #3: key all zero except the last byte
    (bytes(31) + b"\x01", 1,
     "3aeb5224ecf849929b9d828db1ced4dd832025e8018b8160b82284f3c949aa5a"
     "8eca00bbb4a73bdad192b5c42f73f2fd4e273644c8b36125a64addeb006c13a0"),
])
def test_block_rfc8439_appendix_vectors(key, counter, expected):
    assert _keystream(key, bytes(12), counter).hex() == expected


def test_block_is_deterministic_and_leaves_input_alone():
    words = ChaChaState.from_bytes(bytes(range(32)), bytes(12), 5).to_words()
    snapshot = list(words)
    assert chacha_block(words) == chacha_block(words)
    assert words == snapshot


def test_adjacent_counters_give_different_blocks():
    key, nonce = bytes(range(100, 132)), bytes(range(12))
    assert _keystream(key, nonce, 0) != _keystream(key, nonce, 1)


def test_block_rejects_wrong_size():
    with pytest.raises(ValueError):
        chacha_block([0] * 15)


# ── round-count floor ────────────────────────────────────────────

def test_full_rounds_accepted():
    assert check_rounds(10) == 10
    assert check_rounds(12) == 12


def test_reduced_rounds_need_opt_in():
    with pytest.raises(InsecureRoundCount):
        check_rounds(4)


def test_reduced_rounds_warn_when_allowed(caplog):
    with caplog.at_level(logging.WARNING, logger="ChaChaCrypt.Block"):
        assert check_rounds(4, allow_reduced_rounds=True) == 4
    assert "reduced-round" in caplog.text


def test_zero_rounds_never_allowed():
    with pytest.raises(InsecureRoundCount):
        check_rounds(0, allow_reduced_rounds=True)


def test_block_function_enforces_round_floor():
    words = ChaChaState.from_bytes(bytes(32), bytes(12)).to_words()
    with pytest.raises(InsecureRoundCount):
        chacha_block(words, 0)
    with pytest.raises(InsecureRoundCount):
        chacha_block(words, 0, allow_reduced_rounds=True)
    with pytest.raises(InsecureRoundCount):
        chacha_block(words, 1)


def test_block_function_warns_on_allowed_reduced_rounds(caplog):
    words = ChaChaState.from_bytes(bytes(32), bytes(12)).to_words()
    with caplog.at_level(logging.WARNING, logger="ChaChaCrypt.Block"):
        reduced = chacha_block(words, 4, allow_reduced_rounds=True)
    assert reduced != chacha_block(words)
    assert "reduced-round" in caplog.text


@pytest.mark.parametrize("double_rounds", [0, 4])
def test_stream_helpers_enforce_round_floor(double_rounds):
    state = ChaChaState.from_bytes(bytes(32), bytes(12))
    with pytest.raises(InsecureRoundCount):
        xor_stream_words(state, [0] * 16, double_rounds)
    with pytest.raises(InsecureRoundCount):
        xor_stream_bytes(state, bytes(64), double_rounds)
    with pytest.raises(InsecureRoundCount):
        parallel_xor(state, bytes(64), double_rounds)
    # nothing was produced, so the counter never moved
    assert state.counter == 0


def test_stream_helpers_accept_opted_in_reduced_rounds():
    state = ChaChaState.from_bytes(bytes(32), bytes(12))
    words = state.to_words()
    out = xor_stream_bytes(state.copy(), bytes(64), 4,
                           allow_reduced_rounds=True)
    assert out == serialize_block(
        chacha_block(words, 4, allow_reduced_rounds=True)
    )
