"""
ChaCha quarter-round and block function.

The block function works on a 16-word positional list. Quarter-rounds
update four slots of that list by index; no word is ever shared between
two slots.

Every entry point that takes a round count validates it: fewer than
``Settings.MIN_DOUBLE_ROUNDS`` needs ``allow_reduced_rounds=True``.
"""

import logging

from config.settings import Settings

from .errors import InsecureRoundCount
from .state  import BLOCK_SIZE, STATE_WORDS, words_to_bytes
from .word   import MASK32, add_mod, rotate_left

logger = logging.getLogger("ChaChaCrypt.Block")

# (a, b, c, d) index groups
COLUMN_ROUND = (
    (0, 4,  8, 12),
    (1, 5,  9, 13),
    (2, 6, 10, 14),
    (3, 7, 11, 15),
)
DIAGONAL_ROUND = (
    (0, 5, 10, 15),
    (1, 6, 11, 12),
    (2, 7,  8, 13),
    (3, 4,  9, 14),
)


def quarter_round(x: list, a: int, b: int, c: int, d: int):
    """Mix x[a], x[b], x[c], x[d] in place."""
    xa, xb, xc, xd = x[a], x[b], x[c], x[d]

    xa = add_mod(xa, xb);  xd = rotate_left(xd ^ xa, 16)
    xc = add_mod(xc, xd);  xb = rotate_left(xb ^ xc, 12)
    xa = add_mod(xa, xb);  xd = rotate_left(xd ^ xa, 8)
    xc = add_mod(xc, xd);  xb = rotate_left(xb ^ xc, 7)

    x[a], x[b], x[c], x[d] = xa, xb, xc, xd


def quarter_round_words(a: int, b: int, c: int, d: int) -> tuple:
    """Value form of quarter_round."""
    x = [a, b, c, d]
    quarter_round(x, 0, 1, 2, 3)
    return tuple(x)


def double_round(x: list):
    """One column pass followed by one diagonal pass."""
    for a, b, c, d in COLUMN_ROUND:
        quarter_round(x, a, b, c, d)
    for a, b, c, d in DIAGONAL_ROUND:
        quarter_round(x, a, b, c, d)


def require_rounds(double_rounds: int,
                   allow_reduced_rounds: bool = False) -> int:
    """check_rounds() without the warning, for per-call validation."""
    if double_rounds < 1:
        raise InsecureRoundCount(
            f"Double-round count must be positive, got {double_rounds}"
        )
    if double_rounds < Settings.MIN_DOUBLE_ROUNDS and not allow_reduced_rounds:
        raise InsecureRoundCount(
            f"{double_rounds} double-rounds is below the minimum of "
            f"{Settings.MIN_DOUBLE_ROUNDS}"
        )
    return double_rounds


def check_rounds(double_rounds: int,
                 allow_reduced_rounds: bool = False) -> int:
    """
    Validate a double-round count.

    Anything below ``Settings.MIN_DOUBLE_ROUNDS`` needs an explicit
    opt-in and is logged; zero or negative counts are never accepted.
    """
    require_rounds(double_rounds, allow_reduced_rounds)
    if double_rounds < Settings.MIN_DOUBLE_ROUNDS:
        logger.warning(
            "Using reduced-round ChaCha (%d double-rounds); "
            "fewer than 4 is known to be breakable",
            double_rounds,
        )
    return double_rounds


def _mix(state_words, double_rounds: int) -> list[int]:
    working = list(state_words)
    for _ in range(double_rounds):
        double_round(working)
    return [
        (working[i] + state_words[i]) & MASK32
        for i in range(STATE_WORDS)
    ]


def chacha_block(state_words, double_rounds: int = 10,
                 allow_reduced_rounds: bool = False) -> list[int]:
    """
    Produce one 16-word keystream block.

    *state_words* is the positional state; it is not modified. The
    mixed words are added back to the input (feed-forward) so the
    permutation cannot simply be run backwards.
    """
    if len(state_words) != STATE_WORDS:
        raise ValueError(
            f"ChaCha state must be 16 words, got {len(state_words)}"
        )
    check_rounds(double_rounds, allow_reduced_rounds)
    return _mix(state_words, double_rounds)


def serialize_block(words) -> bytes:
    """64-byte little-endian keystream."""
    return words_to_bytes(words)


# ── counter-mode XOR over a state ────────────────────────────────

def xor_stream_words(state, words, double_rounds: int = 10,
                     allow_reduced_rounds: bool = False) -> list[int]:
    """
    XOR *words* against consecutive keystream blocks of *state*.

    One block per 16-word chunk; a short final chunk uses only the
    leading keystream words. ``state.counter`` is advanced by one
    (mod 2**32) after every block.
    """
    require_rounds(double_rounds, allow_reduced_rounds)
    out = []
    for k in range(0, len(words), STATE_WORDS):
        block = _mix(state.to_words(), double_rounds)
        chunk = words[k:k + STATE_WORDS]
        out.extend((w ^ ks) & MASK32 for w, ks in zip(chunk, block))
        state.counter = (state.counter + 1) & MASK32
    return out


def xor_stream_bytes(state, data: bytes, double_rounds: int = 10,
                     allow_reduced_rounds: bool = False) -> bytes:
    """Byte-precise counterpart of xor_stream_words (64-byte chunks)."""
    require_rounds(double_rounds, allow_reduced_rounds)
    out = bytearray()
    for k in range(0, len(data), BLOCK_SIZE):
        chunk     = data[k:k + BLOCK_SIZE]
        keystream = serialize_block(
            _mix(state.to_words(), double_rounds)
        )[:len(chunk)]
        mixed = (
            int.from_bytes(chunk, "little")
            ^ int.from_bytes(keystream, "little")
        )
        out += mixed.to_bytes(len(chunk), "little")
        state.counter = (state.counter + 1) & MASK32
    return bytes(out)
