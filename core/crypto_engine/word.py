"""
32-bit word algebra.

A word is a plain Python int kept in ``[0, 2**32)``. Every operation
here is total and returns a fresh value. The quarter-round in block.py
is built from add_mod and rotate_left; sub_mod and rotate_right are
their inverses.
"""

MASK32 = 0xFFFFFFFF
WORD_BITS = 32

ZERO = 0
ONE  = 1


def zero() -> int:
    return ZERO


def one() -> int:
    return ONE


def to_word(value: int) -> int:
    """Reduce any integer to 32 bits."""
    return value & MASK32


def add_mod(a: int, b: int) -> int:
    """(a + b) mod 2**32"""
    return (a + b) & MASK32


def sub_mod(a: int, b: int) -> int:
    """(a - b) mod 2**32 — inverse of add_mod."""
    return (a - b) & MASK32


def xor(a: int, b: int) -> int:
    return (a ^ b) & MASK32


def rotate_left(a: int, n: int) -> int:
    """Circular left shift by *n* bits; *n* is taken modulo 32."""
    n %= WORD_BITS
    a &= MASK32
    return ((a << n) & MASK32) | (a >> (WORD_BITS - n))


def rotate_right(a: int, n: int) -> int:
    """Inverse of rotate_left."""
    return rotate_left(a, (WORD_BITS - n) % WORD_BITS)
