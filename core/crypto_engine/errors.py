"""
Exceptions raised by the ChaCha20 engine.

All of them derive from ValueError, so callers that already guard
cipher calls with ``except ValueError`` keep working.
"""


class ChaChaError(ValueError):
    """Base class for every ChaChaCrypt error."""


class InvalidKeyLength(ChaChaError):
    """Key material is not exactly 256 bits under the strict policy."""


class InvalidNonceLength(ChaChaError):
    """Nonce is not exactly 96 bits under the strict policy."""


class InsecureRoundCount(ChaChaError):
    """Requested double-round count is below the enforced floor."""


class KeystreamExhausted(ChaChaError):
    """The 32-bit block counter would wrap and reuse keystream."""


class NonceReuseError(ChaChaError):
    """A nonce was presented twice under the same key."""


class InvalidCiphertext(ChaChaError):
    """Ciphertext blob or hex string cannot be parsed."""
