"""
ChaChaCrypt engine — ChaCha20 word algebra, state, block function,
stream sessions and cipher facades.
"""

# ── Core algorithm ───────────────────────────────────────────────
from .errors  import (ChaChaError, InvalidKeyLength, InvalidNonceLength,
                      InsecureRoundCount, KeystreamExhausted,
                      NonceReuseError, InvalidCiphertext)
from .word    import (MASK32, ZERO, ONE, zero, one, to_word, add_mod,
                      sub_mod, xor, rotate_left, rotate_right)
from .state   import (ChaChaState, CONSTANT_WORDS, BLOCK_SIZE,
                      words_from_bytes, words_to_bytes)
from .block   import (quarter_round, quarter_round_words, double_round,
                      chacha_block, serialize_block, check_rounds,
                      require_rounds)
from .session  import StreamSession
from .parallel import partition, parallel_xor

# ── Unified cipher system ────────────────────────────────────────
from .symmetric_base import SymmetricCipher
from .chacha_crypto  import ChaCha20Cipher, NativeChaCha20Cipher, \
                            NATIVE_AVAILABLE
from .cipher_factory import CipherFactory

__all__ = [
    # Errors
    "ChaChaError", "InvalidKeyLength", "InvalidNonceLength",
    "InsecureRoundCount", "KeystreamExhausted", "NonceReuseError",
    "InvalidCiphertext",
    # Word algebra
    "MASK32", "ZERO", "ONE", "zero", "one", "to_word", "add_mod",
    "sub_mod", "xor", "rotate_left", "rotate_right",
    # State / block
    "ChaChaState", "CONSTANT_WORDS", "BLOCK_SIZE",
    "words_from_bytes", "words_to_bytes",
    "quarter_round", "quarter_round_words", "double_round",
    "chacha_block", "serialize_block", "check_rounds", "require_rounds",
    # Session / parallel keystream
    "StreamSession", "partition", "parallel_xor",
    # Cipher facades
    "SymmetricCipher", "ChaCha20Cipher", "NativeChaCha20Cipher",
    "NATIVE_AVAILABLE", "CipherFactory",
]
