"""
CipherFactory — ChaCha cipher creation and discovery.

Usage:
    cipher = CipherFactory.create("CHACHA20", key)
    encrypted = cipher.encrypt(b"hello")
    plaintext = cipher.decrypt(encrypted)

    # List all available ciphers
    for name in CipherFactory.list_ciphers():
        print(CipherFactory.get_info(name))
"""

import logging

from .chacha_crypto  import ChaCha20Cipher, NativeChaCha20Cipher, \
                            NATIVE_AVAILABLE
from .errors         import InvalidKeyLength
from .symmetric_base import SymmetricCipher

logger = logging.getLogger("ChaChaCrypt.CipherFactory")


class CipherFactory:
    """
    Create any supported ChaCha variant by name.

    Keys are taken as-is: the factory never pads or truncates key
    material, a wrong length raises InvalidKeyLength.
    """

    # ── Registry ─────────────────────────────────────────────────
    _REGISTRY: dict[str, dict] = {
        "CHACHA20": {
            "class":    ChaCha20Cipher,
            "options":  {"double_rounds": 10},
            "key_size": 32,
            "rounds":   20,
            "category": "Stream (pure Python)",
            "security": "Very High (256-bit)",
            "speed":    "Slow (interpreted)",
        },
        # Reduced-round variants: educational, created with a warning
        "CHACHA12": {
            "class":    ChaCha20Cipher,
            "options":  {"double_rounds": 6, "allow_reduced_rounds": True},
            "key_size": 32,
            "rounds":   12,
            "category": "Stream (reduced rounds)",
            "security": "Reduced margin",
            "speed":    "Slow (interpreted)",
        },
        "CHACHA8": {
            "class":    ChaCha20Cipher,
            "options":  {"double_rounds": 4, "allow_reduced_rounds": True},
            "key_size": 32,
            "rounds":   8,
            "category": "Stream (reduced rounds)",
            "security": "Low margin",
            "speed":    "Slow (interpreted)",
        },
    }

    # Conditionally add the OpenSSL-backed engine
    if NATIVE_AVAILABLE:
        _REGISTRY["CHACHA20-NATIVE"] = {
            "class":    NativeChaCha20Cipher,
            "options":  {},
            "key_size": 32,
            "rounds":   20,
            "category": "Stream (OpenSSL)",
            "security": "Very High (256-bit)",
            "speed":    "Very Fast",
        }

    # ── Factory method ───────────────────────────────────────────

    @classmethod
    def create(cls, cipher_name: str, key: bytes,
               **options) -> SymmetricCipher:
        """
        Create a cipher instance.

        Parameters
        ----------
        cipher_name : str
            One of the registered cipher names (e.g. "CHACHA20").
        key : bytes
            Exactly ``get_required_key_size(cipher_name)`` bytes.
        **options
            Passed to the cipher class (``counter``, ``nonce_tracker``).

        Returns
        -------
        SymmetricCipher
            Ready-to-use cipher instance.
        """
        if cipher_name not in cls._REGISTRY:
            raise ValueError(
                f"Unknown cipher: {cipher_name}. "
                f"Available: {cls.list_ciphers()}"
            )

        info     = cls._REGISTRY[cipher_name]
        key_size = info["key_size"]

        if len(key) != key_size:
            raise InvalidKeyLength(
                f"{cipher_name} needs a {key_size}-byte key, "
                f"got {len(key)}"
            )

        cipher = info["class"](key, **info["options"], **options)

        logger.debug(
            "Created cipher: %s (key=%d bits, rounds=%d)",
            cipher.cipher_name, cipher.key_size_bits, info["rounds"],
        )
        return cipher

    # ── Discovery ────────────────────────────────────────────────

    @classmethod
    def list_ciphers(cls) -> list[str]:
        """Return all registered cipher names, ordered by preference."""
        preferred_order = [
            "CHACHA20",
            "CHACHA20-NATIVE",
            "CHACHA12",
            "CHACHA8",
        ]
        return [c for c in preferred_order if c in cls._REGISTRY]

    @classmethod
    def list_full_round_ciphers(cls) -> list[str]:
        """Return only the 20-round variants."""
        return [
            name for name in cls.list_ciphers()
            if cls._REGISTRY[name]["rounds"] == 20
        ]

    @classmethod
    def get_info(cls, cipher_name: str) -> dict:
        """Return metadata for a cipher."""
        if cipher_name not in cls._REGISTRY:
            raise ValueError(f"Unknown cipher: {cipher_name}")
        info = cls._REGISTRY[cipher_name]
        return {
            "name":      cipher_name,
            "key_bits":  info["key_size"] * 8,
            "rounds":    info["rounds"],
            "aead":      False,
            "category":  info["category"],
            "security":  info["security"],
            "speed":     info["speed"],
        }

    @classmethod
    def get_all_info(cls) -> list[dict]:
        """Return metadata for all ciphers (for GUI table)."""
        return [
            cls.get_info(name) for name in cls.list_ciphers()
        ]

    @classmethod
    def is_available(cls, cipher_name: str) -> bool:
        return cipher_name in cls._REGISTRY

    @classmethod
    def get_required_key_size(cls, cipher_name: str) -> int:
        """Return required key size in bytes."""
        if cipher_name not in cls._REGISTRY:
            raise ValueError(f"Unknown cipher: {cipher_name}")
        return cls._REGISTRY[cipher_name]["key_size"]

    @classmethod
    def recommend(cls, data_size_mb: float = 1.0) -> str:
        """
        Recommend a full-round engine for the expected data volume.

        The pure-Python engine is fine for short messages; bulk data
        goes to the native engine when it is available.
        """
        if data_size_mb > 0.1 and cls.is_available("CHACHA20-NATIVE"):
            return "CHACHA20-NATIVE"
        return "CHACHA20"
