"""
In-process nonce bookkeeping.

ChaCha20 leaks the XOR of two plaintexts when a nonce is reused under
one key. The tracker remembers every (key, nonce) pair it has seen in
this process and refuses a repeat. Keys are stored only as SHA-256
fingerprints.
"""

import logging
import threading

from cryptography.hazmat.primitives import hashes

from core.crypto_engine.errors import NonceReuseError

logger = logging.getLogger("ChaChaCrypt.NonceTracker")


class NonceTracker:
    """Thread-safe registry of nonces already used per key."""

    def __init__(self):
        self._seen: dict[bytes, set[bytes]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def fingerprint(key: bytes) -> bytes:
        digest = hashes.Hash(hashes.SHA256())
        digest.update(key)
        return digest.finalize()

    def register(self, key: bytes, nonce: bytes):
        """Record *nonce* for *key*; NonceReuseError if seen before."""
        fp = self.fingerprint(key)
        with self._lock:
            used = self._seen.setdefault(fp, set())
            if nonce in used:
                logger.error(
                    "Nonce reuse refused for key %s…", fp.hex()[:12]
                )
                raise NonceReuseError(
                    f"Nonce {nonce.hex()} was already used with this key"
                )
            used.add(bytes(nonce))

    def is_used(self, key: bytes, nonce: bytes) -> bool:
        fp = self.fingerprint(key)
        with self._lock:
            return nonce in self._seen.get(fp, ())

    def count(self, key: bytes | None = None) -> int:
        with self._lock:
            if key is None:
                return sum(len(v) for v in self._seen.values())
            return len(self._seen.get(self.fingerprint(key), ()))

    def forget(self, key: bytes):
        """Drop all nonces recorded for *key* (e.g. after key rotation)."""
        with self._lock:
            self._seen.pop(self.fingerprint(key), None)

    def clear(self):
        with self._lock:
            self._seen.clear()
