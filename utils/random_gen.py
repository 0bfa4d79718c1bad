"""
Cryptographically-secure random value generators.
"""

import os

from config.settings import Settings


class SecureRandom:

    @staticmethod
    def generate_bytes(length: int) -> bytes:
        return os.urandom(length)

    @staticmethod
    def generate_key(length: int = Settings.KEY_SIZE) -> bytes:
        return os.urandom(length)

    @staticmethod
    def generate_nonce(length: int = Settings.NONCE_SIZE) -> bytes:
        return os.urandom(length)

