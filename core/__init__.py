from .crypto_engine import StreamSession, ChaCha20Cipher, CipherFactory

__all__ = ["StreamSession", "ChaCha20Cipher", "CipherFactory"]
