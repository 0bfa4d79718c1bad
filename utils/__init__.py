from .random_gen    import SecureRandom
from .nonce_tracker import NonceTracker
from . import codec

__all__ = ["SecureRandom", "NonceTracker", "codec"]
