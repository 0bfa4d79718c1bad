import os


class Settings:
    """Centralised application configuration."""

    # ── application ──────────────────────────────────────────────
    APP_NAME    = "ChaChaCrypt"
    APP_VERSION = "1.0.0"

    # ── paths ────────────────────────────────────────────────────
    BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    LOG_FILE = os.path.join(BASE_DIR, "chachacrypt.log")

    # ── cipher parameters ────────────────────────────────────────
    KEY_SIZE          = 32          # 256 bits
    NONCE_SIZE        = 12          # 96 bits
    DOUBLE_ROUNDS     = 10          # ChaCha20
    MIN_DOUBLE_ROUNDS = 10
    INITIAL_COUNTER   = 0

    # ── session policy ───────────────────────────────────────────
    COUNTER_POLICY     = "raise"    # "raise" | "wrap"
    CONTINUOUS_COUNTER = True
    STRICT_KEY_LENGTH  = True

    # ── parallel keystream ───────────────────────────────────────
    PARALLEL_WORKERS    = 4
    PARALLEL_MIN_BLOCKS = 64        # below this, stay sequential

    # ── tooling ──────────────────────────────────────────────────
    BENCHMARK_SIZE = 64 * 1024      # bytes

    # ── logging ──────────────────────────────────────────────────
    LOG_LEVEL = "DEBUG"
