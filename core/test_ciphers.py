import logging
import os

import pytest

from core.crypto_engine import (CipherFactory, ChaCha20Cipher,
                                NATIVE_AVAILABLE, StreamSession)
from core.crypto_engine.errors import (InvalidCiphertext, InvalidKeyLength,
                                       InvalidNonceLength, KeystreamExhausted,
                                       NonceReuseError)
from utils.nonce_tracker import NonceTracker

KEY   = bytes(range(32))
NONCE = bytes.fromhex("000000000000004a00000000")

needs_native = pytest.mark.skipif(
    not NATIVE_AVAILABLE, reason="OpenSSL build lacks ChaCha20"
)


# ── Factory ──────────────────────────────────────────────────────

def test_registry_lists_variants():
    names = CipherFactory.list_ciphers()
    assert names[0] == "CHACHA20"
    assert {"CHACHA12", "CHACHA8"} <= set(names)
    assert "CHACHA8" not in CipherFactory.list_full_round_ciphers()
    assert ("CHACHA20-NATIVE" in names) == NATIVE_AVAILABLE


def test_create_unknown_cipher():
    with pytest.raises(ValueError, match="Unknown cipher"):
        CipherFactory.create("SALSA20", KEY)


def test_create_rejects_short_key():
    with pytest.raises(InvalidKeyLength):
        CipherFactory.create("CHACHA20", KEY[:16])


def test_get_info():
    info = CipherFactory.get_info("CHACHA12")
    assert info["rounds"] == 12
    assert info["key_bits"] == 256
    assert info["aead"] is False
    assert CipherFactory.get_required_key_size("CHACHA20") == 32
    assert len(CipherFactory.get_all_info()) == len(CipherFactory.list_ciphers())


def test_recommend():
    assert CipherFactory.recommend(0.01) == "CHACHA20"
    expected = "CHACHA20-NATIVE" if NATIVE_AVAILABLE else "CHACHA20"
    assert CipherFactory.recommend(50) == expected


def test_reduced_round_variant_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="ChaChaCrypt.Block"):
        cipher = CipherFactory.create("CHACHA8", KEY)
    assert cipher.cipher_name == "CHACHA8"
    assert cipher.double_rounds == 4
    assert "reduced-round" in caplog.text


# ── Blob format ──────────────────────────────────────────────────

@pytest.mark.parametrize("name", CipherFactory.list_ciphers())
def test_round_trip(name):
    cipher = CipherFactory.create(name, KEY)
    for message in (b"", b"x", b"Hello, World!", os.urandom(1000)):
        blob = cipher.encrypt(message)
        assert len(blob) == 12 + len(message)
        assert cipher.decrypt(blob) == message


def test_fresh_nonce_per_message():
    cipher = CipherFactory.create("CHACHA20", KEY)
    assert cipher.encrypt(b"same") != cipher.encrypt(b"same")


def test_blob_matches_session():
    cipher = CipherFactory.create("CHACHA20", KEY)
    blob   = cipher.encrypt(b"attack at dawn")
    nonce, body = blob[:12], blob[12:]
    assert body == StreamSession(KEY, nonce).process_bytes(b"attack at dawn")


def test_short_blob_is_rejected():
    cipher = CipherFactory.create("CHACHA20", KEY)
    with pytest.raises(InvalidCiphertext):
        cipher.decrypt(b"\x00" * 11)


def test_wrong_nonce_length():
    cipher = CipherFactory.create("CHACHA20", KEY)
    with pytest.raises(InvalidNonceLength):
        cipher.encrypt_with_nonce(b"data", NONCE[:8])


def test_counter_option():
    cipher = CipherFactory.create("CHACHA20", KEY, counter=1)
    direct = StreamSession(KEY, NONCE, counter=1).process_bytes(b"hi there")
    assert cipher.encrypt_with_nonce(b"hi there", NONCE) == direct
    assert cipher.encrypt_with_nonce(b"hi there", NONCE, counter=0) != direct


def test_info():
    info = ChaCha20Cipher(KEY).info()
    assert info["name"] == "CHACHA20"
    assert info["rounds"] == 20
    assert info["iv_bytes"] == 12
    assert info["auth_method"] == "None"
    assert info["backend"] == "pure-python"


# ── Nonce tracking ───────────────────────────────────────────────

def test_tracker_refuses_reused_nonce():
    cipher = CipherFactory.create("CHACHA20", KEY, nonce_tracker=NonceTracker())
    cipher.encrypt_with_nonce(b"first", NONCE)
    with pytest.raises(NonceReuseError):
        cipher.encrypt_with_nonce(b"second", NONCE)
    # decryption never registers a nonce
    ct = cipher.encrypt_with_nonce(b"third", os.urandom(12))
    assert cipher.decrypt_with_nonce(ct, NONCE) == cipher.decrypt_with_nonce(ct, NONCE)


# ── Native engine agreement ──────────────────────────────────────

@needs_native
def test_native_matches_rfc_vector():
    from verify_ciphers import SUNSCREEN, SUNSCREEN_CT
    native = CipherFactory.create("CHACHA20-NATIVE", KEY, counter=1)
    assert native.encrypt_with_nonce(SUNSCREEN, NONCE) == SUNSCREEN_CT


@needs_native
@pytest.mark.parametrize("length, counter", [
    (0, 0), (63, 0), (64, 1), (1000, 7), (4096 + 17, 12345),
])
def test_native_matches_pure(length, counter):
    data   = os.urandom(length)
    nonce  = os.urandom(12)
    pure   = CipherFactory.create("CHACHA20", KEY)
    native = CipherFactory.create("CHACHA20-NATIVE", KEY)
    assert pure.encrypt_with_nonce(data, nonce, counter) == \
        native.encrypt_with_nonce(data, nonce, counter)


@needs_native
def test_blobs_are_interchangeable():
    pure   = CipherFactory.create("CHACHA20", KEY)
    native = CipherFactory.create("CHACHA20-NATIVE", KEY)
    assert native.decrypt(pure.encrypt(b"portable")) == b"portable"
    assert pure.decrypt(native.encrypt(b"portable")) == b"portable"


@needs_native
@pytest.mark.parametrize("name", ["CHACHA20", "CHACHA20-NATIVE"])
def test_engines_refuse_counter_wrap_alike(name):
    tracker = NonceTracker()
    cipher  = CipherFactory.create(name, KEY, nonce_tracker=tracker)
    with pytest.raises(KeystreamExhausted):
        cipher.encrypt_with_nonce(bytes(128), NONCE, 0xFFFFFFFF)
    with pytest.raises(KeystreamExhausted):
        cipher.decrypt_with_nonce(bytes(128), NONCE, 0xFFFFFFFF)
    # a refused request does not burn the nonce
    assert not tracker.is_used(KEY, NONCE)


@needs_native
@pytest.mark.parametrize("name", ["CHACHA20", "CHACHA20-NATIVE"])
@pytest.mark.parametrize("counter", [-1, 1 << 32])
def test_engines_reject_out_of_range_counter(name, counter):
    cipher = CipherFactory.create(name, KEY)
    with pytest.raises(ValueError):
        cipher.encrypt_with_nonce(b"data", NONCE, counter)
