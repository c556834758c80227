"""Unit tests for password hashing and verification."""

import pytest

from ema_api.auth.passwords import MAX_PASSWORD_BYTES, hash_password, password_fits, verify_password


class TestHashPassword:
    """Test password hashing."""

    def test_hash_differs_from_plaintext(self):
        hashed = hash_password("mypassword")
        assert isinstance(hashed, str)
        assert hashed != "mypassword"

    def test_same_password_different_salts(self):
        """Hashing the same password twice should produce different hashes (different salts)."""
        assert hash_password("samepassword") != hash_password("samepassword")

    def test_too_long_password_rejected(self):
        with pytest.raises(ValueError):
            hash_password("a" * (MAX_PASSWORD_BYTES + 1))


class TestVerifyPassword:
    """Test password verification."""

    def test_correct_password_verifies(self):
        hashed = hash_password("testpass123")
        assert verify_password("testpass123", hashed) is True

    def test_wrong_password_fails(self):
        hashed = hash_password("testpass123")
        assert verify_password("wrongpassword", hashed) is False

    def test_unicode_password(self):
        hashed = hash_password("pässwördü")
        assert verify_password("pässwördü", hashed) is True
        assert verify_password("password", hashed) is False

    def test_max_length_password(self):
        long_pass = "a" * MAX_PASSWORD_BYTES
        assert verify_password(long_pass, hash_password(long_pass)) is True

    def test_byte_length_counts_multibyte_chars(self):
        assert password_fits("é" * 36) is True
        assert password_fits("é" * 37) is False
