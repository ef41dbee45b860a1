"""Unit tests for password hashing helpers."""

from src.storefront.core.security import (
    generate_secure_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password("s3cret-pass")

        assert hashed != "s3cret-pass"
        assert hashed.startswith("$argon2")

    def test_same_password_hashes_differently(self):
        """Each hash carries its own salt."""
        assert hash_password("s3cret-pass") != hash_password("s3cret-pass")

    def test_verify_accepts_matching_password(self):
        hashed = hash_password("s3cret-pass")

        assert verify_password("s3cret-pass", hashed) is True

    def test_verify_rejects_wrong_password(self):
        hashed = hash_password("s3cret-pass")

        assert verify_password("other-pass", hashed) is False

    def test_verify_rejects_missing_values(self):
        hashed = hash_password("s3cret-pass")

        assert verify_password(None, hashed) is False
        assert verify_password("", hashed) is False
        assert verify_password("s3cret-pass", None) is False


def test_generate_secure_token_is_random():
    assert generate_secure_token() != generate_secure_token()
    assert len(generate_secure_token(16)) >= 16
