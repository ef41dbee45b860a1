"""Password hashing and token helpers."""

import base64
import secrets

from pwdlib import PasswordHash


def _get_password_hasher() -> PasswordHash:
    """Get or create the password hasher instance.

    Returns:
        PasswordHash instance with recommended settings (Argon2)
    """
    if not hasattr(_get_password_hasher, "cached_instance"):
        _get_password_hasher.cached_instance = PasswordHash.recommended()
    return _get_password_hasher.cached_instance


def hash_password(password: str) -> str:
    """Hash a password using Argon2.

    Args:
        password: Plain text password to hash

    Returns:
        Hashed password string that can be safely stored in a database
    """
    return _get_password_hasher().hash(password)


def verify_password(plain_password: str | None, hashed_password: str | None) -> bool:
    """Verify a password against its hash.

    Missing values never match, so callers can pass request input straight
    through.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Hashed password from the database

    Returns:
        True if password matches, False otherwise
    """
    if not plain_password or not hashed_password:
        return False
    return _get_password_hasher().verify(plain_password, hashed_password)


def generate_secure_token(length: int = 32) -> str:
    """Generate a cryptographically secure random token.

    Args:
        length: Number of random bytes to generate (default 32)

    Returns:
        URL-safe base64 encoded token
    """
    return (
        base64.urlsafe_b64encode(secrets.token_bytes(length))
        .decode("utf-8")
        .rstrip("=")
    )
