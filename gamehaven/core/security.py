"""
Password hashing for stored user credentials.

Passwords are never persisted in plaintext; the users table holds bcrypt
hashes and login verifies the submitted string against them.
"""

import base64
import hashlib

import bcrypt


_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def _to_bytes(password: str) -> bytes:
    # bcrypt reads at most 72 bytes; a SHA-256 digest keeps every character significant
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def get_password_hash(password: str, rounds: int = 12) -> str:
    """
    Hash a password for storage.

    Args:
        password: Plain text password
        rounds: bcrypt cost factor

    Returns:
        bcrypt hash as a UTF-8 string
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_to_bytes(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The hashed password to compare against

    Returns:
        True if password matches, False otherwise (including when the
        stored value is not a bcrypt hash at all)
    """
    if not is_password_hash(hashed_password):
        return False
    try:
        return bcrypt.checkpw(_to_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def is_password_hash(value: str) -> bool:
    """Return True when ``value`` already looks like a bcrypt hash."""
    return (
        isinstance(value, str)
        and len(value) == 60
        and value.startswith(_BCRYPT_PREFIXES)
    )
