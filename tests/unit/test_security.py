"""
Tests for password hashing helpers.
"""

import pytest

from gamehaven.core.security import get_password_hash, is_password_hash, verify_password


ROUNDS = 4


class TestPasswordHashing:

    def test_hash_is_not_plaintext(self):
        hashed = get_password_hash("123", rounds=ROUNDS)

        assert hashed != "123"
        assert is_password_hash(hashed)

    def test_hash_is_salted(self):
        assert get_password_hash("123", rounds=ROUNDS) != get_password_hash("123", rounds=ROUNDS)

    def test_verify_password(self):
        hashed = get_password_hash("Secret", rounds=ROUNDS)

        assert verify_password("Secret", hashed) is True
        assert verify_password("secret", hashed) is False
        assert verify_password("", hashed) is False

    def test_verify_against_plaintext_value(self):
        """A stored value that isn't a hash never verifies, even if equal."""
        assert verify_password("123", "123") is False

    def test_long_passwords_compared_in_full(self):
        """
        Arrange: Hash a password longer than bcrypt's 72-byte input
        Act: Verify the exact string and strings sharing its first 72 bytes
        Assert: Only the exact string verifies
        """
        # Arrange
        password = "a" * 72 + "SECRET"
        hashed = get_password_hash(password, rounds=ROUNDS)

        # Act & Assert
        assert verify_password(password, hashed) is True
        assert verify_password("a" * 72, hashed) is False
        assert verify_password("a" * 72 + "WRONG", hashed) is False

    @pytest.mark.parametrize(
        "value",
        ["", "123", "$2b$04$short", "x" * 60, None],
    )
    def test_is_password_hash_rejects(self, value):
        assert is_password_hash(value) is False
