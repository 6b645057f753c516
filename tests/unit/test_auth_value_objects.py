"""Unit tests for authentication value objects."""

import pytest
from datetime import timedelta
from uuid import uuid4

from src.car_rental.domain.value_objects.auth import (
    AuthToken,
    LoginCredentials,
    PasswordHasher
)
from src.car_rental.domain.value_objects.rental_period import utcnow


class TestLoginCredentials:
    """Test cases for LoginCredentials value object."""

    def test_valid_credentials_creation(self):
        """Test creation of valid login credentials."""
        credentials = LoginCredentials(
            email="Test@Example.com ",
            password="testpassword123"
        )

        assert credentials.password == "testpassword123"
        assert credentials.normalized_email == "test@example.com"

    def test_empty_email_raises_error(self):
        """Test that empty email raises ValueError."""
        with pytest.raises(ValueError, match="Email cannot be empty"):
            LoginCredentials(email="", password="testpassword123")

    def test_whitespace_only_email_raises_error(self):
        with pytest.raises(ValueError, match="Email cannot be empty"):
            LoginCredentials(email="   ", password="testpassword123")

    def test_invalid_email_format_raises_error(self):
        with pytest.raises(ValueError, match="Invalid email format"):
            LoginCredentials(email="notanemail", password="testpassword123")

    def test_empty_password_raises_error(self):
        with pytest.raises(ValueError, match="Password cannot be empty"):
            LoginCredentials(email="test@example.com", password="")


class TestAuthToken:
    """Test cases for AuthToken value object."""

    def test_fresh_token_is_not_expired(self):
        created_at = utcnow()
        token = AuthToken(
            token="test_token_123",
            user_id=uuid4(),
            expires_at=created_at + timedelta(days=7),
            created_at=created_at
        )

        assert token.is_expired is False

    def test_past_token_is_expired(self):
        created_at = utcnow() - timedelta(days=8)
        token = AuthToken(
            token="test_token_123",
            user_id=uuid4(),
            expires_at=created_at + timedelta(days=7),
            created_at=created_at
        )

        assert token.is_expired is True


class TestPasswordHasher:
    """Test cases for PasswordHasher."""

    def test_hash_is_salted(self):
        """Test that the same password hashes differently each time."""
        first = PasswordHasher.create_password_hash("password123")
        second = PasswordHasher.create_password_hash("password123")

        assert first != second
        assert "password123" not in first

    def test_verify_correct_password(self):
        password_hash = PasswordHasher.create_password_hash("password123")

        assert PasswordHasher.verify_password_hash("password123", password_hash) is True

    def test_verify_wrong_password(self):
        password_hash = PasswordHasher.create_password_hash("password123")

        assert PasswordHasher.verify_password_hash("wrongpassword", password_hash) is False

    def test_verify_malformed_hash(self):
        """Test that a stored value in an unknown format never verifies."""
        assert PasswordHasher.verify_password_hash("password123", "not-a-hash") is False

    def test_hash_records_its_work_factor(self):
        password_hash = PasswordHasher.create_password_hash("password123", iterations=1000)

        algorithm, iterations, _, _ = password_hash.split("$")
        assert algorithm == "pbkdf2_sha256"
        assert iterations == "1000"
        assert PasswordHasher.verify_password_hash("password123", password_hash) is True

    def test_unknown_algorithm_never_verifies(self):
        password_hash = PasswordHasher.create_password_hash("password123")
        tampered = password_hash.replace("pbkdf2_sha256", "md5", 1)

        assert PasswordHasher.verify_password_hash("password123", tampered) is False
