"""Authentication-related value objects and services."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID
import hashlib
import secrets

from .rental_period import utcnow


@dataclass(frozen=True)
class LoginCredentials:
    """Value object for login credentials."""
    email: str
    password: str

    def __post_init__(self) -> None:
        """Validate credentials."""
        if not self.email or not self.email.strip():
            raise ValueError("Email cannot be empty")
        if "@" not in self.email:
            raise ValueError("Invalid email format")
        if not self.password:
            raise ValueError("Password cannot be empty")

    @property
    def normalized_email(self) -> str:
        """Email as stored: trimmed and lower-cased."""
        return self.email.strip().lower()


@dataclass(frozen=True)
class AuthToken:
    """Value object for an issued session token."""
    token: str
    user_id: UUID
    expires_at: datetime
    created_at: datetime

    @property
    def is_expired(self) -> bool:
        """Check if token is expired."""
        return utcnow() > self.expires_at


class PasswordHasher:
    """PBKDF2-SHA256 password hashing.

    Stored hashes look like ``pbkdf2_sha256$<iterations>$<salt>$<hex digest>``,
    so the work factor can be raised without invalidating existing accounts.
    """

    ALGORITHM = "pbkdf2_sha256"
    ITERATIONS = 100000
    SALT_BYTES = 16

    @staticmethod
    def _digest(password: str, salt: str, iterations: int) -> str:
        return hashlib.pbkdf2_hmac(
            'sha256',
            password.encode('utf-8'),
            salt.encode('utf-8'),
            iterations
        ).hex()

    @classmethod
    def create_password_hash(cls, password: str, iterations: Optional[int] = None) -> str:
        """Hash a password with a fresh random salt."""
        iterations = iterations or cls.ITERATIONS
        salt = secrets.token_hex(cls.SALT_BYTES)
        return f"{cls.ALGORITHM}${iterations}${salt}${cls._digest(password, salt, iterations)}"

    @classmethod
    def verify_password_hash(cls, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash; malformed hashes never match."""
        try:
            algorithm, iterations, salt, expected = password_hash.split('$')
            iterations = int(iterations)
        except ValueError:
            return False

        if algorithm != cls.ALGORITHM or iterations <= 0:
            return False
        return secrets.compare_digest(cls._digest(password, salt, iterations), expected)
