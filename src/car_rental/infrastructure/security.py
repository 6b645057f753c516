"""JWT session token issuance and verification."""

from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt

from src.car_rental.domain.exceptions import AuthenticationError
from src.car_rental.domain.value_objects.auth import AuthToken

TOKEN_TYPE = "access_token"


class JWTTokenService:
    """Issues and verifies signed, time-limited bearer tokens."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expires_in: timedelta = timedelta(days=7)):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expires_in = expires_in

    @property
    def expires_in(self) -> timedelta:
        return self._expires_in

    def issue(self, user_id: UUID) -> AuthToken:
        """Create a signed token whose subject is the user id."""
        issued_at = datetime.now(timezone.utc)
        expires_at = issued_at + self._expires_in

        to_encode = {
            "sub": str(user_id),
            "exp": expires_at,
            "iat": issued_at,
            "type": TOKEN_TYPE
        }
        token = jwt.encode(to_encode, self._secret_key, algorithm=self._algorithm)

        return AuthToken(
            token=token,
            user_id=user_id,
            expires_at=expires_at.replace(tzinfo=None),
            created_at=issued_at.replace(tzinfo=None)
        )

    def decode(self, token: str) -> UUID:
        """Verify signature and expiry and return the user id carried by the token."""
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except ExpiredSignatureError as e:
            raise AuthenticationError("Token has expired") from e
        except JWTError as e:
            raise AuthenticationError("Invalid token") from e

        subject = payload.get("sub")
        if subject is None or payload.get("type") != TOKEN_TYPE:
            raise AuthenticationError("Invalid token")

        try:
            return UUID(subject)
        except ValueError as e:
            raise AuthenticationError("Invalid token") from e
