"""Authentication service for registration, login and profile lookup."""

from typing import Tuple, TYPE_CHECKING
from uuid import UUID

from src.car_rental.domain.entities.user import User
from src.car_rental.domain.exceptions import (
    AuthenticationError,
    ConflictError,
    ResourceNotFoundError
)
from src.car_rental.domain.value_objects.auth import (
    AuthToken,
    LoginCredentials,
    PasswordHasher
)
from src.car_rental.infrastructure.logging import (
    get_logger,
    log_authentication_attempt,
    mask_email
)

if TYPE_CHECKING:
    from src.car_rental.application.ports.repositories import UserRepository
    from src.car_rental.infrastructure.security import JWTTokenService


INVALID_CREDENTIALS = "Invalid credentials"


class AuthenticationService:
    """Service for user authentication."""

    def __init__(
        self,
        user_repository: "UserRepository",
        token_service: "JWTTokenService"
    ):
        self._user_repository = user_repository
        self._token_service = token_service
        self._logger = get_logger(__name__)

    async def register(self, email: str, name: str, password: str) -> User:
        """Create a new account; the raw password is never stored."""
        email = email.strip().lower()

        if await self._user_repository.find_by_email(email):
            self._logger.info(f"Registration rejected, email already in use: {mask_email(email)}")
            raise ConflictError("User already exists")

        user = User(
            email=email,
            name=name,
            password_hash=PasswordHasher.create_password_hash(password)
        )
        saved_user = await self._user_repository.save(user)

        self._logger.info(f"Registered user {saved_user.id}")
        return saved_user

    async def login(self, credentials: LoginCredentials) -> Tuple[User, AuthToken]:
        """Verify credentials and issue a session token.

        Unknown email and wrong password fail with the same message so the
        response does not reveal which accounts exist.
        """
        email = credentials.normalized_email
        user = await self._user_repository.find_by_email(email)

        if not user:
            log_authentication_attempt(self._logger, email, False, failure_reason="user_not_found")
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not PasswordHasher.verify_password_hash(credentials.password, user.password_hash):
            log_authentication_attempt(self._logger, email, False,
                                       failure_reason="invalid_password",
                                       user_id=str(user.id))
            raise AuthenticationError(INVALID_CREDENTIALS)

        auth_token = self._token_service.issue(user.id)
        log_authentication_attempt(self._logger, email, True,
                                   user_id=str(user.id),
                                   token_expires_at=auth_token.expires_at.isoformat())
        return user, auth_token

    async def get_profile(self, user_id: UUID) -> User:
        """Load the authenticated user's account."""
        user = await self._user_repository.find_by_id(user_id)
        if not user:
            raise ResourceNotFoundError("User not found")
        return user
