"""User profile service."""

from typing import Optional, TYPE_CHECKING
from uuid import UUID

from src.car_rental.domain.entities.user import User
from src.car_rental.domain.exceptions import InvalidOperationError, ResourceNotFoundError
from src.car_rental.domain.value_objects.auth import PasswordHasher
from src.car_rental.domain.value_objects.upload import LICENSE_UPLOAD_POLICY, UploadPolicy
from src.car_rental.infrastructure.logging import get_logger

if TYPE_CHECKING:
    from src.car_rental.application.ports.repositories import UserRepository
    from src.car_rental.application.ports.storage import FileStorage


LICENSE_FOLDER = "licenses"


class UserService:
    """Application service for profile reads and updates."""

    def __init__(
        self,
        user_repository: "UserRepository",
        file_storage: "FileStorage",
        license_policy: UploadPolicy = LICENSE_UPLOAD_POLICY
    ):
        self._user_repository = user_repository
        self._file_storage = file_storage
        self._license_policy = license_policy
        self._logger = get_logger(__name__)

    async def get_user(self, user_id: UUID) -> User:
        user = await self._user_repository.find_by_id(user_id)
        if not user:
            raise ResourceNotFoundError("User not found")
        return user

    async def update_profile(
        self,
        user_id: UUID,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        password: Optional[str] = None
    ) -> User:
        """Change only the supplied profile fields."""
        user = await self.get_user(user_id)

        password_hash = PasswordHasher.create_password_hash(password) if password else None
        user.update_profile(name=name, phone=phone, password_hash=password_hash)

        self._logger.info(f"Updated profile for user {user_id}")
        return await self._user_repository.save(user)

    async def upload_license(
        self,
        user_id: UUID,
        content: Optional[bytes],
        content_type: Optional[str]
    ) -> str:
        """Store a driving license document and link it to the user."""
        if content is None:
            raise InvalidOperationError("License file is required")

        self._license_policy.validate(content_type, len(content))
        user = await self.get_user(user_id)

        url = await self._file_storage.save(
            content,
            folder=LICENSE_FOLDER,
            extension=UploadPolicy.extension_for(content_type)
        )
        user.attach_license(url)
        await self._user_repository.save(user)

        self._logger.info(f"Stored license for user {user_id} at {url}")
        return url
