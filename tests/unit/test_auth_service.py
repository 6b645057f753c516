"""Unit tests for authentication service."""

import pytest
from uuid import uuid4

from src.car_rental.application.services.auth_service import AuthenticationService
from src.car_rental.domain.exceptions import (
    AuthenticationError,
    ConflictError,
    ResourceNotFoundError
)
from src.car_rental.domain.value_objects.auth import LoginCredentials, PasswordHasher

# Mark all async tests in this module
pytestmark = pytest.mark.asyncio


@pytest.fixture
def auth_service(user_repository, token_service):
    return AuthenticationService(user_repository=user_repository, token_service=token_service)


class TestRegistration:
    """Test cases for account registration."""

    async def test_register_stores_hash_not_password(self, auth_service, user_repository):
        user = await auth_service.register("Jane@Example.com", "Jane Smith", "password123")

        stored = await user_repository.find_by_id(user.id)
        assert stored.email == "jane@example.com"
        assert stored.password_hash != "password123"
        assert PasswordHasher.verify_password_hash("password123", stored.password_hash)

    async def test_duplicate_email_conflicts(self, auth_service):
        await auth_service.register("jane@example.com", "Jane Smith", "password123")

        with pytest.raises(ConflictError, match="User already exists"):
            await auth_service.register("JANE@example.com", "Another Jane", "password456")


class TestLogin:
    """Test cases for login."""

    async def test_login_success(self, auth_service, token_service, make_user):
        user = make_user()

        logged_in, auth_token = await auth_service.login(
            LoginCredentials(email="john@example.com", password="password123")
        )

        assert logged_in.id == user.id
        assert token_service.decode(auth_token.token) == user.id

    async def test_wrong_password_and_unknown_email_fail_identically(self, auth_service, make_user):
        """Test that the failure does not reveal whether the account exists."""
        make_user()

        with pytest.raises(AuthenticationError) as wrong_password:
            await auth_service.login(LoginCredentials(email="john@example.com", password="wrongpass1"))
        with pytest.raises(AuthenticationError) as unknown_email:
            await auth_service.login(LoginCredentials(email="nobody@example.com", password="password123"))

        assert wrong_password.value.message == unknown_email.value.message == "Invalid credentials"


class TestProfile:
    """Test cases for profile lookup."""

    async def test_profile_of_deleted_user(self, auth_service):
        with pytest.raises(ResourceNotFoundError, match="User not found"):
            await auth_service.get_profile(uuid4())
