"""Integration tests for the HTTP API running on in-memory storage."""

import pytest
import pytest_asyncio
from datetime import datetime, timedelta, timezone
from httpx import ASGITransport, AsyncClient

from src.car_rental.domain.entities.car import Car, CarType, FuelType
from src.car_rental.domain.entities.user import User, UserRole
from src.car_rental.domain.value_objects.auth import PasswordHasher
from src.car_rental.infrastructure.security import JWTTokenService
from src.car_rental.infrastructure.services import InMemoryServiceFactory
from src.car_rental.infrastructure.storage import LocalFileStorage
from src.car_rental.presentation.api.config import Settings
from src.car_rental.presentation.api.main import create_app

# Mark all async tests in this module
pytestmark = pytest.mark.asyncio

API = "/api/v1"
SECRET = "integration-secret"
PASSWORD = "password123"


def iso_days_from(now: datetime, days: float) -> str:
    return (now + timedelta(days=days)).isoformat()


@pytest.fixture
def factory(tmp_path):
    return InMemoryServiceFactory(
        token_service=JWTTokenService(secret_key=SECRET),
        file_storage=LocalFileStorage(str(tmp_path), f"{API}/uploads")
    )


@pytest.fixture
def app(factory, tmp_path):
    settings = Settings(secret_key=SECRET, upload_dir=str(tmp_path), log_enable_file=False)
    return create_app(settings=settings, service_factory=factory)


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def car(factory):
    car = Car(
        name="Corolla",
        brand="Toyota",
        car_type=CarType.SEDAN,
        fuel_type=FuelType.PETROL,
        seats=5,
        price_per_day=50.0
    )
    factory.store.cars[car.id] = car
    return car


@pytest.fixture
def admin(factory):
    admin = User(
        email="admin@carrental.com",
        name="Admin User",
        password_hash=PasswordHasher.create_password_hash("admin123"),
        role=UserRole.ADMIN
    )
    factory.store.users[admin.id] = admin
    return admin


async def register(client, email, name="John Doe", password=PASSWORD):
    return await client.post(f"{API}/auth/register", json={"name": name, "email": email, "password": password})


async def login(client, email, password=PASSWORD) -> dict:
    """Log in and return bearer headers for the session."""
    response = await client.post(f"{API}/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['data']['accessToken']}"}


async def register_and_login(client, email, name="John Doe") -> dict:
    response = await register(client, email, name=name)
    assert response.status_code == 201
    return await login(client, email)


async def book(client, headers, car_id, start_days, end_days):
    now = datetime.now(timezone.utc)
    return await client.post(
        f"{API}/booking/create",
        json={
            "carId": str(car_id),
            "startDate": iso_days_from(now, start_days),
            "endDate": iso_days_from(now, end_days)
        },
        headers=headers
    )


class TestHealth:
    """Test cases for the unauthenticated health endpoints."""

    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "car-rental-api"}

    async def test_correlation_id_is_echoed(self, client):
        response = await client.get("/", headers={"X-Correlation-ID": "abc-123"})

        assert response.status_code == 200
        assert response.headers["X-Correlation-ID"] == "abc-123"


class TestAuthAPI:
    """Test cases for registration, login and session handling."""

    async def test_register(self, client):
        response = await register(client, "Jane@Example.com", name="  Jane Smith ")

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User registered successfully"
        assert body["data"]["email"] == "jane@example.com"
        assert body["data"]["name"] == "Jane Smith"
        assert "password" not in body["data"]
        assert "passwordHash" not in body["data"]

    async def test_duplicate_registration(self, client):
        await register(client, "jane@example.com")

        response = await register(client, "JANE@example.com")

        assert response.status_code == 409
        assert response.json() == {"message": "User already exists"}

    async def test_registration_validation(self, client):
        response = await client.post(
            f"{API}/auth/register",
            json={"name": "J", "email": "not-an-email", "password": "short"}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert {error["field"] for error in body["errors"]} == {"name", "email", "password"}
        assert {"field": "email", "message": "Invalid email address"} in body["errors"]

    async def test_login_failures_look_identical(self, client):
        await register(client, "jane@example.com")

        wrong_password = await client.post(
            f"{API}/auth/login", json={"email": "jane@example.com", "password": "wrongpass1"}
        )
        unknown_email = await client.post(
            f"{API}/auth/login", json={"email": "nobody@example.com", "password": PASSWORD}
        )

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {"message": "Invalid credentials"}

    async def test_login_sets_http_only_cookie(self, client):
        await register(client, "jane@example.com")

        response = await client.post(f"{API}/auth/login", json={"email": "jane@example.com", "password": PASSWORD})

        assert response.status_code == 200
        assert response.json()["data"]["tokenType"] == "bearer"
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("access_token=")
        assert "httponly" in set_cookie.lower()
        assert "Max-Age=604800" in set_cookie

    async def test_cookie_session_and_logout(self, client):
        await register(client, "jane@example.com", name="Jane Smith")
        await client.post(f"{API}/auth/login", json={"email": "jane@example.com", "password": PASSWORD})

        me = await client.get(f"{API}/auth/me")
        assert me.status_code == 200
        assert me.json()["data"]["name"] == "Jane Smith"

        logout = await client.post(f"{API}/auth/logout")
        assert logout.json() == {"message": "Logout successful"}

        after = await client.get(f"{API}/auth/me")
        assert after.status_code == 401

    async def test_missing_and_invalid_tokens(self, client):
        missing = await client.get(f"{API}/auth/me")
        invalid = await client.get(f"{API}/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

        assert missing.status_code == 401
        assert missing.json() == {"message": "Authentication required"}
        assert missing.headers["WWW-Authenticate"] == "Bearer"
        assert invalid.status_code == 401
        assert invalid.json() == {"message": "Invalid token"}

    async def test_expired_token(self, client, factory):
        await register(client, "jane@example.com")
        [user] = factory.store.users.values()
        expired = JWTTokenService(secret_key=SECRET, expires_in=timedelta(seconds=-5)).issue(user.id)

        response = await client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {expired.token}"})

        assert response.status_code == 401
        assert response.json() == {"message": "Token has expired"}


class TestUserAPI:
    """Test cases for profile endpoints."""

    async def test_update_profile(self, client):
        headers = await register_and_login(client, "jane@example.com", name="Jane Smith")

        response = await client.put(f"{API}/user/me", json={"phone": "+1 555 0100"}, headers=headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["phone"] == "+1 555 0100"
        assert data["name"] == "Jane Smith"
        assert data["role"] == "USER"

    async def test_password_change_takes_effect(self, client):
        headers = await register_and_login(client, "jane@example.com")

        await client.put(f"{API}/user/me", json={"password": "newsecret1"}, headers=headers)

        old = await client.post(f"{API}/auth/login", json={"email": "jane@example.com", "password": PASSWORD})
        new = await client.post(f"{API}/auth/login", json={"email": "jane@example.com", "password": "newsecret1"})
        assert old.status_code == 401
        assert new.status_code == 200

    async def test_invalid_phone(self, client):
        headers = await register_and_login(client, "jane@example.com")

        response = await client.put(f"{API}/user/me", json={"phone": "call me maybe"}, headers=headers)

        assert response.status_code == 400
        assert response.json()["errors"] == [{"field": "phone", "message": "Invalid phone number format"}]

    async def test_license_upload_is_served_back(self, client):
        headers = await register_and_login(client, "jane@example.com")

        response = await client.post(
            f"{API}/user/upload",
            files={"license": ("license.pdf", b"%PDF-1.4 license", "application/pdf")},
            headers=headers
        )

        assert response.status_code == 200
        url = response.json()["url"]
        assert url.startswith(f"{API}/uploads/licenses/")
        assert url.endswith(".pdf")

        profile = await client.get(f"{API}/user/me", headers=headers)
        assert profile.json()["data"]["licenseUrl"] == url

        served = await client.get(url)
        assert served.status_code == 200
        assert served.content == b"%PDF-1.4 license"

    async def test_license_upload_rejects_text(self, client):
        headers = await register_and_login(client, "jane@example.com")

        response = await client.post(
            f"{API}/user/upload",
            files={"license": ("notes.txt", b"hello", "text/plain")},
            headers=headers
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid file type. Allowed: png, jpg, jpeg, pdf"}

    async def test_license_upload_requires_file(self, client):
        headers = await register_and_login(client, "jane@example.com")

        response = await client.post(f"{API}/user/upload", headers=headers)

        assert response.status_code == 400
        assert response.json() == {"message": "License file is required"}


class TestCarAPI:
    """Test cases for catalog endpoints."""

    @pytest.fixture
    def catalog(self, factory):
        cars = [
            Car(name="Corolla", brand="Toyota", car_type=CarType.SEDAN,
                fuel_type=FuelType.PETROL, seats=5, price_per_day=45.0),
            Car(name="RAV4", brand="Toyota", car_type=CarType.SUV,
                fuel_type=FuelType.HYBRID, seats=5, price_per_day=70.0),
            Car(name="Model 3", brand="Tesla", car_type=CarType.SEDAN,
                fuel_type=FuelType.ELECTRIC, seats=5, price_per_day=95.0),
        ]
        for car in cars:
            factory.store.cars[car.id] = car
        return cars

    async def test_catalog_requires_session(self, client, catalog):
        response = await client.get(f"{API}/car")

        assert response.status_code == 401

    async def test_list_with_filters(self, client, catalog):
        headers = await register_and_login(client, "jane@example.com")

        response = await client.get(
            f"{API}/car",
            params={"brand": "toy", "type": "suv", "maxPrice": 80},
            headers=headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["data"][0]["name"] == "RAV4"
        assert body["data"][0]["fuelType"] == "HYBRID"
        assert body["data"][0]["pricePerDay"] == 70.0

    async def test_price_range(self, client, catalog):
        headers = await register_and_login(client, "jane@example.com")

        response = await client.get(f"{API}/car", params={"minPrice": 45, "maxPrice": 70}, headers=headers)

        assert {car["name"] for car in response.json()["data"]} == {"Corolla", "RAV4"}

    async def test_invalid_enum_filter(self, client, catalog):
        headers = await register_and_login(client, "jane@example.com")

        response = await client.get(f"{API}/car", params={"fuelType": "STEAM"}, headers=headers)

        assert response.status_code == 400
        assert response.json()["message"].startswith("Invalid fuelType. Allowed: PETROL")

    async def test_update_with_image(self, client, catalog):
        headers = await register_and_login(client, "jane@example.com")
        car = catalog[0]

        response = await client.put(
            f"{API}/car/{car.id}",
            data={"pricePerDay": "49.5", "fuelType": "hybrid"},
            files={"image": ("car.png", b"\x89PNG\r\n", "image/png")},
            headers=headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["pricePerDay"] == 49.5
        assert data["fuelType"] == "HYBRID"
        assert data["name"] == "Corolla"
        assert data["imageUrl"].startswith(f"{API}/uploads/cars/")

    async def test_get_and_delete(self, client, catalog):
        headers = await register_and_login(client, "jane@example.com")
        car = catalog[2]

        found = await client.get(f"{API}/car/{car.id}", headers=headers)
        deleted = await client.delete(f"{API}/car/{car.id}", headers=headers)
        missing = await client.get(f"{API}/car/{car.id}", headers=headers)
        deleted_again = await client.delete(f"{API}/car/{car.id}", headers=headers)

        assert found.status_code == 200
        assert deleted.json() == {"message": "Successfully deleted car"}
        assert missing.status_code == 404
        assert deleted_again.status_code == 404
        assert deleted_again.json() == {"message": "Car not found"}

    async def test_malformed_car_id(self, client):
        headers = await register_and_login(client, "jane@example.com")

        response = await client.get(f"{API}/car/not-a-uuid", headers=headers)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "car_id"


class TestBookingLifecycle:
    """End-to-end booking flow across users and the admin panel."""

    async def test_full_lifecycle(self, client, car, admin):
        john = await register_and_login(client, "john@example.com", name="John Doe")
        jane = await register_and_login(client, "jane@example.com", name="Jane Smith")
        admin_headers = await login(client, "admin@carrental.com", password="admin123")

        created = await book(client, john, car.id, 2, 4)
        assert created.status_code == 201
        booking = created.json()["data"]
        assert booking["status"] == "PENDING"
        assert booking["totalDays"] == 2
        assert booking["totalPrice"] == 100.0
        assert booking["car"]["name"] == "Corolla"

        conflict = await book(client, jane, car.id, 3, 5)
        assert conflict.status_code == 409
        assert conflict.json() == {"message": "Car is not available for the selected dates"}

        approved = await client.put(f"{API}/admin/bookings/{booking['id']}/approve", headers=admin_headers)
        assert approved.status_code == 200
        assert approved.json()["data"]["status"] == "CONFIRMED"
        assert approved.json()["data"]["user"]["email"] == "john@example.com"

        approved_again = await client.put(f"{API}/admin/bookings/{booking['id']}/approve", headers=admin_headers)
        assert approved_again.status_code == 400

        cancelled = await client.put(f"{API}/booking/{booking['id']}/cancel", headers=john)
        assert cancelled.status_code == 200
        assert cancelled.json()["data"]["status"] == "CANCELLED"

        cancelled_again = await client.put(f"{API}/booking/{booking['id']}/cancel", headers=john)
        assert cancelled_again.status_code == 400
        assert cancelled_again.json() == {"message": "Booking is already cancelled"}

        # The freed dates can be booked again
        rebooked = await book(client, jane, car.id, 3, 5)
        assert rebooked.status_code == 201

    async def test_detail_visibility(self, client, car, admin):
        john = await register_and_login(client, "john@example.com")
        jane = await register_and_login(client, "jane@example.com")
        admin_headers = await login(client, "admin@carrental.com", password="admin123")
        booking_id = (await book(client, john, car.id, 2, 4)).json()["data"]["id"]

        owner = await client.get(f"{API}/booking/{booking_id}", headers=john)
        stranger = await client.get(f"{API}/booking/{booking_id}", headers=jane)
        as_admin = await client.get(f"{API}/booking/{booking_id}", headers=admin_headers)

        assert owner.status_code == 200
        assert stranger.status_code == 403
        assert stranger.json() == {"message": "Unauthorized access"}
        assert as_admin.status_code == 200

    async def test_only_owner_cancels(self, client, car):
        john = await register_and_login(client, "john@example.com")
        jane = await register_and_login(client, "jane@example.com")
        booking_id = (await book(client, john, car.id, 2, 4)).json()["data"]["id"]

        response = await client.put(f"{API}/booking/{booking_id}/cancel", headers=jane)

        assert response.status_code == 403

    async def test_date_validation(self, client, car):
        john = await register_and_login(client, "john@example.com")

        past = await book(client, john, car.id, -1, 2)
        inverted = await book(client, john, car.id, 4, 2)

        assert past.status_code == 400
        assert {"field": "startDate", "message": "Start date cannot be in the past"} in past.json()["errors"]
        assert inverted.status_code == 400
        assert {"field": "endDate", "message": "End date must be after start date"} in inverted.json()["errors"]

    async def test_unknown_car(self, client, factory):
        john = await register_and_login(client, "john@example.com")
        ghost = Car(name="Ghost", brand="None", car_type=CarType.VAN,
                    fuel_type=FuelType.DIESEL, seats=9, price_per_day=10.0)

        response = await book(client, john, ghost.id, 2, 4)

        assert response.status_code == 404
        assert response.json() == {"message": "Car not found"}

    async def test_pagination(self, client, car):
        john = await register_and_login(client, "john@example.com")
        for i in range(12):
            response = await book(client, john, car.id, 10 * i + 1, 10 * i + 2)
            assert response.status_code == 201

        second = await client.get(f"{API}/booking", params={"page": 2, "pageSize": 5}, headers=john)
        last = await client.get(f"{API}/booking", params={"page": 3, "pageSize": 5}, headers=john)

        assert second.status_code == 200
        assert second.json()["message"] == "Successfully retrieved all booking"
        assert len(second.json()["data"]) == 5
        assert second.json()["pagination"] == {"total": 12, "page": 2, "pageSize": 5, "totalPages": 3}
        assert len(last.json()["data"]) == 2

    async def test_page_size_limit(self, client):
        john = await register_and_login(client, "john@example.com")

        response = await client.get(f"{API}/booking", params={"pageSize": 101}, headers=john)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "pageSize"


class TestAdminAPI:
    """Test cases for the admin panel."""

    async def test_admin_routes_check_session_before_role(self, client):
        anonymous = await client.get(f"{API}/admin/users")
        john = await register_and_login(client, "john@example.com")

        regular = await client.get(f"{API}/admin/users", headers=john)

        assert anonymous.status_code == 401
        assert regular.status_code == 403
        assert regular.json() == {"message": "Admin access required"}

    async def test_list_users_with_counts(self, client, car, admin):
        john = await register_and_login(client, "john@example.com")
        await register_and_login(client, "jane@example.com")
        admin_headers = await login(client, "admin@carrental.com", password="admin123")
        await book(client, john, car.id, 2, 4)

        everyone = await client.get(f"{API}/admin/users", headers=admin_headers)
        users_only = await client.get(f"{API}/admin/users", params={"role": "user"}, headers=admin_headers)

        assert everyone.json()["pagination"]["total"] == 3
        counts = {user["email"]: user["bookingCount"] for user in everyone.json()["data"]}
        assert counts == {"john@example.com": 1, "jane@example.com": 0, "admin@carrental.com": 0}
        assert users_only.json()["pagination"]["total"] == 2
        assert all(user["role"] == "USER" for user in users_only.json()["data"])

    async def test_list_bookings_by_status(self, client, car, admin):
        john = await register_and_login(client, "john@example.com")
        admin_headers = await login(client, "admin@carrental.com", password="admin123")
        first = (await book(client, john, car.id, 2, 4)).json()["data"]["id"]
        await book(client, john, car.id, 10, 12)
        await client.put(f"{API}/admin/bookings/{first}/approve", headers=admin_headers)

        confirmed = await client.get(f"{API}/admin/bookings", params={"status": "CONFIRMED"}, headers=admin_headers)
        invalid = await client.get(f"{API}/admin/bookings", params={"status": "LOST"}, headers=admin_headers)

        assert confirmed.status_code == 200
        assert [b["id"] for b in confirmed.json()["data"]] == [first]
        assert confirmed.json()["data"][0]["user"]["name"] == "John Doe"
        assert invalid.status_code == 400

    async def test_approve_missing_booking(self, client, admin):
        admin_headers = await login(client, "admin@carrental.com", password="admin123")

        response = await client.put(
            f"{API}/admin/bookings/00000000-0000-0000-0000-000000000000/approve",
            headers=admin_headers
        )

        assert response.status_code == 404
        assert response.json() == {"message": "Booking not found"}
