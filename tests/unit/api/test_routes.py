"""HTTP-level tests for the storefront routes."""

import asyncio

import httpx
import pytest

from src.storefront.api.http.app import app
from src.storefront.api.http.deps import get_product_feed
from src.storefront.core.errors import PlatformError
from src.storefront.core.models.platform import PlatformUser, SignUpResult
from src.storefront.core.services import ProductFeed
from tests.fixtures.platform import GatedPlatformGateway, make_platform_session


def _sign_in(client, fake_platform, user_id: str = "user-123"):
    session = make_platform_session(user_id=user_id, token="user-token")
    fake_platform.accounts["ada@example.com"] = ("s3cret-pass", session)
    return client.post(
        "/customer/login", json={"email": "ada@example.com", "password": "s3cret-pass"}
    )


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert "X-Request-ID" in response.headers

    def test_ready(self, client):
        response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["provisioning"] is True


class TestProducts:
    def test_lists_newest_first(self, client, fake_platform):
        fake_platform.tables["products"] = [
            {"id": "p1", "name": "Jam", "price": 3.0, "created_at": "2024-01-01T00:00:00+00:00"},
            {"id": "p2", "name": "Bread", "price": 2.5, "created_at": "2024-02-01T00:00:00+00:00"},
        ]

        response = client.get("/api/products")

        assert response.status_code == 200
        body = response.json()
        assert [p["id"] for p in body["products"]] == ["p2", "p1"]
        assert body["loading"] is False
        assert body["error"] is None
        assert fake_platform.calls_to("select_rows")[0]["limit"] == 20

    def test_limit_is_capped(self, client, fake_platform):
        client.get("/api/products", params={"limit": 500})

        assert fake_platform.calls_to("select_rows")[0]["limit"] == 100

    def test_invalid_limit(self, client):
        response = client.get("/api/products", params={"limit": 0})

        assert response.status_code == 422

    def test_provider_error_keeps_previous_products(self, client, fake_platform):
        fake_platform.tables["products"] = [
            {"id": "p1", "name": "Jam", "created_at": "2024-01-01T00:00:00+00:00"}
        ]
        client.get("/api/products")
        fake_platform.errors["select_rows"] = PlatformError("upstream timeout")

        response = client.get("/api/products")

        assert response.status_code == 502
        body = response.json()
        assert body["error"] == "upstream timeout"
        assert [p["id"] for p in body["products"]] == ["p1"]

    @pytest.mark.asyncio
    async def test_overlapping_requests_get_their_own_limit(self):
        gateway = GatedPlatformGateway()
        gateway.tables["products"] = [
            {"id": f"p{i}", "name": f"Item {i}", "created_at": f"2024-01-{i + 1:02d}T00:00:00+00:00"}
            for i in range(12)
        ]
        feed = ProductFeed(gateway)
        app.dependency_overrides[get_product_feed] = lambda: feed

        try:
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
                small = asyncio.create_task(ac.get("/api/products", params={"limit": 2}))
                await gateway.first_started.wait()
                large = await ac.get("/api/products", params={"limit": 10})
                gateway.release_first.set()
                small_response = await small
        finally:
            app.dependency_overrides.clear()

        assert large.status_code == 200
        assert len(large.json()["products"]) == 10
        assert small_response.status_code == 200
        assert small_response.json()["loading"] is False
        assert [p["id"] for p in small_response.json()["products"]] == ["p11", "p10"]


class TestCreateCustomer:
    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE", "OPTIONS"])
    def test_method_not_allowed(self, client, fake_service_platform, method):
        response = client.request(method, "/api/create-customer")

        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}
        assert fake_service_platform.calls == []

    def test_head_not_allowed(self, client, fake_service_platform):
        response = client.head("/api/create-customer")

        assert response.status_code == 405
        assert fake_service_platform.calls == []

    def test_missing_id(self, client):
        response = client.post("/api/create-customer", json={"email": "ada@example.com"})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing user id"}

    def test_non_json_body(self, client):
        response = client.post(
            "/api/create-customer",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Missing user id"}

    def test_creates_row(self, client, fake_platform, fake_service_platform):
        response = client.post(
            "/api/create-customer", json={"id": "user-123", "first_name": "Ada"}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == "user-123"
        assert data["first_name"] == "Ada"
        assert fake_platform.calls_to("insert_rows") == []
        assert len(fake_service_platform.calls_to("insert_rows")) == 1

    def test_insert_rejected(self, client, fake_service_platform):
        fake_service_platform.errors["insert_rows"] = PlatformError("duplicate key value")

        response = client.post("/api/create-customer", json={"id": "user-123"})

        assert response.status_code == 500
        assert response.json() == {"error": "duplicate key value"}


class TestRegister:
    def test_created(self, client, fake_platform, registration_form_data):
        fake_platform.sign_up_result = SignUpResult(user=PlatformUser(id="user-123"))

        response = client.post("/customer/register", json=registration_form_data)

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "created"
        assert body["redirect_to"] == "/customer/login"
        assert "error" not in body

    def test_confirmation_pending(self, client, fake_platform, registration_form_data):
        response = client.post("/customer/register", json=registration_form_data)

        assert response.status_code == 202
        assert response.json()["status"] == "confirmation_pending"
        assert fake_platform.calls_to("insert_rows") == []

    def test_validation_error(self, client, fake_platform, registration_form_data):
        registration_form_data["confirmPassword"] = "different"

        response = client.post("/customer/register", json=registration_form_data)

        assert response.status_code == 400
        assert response.json()["error"] == "Passwords do not match"
        assert fake_platform.calls == []

    def test_null_field_is_a_validation_error(self, client, fake_platform, registration_form_data):
        registration_form_data["firstName"] = None

        response = client.post("/customer/register", json=registration_form_data)

        assert response.status_code == 400
        assert response.json()["error"] == "Please fill all fields"
        assert fake_platform.calls == []

    def test_sign_up_rejected(self, client, fake_platform, registration_form_data):
        fake_platform.errors["sign_up"] = PlatformError("User already registered")

        response = client.post("/customer/register", json=registration_form_data)

        assert response.status_code == 400
        assert response.json()["error"] == "User already registered"

    def test_profile_failure(self, client, fake_platform, registration_form_data):
        fake_platform.sign_up_result = SignUpResult(user=PlatformUser(id="user-123"))
        fake_platform.errors["insert_rows"] = PlatformError("permission denied")

        response = client.post("/customer/register", json=registration_form_data)

        assert response.status_code == 502
        body = response.json()
        assert body["stage"] == "profile"
        assert body["orphaned_account_id"] == "user-123"


class TestCustomerSession:
    def test_signed_out_by_default(self, client):
        response = client.get("/customer/session")

        assert response.json() == {"authenticated": False, "user": None}

    def test_login_sets_cookie(self, client, fake_platform):
        response = _sign_in(client, fake_platform)

        assert response.status_code == 200
        assert response.json()["user"] == {"id": "user-123", "email": "ada@example.com"}
        assert "customer_session_id" in response.cookies

        session = client.get("/customer/session").json()
        assert session["authenticated"] is True
        assert session["user"]["id"] == "user-123"

    def test_login_rejected(self, client):
        response = client.post(
            "/customer/login", json={"email": "nobody@example.com", "password": "x"}
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid login credentials"}

    def test_logout(self, client, fake_platform):
        _sign_in(client, fake_platform)

        response = client.post("/customer/logout")

        assert response.status_code == 200
        assert response.json() == {"message": "Logged out"}
        assert fake_platform.calls_to("sign_out") == [{"access_token": "user-token"}]
        assert client.get("/customer/session").json()["authenticated"] is False


class TestDashboard:
    def test_requires_session(self, client):
        response = client.get("/customer/dashboard", params={"tab": "cart"})

        assert response.status_code == 401
        assert response.json() == {
            "error": "Not signed in",
            "redirect_to": "/customer/login",
        }

    def test_tab_and_greeting(self, client, fake_platform):
        fake_platform.tables["customers"] = [{"id": "user-123", "first_name": "Ada"}]
        _sign_in(client, fake_platform)

        response = client.get("/customer/dashboard", params={"tab": "reviews"})

        assert response.status_code == 200
        body = response.json()
        assert body["active_tab"] == "reviews"
        assert body["greeting"] == "Welcome back, Ada!"
        assert body["profile"]["first_name"] == "Ada"

    def test_unknown_tab_falls_back(self, client, fake_platform):
        _sign_in(client, fake_platform)

        body = client.get("/customer/dashboard", params={"tab": "admin"}).json()

        assert body["active_tab"] == "browse"
        assert body["profile"] is None
        assert body["greeting"] == "Welcome back, Customer!"
