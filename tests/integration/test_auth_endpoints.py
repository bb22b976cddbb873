"""Integration tests for auth endpoints."""
import httpx
import pytest


def _rejected(code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "http://remote.test/auth/signin")
    return httpx.HTTPStatusError(
        str(code), request=request, response=httpx.Response(code, request=request)
    )


@pytest.mark.asyncio
class TestAuthSignIn:
    """Tests for POST /auth/signin endpoint."""

    async def test_signin_success(self, app_client, container):
        """Test successful sign-in starts a session."""
        response = await app_client.post(
            "/auth/signin",
            json={"email": "brian@example.com", "password": "securepassword123"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "brian@example.com"
        assert data["id"] == "user-1"
        assert container.session.is_authenticated is True

    async def test_signin_rejected(self, app_client, fake_remote, container):
        """Test that rejected credentials return 401."""
        fake_remote.failures["sign_in"] = _rejected(401)

        response = await app_client.post(
            "/auth/signin",
            json={"email": "brian@example.com", "password": "wrong"},
        )

        assert response.status_code == 401
        assert container.session.is_authenticated is False

    async def test_signin_remote_down(self, app_client, fake_remote):
        """Test that an unreachable remote returns 502."""
        fake_remote.failures["sign_in"] = httpx.ConnectError("offline")

        response = await app_client.post(
            "/auth/signin",
            json={"email": "brian@example.com", "password": "pw"},
        )

        assert response.status_code == 502

    async def test_signin_missing_fields(self, app_client):
        """Test sign-in with missing fields returns 422."""
        response = await app_client.post("/auth/signin", json={"email": "brian@example.com"})

        assert response.status_code == 422


@pytest.mark.asyncio
class TestAuthSignUp:
    """Tests for POST /auth/signup endpoint."""

    async def test_signup_success(self, app_client):
        response = await app_client.post(
            "/auth/signup",
            json={"email": "new@example.com", "password": "pw", "name": "New User"},
        )

        assert response.status_code == 201
        assert response.json()["name"] == "New User"

    async def test_signup_rejected(self, app_client, fake_remote):
        fake_remote.failures["sign_up"] = _rejected(409)

        response = await app_client.post(
            "/auth/signup",
            json={"email": "dup@example.com", "password": "pw", "name": "Dup"},
        )

        assert response.status_code == 400


@pytest.mark.asyncio
class TestAuthSession:
    """Tests for session and sign-out endpoints."""

    async def test_session_reflects_signin_and_signout(self, app_client):
        response = await app_client.get("/auth/session")
        assert response.json() == {"authenticated": False, "user": None}

        await app_client.post(
            "/auth/signin",
            json={"email": "brian@example.com", "password": "pw"},
        )
        response = await app_client.get("/auth/session")
        assert response.json()["authenticated"] is True
        assert response.json()["user"]["email"] == "brian@example.com"

        response = await app_client.post("/auth/signout")
        assert response.status_code == 200
        assert response.json()["authenticated"] is False

        response = await app_client.get("/auth/session")
        assert response.json()["authenticated"] is False
