"""
API tests for authentication: token validation, roles and the auth endpoints
"""
import time
from unittest.mock import Mock, patch

import pytest
from jose import jwt

from storefront.api.auth import AUTH_RATE_LIMIT, get_auth_service
from storefront.core.config import settings
from storefront.main import app
from storefront.services.auth_service import EmailAlreadyRegistered, InvalidCredentials

from conftest import CUSTOMER_ID


def make_token(expires_in=3600, **claims):
    payload = {
        "sub": CUSTOMER_ID,
        "email": "budi@example.com",
        "aud": "authenticated",
        "role": "authenticated",
        "user_metadata": {"full_name": "Budi Santoso"},
        "iat": int(time.time()),
        "exp": int(time.time()) + expires_in,
    }
    payload.update(claims)
    return jwt.encode(payload, settings.SUPABASE_JWT_SECRET, algorithm="HS256")


@pytest.fixture
def auth_service():
    service = Mock()
    app.dependency_overrides[get_auth_service] = lambda: service
    yield service
    app.dependency_overrides.clear()


REGISTER_BODY = {
    "full_name": "Budi Santoso",
    "email": "budi@example.com",
    "password": "rahasia123",
    "confirm_password": "rahasia123",
}


class TestCurrentUser:

    @patch('storefront.core.auth.ProfileRepository')
    def test_me_for_customer(self, mock_repo_cls, client):
        mock_repo_cls.return_value.get_role.return_value = "user"

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {make_token()}"})

        assert response.status_code == 200
        data = response.json()['data']
        assert data['id'] == CUSTOMER_ID
        assert data['name'] == "Budi Santoso"
        assert data['is_admin'] is False
        assert data['capabilities'] == {'can_purchase': True, 'can_manage_catalog': False}

    @patch('storefront.core.auth.ProfileRepository')
    def test_me_for_admin(self, mock_repo_cls, client):
        mock_repo_cls.return_value.get_role.return_value = "admin"

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {make_token()}"})

        data = response.json()['data']
        assert data['role'] == "admin"
        assert data['capabilities'] == {'can_purchase': False, 'can_manage_catalog': True}

    def test_missing_token(self, client):
        response = client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json()['detail'] == "Authentication required"

    def test_expired_token(self, client):
        token = make_token(expires_in=-60)

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()['detail'] == "Token has expired"

    def test_wrong_signature(self, client):
        token = jwt.encode(
            {"sub": CUSTOMER_ID, "email": "budi@example.com", "aud": "authenticated"},
            "another-secret",
            algorithm="HS256",
        )

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()['detail'].startswith("Invalid token")

    def test_wrong_audience(self, client):
        token = make_token(aud="anon")

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401


class TestAuthEndpoints:

    def test_register(self, client, auth_service):
        auth_service.register.return_value = {'user': {'id': CUSTOMER_ID}, 'session': None}

        response = client.post("/api/v1/auth/register", json=REGISTER_BODY)

        assert response.status_code == 201
        assert response.json()['data']['user']['id'] == CUSTOMER_ID

    def test_register_duplicate_email(self, client, auth_service):
        auth_service.register.side_effect = EmailAlreadyRegistered("Email is already registered.")

        response = client.post("/api/v1/auth/register", json=REGISTER_BODY)

        assert response.status_code == 409

    def test_register_invalid_email(self, client, auth_service):
        response = client.post("/api/v1/auth/register", json={**REGISTER_BODY, "email": "not-an-email"})

        assert response.status_code == 422
        auth_service.register.assert_not_called()

    def test_login_failure(self, client, auth_service):
        auth_service.login.side_effect = InvalidCredentials("Invalid email or password")

        response = client.post("/api/v1/auth/login", json={"email": "budi@example.com", "password": "x"})

        assert response.status_code == 401
        assert response.json()['detail'] == "Invalid email or password"

    def test_login_is_rate_limited(self, client, auth_service):
        auth_service.login.return_value = {'user': None, 'session': None}
        body = {"email": "budi@example.com", "password": "rahasia123"}

        for _ in range(AUTH_RATE_LIMIT):
            assert client.post("/api/v1/auth/login", json=body).status_code == 200

        response = client.post("/api/v1/auth/login", json=body)

        assert response.status_code == 429
        assert "Retry-After" in response.headers

    @patch('storefront.core.auth.ProfileRepository')
    def test_logout_revokes_bearer_token(self, mock_repo_cls, client, auth_service):
        mock_repo_cls.return_value.get_role.return_value = "user"
        token = make_token()

        response = client.post("/api/v1/auth/logout", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        auth_service.logout.assert_called_once_with(token)
