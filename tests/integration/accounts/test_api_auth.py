"""Integration tests for registration, login and token endpoints."""

from __future__ import annotations

import pytest
from django.test import override_settings

pytestmark = pytest.mark.integration

REGISTER_URL = "/api/v1/auth/register/"
LOGIN_URL = "/api/v1/auth/login/"
REFRESH_URL = "/api/v1/auth/token/refresh/"
VERIFY_URL = "/api/v1/auth/token/verify/"


class TestRegister:
    def test_registers_customer(self, api_client):
        response = api_client.post(
            REGISTER_URL,
            {"email": "New@Example.com", "password": "secret1"},
            format="json",
        )

        assert response.status_code == 201
        body = response.json()
        assert set(body) == {"user", "token", "refreshToken"}
        assert body["user"]["email"] == "new@example.com"
        assert body["user"]["role"] == "customer"
        assert set(body["user"]) == {"id", "email", "role", "createdAt"}
        assert "password" not in body["user"]

    def test_duplicate_email(self, api_client, customer_user):
        response = api_client.post(
            REGISTER_URL,
            {"email": "CUSTOMER@example.com", "password": "secret1"},
            format="json",
        )

        assert response.status_code == 409
        assert response.json()["errors"][0] == {
            "code": "email_already_registered",
            "detail": "Email already registered",
            "attr": None,
        }

    @pytest.mark.parametrize(
        ("payload", "attr"),
        [
            ({"email": "not-an-email", "password": "secret1"}, "email"),
            ({"email": "a@example.com", "password": "12345"}, "password"),
            ({"email": "a@example.com"}, "password"),
            ({"email": "a@example.com", "password": "secret1", "role": "root"}, "role"),
        ],
    )
    def test_invalid_payload(self, api_client, payload, attr):
        response = api_client.post(REGISTER_URL, payload, format="json")

        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "validation_error"
        assert body["errors"][0]["attr"] == attr

    def test_admin_signup_disabled(self, api_client):
        response = api_client.post(
            REGISTER_URL,
            {"email": "boss@example.com", "password": "secret1", "role": "admin"},
            format="json",
        )
        assert response.status_code == 403

    @override_settings(ACCOUNTS_ALLOW_ADMIN_SIGNUP=True)
    def test_admin_signup_enabled(self, api_client):
        response = api_client.post(
            REGISTER_URL,
            {"email": "boss@example.com", "password": "secret1", "role": "admin"},
            format="json",
        )
        assert response.status_code == 201
        assert response.json()["user"]["role"] == "admin"


class TestLogin:
    def test_login_returns_usable_token(self, api_client, customer_user):
        response = api_client.post(
            LOGIN_URL,
            {"email": "customer@example.com", "password": "customer123"},
            format="json",
        )

        assert response.status_code == 200
        token = response.json()["token"]

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        assert api_client.get("/api/v1/orders/").status_code == 200

    @pytest.mark.parametrize(
        ("email", "password"),
        [
            ("customer@example.com", "wrong-password"),
            ("nobody@example.com", "customer123"),
        ],
    )
    def test_invalid_credentials(self, api_client, customer_user, email, password):
        response = api_client.post(
            LOGIN_URL, {"email": email, "password": password}, format="json"
        )

        assert response.status_code == 401
        assert response.json()["errors"][0]["detail"] == "Invalid credentials"

    def test_garbage_token_is_rejected(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer not.a.token")
        response = api_client.get("/api/v1/orders/")

        assert response.status_code == 401
        assert response.json()["type"] == "client_error"


class TestTokens:
    def test_refresh_and_verify(self, api_client, customer_user):
        login = api_client.post(
            LOGIN_URL,
            {"email": "customer@example.com", "password": "customer123"},
            format="json",
        ).json()

        refreshed = api_client.post(
            REFRESH_URL, {"refresh": login["refreshToken"]}, format="json"
        )
        assert refreshed.status_code == 200
        access = refreshed.json()["access"]

        verified = api_client.post(VERIFY_URL, {"token": access}, format="json")
        assert verified.status_code == 200


class TestThrottling:
    def test_login_attempts_are_throttled(self, api_client, customer_user):
        payload = {"email": "customer@example.com", "password": "wrong-password"}
        statuses = [
            api_client.post(LOGIN_URL, payload, format="json").status_code
            for _ in range(21)
        ]

        assert statuses[:20] == [401] * 20
        assert statuses[20] == 429
