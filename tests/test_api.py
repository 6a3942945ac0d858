"""Integration tests for the HTTP endpoints."""

import string
import uuid

import jwt
import pytest

from models import storage
from models.refresh_token import RefreshToken
from models.user import User
from tests.conftest import TEST_EMAIL, TEST_PASSWORD


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def login(client, **extra):
    return client.post("/api/login", json={"email": TEST_EMAIL, "password": TEST_PASSWORD, **extra})


class TestHealth:
    def test_healthz(self, client):
        response = client.get("/api/healthz")
        assert response.status_code == 200
        assert response.get_json() == {"status": "ok"}


class TestUsers:
    def test_create_user(self, client):
        response = client.post("/api/users", json={"email": "New@Example.com", "password": "long enough"})

        assert response.status_code == 201
        data = response.get_json()
        assert data["email"] == "new@example.com"
        assert data["is_chirpy_red"] is False
        assert "password" not in data
        assert "password_hash" not in data
        assert uuid.UUID(data["id"])

    def test_duplicate_email(self, client, user):
        response = client.post("/api/users", json={"email": TEST_EMAIL, "password": "long enough"})
        assert response.status_code == 409
        assert response.get_json()["error"] == "CONFLICT"

    def test_invalid_payload(self, client):
        response = client.post("/api/users", json={"email": "not-an-email", "password": "short"})
        assert response.status_code == 422
        details = response.get_json()["details"]
        assert "email" in details
        assert "password" in details

    def test_update_requires_token(self, client, user):
        response = client.put("/api/users", json={"email": "x@b.com", "password": "long enough"})
        assert response.status_code == 401
        assert response.get_json()["error"] == "MISSING_HEADER"

    def test_update_user(self, client, user):
        token = login(client).get_json()["token"]
        response = client.put(
            "/api/users", json={"email": "c@d.com", "password": "another password"}, headers=bearer(token)
        )
        assert response.status_code == 200
        assert response.get_json()["email"] == "c@d.com"

        relogin = client.post("/api/login", json={"email": "c@d.com", "password": "another password"})
        assert relogin.status_code == 200
        assert login(client).status_code == 401

    def test_update_with_bad_token(self, client, user):
        response = client.put(
            "/api/users", json={"email": "c@d.com", "password": "another password"}, headers=bearer("nope")
        )
        assert response.status_code == 401
        assert response.get_json()["error"] == "UNAUTHORIZED"


class TestLogin:
    def test_login(self, client, user, app):
        response = login(client)

        assert response.status_code == 200
        data = response.get_json()
        assert data["id"] == user.id
        assert data["email"] == TEST_EMAIL
        assert "password_hash" not in data
        assert len(data["refresh_token"]) == 64
        assert set(data["refresh_token"]) <= set(string.hexdigits.lower())
        claims = jwt.decode(data["token"], app.config["JWT_SECRET"], algorithms=["HS256"])
        assert claims["exp"] - claims["iat"] <= 3600 + 1e-3

    def test_login_ttl_is_capped(self, client, user):
        data = login(client, expires_in_seconds=999999).get_json()
        assert data["expires_in"] == 3600

    def test_login_with_short_ttl(self, client, user):
        assert login(client, expires_in_seconds=120).get_json()["expires_in"] == 120

    @pytest.mark.parametrize(
        "body",
        [
            {"email": TEST_EMAIL, "password": "wrong password"},
            {"email": "nobody@example.com", "password": TEST_PASSWORD},
        ],
    )
    def test_bad_credentials_share_one_answer(self, client, user, body):
        response = client.post("/api/login", json=body)
        assert response.status_code == 401
        payload = response.get_json()
        assert payload["error"] == "INVALID_CREDENTIALS"
        assert payload["message"] == "Incorrect email or password"

    def test_login_requires_fields(self, client):
        response = client.post("/api/login", json={})
        assert response.status_code == 422


class TestSessionScenario:
    def test_login_refresh_revoke_refresh(self, client, user, app):
        first = login(client).get_json()
        refresh_token = first["refresh_token"]

        refreshed = client.post("/api/refresh", headers=bearer(refresh_token))
        assert refreshed.status_code == 200
        new_token = refreshed.get_json()["token"]
        assert new_token != first["token"]
        claims = jwt.decode(new_token, app.config["JWT_SECRET"], algorithms=["HS256"])
        assert claims["exp"] - claims["iat"] == pytest.approx(3600)

        revoked = client.post("/api/revoke", headers=bearer(refresh_token))
        assert revoked.status_code == 204
        assert revoked.data == b""

        again = client.post("/api/refresh", headers=bearer(refresh_token))
        assert again.status_code == 401
        assert again.get_json()["error"] == "UNAUTHORIZED"

        row = storage.get(RefreshToken, refresh_token)
        assert row is not None and row.revoked_at is not None

    def test_refresh_without_header(self, client):
        response = client.post("/api/refresh")
        assert response.status_code == 401
        assert response.get_json()["error"] == "MISSING_HEADER"

    def test_refresh_with_basic_scheme(self, client):
        response = client.post("/api/refresh", headers={"Authorization": "Basic abc123"})
        assert response.status_code == 401
        assert response.get_json()["error"] == "MALFORMED_HEADER"

    def test_revoke_unknown_token(self, client):
        response = client.post("/api/revoke", headers=bearer("0" * 64))
        assert response.status_code == 404

    def test_revoke_twice(self, client, user):
        refresh_token = login(client).get_json()["refresh_token"]
        assert client.post("/api/revoke", headers=bearer(refresh_token)).status_code == 204
        assert client.post("/api/revoke", headers=bearer(refresh_token)).status_code == 204


class TestPolkaWebhook:
    def post(self, client, body, key="test-polka-key"):
        headers = {"X-API-Key": key} if key is not None else {}
        return client.post("/api/polka/webhooks", json=body, headers=headers)

    def test_upgrade(self, client, user):
        response = self.post(client, {"event": "user.upgraded", "data": {"user_id": user.id}})
        assert response.status_code == 204
        assert storage.get(User, user.id).is_chirpy_red is True

    def test_other_events_are_ignored(self, client, user):
        response = self.post(client, {"event": "user.downgraded", "data": {"user_id": user.id}})
        assert response.status_code == 204
        assert storage.get(User, user.id).is_chirpy_red is False

    def test_unknown_user(self, client):
        response = self.post(client, {"event": "user.upgraded", "data": {"user_id": str(uuid.uuid4())}})
        assert response.status_code == 404

    def test_wrong_key(self, client, user):
        response = self.post(client, {"event": "user.upgraded", "data": {"user_id": user.id}}, key="wrong")
        assert response.status_code == 403
        assert response.get_json()["error"] == "FORBIDDEN"

    def test_missing_key(self, client, user):
        response = self.post(client, {"event": "user.upgraded", "data": {"user_id": user.id}}, key=None)
        assert response.status_code == 401
        assert response.get_json()["error"] == "MISSING_HEADER"

    @pytest.mark.parametrize("body", [[], [1, 2], "user.upgraded", 7])
    def test_non_object_body_is_a_bad_request(self, client, user, body):
        response = self.post(client, body)
        assert response.status_code == 400
        assert response.get_json()["error"] == "BAD_REQUEST"

    @pytest.mark.parametrize("data", [[1], "x", 5])
    def test_non_object_data_is_a_bad_request(self, client, user, data):
        response = self.post(client, {"event": "user.upgraded", "data": data})
        assert response.status_code == 400
        assert storage.get(User, user.id).is_chirpy_red is False

    def test_missing_user_id_is_a_bad_request(self, client, user):
        response = self.post(client, {"event": "user.upgraded", "data": {}})
        assert response.status_code == 400


class TestAdminReset:
    def test_reset_in_dev(self, client, user):
        login(client)
        response = client.post("/admin/reset")
        assert response.status_code == 200
        assert response.get_json()["deleted_users"] == 1
        assert storage.count(User) == 0
        assert storage.count(RefreshToken) == 0

    def test_reset_outside_dev(self, app, client, user):
        app.config["PLATFORM"] = "prod"
        response = client.post("/admin/reset")
        assert response.status_code == 403
        assert storage.count(User) == 1
