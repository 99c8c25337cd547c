"""Authenticator dependency tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
import os
import unittest

from fastapi import Request
from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.main import create_app
from app.repositories.memory import InMemoryStore
from app.routes.dependencies import get_link_service
from app.schemas.auth import Authenticated
from app.services.links import LinkService


class _FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = (
        "ONELINK_JWT_SECRET",
        "ONELINK_BCRYPT_ROUNDS",
        "ONELINK_ENVIRONMENT",
    )

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["ONELINK_JWT_SECRET"] = "test-jwt-secret"
        os.environ["ONELINK_BCRYPT_ROUNDS"] = "4"
        os.environ["ONELINK_ENVIRONMENT"] = "production"
        get_settings.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()


def _signup(client: TestClient, handle: str = "alice", email: str = "a@x.com") -> dict:
    response = client.post("/api/auth/signup", json={"handle": handle, "email": email, "password": "Abc123"})
    assert response.status_code == 201, response.text
    return response.json()["data"]


class AuthenticatorTests(_SettingsEnvCase):
    def test_missing_authorization_header_returns_401_and_no_link_side_effect(self) -> None:
        app = create_app()
        client = TestClient(app)

        response = client.post("/api/links", json={"title": "Site", "url": "https://example.com"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"success": False, "message": "Access token required"})
        self.assertEqual(app.state.store.link_write_count, 0)

    def test_non_bearer_scheme_counts_as_missing_token(self) -> None:
        app = create_app()
        client = TestClient(app)
        token = _signup(client)["token"]

        response = client.get("/api/links", headers={"Authorization": f"Basic {token}"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Access token required")

    def test_invalid_bearer_token_returns_401_invalid_token(self) -> None:
        app = create_app()
        client = TestClient(app)

        response = client.get("/api/links", headers={"Authorization": "Bearer not-a-valid-token"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"success": False, "message": "Invalid token"})

    def test_token_signed_by_another_deployment_is_invalid(self) -> None:
        issuing_app = create_app()
        token = _signup(TestClient(issuing_app))["token"]

        os.environ["ONELINK_JWT_SECRET"] = "a-different-secret"
        get_settings.cache_clear()
        app = create_app(store=issuing_app.state.store)
        response = TestClient(app).get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Invalid token")

    def test_expired_token_returns_401_token_expired(self) -> None:
        clock = _FakeClock()
        app = create_app(clock=clock)
        client = TestClient(app)
        token = _signup(client)["token"]

        clock.now = clock.now + timedelta(days=7, seconds=1)
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Token expired")

    def test_valid_token_for_vanished_principal_returns_401_user_not_found(self) -> None:
        app = create_app()
        client = TestClient(app)
        data = _signup(client)
        store = app.state.store
        record = store.principals.pop(data["user"]["id"])
        store.principal_ids_by_handle.pop(record.handle)
        store.principal_ids_by_email.pop(record.email)

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Invalid token - user not found")

    def test_storage_fault_during_lookup_returns_500_without_detail(self) -> None:
        app = create_app()
        client = TestClient(app)
        token = _signup(client)["token"]
        app.state.store.storage_failure_message = "connection reset by peer"

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"success": False, "message": "Authentication failed"})

    def test_storage_fault_detail_is_echoed_in_development(self) -> None:
        os.environ["ONELINK_ENVIRONMENT"] = "development"
        get_settings.cache_clear()
        app = create_app()
        client = TestClient(app)
        token = _signup(client)["token"]
        app.state.store.storage_failure_message = "connection reset by peer"

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"], "connection reset by peer")

    def test_authenticated_identity_is_attached_to_request_state(self) -> None:
        app = create_app()
        client = TestClient(app)
        data = _signup(client)
        observed: dict[str, object] = {}

        def _override_link_service(request: Request) -> LinkService:
            observed["identity"] = request.state.identity
            return LinkService(request.app.state.store)

        app.dependency_overrides[get_link_service] = _override_link_service

        response = client.get("/api/links", headers={"Authorization": f"Bearer {data['token']}"})

        self.assertEqual(response.status_code, 200)
        identity = observed.get("identity")
        self.assertIsInstance(identity, Authenticated)
        assert isinstance(identity, Authenticated)
        self.assertEqual(identity.principal.id, data["user"]["id"])

    def test_rejected_request_never_reaches_the_handler_dependencies(self) -> None:
        app = create_app()
        client = TestClient(app)
        reached: list[bool] = []

        def _override_link_service() -> LinkService:
            reached.append(True)
            return LinkService(InMemoryStore())

        app.dependency_overrides[get_link_service] = _override_link_service

        response = client.get("/api/links", headers={"Authorization": "Bearer broken"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(reached, [])


class UnexpectedFailureTests(_SettingsEnvCase):
    def test_unhandled_error_becomes_generic_500(self) -> None:
        app = create_app()
        client = TestClient(app, raise_server_exceptions=False)
        token = _signup(client)["token"]

        def _broken_link_service() -> LinkService:
            raise RuntimeError("secret internals")

        app.dependency_overrides[get_link_service] = _broken_link_service

        response = client.get("/api/links", headers={"Authorization": f"Bearer {token}"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"success": False, "message": "Internal server error"})
        self.assertNotIn("secret internals", response.text)
