"""Integration tests for the AuthController."""

import typing as t
from unittest.mock import MagicMock, patch

import orjson
import pytest
from django.test.client import Client
from django.urls import reverse
from ninja_jwt.schema import TokenObtainPairOutputSchema

from accounts.models import EventFlowUser

pytestmark = pytest.mark.django_db


def _post(client: Client, name: str, payload: dict[str, t.Any]) -> t.Any:
    return client.post(reverse(f"api:{name}"), data=orjson.dumps(payload), content_type="application/json")


def test_obtain_token_and_logout(user: EventFlowUser) -> None:
    client = Client()

    response = _post(client, "token_obtain_pair", {"username": user.email, "password": "strong-password-123!"})

    assert response.status_code == 200, response.content
    tokens = response.json()
    assert tokens["access"]
    assert tokens["refresh"]

    assert _post(client, "logout", {"refresh": tokens["refresh"]}).status_code == 200
    assert _post(client, "logout", {"refresh": tokens["refresh"]}).status_code == 401


def test_obtain_token_wrong_password(user: EventFlowUser) -> None:
    response = _post(Client(), "token_obtain_pair", {"username": user.email, "password": "wrong"})

    assert response.status_code == 401
    assert response.json()["detail"] == "No active account found with the given credentials"


@patch("accounts.service.auth.google_login")
def test_google_login(mock_login: MagicMock) -> None:
    mock_login.return_value = TokenObtainPairOutputSchema(
        username="jane.doe@example.com", access="access", refresh="refresh"
    )

    response = _post(Client(), "google_sso_login", {"id_token": "google-token"})

    assert response.status_code == 200
    assert response.json()["access"] == "access"
    mock_login.assert_called_once_with("google-token")


def test_mediawiki_authorize() -> None:
    response = Client().get(reverse("api:mediawiki_authorize"))

    assert response.status_code == 200
    data = response.json()
    assert f"state={data['state']}" in data["authorization_url"]
    assert "code_challenge_method=S256" in data["authorization_url"]


def test_mediawiki_callback_unknown_state() -> None:
    response = _post(Client(), "mediawiki_callback", {"code": "abc", "state": "never-issued"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Unknown or expired OAuth state."


def test_linked_accounts(make_client: t.Callable[[EventFlowUser], Client], google_user: EventFlowUser) -> None:
    response = make_client(google_user).get(reverse("api:linked_accounts"))

    assert response.status_code == 200
    data = response.json()
    assert data["has_google"] is True
    assert data["has_password"] is False
    assert data["linked_accounts"][0]["account_id"] == "g-123"


def test_unlink_only_method(make_client: t.Callable[[EventFlowUser], Client], google_user: EventFlowUser) -> None:
    response = _post(make_client(google_user), "unlink_account", {"provider": "google"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot unlink your only authentication method."


def test_check_admin(auth_client: Client, platform_admin_client: Client) -> None:
    assert auth_client.get(reverse("api:check_admin")).json() == {"is_admin": False}
    assert platform_admin_client.get(reverse("api:check_admin")).json() == {"is_admin": True}
