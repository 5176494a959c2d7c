"""Tests for token pairs, password login and Google sign-in."""

import typing as t
from unittest.mock import MagicMock, patch

import pytest
from django.test import override_settings
from google.auth.exceptions import GoogleAuthError
from ninja.errors import HttpError
from ninja_jwt.token_blacklist.models import BlacklistedToken
from ninja_jwt.tokens import AccessToken, RefreshToken

from accounts import schema
from accounts.exceptions import AccountAlreadyLinkedError, EmailAlreadyInUseError
from accounts.models import EventFlowUser, LinkedAccount
from accounts.service import auth as auth_service

pytestmark = pytest.mark.django_db


def test_get_token_pair_for_user_carries_profile_claims(user: EventFlowUser) -> None:
    pair = auth_service.get_token_pair_for_user(user)

    access = AccessToken(pair.access)  # type: ignore[arg-type]
    assert access["sub"] == str(user.id)
    assert access["email"] == user.email
    assert access["role"] == "user"
    assert access["user_type"] == "registered_user"
    assert access["email_verified"] is True
    user.refresh_from_db()
    assert user.last_login is not None


def test_obtain_token_pair_with_password(user: EventFlowUser) -> None:
    pair = auth_service.obtain_token_pair(" TestUser@example.com ", "strong-password-123!")
    assert pair.username == user.username
    assert pair.refresh


def test_obtain_token_pair_wrong_password(user: EventFlowUser) -> None:
    with pytest.raises(HttpError) as exc_info:
        auth_service.obtain_token_pair(user.username, "wrong-password")
    assert exc_info.value.status_code == 401


def test_obtain_token_pair_provider_only_user(google_user: EventFlowUser) -> None:
    with pytest.raises(HttpError) as exc_info:
        auth_service.obtain_token_pair(google_user.username, "anything-at-all")
    assert exc_info.value.status_code == 401
    assert str(exc_info.value) == "Login via your linked provider."


def test_logout_blacklists_refresh_token(user: EventFlowUser) -> None:
    refresh = RefreshToken.for_user(user)

    auth_service.logout(str(refresh))

    assert BlacklistedToken.objects.filter(token__jti=refresh["jti"]).exists()
    with pytest.raises(HttpError) as exc_info:
        auth_service.logout(str(refresh))
    assert exc_info.value.status_code == 401


def test_logout_invalid_token() -> None:
    with pytest.raises(HttpError) as exc_info:
        auth_service.logout("not-a-token")
    assert exc_info.value.status_code == 401


@patch("accounts.service.auth._verify_oauth2_token")
def test_verify_oauth2_token_invalid(mock_verify: MagicMock) -> None:
    mock_verify.side_effect = GoogleAuthError("bad token")
    with pytest.raises(HttpError) as exc_info:
        auth_service.verify_oauth2_token("bad")
    assert exc_info.value.status_code == 401


@patch("accounts.service.auth.verify_oauth2_token")
def test_google_login_creates_user(mock_verify: MagicMock, google_id_info: schema.GoogleIDInfo) -> None:
    mock_verify.return_value = google_id_info

    pair = auth_service.google_login("id-token")

    user = EventFlowUser.objects.get(email="jane.doe@example.com")
    assert pair.username == user.username
    assert user.name == "Jane Doe"
    assert user.image == "https://example.com/jane.png"
    assert user.email_verified
    assert user.email_verified_at is not None
    assert not user.has_usable_password()
    account = LinkedAccount.objects.get(user=user)
    assert account.provider == LinkedAccount.Provider.GOOGLE
    assert account.provider_account_id == "google-sub-1"
    assert account.id_token == "id-token"


@patch("accounts.service.auth.verify_oauth2_token")
def test_google_login_links_existing_email_user(
    mock_verify: MagicMock, google_id_info: schema.GoogleIDInfo, user_factory: t.Callable[..., EventFlowUser]
) -> None:
    existing = user_factory(username="jane.doe@example.com", email="jane.doe@example.com")
    mock_verify.return_value = google_id_info

    auth_service.google_login("id-token")

    assert EventFlowUser.objects.count() == 1
    existing.refresh_from_db()
    assert existing.email_verified
    assert existing.has_usable_password()
    assert existing.linked_accounts.filter(provider=LinkedAccount.Provider.GOOGLE).exists()


@patch("accounts.service.auth.verify_oauth2_token")
def test_google_login_unverified_email_does_not_take_over_account(
    mock_verify: MagicMock, user: EventFlowUser, google_id_info: schema.GoogleIDInfo
) -> None:
    mock_verify.return_value = google_id_info.model_copy(update={"email": user.email, "email_verified": False})

    with pytest.raises(EmailAlreadyInUseError):
        auth_service.google_login("id-token")

    assert not LinkedAccount.objects.filter(provider=LinkedAccount.Provider.GOOGLE).exists()


@override_settings(GOOGLE_SSO_STAFF_LIST=["jane.doe@example.com"], GOOGLE_SSO_SUPERUSER_LIST=[])
@patch("accounts.service.auth.verify_oauth2_token")
def test_google_login_unverified_email_creates_unverified_user(
    mock_verify: MagicMock, google_id_info: schema.GoogleIDInfo
) -> None:
    mock_verify.return_value = google_id_info.model_copy(update={"email_verified": False})

    auth_service.google_login("id-token")

    user = EventFlowUser.objects.get(email="jane.doe@example.com")
    assert not user.email_verified
    assert user.email_verified_at is None
    assert not user.is_staff


@patch("accounts.service.auth.verify_oauth2_token")
def test_google_login_resolves_by_linked_account(
    mock_verify: MagicMock, google_user: EventFlowUser, google_id_info: schema.GoogleIDInfo
) -> None:
    mock_verify.return_value = google_id_info.model_copy(update={"sub": "g-123"})

    pair = auth_service.google_login("id-token")

    assert pair.username == google_user.username
    assert EventFlowUser.objects.count() == 1


@override_settings(GOOGLE_SSO_STAFF_LIST=["jane.doe@example.com"], GOOGLE_SSO_SUPERUSER_LIST=[])
@patch("accounts.service.auth.verify_oauth2_token")
def test_google_login_staff_list(mock_verify: MagicMock, google_id_info: schema.GoogleIDInfo) -> None:
    mock_verify.return_value = google_id_info
    auth_service.google_login("id-token")
    user = EventFlowUser.objects.get(email="jane.doe@example.com")
    assert user.is_staff
    assert not user.is_superuser


@patch("accounts.service.auth.verify_oauth2_token")
def test_google_login_without_email(mock_verify: MagicMock, google_id_info: schema.GoogleIDInfo) -> None:
    mock_verify.return_value = google_id_info.model_copy(update={"email": ""})
    with pytest.raises(HttpError) as exc_info:
        auth_service.google_login("id-token")
    assert exc_info.value.status_code == 401


@patch("accounts.service.auth.verify_oauth2_token")
def test_link_google(mock_verify: MagicMock, user: EventFlowUser, google_id_info: schema.GoogleIDInfo) -> None:
    mock_verify.return_value = google_id_info

    account = auth_service.link_google(user, "id-token")

    assert account.user == user
    assert account.provider_account_id == "google-sub-1"


@patch("accounts.service.auth.verify_oauth2_token")
def test_link_google_owned_by_other_user(
    mock_verify: MagicMock, user: EventFlowUser, google_user: EventFlowUser, google_id_info: schema.GoogleIDInfo
) -> None:
    mock_verify.return_value = google_id_info.model_copy(update={"sub": "g-123"})
    with pytest.raises(AccountAlreadyLinkedError):
        auth_service.link_google(user, "id-token")


@patch("accounts.service.auth.verify_oauth2_token")
def test_link_google_already_linked(
    mock_verify: MagicMock, google_user: EventFlowUser, google_id_info: schema.GoogleIDInfo
) -> None:
    mock_verify.return_value = google_id_info
    with pytest.raises(HttpError) as exc_info:
        auth_service.link_google(google_user, "id-token")
    assert exc_info.value.status_code == 400


@patch("accounts.service.auth.verify_oauth2_token")
def test_link_google_unverified_email_keeps_user_unverified(
    mock_verify: MagicMock, user_factory: t.Callable[..., EventFlowUser], google_id_info: schema.GoogleIDInfo
) -> None:
    user = user_factory(username="jane.doe@example.com", email="jane.doe@example.com", email_verified=False)
    mock_verify.return_value = google_id_info.model_copy(update={"email_verified": False})

    auth_service.link_google(user, "id-token")

    user.refresh_from_db()
    assert not user.email_verified
