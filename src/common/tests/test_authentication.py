import typing as t

import pytest
from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory
from django.utils import timezone
from ninja_jwt.tokens import RefreshToken

from accounts.models import EventFlowUser
from common.auth_base import AdminJWTAuth, PermissionDenied
from common.authentication import EventFlowJWTAuth, OptionalAuth

pytestmark = pytest.mark.django_db


def _access_token(user: EventFlowUser) -> str:
    return str(RefreshToken.for_user(user).access_token)  # type: ignore[attr-defined]


def test_jwt_auth_activates_user_timezone(user: EventFlowUser) -> None:
    user.timezone = "Europe/Rome"
    user.save()
    request = RequestFactory().get("/")

    try:
        authenticated = EventFlowJWTAuth().authenticate(request, _access_token(user))

        assert authenticated == user
        assert timezone.get_current_timezone_name() == "Europe/Rome"
    finally:
        timezone.deactivate()


def test_optional_auth_without_header_is_anonymous() -> None:
    request = RequestFactory().get("/")

    result = OptionalAuth()(request)

    assert isinstance(result, AnonymousUser)
    assert isinstance(request.user, AnonymousUser)


def test_optional_auth_with_token(user: EventFlowUser) -> None:
    request = RequestFactory().get("/", HTTP_AUTHORIZATION=f"Bearer {_access_token(user)}")

    try:
        assert OptionalAuth()(request) == user
    finally:
        timezone.deactivate()


def test_optional_auth_other_scheme() -> None:
    request = RequestFactory().get("/", HTTP_AUTHORIZATION="Basic abc")

    assert OptionalAuth()(request) is None


def test_admin_auth_rejects_regular_users(user: EventFlowUser) -> None:
    with pytest.raises(PermissionDenied):
        AdminJWTAuth().authenticate(RequestFactory().get("/"), _access_token(user))
    timezone.deactivate()


def test_admin_auth_accepts_platform_admins(platform_admin: EventFlowUser) -> None:
    request: t.Any = RequestFactory().get("/")

    assert AdminJWTAuth().authenticate(request, _access_token(platform_admin)) == platform_admin
    timezone.deactivate()
