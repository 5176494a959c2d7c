"""Authentication classes with extra requirements on the authenticated user."""

import typing as t

from django.contrib.auth.models import AnonymousUser
from django.http import HttpRequest
from django.utils.translation import gettext_lazy as _
from ninja_extra import status
from ninja_extra.exceptions import APIException

from .authentication import EventFlowJWTAuth


class PermissionDenied(APIException):
    """Exception raised when user doesn't have required permissions."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = _("Permission denied")


class AdminJWTAuth(EventFlowJWTAuth):
    """JWT authentication restricted to platform admins.

    A valid token of a user without the admin role is rejected with 403 rather than 401.
    """

    def authenticate(self, request: HttpRequest, token: str) -> t.Any:
        """Authenticate and require the platform admin role.

        Raises:
            PermissionDenied: If the user is not a platform admin
        """
        user = super().authenticate(request, token)

        if user and not isinstance(user, AnonymousUser) and not getattr(user, "is_platform_admin", False):
            raise PermissionDenied(str(_("Admin access required.")))

        return user
