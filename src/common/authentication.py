import typing as t
import zoneinfo

import structlog
from django.conf import settings
from django.contrib.auth.models import AnonymousUser
from django.http import HttpRequest
from django.utils import timezone
from ninja_jwt.authentication import JWTAuth

logger = structlog.get_logger(__name__)


class EventFlowJWTAuth(JWTAuth):
    """Bearer JWT auth that switches the active time zone to the caller's profile zone.

    An unknown zone name on the profile is logged and the default zone is kept.
    """

    def authenticate(self, request: HttpRequest, token: str) -> t.Any:
        user = super().authenticate(request, token)

        user_timezone = getattr(user, "timezone", None)
        if user_timezone:
            try:
                timezone.activate(zoneinfo.ZoneInfo(user_timezone))
            except (zoneinfo.ZoneInfoNotFoundError, ValueError):
                logger.warning("invalid_user_timezone", user_id=str(user.pk), timezone=user_timezone)
                timezone.deactivate()

        return user


class OptionalAuth(EventFlowJWTAuth):
    """Auth for endpoints open to everyone that still recognise signed-in callers.

    Without an Authorization header the request proceeds as AnonymousUser. A header
    with the wrong scheme fails authentication, a bearer token is validated as usual.
    """

    def __call__(self, request: HttpRequest) -> t.Any | None:
        auth_value = request.headers.get(self.header)
        if not auth_value:
            request.user = AnonymousUser()
            return request.user

        scheme, _, token = auth_value.partition(" ")
        if scheme.lower() != self.openapi_scheme:
            if settings.DEBUG:
                logger.error("unexpected_auth_header", auth_scheme=scheme)
            return None
        return self.authenticate(request, token.strip())
