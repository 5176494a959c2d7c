"""Exception handlers for the API."""

import traceback
import typing as t
from copy import deepcopy

import orjson
import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import HttpRequest
from ninja.responses import Response

from accounts.exceptions import AccountAlreadyLinkedError, EmailAlreadyInUseError, MediaWikiOAuthError
from communities.exceptions import AlreadyCommunityAdminError, AlreadyCommunityMemberError
from events.exceptions import (
    AlreadyRegisteredError,
    EventAtCapacityError,
    EventNotOpenForRegistrationError,
    RegistrationCancelledError,
)

logger = structlog.get_logger(__name__)


def handle_general_exception(request: HttpRequest, exc: Exception | t.Type[Exception]) -> Response:
    """Handle a general exception.

    Args:
        request: The incoming HTTP request.
        exc: The exception.

    Returns:
        The response.
    """
    is_staff = getattr(request, "user", None) and request.user.is_staff
    metadata = {
        "headers": obfuscate(dict(request.headers)),
        "method": request.method,
        "path": request.path,
        "GET": obfuscate(request.GET.dict()),
        # note: we can do request.user because we set the user in the auth flow
        "user": str(request.user.pk) if getattr(request, "user", None) and request.user.is_authenticated else None,
    }
    if request.method in ("POST", "PUT", "PATCH") and request.headers.get("Content-Type") == "application/json":
        try:
            payload = orjson.loads(request.body)
        except orjson.JSONDecodeError:
            payload = None
        metadata["json_payload"] = obfuscate(payload) if isinstance(payload, dict) else None
    logger.exception("internal_server_error", exc_info=exc, **metadata)
    data = {"detail": "Internal Server Error."}
    if settings.DEBUG or is_staff:  # pragma: no cover
        data["traceback"] = "".join(traceback.format_exception(exc))  # type: ignore[arg-type]
    return Response(status=500, data=data)


def handle_django_validation_error(request: HttpRequest, exc: ValidationError | t.Type[ValidationError]) -> Response:
    """Handle a validation error.

    Args:
        request: The incoming HTTP request.
        exc: The exception.
    """
    logger.warning("validation_error", path=request.path, messages=exc.messages)  # type: ignore[union-attr]
    if hasattr(exc, "error_dict"):
        error_dict = {k: [ee for e in v for ee in e] for k, v in exc.error_dict.items()}
    else:
        error_dict = {"__all__": exc.messages}  # type: ignore[union-attr]
    return Response(status=400, data={"errors": error_dict})


def handle_email_already_in_use_error(
    request: HttpRequest, exc: EmailAlreadyInUseError | t.Type[EmailAlreadyInUseError]
) -> Response:
    """Handle an email conflict. The frontend offers to sign in with the other account instead."""
    return Response(
        status=409,
        data={"detail": "This email is already associated with another account.", "conflict": True},
    )


def handle_account_already_linked_error(
    request: HttpRequest, exc: AccountAlreadyLinkedError | t.Type[AccountAlreadyLinkedError]
) -> Response:
    """Handle a provider account that belongs to another user."""
    return Response(
        status=409,
        data={"detail": "This account is already linked to another user.", "conflict": True},
    )


def handle_mediawiki_oauth_error(
    request: HttpRequest, exc: MediaWikiOAuthError | t.Type[MediaWikiOAuthError]
) -> Response:
    """Handle a failed MediaWiki OAuth exchange."""
    return Response(status=400, data={"detail": str(exc)})


def handle_already_community_member_error(
    request: HttpRequest, exc: AlreadyCommunityMemberError | t.Type[AlreadyCommunityMemberError]
) -> Response:
    """Handle an already member error."""
    return Response(status=400, data={"detail": "You are already a member of this community"})


def handle_already_community_admin_error(
    request: HttpRequest, exc: AlreadyCommunityAdminError | t.Type[AlreadyCommunityAdminError]
) -> Response:
    """Handle a join attempt by one of the community's admins."""
    return Response(status=400, data={"detail": "You are already an admin of this community"})


def handle_event_not_open_for_registration_error(
    request: HttpRequest, exc: EventNotOpenForRegistrationError | t.Type[EventNotOpenForRegistrationError]
) -> Response:
    """Handle a registration for an event that is not published."""
    return Response(status=400, data={"detail": str(exc)})


def handle_already_registered_error(
    request: HttpRequest, exc: AlreadyRegisteredError | t.Type[AlreadyRegisteredError]
) -> Response:
    """Handle a second registration for the same event."""
    return Response(status=400, data={"detail": "You are already registered for this event"})


def handle_registration_cancelled_error(
    request: HttpRequest, exc: RegistrationCancelledError | t.Type[RegistrationCancelledError]
) -> Response:
    """Handle a registration attempt after the organizer removed the user."""
    return Response(
        status=400,
        data={
            "detail": "Your previous registration for this event was cancelled. "
            "Please contact the organizer if you believe this is a mistake."
        },
    )


def handle_event_at_capacity_error(
    request: HttpRequest, exc: EventAtCapacityError | t.Type[EventAtCapacityError]
) -> Response:
    """Handle a registration for a full event."""
    return Response(status=400, data={"detail": "This event is at full capacity"})


SENSITIVE_KEYS = {
    "password",
    "password1",
    "password2",
    "token",
    "refresh",
    "id_token",
    "code",
    "authorization",
    "cookie",
}


def obfuscate(data: dict[str, t.Any]) -> dict[str, t.Any]:
    """Obfuscate sensitive data in payloads and headers."""
    new_data = deepcopy(data)
    for key in data.keys():
        if key.lower() in SENSITIVE_KEYS:
            new_data[key] = "********"
    return new_data
