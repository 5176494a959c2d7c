from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import HttpRequest
from ninja_extra import NinjaExtraAPI

from accounts.controllers.account import AccountController
from accounts.controllers.auth import AuthController
from accounts.exceptions import AccountAlreadyLinkedError, EmailAlreadyInUseError, MediaWikiOAuthError
from common.schema import ResponseOk, VersionResponse
from common.throttling import AnonDefaultThrottle, UserDefaultThrottle
from communities.controllers.communities import CommunityController
from communities.controllers.community_admin import CommunityAdminController
from communities.exceptions import AlreadyCommunityAdminError, AlreadyCommunityMemberError
from events.controllers.events import EventController
from events.controllers.participants import ParticipantController
from events.controllers.registration import RegistrationController
from events.exceptions import (
    AlreadyRegisteredError,
    EventAtCapacityError,
    EventNotOpenForRegistrationError,
    RegistrationCancelledError,
)
from subscriptions.controllers.subscription import SubscriptionController
from subscriptions.controllers.subscription_admin import SubscriptionAdminController

from .exception_handlers import (
    handle_account_already_linked_error,
    handle_already_community_admin_error,
    handle_already_community_member_error,
    handle_already_registered_error,
    handle_django_validation_error,
    handle_email_already_in_use_error,
    handle_event_at_capacity_error,
    handle_event_not_open_for_registration_error,
    handle_general_exception,
    handle_mediawiki_oauth_error,
    handle_registration_cancelled_error,
)

api = NinjaExtraAPI(
    title="EventFlow API",
    docs_url="/docs",
    version=settings.VERSION,
    description=f"EventFlow API {settings.VERSION}",
    app_name=f"eventflow-api-{settings.VERSION}",
    urls_namespace="api",
    servers=[
        {"url": settings.SERVICE_URL, "description": settings.SERVICE_DESCRIPTION},
    ],
    throttle=[AnonDefaultThrottle(), UserDefaultThrottle()],
)


@api.get("/version", tags=["Version"], response={200: VersionResponse}, url_name="version")
def version(request: HttpRequest) -> tuple[int, VersionResponse]:
    """Get the API version.

    Args:
        request: The incoming HTTP request.

    Returns:
        The response status code and message.
    """
    return 200, VersionResponse(version=settings.VERSION)


@api.get("/healthcheck", tags=["Healthcheck"], response={200: ResponseOk}, url_name="healthcheck")
def healthcheck(request: HttpRequest) -> tuple[int, ResponseOk]:
    """Check the health of the API.

    Args:
        request: The incoming HTTP request.

    Returns:
        The response status code and message.
    """
    return 200, ResponseOk()


api.register_controllers(
    # Auth/Account controllers
    AuthController,
    AccountController,
    # Community controllers
    CommunityController,
    CommunityAdminController,
    # Event controllers
    EventController,
    RegistrationController,
    ParticipantController,
    # Subscription controllers
    SubscriptionController,
    SubscriptionAdminController,
)

EXCEPTION_HANDLERS = {
    Exception: handle_general_exception,
    ValidationError: handle_django_validation_error,
    EmailAlreadyInUseError: handle_email_already_in_use_error,
    AccountAlreadyLinkedError: handle_account_already_linked_error,
    MediaWikiOAuthError: handle_mediawiki_oauth_error,
    AlreadyCommunityMemberError: handle_already_community_member_error,
    AlreadyCommunityAdminError: handle_already_community_admin_error,
    EventNotOpenForRegistrationError: handle_event_not_open_for_registration_error,
    AlreadyRegisteredError: handle_already_registered_error,
    RegistrationCancelledError: handle_registration_cancelled_error,
    EventAtCapacityError: handle_event_at_capacity_error,
}

for exc, handler in EXCEPTION_HANDLERS.items():
    api.add_exception_handler(exc, handler)
