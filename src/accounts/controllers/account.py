"""This module contains the controllers for the account app."""

import typing as t

import structlog
from django.http import HttpResponseRedirect
from django.utils.translation import gettext_lazy as _
from ninja.errors import HttpError
from ninja_extra import api_controller, route, status

from accounts import schema
from accounts.models import EventFlowUser
from accounts.service import account as account_service
from common.authentication import EventFlowJWTAuth
from common.controllers import UserAwareController
from common.schema import ResponseMessage
from common.throttling import AuthThrottle, EmailVerificationThrottle, UserRegistrationThrottle

logger = structlog.get_logger(__name__)


@api_controller("/account", tags=["Account"], throttle=AuthThrottle())
class AccountController(UserAwareController):
    @route.get(
        "/me",
        response=schema.EventFlowUserSchema,
        url_name="me",
        auth=EventFlowJWTAuth(),
    )
    def me(self) -> EventFlowUser:
        """Retrieve the authenticated user's profile information."""
        return self.user()

    @route.put(
        "/me",
        response=schema.EventFlowUserSchema,
        url_name="update-profile",
        auth=EventFlowJWTAuth(),
    )
    def update_profile(self, payload: schema.ProfileUpdateSchema) -> EventFlowUser:
        """Update the authenticated user's profile.

        Only provided fields are updated. The time zone must be an IANA zone name.
        """
        return account_service.update_profile(self.user(), payload)

    @route.post(
        "/register",
        response={201: schema.EventFlowUserSchema},
        url_name="register-account",
        throttle=UserRegistrationThrottle(),
    )
    def register(self, payload: schema.RegisterUserSchema) -> tuple[int, EventFlowUser]:
        """Create a new user account with email and password.

        A verification email is sent to the address. Returns 400 if the address is taken; if that
        account is still unverified, its verification email is sent again.
        """
        user = account_service.register_user(payload)
        return status.HTTP_201_CREATED, user

    @route.post(
        "/add-email",
        response=schema.EmailChangeResponse,
        url_name="add-email",
        auth=EventFlowJWTAuth(),
        throttle=EmailVerificationThrottle(),
    )
    def add_email(self, payload: schema.AddEmailSchema) -> schema.EmailChangeResponse:
        """Add a real email address to an account that only has a placeholder.

        Returns 409 when the address belongs to another account.
        """
        user = account_service.add_email(self.user(), payload.email)
        return schema.EmailChangeResponse(
            message=str(_("Verification email sent. Please check your inbox.")),
            email=user.email or "",
            email_verified=user.email_verified,
        )

    @route.get("/verify-email", url_name="verify-email")
    def verify_email(self, token: str = "", email: str = "") -> t.Any:
        """Confirm an email address from the link in the verification email.

        Always redirects the browser to the frontend: to the dashboard on success, or back to the
        verification page with an `error` query parameter.
        """
        if not token or not email:
            return HttpResponseRedirect(account_service.verification_redirect_url("missing_params"))
        try:
            account_service.verify_email(token, email)
        except HttpError:
            return HttpResponseRedirect(account_service.verification_redirect_url("invalid_token"))
        except Exception:
            logger.exception("email_verification_unexpected_error", email=email)
            return HttpResponseRedirect(account_service.verification_redirect_url("server_error"))
        return HttpResponseRedirect(account_service.verification_redirect_url())

    @route.post(
        "/resend-verification",
        response=ResponseMessage,
        url_name="resend-verification-email",
        throttle=UserRegistrationThrottle(),
    )
    def resend_verification_email(self, payload: schema.ResendVerificationSchema) -> ResponseMessage:
        """Send a new verification link.

        Unknown addresses get the same answer as successful sends to prevent user enumeration.
        """
        message = account_service.resend_verification_email(payload.email)
        return ResponseMessage(message=message)

    @route.post(
        "/skip-email",
        response=schema.EventFlowUserSchema,
        url_name="skip-email",
        auth=EventFlowJWTAuth(),
    )
    def skip_email(self) -> EventFlowUser:
        """Continue without adding an email address. The profile prompt stops appearing."""
        return account_service.skip_email(self.user())

    @route.get(
        "/profile-completion",
        response=schema.ProfileCompletionSchema,
        url_name="profile-completion",
        auth=EventFlowJWTAuth(),
    )
    def profile_completion(self) -> schema.ProfileCompletionSchema:
        """How complete the profile is, with the fields still missing and suggestions."""
        return account_service.get_profile_completion(self.user())
