"""This module contains the controllers for the authentication app."""

import structlog
from django.utils.translation import gettext_lazy as _
from ninja_extra import api_controller, route
from ninja_jwt.controller import TokenObtainPairController
from ninja_jwt.schema import TokenObtainPairOutputSchema

from accounts import schema
from accounts.models import EventFlowUser
from accounts.service import account as account_service
from accounts.service import auth as auth_service
from accounts.service import mediawiki as mediawiki_service
from common.authentication import EventFlowJWTAuth
from common.controllers import UserAwareController
from common.schema import ResponseMessage
from common.throttling import AuthThrottle

logger = structlog.get_logger(__name__)


@api_controller("/auth", tags=["Auth"], throttle=AuthThrottle())
class AuthController(TokenObtainPairController, UserAwareController):
    @route.post("/token/pair", response=TokenObtainPairOutputSchema, url_name="token_obtain_pair")
    def obtain_token(self, payload: schema.TokenObtainSchema) -> TokenObtainPairOutputSchema:  # type: ignore[override]
        """Authenticate with email and password to obtain JWT access/refresh tokens.

        Users that signed up through Google or MediaWiki and never set a password must use
        their provider's login endpoint instead.
        """
        return auth_service.obtain_token_pair(payload.username, payload.password)

    @route.post("/logout", response=ResponseMessage, url_name="logout")
    def logout(self, payload: schema.LogoutSchema) -> ResponseMessage:
        """Revoke the refresh token. The access token stays valid until it expires."""
        auth_service.logout(payload.refresh)
        return ResponseMessage(message=str(_("Logged out.")))

    @route.post("/google/login", response=TokenObtainPairOutputSchema, url_name="google_sso_login")
    def google_login(self, payload: schema.GoogleIDTokenSchema) -> TokenObtainPairOutputSchema:
        """Authenticate or register via Google using a Google ID token.

        An existing user with the same email address is linked instead of creating a new account.
        """
        return auth_service.google_login(payload.id_token)

    @route.post(
        "/link-google",
        response={200: schema.LinkedAccountSchema},
        url_name="link_google",
        auth=EventFlowJWTAuth(),
    )
    def link_google(self, payload: schema.GoogleIDTokenSchema) -> schema.LinkedAccountSchema:
        """Attach a Google account to the authenticated user.

        Returns 409 if the Google account already belongs to another user.
        """
        account = auth_service.link_google(self.user(), payload.id_token)
        return schema.LinkedAccountSchema.from_orm(account)

    @route.get("/mediawiki/authorize", response=schema.MediaWikiAuthorizeSchema, url_name="mediawiki_authorize")
    def mediawiki_authorize(self) -> schema.MediaWikiAuthorizeSchema:
        """Start a MediaWiki sign-in. Redirect the browser to the returned authorization URL."""
        return mediawiki_service.build_authorization(mediawiki_service.Intent.LOGIN)

    @route.post("/mediawiki/callback", response=TokenObtainPairOutputSchema, url_name="mediawiki_callback")
    def mediawiki_callback(self, payload: schema.MediaWikiCallbackSchema) -> TokenObtainPairOutputSchema:
        """Complete a MediaWiki sign-in with the code and state MediaWiki redirected back with."""
        return mediawiki_service.complete_login(payload.code, payload.state)

    @route.get(
        "/link-mediawiki/authorize",
        response=schema.MediaWikiAuthorizeSchema,
        url_name="mediawiki_link_authorize",
        auth=EventFlowJWTAuth(),
    )
    def mediawiki_link_authorize(self) -> schema.MediaWikiAuthorizeSchema:
        """Start linking a MediaWiki account to the authenticated user."""
        return mediawiki_service.build_authorization(mediawiki_service.Intent.LINK, self.user())

    @route.post(
        "/link-mediawiki",
        response={200: schema.LinkedAccountSchema},
        url_name="link_mediawiki",
        auth=EventFlowJWTAuth(),
    )
    def link_mediawiki(self, payload: schema.MediaWikiCallbackSchema) -> schema.LinkedAccountSchema:
        """Complete linking a MediaWiki account.

        Returns 409 if the MediaWiki account or username already belongs to another user.
        """
        account = mediawiki_service.complete_link(self.user(), payload.code, payload.state)
        return schema.LinkedAccountSchema.from_orm(account)

    @route.get(
        "/accounts",
        response=schema.LinkedAccountsResponse,
        url_name="linked_accounts",
        auth=EventFlowJWTAuth(),
    )
    def linked_accounts(self) -> schema.LinkedAccountsResponse:
        """List the sign-in methods of the authenticated user."""
        return account_service.get_linked_accounts(self.user())

    @route.post(
        "/unlink-account",
        response=ResponseMessage,
        url_name="unlink_account",
        auth=EventFlowJWTAuth(),
    )
    def unlink_account(self, payload: schema.UnlinkAccountSchema) -> ResponseMessage:
        """Remove a sign-in method (`password`, `google` or `mediawiki`).

        The last remaining method cannot be removed.
        """
        account_service.unlink_account(self.user(), payload.provider)
        return ResponseMessage(message=str(_("Account unlinked successfully.")))

    @route.get(
        "/check-admin",
        response=schema.CheckAdminResponse,
        url_name="check_admin",
        auth=EventFlowJWTAuth(),
    )
    def check_admin(self) -> schema.CheckAdminResponse:
        """Whether the authenticated user holds the platform admin role."""
        user: EventFlowUser = self.user()
        return schema.CheckAdminResponse(is_admin=user.is_platform_admin)
