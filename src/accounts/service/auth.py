"""Authentication service layer: token pairs, Google sign-in and account linking."""

import typing as t

import structlog
from django.conf import settings
from django.contrib.auth import authenticate
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.id_token import verify_oauth2_token as _verify_oauth2_token
from ninja.errors import HttpError
from ninja_jwt.exceptions import TokenError
from ninja_jwt.schema import TokenObtainPairOutputSchema
from ninja_jwt.tokens import RefreshToken

from accounts import schema
from accounts.exceptions import AccountAlreadyLinkedError, EmailAlreadyInUseError
from accounts.models import EventFlowUser, LinkedAccount

logger = structlog.get_logger(__name__)


def get_token_pair_for_user(user: EventFlowUser) -> TokenObtainPairOutputSchema:
    """Get a token pair for the user."""
    user.last_login = timezone.now()
    user.save(update_fields=["last_login"])

    logger.info("token_pair_generated", user_id=str(user.id))
    token = RefreshToken.for_user(user)
    token.payload.update(
        {
            "sub": str(user.id),
            "email": user.email,
            "name": user.display_name,
            "role": user.role,
            "user_type": user.user_type,
            "email_verified": user.email_verified,
        }
    )
    return TokenObtainPairOutputSchema(
        username=user.username,
        access=str(token.access_token),  # type: ignore[attr-defined]
        refresh=str(token),
    )


def logout(refresh_token: str) -> None:
    """Revoke a refresh token so it can no longer be exchanged for access tokens."""
    try:
        RefreshToken(refresh_token).blacklist()  # type: ignore[arg-type]
    except TokenError as e:
        logger.warning("logout_invalid_refresh_token", error=str(e))
        raise HttpError(401, str(_("Invalid refresh token."))) from e
    logger.info("refresh_token_blacklisted")


def verify_oauth2_token(id_token: str) -> schema.GoogleIDInfo:
    """Verify a Google ID token and return its claims."""
    try:
        id_info = _verify_oauth2_token(
            id_token,
            Request(),  # type: ignore[no-untyped-call]
            settings.GOOGLE_SSO_CLIENT_ID,
        )
        validated_info = schema.GoogleIDInfo.model_validate(id_info)
        logger.info("google_token_verified", email=validated_info.email)
        return validated_info
    except (GoogleAuthError, ValueError) as e:
        logger.warning("google_token_verification_failed", error=str(e))
        raise HttpError(401, str(_("Invalid Google ID Token."))) from e


def _store_google_account(user: EventFlowUser, id_info: schema.GoogleIDInfo, id_token: str) -> LinkedAccount:
    account, _created = LinkedAccount.objects.update_or_create(
        provider=LinkedAccount.Provider.GOOGLE,
        provider_account_id=id_info.sub,
        defaults={"user": user, "id_token": id_token},
    )
    return account


@transaction.atomic
def google_login(id_token: str) -> TokenObtainPairOutputSchema:
    """Log in or register a user using a Google ID token.

    The user is resolved through an existing Google account first and through the
    email address second, so a Google sign-in links to an existing email/password
    or MediaWiki user with the same address instead of creating a duplicate.
    Linking by address only happens when Google reports the address as verified.

    Raises:
        EmailAlreadyInUseError: if the unverified Google address belongs to another user.
    """
    id_info = verify_oauth2_token(id_token)
    if not id_info.sub or not id_info.email:
        raise HttpError(401, str(_("Invalid Google ID Token.")))
    email = id_info.email.lower()

    if account := LinkedAccount.objects.select_related("user").filter(
        provider=LinkedAccount.Provider.GOOGLE, provider_account_id=id_info.sub
    ).first():
        user = account.user
        logger.info("google_sso_login", user_id=str(user.id))
    elif user := EventFlowUser.objects.filter(email=email).first():  # type: ignore[assignment]
        if not id_info.email_verified:
            logger.warning("google_sso_unverified_email_conflict", user_id=str(user.id), google_id=id_info.sub)
            raise EmailAlreadyInUseError(email)
        logger.info("google_sso_linked_by_email", user_id=str(user.id), email=email)
    else:
        user = EventFlowUser(
            username=email,
            email=email,
            name=id_info.name or f"{id_info.given_name} {id_info.family_name}".strip(),
            first_name=id_info.given_name,
            last_name=id_info.family_name,
            image=id_info.picture,
            is_staff=id_info.email_verified and email in settings.GOOGLE_SSO_STAFF_LIST,
            is_superuser=id_info.email_verified and email in settings.GOOGLE_SSO_SUPERUSER_LIST,
        )
        user.set_unusable_password()
        logger.info("google_sso_user_created", email=email, google_id=id_info.sub)

    if id_info.email_verified and user.email == email and not user.email_verified:
        user.mark_email_verified()
    if not user.image and id_info.picture:
        user.image = id_info.picture
    user.save()
    _store_google_account(user, id_info, id_token)
    return get_token_pair_for_user(user)


@transaction.atomic
def link_google(user: EventFlowUser, id_token: str) -> LinkedAccount:
    """Attach a Google account to an already authenticated user.

    Raises:
        AccountAlreadyLinkedError: if the Google account belongs to another user.
        HttpError: 400 if the user already has a Google account linked.
    """
    id_info = verify_oauth2_token(id_token)
    existing = LinkedAccount.objects.filter(
        provider=LinkedAccount.Provider.GOOGLE, provider_account_id=id_info.sub
    ).first()
    if existing and existing.user_id != user.id:
        logger.warning("google_link_conflict", user_id=str(user.id), other_user_id=str(existing.user_id))
        raise AccountAlreadyLinkedError(LinkedAccount.Provider.GOOGLE)
    if existing or user.linked_accounts.filter(provider=LinkedAccount.Provider.GOOGLE).exists():
        raise HttpError(400, str(_("A Google account is already linked.")))

    account = _store_google_account(user, id_info, id_token)
    if id_info.email_verified and user.email and id_info.email.lower() == user.email and not user.email_verified:
        user.mark_email_verified()
        user.save(update_fields=["email_verified", "email_verified_at"])
    logger.info("google_account_linked", user_id=str(user.id))
    return account


def obtain_token_pair(username: str, password: str) -> TokenObtainPairOutputSchema:
    """Authenticate with username (the email address) and password.

    Raises:
        HttpError: 401 for bad credentials or users that can only sign in through a linked provider.
    """
    username = username.strip()
    candidate = EventFlowUser.objects.filter(username__iexact=username).first()
    if candidate is not None and not candidate.has_usable_password():
        logger.info("password_login_rejected_provider_only", user_id=str(candidate.id))
        raise HttpError(401, str(_("Login via your linked provider.")))
    user = authenticate(username=candidate.username if candidate else username, password=password)
    if user is None or not user.is_active:
        logger.info("password_login_failed")
        raise HttpError(401, str(_("No active account found with the given credentials")))
    return get_token_pair_for_user(t.cast(EventFlowUser, user))
