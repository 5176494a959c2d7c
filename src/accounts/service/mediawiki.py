"""MediaWiki OAuth 2 sign-in and account linking.

The flow is the standard authorization-code grant with PKCE:

1. ``build_authorization`` creates a random ``state`` and ``code_verifier``; the verifier is
   cached under the state and the browser is sent to the authorization URL.
2. MediaWiki redirects back with ``code`` and ``state``; ``complete_login`` or
   ``complete_link`` pops the verifier, exchanges the code for tokens and reads the profile.

MediaWiki does not reliably expose an email address, so users created from a MediaWiki
profile get a placeholder address until they add a real one.
"""

import base64
import hashlib
import secrets
import typing as t
from datetime import timedelta
from urllib.parse import urlencode
from uuid import UUID

import httpx
import structlog
from django.conf import settings
from django.core.cache import cache
from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from ninja.errors import HttpError
from ninja_jwt.schema import TokenObtainPairOutputSchema
from pydantic import BaseModel, ValidationError

from accounts import schema
from accounts.exceptions import AccountAlreadyLinkedError, MediaWikiOAuthError
from accounts.models import EventFlowUser, LinkedAccount, placeholder_email_for
from accounts.service.auth import get_token_pair_for_user

logger = structlog.get_logger(__name__)

STATE_CACHE_PREFIX = "mediawiki-oauth-state"


class Intent:
    LOGIN = "login"
    LINK = "link"


class PendingAuthorization(BaseModel):
    code_verifier: str
    intent: str
    user_id: UUID | None = None


class MediaWikiEndpoints(t.NamedTuple):
    authorization: str
    token: str
    profile: str


def get_endpoints() -> MediaWikiEndpoints:
    """The OAuth 2 endpoints of the configured wiki."""
    base_url = settings.MEDIAWIKI_BASE_URL
    return MediaWikiEndpoints(
        authorization=f"{base_url}/w/rest.php/oauth2/authorize",
        token=f"{base_url}/w/rest.php/oauth2/access_token",
        profile=f"{base_url}/w/rest.php/oauth2/resource/profile",
    )


def _code_challenge(code_verifier: str) -> str:
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def _cache_key(state: str) -> str:
    return f"{STATE_CACHE_PREFIX}:{state}"


def build_authorization(
    intent: str = Intent.LOGIN, user: EventFlowUser | None = None
) -> schema.MediaWikiAuthorizeSchema:
    """Start an authorization: remember the PKCE verifier and return the URL to redirect to."""
    state = secrets.token_urlsafe(32)
    code_verifier = secrets.token_urlsafe(64)
    pending = PendingAuthorization(code_verifier=code_verifier, intent=intent, user_id=user.id if user else None)
    cache.set(_cache_key(state), pending.model_dump(mode="json"), timeout=settings.MEDIAWIKI_STATE_LIFETIME_SECONDS)
    params = {
        "response_type": "code",
        "client_id": settings.MEDIAWIKI_CLIENT_ID,
        "redirect_uri": settings.MEDIAWIKI_REDIRECT_URI,
        "state": state,
        "code_challenge": _code_challenge(code_verifier),
        "code_challenge_method": "S256",
    }
    if settings.MEDIAWIKI_SCOPES:
        params["scope"] = " ".join(settings.MEDIAWIKI_SCOPES)
    logger.info("mediawiki_authorization_started", intent=intent, user_id=str(user.id) if user else None)
    return schema.MediaWikiAuthorizeSchema(
        authorization_url=f"{get_endpoints().authorization}?{urlencode(params)}",
        state=state,
    )


def _pop_pending(state: str) -> PendingAuthorization:
    key = _cache_key(state)
    data = cache.get(key)
    if data is None:
        logger.warning("mediawiki_unknown_state")
        raise MediaWikiOAuthError("Unknown or expired OAuth state.")
    cache.delete(key)
    return PendingAuthorization.model_validate(data)


def _client() -> httpx.Client:
    return httpx.Client(
        timeout=settings.MEDIAWIKI_HTTP_TIMEOUT,
        headers={"User-Agent": settings.MEDIAWIKI_USER_AGENT, "Accept": "application/json"},
    )


def exchange_code(code: str, code_verifier: str) -> schema.MediaWikiTokenResponse:
    """Exchange an authorization code for tokens."""
    data = {
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": settings.MEDIAWIKI_REDIRECT_URI,
        "client_id": settings.MEDIAWIKI_CLIENT_ID,
        "client_secret": settings.MEDIAWIKI_CLIENT_SECRET,
        "code_verifier": code_verifier,
    }
    try:
        with _client() as client:
            response = client.post(get_endpoints().token, data=data)
            response.raise_for_status()
            return schema.MediaWikiTokenResponse.model_validate(response.json())
    except httpx.HTTPStatusError as e:
        logger.warning("mediawiki_token_exchange_failed", status_code=e.response.status_code)
        raise MediaWikiOAuthError("Could not exchange the authorization code.") from e
    except (httpx.HTTPError, ValueError, ValidationError) as e:
        logger.warning("mediawiki_token_exchange_error", error=str(e))
        raise MediaWikiOAuthError("Could not exchange the authorization code.") from e


def fetch_profile(access_token: str) -> schema.MediaWikiProfile:
    """Read the profile of the user the access token belongs to."""
    try:
        with _client() as client:
            response = client.get(get_endpoints().profile, headers={"Authorization": f"Bearer {access_token}"})
            response.raise_for_status()
            payload = response.json()
    except httpx.HTTPStatusError as e:
        logger.warning("mediawiki_profile_fetch_failed", status_code=e.response.status_code)
        raise MediaWikiOAuthError("Could not fetch the MediaWiki profile.") from e
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("mediawiki_profile_fetch_error", error=str(e))
        raise MediaWikiOAuthError("Could not fetch the MediaWiki profile.") from e
    try:
        return schema.MediaWikiProfile.model_validate(payload)
    except ValidationError as e:
        logger.warning("mediawiki_profile_incomplete", keys=sorted(payload) if isinstance(payload, dict) else None)
        raise MediaWikiOAuthError("The MediaWiki profile is missing the user id or username.") from e


def _store_account(
    user: EventFlowUser, profile: schema.MediaWikiProfile, tokens: schema.MediaWikiTokenResponse
) -> LinkedAccount:
    expires_at = timezone.now() + timedelta(seconds=tokens.expires_in) if tokens.expires_in else None
    account, _created = LinkedAccount.objects.update_or_create(
        provider=LinkedAccount.Provider.MEDIAWIKI,
        provider_account_id=profile.sub,
        defaults={
            "user": user,
            "access_token": tokens.access_token,
            "refresh_token": tokens.refresh_token,
            "access_token_expires_at": expires_at,
            "scope": tokens.scope,
        },
    )
    return account


def _set_mediawiki_username(user: EventFlowUser, username: str) -> None:
    if EventFlowUser.objects.filter(mediawiki_username=username).exclude(pk=user.pk).exists():
        logger.warning("mediawiki_username_taken", user_id=str(user.pk), mediawiki_username=username)
        raise AccountAlreadyLinkedError(LinkedAccount.Provider.MEDIAWIKI)
    user.mediawiki_username = username
    user.mediawiki_username_verified_at = timezone.now()


def _resolve_user(profile: schema.MediaWikiProfile) -> EventFlowUser:
    if account := LinkedAccount.objects.select_related("user").filter(
        provider=LinkedAccount.Provider.MEDIAWIKI, provider_account_id=profile.sub
    ).first():
        return account.user
    if user := EventFlowUser.objects.filter(mediawiki_username=profile.username).first():
        return user
    if profile.email and profile.confirmed_email:
        # an existing user with the same real address is linked, keeping their email
        if user := EventFlowUser.objects.with_real_email().filter(email=profile.email.lower()).first():
            logger.info("mediawiki_linked_by_email", user_id=str(user.id))
            return user
    email = placeholder_email_for(profile.username)
    # placeholder address left behind by an unlinked MediaWiki account
    if user := EventFlowUser.objects.filter(Q(username=email) | Q(email=email)).first():
        logger.info("mediawiki_relinked_by_placeholder", user_id=str(user.id))
        return user
    user = EventFlowUser(
        username=email,
        email=email,
        name=profile.realname or profile.username,
        email_verified=False,
    )
    user.set_unusable_password()
    user.save()
    logger.info("mediawiki_user_created", user_id=str(user.id), mediawiki_username=profile.username)
    return user


def _authorize(
    code: str, state: str, intent: str
) -> tuple[PendingAuthorization, schema.MediaWikiTokenResponse, schema.MediaWikiProfile]:
    pending = _pop_pending(state)
    if pending.intent != intent:
        logger.warning("mediawiki_state_intent_mismatch", expected=intent, actual=pending.intent)
        raise MediaWikiOAuthError("Unknown or expired OAuth state.")
    tokens = exchange_code(code, pending.code_verifier)
    profile = fetch_profile(tokens.access_token)
    return pending, tokens, profile


def complete_login(code: str, state: str) -> TokenObtainPairOutputSchema:
    """Finish a MediaWiki sign-in and return a token pair for the resolved user."""
    _pending, tokens, profile = _authorize(code, state, Intent.LOGIN)
    with transaction.atomic():
        user = _resolve_user(profile)
        _set_mediawiki_username(user, profile.username)
        user.save()
        _store_account(user, profile, tokens)
    logger.info("mediawiki_login", user_id=str(user.id), mediawiki_username=profile.username)
    return get_token_pair_for_user(user)


def complete_link(user: EventFlowUser, code: str, state: str) -> LinkedAccount:
    """Finish linking a MediaWiki account to the authenticated user.

    Raises:
        HttpError: 400 if the state was issued to someone else or a MediaWiki account is already linked.
        AccountAlreadyLinkedError: if the MediaWiki account or username belongs to another user.
    """
    pending, tokens, profile = _authorize(code, state, Intent.LINK)
    if pending.user_id != user.id:
        logger.warning("mediawiki_link_state_user_mismatch", user_id=str(user.id))
        raise HttpError(400, str(_("This authorization was started by another user.")))
    with transaction.atomic():
        existing = LinkedAccount.objects.filter(
            provider=LinkedAccount.Provider.MEDIAWIKI, provider_account_id=profile.sub
        ).first()
        if existing and existing.user_id != user.id:
            logger.warning("mediawiki_link_conflict", user_id=str(user.id), other_user_id=str(existing.user_id))
            raise AccountAlreadyLinkedError(LinkedAccount.Provider.MEDIAWIKI)
        if not existing and user.linked_accounts.filter(provider=LinkedAccount.Provider.MEDIAWIKI).exists():
            raise HttpError(400, str(_("A MediaWiki account is already linked.")))
        _set_mediawiki_username(user, profile.username)
        user.save(update_fields=["mediawiki_username", "mediawiki_username_verified_at"])
        account = _store_account(user, profile, tokens)
    logger.info("mediawiki_account_linked", user_id=str(user.id), mediawiki_username=profile.username)
    return account
