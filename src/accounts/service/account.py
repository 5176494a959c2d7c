"""Service layer for account management and email verification."""

import typing as t

import structlog
from django.conf import settings
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from ninja.errors import HttpError

from accounts import schema, tasks
from accounts.exceptions import EmailAlreadyInUseError
from accounts.models import EventFlowUser, LinkedAccount, VerificationToken

logger = structlog.get_logger(__name__)

PASSWORD_PROVIDER = "password"
GENERIC_RESEND_MESSAGE = _("If an account with this email exists, a verification email has been sent.")


def register_user(payload: schema.RegisterUserSchema) -> EventFlowUser:
    """Register a new email/password user and send a verification email.

    Args:
        payload (schema.RegisterUserSchema): The user data.

    Returns:
        EventFlowUser: The newly created user.
    """
    email = payload.email.lower()
    logger.info("user_registration_started", email=email)
    if existing_user := EventFlowUser.objects.filter(email=email).first():
        if not existing_user.email_verified:
            logger.info("user_registration_duplicate_unverified", email=email)
            send_verification_email_for_user(existing_user)
        logger.warning("user_registration_duplicate", email=email)
        raise HttpError(400, str(_("A user with this email already exists.")))
    candidate = EventFlowUser(username=email, email=email, name=payload.name)
    try:
        validate_password(payload.password1, user=candidate)
    except ValidationError as e:
        raise HttpError(400, " ".join(e.messages)) from e
    new_user = EventFlowUser.objects.create_user(
        username=email,
        email=email,
        password=payload.password1,
        name=payload.name,
    )
    logger.info("user_registration_completed", user_id=str(new_user.id), email=new_user.email)
    send_verification_email_for_user(new_user)
    return new_user


def issue_verification_token(email: str) -> VerificationToken:
    """Replace any previous verification token for the address with a fresh one."""
    VerificationToken.objects.filter(identifier=email).delete()
    return VerificationToken.objects.create(identifier=email)


def send_verification_email_for_user(user: EventFlowUser) -> VerificationToken:
    """Create a verification token for the user's email and send the verification link."""
    email = t.cast(str, user.email)
    logger.info("verification_email_requested", user_id=str(user.id), email=email)
    token = issue_verification_token(email)
    tasks.send_verification_email.delay(email, token.value)
    return token


@transaction.atomic
def add_email(user: EventFlowUser, raw_email: str) -> EventFlowUser:
    """Attach a real email address to a user that only has a placeholder (or none).

    Raises:
        HttpError: 400 if the address is invalid or the user already has a real email.
        EmailAlreadyInUseError: if another user owns the address.
    """
    email = raw_email.strip().lower()
    try:
        validate_email(email)
    except ValidationError as e:
        raise HttpError(400, str(_("Please provide a valid email address."))) from e
    if user.has_real_email:
        logger.warning("add_email_rejected_existing_email", user_id=str(user.id))
        raise HttpError(400, str(_("You already have an email address.")))
    if EventFlowUser.objects.filter(email=email).exclude(pk=user.pk).exists():
        logger.warning("add_email_conflict", user_id=str(user.id), email=email)
        raise EmailAlreadyInUseError(email)

    user.email = email
    user.username = email
    user.email_verified = False
    user.email_verified_at = None
    user.save(update_fields=["email", "username", "email_verified", "email_verified_at"])
    logger.info("email_added", user_id=str(user.id), email=email)
    send_verification_email_for_user(user)
    return user


def verify_email(token_value: str, email: str) -> EventFlowUser:
    """Verify an email address with the token sent to it.

    Expired tokens are removed on sight.

    Raises:
        HttpError: 400 if the token is unknown, expired, or the user no longer exists.
    """
    email = email.strip().lower()
    token = VerificationToken.objects.filter(identifier=email, value=token_value).first()
    if token is None:
        logger.warning("email_verification_invalid_token", email=email)
        raise HttpError(400, str(_("Invalid or expired verification token.")))
    if token.is_expired:
        token.delete()
        logger.warning("email_verification_expired_token", email=email)
        raise HttpError(400, str(_("Invalid or expired verification token.")))

    user = EventFlowUser.objects.filter(email=email).first()
    if user is None:
        token.delete()
        logger.warning("email_verification_failed_user_not_found", email=email)
        raise HttpError(400, str(_("A user with this email no longer exists.")))

    with transaction.atomic():
        user.mark_email_verified()
        user.save(update_fields=["email_verified", "email_verified_at"])
        token.delete()
    logger.info("email_verified", user_id=str(user.id), email=email)
    return user


def resend_verification_email(raw_email: str) -> str:
    """Send a new verification link to the address, if it belongs to an unverified user.

    Returns:
        The message to show to the caller. Unknown addresses get the same generic answer
        as successful sends, to prevent user enumeration.
    """
    email = raw_email.strip().lower()
    if not email:
        raise HttpError(400, str(_("Email is required.")))
    user = EventFlowUser.objects.filter(email=email).first()
    if user is None:
        logger.info("verification_resend_user_not_found", email=email)
        return str(GENERIC_RESEND_MESSAGE)
    if user.email_verified:
        logger.info("verification_resend_already_verified", user_id=str(user.id))
        return str(_("Email is already verified."))
    send_verification_email_for_user(user)
    return str(GENERIC_RESEND_MESSAGE)


def skip_email(user: EventFlowUser) -> EventFlowUser:
    """Remember that the user chose to continue without an email address."""
    user.email_skipped_at = timezone.now()
    user.save(update_fields=["email_skipped_at"])
    logger.info("email_entry_skipped", user_id=str(user.id))
    return user


def update_profile(user: EventFlowUser, payload: schema.ProfileUpdateSchema) -> EventFlowUser:
    """Update the editable profile fields that were provided."""
    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "image" in data:
        data["image"] = str(data["image"])
    for key, value in data.items():
        setattr(user, key, value)
    user.save(update_fields=list(data.keys()))
    logger.info("profile_updated", user_id=str(user.id), fields=list(data.keys()))
    return user


def get_linked_accounts(user: EventFlowUser) -> schema.LinkedAccountsResponse:
    """Summarize the identity providers the user can sign in with."""
    accounts = list(user.linked_accounts.order_by("created_at"))
    providers = {account.provider for account in accounts}
    return schema.LinkedAccountsResponse(
        linked_accounts=[schema.LinkedAccountSchema.from_orm(account) for account in accounts],
        has_google=LinkedAccount.Provider.GOOGLE in providers,
        has_mediawiki=LinkedAccount.Provider.MEDIAWIKI in providers,
        has_password=user.has_usable_password(),
    )


def count_auth_methods(user: EventFlowUser) -> int:
    """The number of ways the user can currently sign in."""
    return user.linked_accounts.count() + int(user.has_usable_password())


@transaction.atomic
def unlink_account(user: EventFlowUser, provider: str) -> None:
    """Remove a sign-in method from the user.

    The last remaining method can never be removed.

    Raises:
        HttpError: 400 for a missing/unknown provider or when it is the only method, 404 if not linked.
    """
    if not provider:
        raise HttpError(400, str(_("Provider is required.")))
    if provider != PASSWORD_PROVIDER and provider not in LinkedAccount.Provider.values:
        raise HttpError(400, str(_("Unknown provider.")))
    user = EventFlowUser.objects.select_for_update().get(pk=user.pk)
    if count_auth_methods(user) <= 1:
        logger.warning("unlink_only_auth_method_rejected", user_id=str(user.id), provider=provider)
        raise HttpError(400, str(_("Cannot unlink your only authentication method.")))

    if provider == PASSWORD_PROVIDER:
        if not user.has_usable_password():
            raise HttpError(404, str(_("No password is set for this account.")))
        user.set_unusable_password()
        user.save(update_fields=["password"])
        logger.info("password_unlinked", user_id=str(user.id))
        return

    deleted, _deleted_by_model = LinkedAccount.objects.filter(user=user, provider=provider).delete()
    if not deleted:
        raise HttpError(404, str(_("This provider is not linked to your account.")))
    if provider == LinkedAccount.Provider.MEDIAWIKI:
        user.mediawiki_username = None
        user.mediawiki_username_verified_at = None
        user.save(update_fields=["mediawiki_username", "mediawiki_username_verified_at"])
    logger.info("account_unlinked", user_id=str(user.id), provider=provider)


def get_profile_completion(user: EventFlowUser) -> schema.ProfileCompletionSchema:
    """Compute how complete the user's profile is and what they could add next."""
    providers = set(user.linked_accounts.values_list("provider", flat=True))
    has_google = LinkedAccount.Provider.GOOGLE in providers
    has_mediawiki = LinkedAccount.Provider.MEDIAWIKI in providers
    has_password = user.has_usable_password()
    is_google_user = has_google and not has_mediawiki and not has_password
    is_mediawiki_user = has_mediawiki and not has_google and not has_password
    is_password_user = has_password and not has_google and not has_mediawiki

    missing_fields: list[str] = []
    recommendations: list[str] = []
    completed = 0
    total_fields = 5
    link_mediawiki = str(_("Link your MediaWiki account to connect your Wikipedia contributions"))

    if not user.has_real_email:
        missing_fields.append("email")
        if is_mediawiki_user:
            recommendations.append(str(_("Add your email address to receive notifications and account recovery")))
    elif not user.email_verified:
        recommendations.append(str(_("Verify your email address")))
    else:
        completed += 1

    if not user.mediawiki_username:
        missing_fields.append("mediawiki_username")
        if is_google_user or is_password_user:
            recommendations.append(link_mediawiki)
    else:
        completed += 1

    if not user.name:
        missing_fields.append("name")
        recommendations.append(str(_("Add your display name")))
    else:
        completed += 1

    if not user.image:
        recommendations.append(str(_("Add a profile picture")))
    else:
        completed += 1

    if not user.bio:
        recommendations.append(str(_("Add a bio to tell others about yourself")))
    else:
        completed += 1

    if is_password_user:
        recommendations.append(str(_("Link your Google account for easier sign-in")))

    is_complete = not missing_fields and (user.email_verified or not user.has_real_email)
    return schema.ProfileCompletionSchema(
        is_complete=is_complete,
        missing_fields=missing_fields,
        recommendations=list(dict.fromkeys(recommendations)),
        completion_percentage=round(completed / total_fields * 100),
        should_complete_profile=should_complete_profile(user),
    )


def should_complete_profile(user: EventFlowUser) -> bool:
    """Users that only have a placeholder email are asked for a real one until they skip it."""
    return (user.email is None or user.has_placeholder_email) and user.email_skipped_at is None


def verification_redirect_url(error: str | None = None) -> str:
    """Frontend page the browser lands on after clicking a verification link."""
    if error is None:
        return f"{settings.FRONTEND_BASE_URL}/dashboard"
    return f"{settings.FRONTEND_BASE_URL}/auth/verify-email?error={error}"
