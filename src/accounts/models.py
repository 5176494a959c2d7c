import secrets
import typing as t
import uuid
import zoneinfo

from django.conf import settings
from django.contrib.auth.models import AbstractUser, UserManager
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from common.models import TimeStampedModel


def validate_timezone(value: str) -> None:
    """Validate that the value is a known IANA time zone."""
    try:
        zoneinfo.ZoneInfo(value)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError) as e:
        raise ValidationError(f"'{value}' is not a valid time zone.") from e


def placeholder_email_for(mediawiki_username: str) -> str:
    """Build the placeholder address assigned to users that only signed in through MediaWiki."""
    return f"mediawiki-{mediawiki_username}@{settings.PLACEHOLDER_EMAIL_DOMAIN}".lower().replace(" ", "_")


def is_placeholder_email(email: str | None) -> bool:
    """Whether the email is a placeholder rather than a real address."""
    return email is not None and email.lower().endswith(f"@{settings.PLACEHOLDER_EMAIL_DOMAIN}")


class EventFlowUserQueryset(models.QuerySet["EventFlowUser"]):
    """Queryset for EventFlowUser."""

    def with_real_email(self) -> t.Self:
        """Exclude users without an email or with a placeholder one."""
        return self.exclude(email__isnull=True).exclude(email__iendswith=f"@{settings.PLACEHOLDER_EMAIL_DOMAIN}")


class EventFlowUserManager(UserManager["EventFlowUser"]):
    def get_queryset(self) -> EventFlowUserQueryset:
        """Get queryset for EventFlowUser."""
        return EventFlowUserQueryset(self.model, using=self._db)

    def with_real_email(self) -> EventFlowUserQueryset:
        """Users that have a real email address."""
        return self.get_queryset().with_real_email()


class EventFlowUser(AbstractUser):
    class Role(models.TextChoices):
        USER = "user", "User"
        ADMIN = "admin", "Admin"

    class UserType(models.TextChoices):
        REGISTERED_USER = "registered_user", "Registered user"
        PREMIUM_SUBSCRIBER = "premium_subscriber", "Premium subscriber"
        PLATFORM_ADMIN = "platform_admin", "Platform admin"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, null=True, blank=True)
    name = models.CharField(max_length=255, blank=True, db_index=True, help_text="Display name")
    image = models.URLField(max_length=2048, blank=True, help_text="Profile picture URL")
    bio = models.TextField(blank=True)
    timezone = models.CharField(max_length=64, default="UTC", validators=[validate_timezone])
    email_verified = models.BooleanField(default=False)
    email_verified_at = models.DateTimeField(null=True, blank=True)
    email_skipped_at = models.DateTimeField(
        null=True, blank=True, help_text="When the user chose to continue without adding an email"
    )
    mediawiki_username = models.CharField(max_length=255, unique=True, null=True, blank=True)
    mediawiki_username_verified_at = models.DateTimeField(null=True, blank=True)
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.USER, db_index=True)
    user_type = models.CharField(
        max_length=32, choices=UserType.choices, default=UserType.REGISTERED_USER, db_index=True
    )

    objects = EventFlowUserManager()  # type: ignore[misc]

    class Meta:
        ordering = ["username"]

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Normalize empty emails to NULL so the unique constraint ignores them."""
        if not self.email:
            self.email = None
        else:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.display_name

    @property
    def display_name(self) -> str:
        """Display name."""
        return self.name or self.get_full_name() or self.mediawiki_username or self.username

    @property
    def has_placeholder_email(self) -> bool:
        """Whether the user only has a placeholder address."""
        return is_placeholder_email(self.email)

    @property
    def has_real_email(self) -> bool:
        """Whether the user has an actual email address."""
        return bool(self.email) and not self.has_placeholder_email

    @property
    def is_platform_admin(self) -> bool:
        """Platform admins review subscription requests and may manage any event."""
        return self.role == self.Role.ADMIN

    def mark_email_verified(self) -> None:
        """Flag the current email as verified."""
        self.email_verified = True
        self.email_verified_at = timezone.now()


class LinkedAccount(TimeStampedModel):
    """An external identity provider account linked to a user."""

    class Provider(models.TextChoices):
        GOOGLE = "google", "Google"
        MEDIAWIKI = "mediawiki", "MediaWiki"

    class AccountType(models.TextChoices):
        OAUTH = "oauth", "OAuth"

    user = models.ForeignKey(EventFlowUser, on_delete=models.CASCADE, related_name="linked_accounts")
    provider = models.CharField(max_length=20, choices=Provider.choices, db_index=True)
    provider_account_id = models.CharField(max_length=255)
    type = models.CharField(max_length=20, choices=AccountType.choices, default=AccountType.OAUTH)
    access_token = models.TextField(blank=True)
    refresh_token = models.TextField(blank=True)
    id_token = models.TextField(blank=True)
    access_token_expires_at = models.DateTimeField(null=True, blank=True)
    scope = models.CharField(max_length=512, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["provider", "provider_account_id"], name="unique_provider_account"),
            models.UniqueConstraint(fields=["user", "provider"], name="unique_provider_per_user"),
        ]

    def __str__(self) -> str:
        return f"{self.provider}:{self.provider_account_id}"


def _generate_token_value() -> str:
    return secrets.token_hex(32)


def _default_token_expiry() -> t.Any:
    return timezone.now() + settings.VERIFICATION_TOKEN_LIFETIME


class VerificationTokenQuerySet(models.QuerySet["VerificationToken"]):
    def valid(self) -> t.Self:
        """Tokens that have not expired yet."""
        return self.filter(expires_at__gt=timezone.now())


class VerificationToken(TimeStampedModel):
    """Single-use token sent by email to confirm ownership of an address."""

    identifier = models.EmailField(db_index=True)
    value = models.CharField(max_length=64, unique=True, default=_generate_token_value)
    expires_at = models.DateTimeField(default=_default_token_expiry)

    objects = VerificationTokenQuerySet.as_manager()

    def __str__(self) -> str:
        return f"Verification token for {self.identifier}"

    @property
    def is_expired(self) -> bool:
        """Whether the token can no longer be used."""
        return self.expires_at <= timezone.now()
