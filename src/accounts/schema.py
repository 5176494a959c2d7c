"""Schema for accounts module."""

import datetime
import typing as t
import zoneinfo

from ninja import ModelSchema, Schema
from pydantic import UUID4, EmailStr, Field, HttpUrl, field_validator, model_validator

from common.schema import StrippedString

from .models import EventFlowUser, LinkedAccount


class EventFlowUserSchema(ModelSchema):
    id: UUID4
    email: str | None
    display_name: str
    has_placeholder_email: bool
    is_platform_admin: bool

    class Meta:
        model = EventFlowUser
        fields = [
            "email",
            "email_verified",
            "email_verified_at",
            "email_skipped_at",
            "name",
            "image",
            "bio",
            "timezone",
            "mediawiki_username",
            "mediawiki_username_verified_at",
            "role",
            "user_type",
        ]


class MinimalUserSchema(ModelSchema):
    id: UUID4
    display_name: str

    class Meta:
        model = EventFlowUser
        fields = ["name", "image", "mediawiki_username"]


class ContactUserSchema(ModelSchema):
    """User info shown to organizers and community admins."""

    id: UUID4
    email: str | None
    display_name: str

    class Meta:
        model = EventFlowUser
        fields = ["name", "image", "mediawiki_username"]


class PasswordMixin(Schema):
    password1: str = Field(..., description="Password", min_length=8, max_length=150)
    password2: str = Field(..., description="Password confirmation", min_length=8, max_length=150)

    @model_validator(mode="after")
    def password_match(self) -> t.Self:
        """Validate that the passwords match."""
        if self.password1 != self.password2:
            raise ValueError("Passwords do not match")
        return self


class RegisterUserSchema(PasswordMixin):
    email: EmailStr
    name: StrippedString = Field("", max_length=255)


class ProfileUpdateSchema(Schema):
    name: StrippedString | None = Field(None, max_length=255)
    bio: StrippedString | None = None
    image: HttpUrl | None = None
    timezone: str | None = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str | None) -> str | None:
        """Only accept IANA time zones."""
        if value is None:
            return value
        try:
            zoneinfo.ZoneInfo(value)
        except (zoneinfo.ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"'{value}' is not a valid time zone.") from e
        return value


class AddEmailSchema(Schema):
    # Validated in the service so that an invalid address is a 400, not a 422
    email: StrippedString = ""


class ResendVerificationSchema(Schema):
    email: StrippedString = ""


class UnlinkAccountSchema(Schema):
    provider: StrippedString = ""


class LogoutSchema(Schema):
    refresh: str


class GoogleIDTokenSchema(Schema):
    id_token: str = Field(..., description="The Google ID token to verify.")


class GoogleIDInfo(Schema):
    email: str = ""
    email_verified: bool = False
    name: str = ""
    given_name: str = ""
    family_name: str = ""
    sub: str = ""
    picture: str = ""
    locale: str = ""


class MediaWikiAuthorizeSchema(Schema):
    authorization_url: str
    state: str


class MediaWikiCallbackSchema(Schema):
    code: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)


class MediaWikiTokenResponse(Schema):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int | None = None
    refresh_token: str = ""
    scope: str = ""


class MediaWikiProfile(Schema):
    """Profile returned by the MediaWiki OAuth 2 resource endpoint."""

    sub: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1)
    realname: str = ""
    email: str = ""
    confirmed_email: bool = False
    editcount: int | None = None

    @field_validator("sub", mode="before")
    @classmethod
    def coerce_sub(cls, value: t.Any) -> t.Any:
        """MediaWiki returns the central user id as a number."""
        return str(value) if isinstance(value, int) else value


class LinkedAccountSchema(ModelSchema):
    account_id: str = Field(..., alias="provider_account_id")

    class Meta:
        model = LinkedAccount
        fields = ["provider", "type", "created_at"]


class LinkedAccountsResponse(Schema):
    linked_accounts: list[LinkedAccountSchema]
    has_google: bool
    has_mediawiki: bool
    has_password: bool


class CheckAdminResponse(Schema):
    is_admin: bool


class ProfileCompletionSchema(Schema):
    is_complete: bool
    missing_fields: list[str]
    recommendations: list[str]
    completion_percentage: int
    should_complete_profile: bool


class EmailChangeResponse(Schema):
    message: str
    email: str
    email_verified: bool
    email_skipped_at: datetime.datetime | None = None


class TokenObtainSchema(Schema):
    username: str = Field(..., description="The email address (or username) of the account.")
    password: str
