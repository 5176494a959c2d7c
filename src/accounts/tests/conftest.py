import typing as t

import pytest

from accounts import schema
from accounts.models import EventFlowUser, LinkedAccount, placeholder_email_for


@pytest.fixture
def valid_register_payload() -> schema.RegisterUserSchema:
    """Provides a valid payload for the user registration endpoint."""
    return schema.RegisterUserSchema(
        email="newuser@example.com",
        password1="a-Strong-password-123!",
        password2="a-Strong-password-123!",
        name="New User",
    )


@pytest.fixture
def unverified_user(django_user_model: t.Type[EventFlowUser]) -> EventFlowUser:
    """A user whose email is not yet verified."""
    return django_user_model.objects.create_user(
        username="unverified@example.com",
        email="unverified@example.com",
        password="strong-password-123!",
        email_verified=False,
    )


@pytest.fixture
def mediawiki_user(django_user_model: t.Type[EventFlowUser]) -> EventFlowUser:
    """A user that signed up through MediaWiki and only has a placeholder email."""
    user = django_user_model(
        username=placeholder_email_for("WikiEditor"),
        email=placeholder_email_for("WikiEditor"),
        name="Wiki Editor",
        mediawiki_username="WikiEditor",
    )
    user.set_unusable_password()
    user.save()
    LinkedAccount.objects.create(user=user, provider=LinkedAccount.Provider.MEDIAWIKI, provider_account_id="4242")
    return user


@pytest.fixture
def google_user(django_user_model: t.Type[EventFlowUser]) -> EventFlowUser:
    """A user who signed up via Google and has no password."""
    user = django_user_model(
        username="googleuser@example.com",
        email="googleuser@example.com",
        name="Google User",
        email_verified=True,
    )
    user.set_unusable_password()
    user.save()
    LinkedAccount.objects.create(user=user, provider=LinkedAccount.Provider.GOOGLE, provider_account_id="g-123")
    return user


@pytest.fixture
def google_id_info() -> schema.GoogleIDInfo:
    return schema.GoogleIDInfo(
        email="Jane.Doe@example.com",
        email_verified=True,
        name="Jane Doe",
        given_name="Jane",
        family_name="Doe",
        sub="google-sub-1",
        picture="https://example.com/jane.png",
    )


@pytest.fixture
def mediawiki_tokens() -> schema.MediaWikiTokenResponse:
    return schema.MediaWikiTokenResponse(
        access_token="mw-access",
        refresh_token="mw-refresh",
        expires_in=3600,
        scope="basic",
    )


@pytest.fixture
def mediawiki_profile() -> schema.MediaWikiProfile:
    return schema.MediaWikiProfile.model_validate(
        {"sub": 4242, "username": "WikiEditor", "realname": "Wiki Editor", "editcount": 1200}
    )
