"""Shared fixtures for all apps."""

import secrets
import string
import typing as t
from datetime import datetime, time, timedelta
from decimal import Decimal

import faker
import pytest
from django.core.cache import cache
from django.test.client import Client
from django.utils import timezone
from ninja_jwt.tokens import RefreshToken
from pytest import MonkeyPatch

from accounts.models import EventFlowUser
from communities.models import Community, CommunityAdmin
from eventflow.celery import app as celery_app
from events.models import Event
from subscriptions.models import Subscription


@pytest.fixture(autouse=True)
def increase_rate_limit(monkeypatch: MonkeyPatch) -> None:
    """Increase the rate limits of the throttles to allow testing."""
    for throttle in (
        "AuthThrottle",
        "UserRegistrationThrottle",
        "EmailVerificationThrottle",
        "SubscriptionRequestThrottle",
        "WriteThrottle",
    ):
        monkeypatch.setattr(f"common.throttling.{throttle}.rate", "1000/min")


@pytest.fixture(autouse=True)
def enable_celery_eager_mode(settings: t.Any) -> None:
    """Enable Celery eager mode for tests so tasks execute synchronously."""
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True
    celery_app.conf.task_always_eager = True
    celery_app.conf.task_eager_propagates = True
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"


@pytest.fixture(autouse=True)
def clear_cache() -> None:
    """Start every test with an empty cache (throttle counters, OAuth states)."""
    cache.clear()


class EventFlowUserFactory:
    """Factory for creating EventFlowUser instances for testing."""

    fake = faker.Faker()

    def create_user(self, **kwargs: t.Any) -> EventFlowUser:
        username = kwargs.pop(
            "username", "".join(secrets.choice(string.ascii_lowercase) for _ in range(8)) + "@user.test"
        )
        email = kwargs.pop("email", username + ("@test.com" if "@" not in username else ""))
        password = kwargs.pop("password", "strong-password-123!")
        name = kwargs.pop("name", self.fake.name())
        return EventFlowUser.objects.create_user(
            username=username,
            email=email,
            password=password,
            name=name,
            **kwargs,
        )

    def __call__(self, **kwargs: t.Any) -> EventFlowUser:
        return self.create_user(**kwargs)


@pytest.fixture
def user_factory() -> EventFlowUserFactory:
    return EventFlowUserFactory()


@pytest.fixture
def user(user_factory: EventFlowUserFactory) -> EventFlowUser:
    """A standard, verified user."""
    return user_factory(
        username="testuser@example.com",
        email="testuser@example.com",
        name="Test User",
        email_verified=True,
    )


@pytest.fixture
def other_user(user_factory: EventFlowUserFactory) -> EventFlowUser:
    """Another verified user without any special role."""
    return user_factory(username="other@example.com", email="other@example.com", email_verified=True)


@pytest.fixture
def platform_admin(user_factory: EventFlowUserFactory) -> EventFlowUser:
    """A user holding the platform admin role."""
    return user_factory(
        username="admin@example.com",
        email="admin@example.com",
        email_verified=True,
        role=EventFlowUser.Role.ADMIN,
        user_type=EventFlowUser.UserType.PLATFORM_ADMIN,
    )


def client_for(user: EventFlowUser) -> Client:
    refresh = RefreshToken.for_user(user)
    return Client(HTTP_AUTHORIZATION=f"Bearer {str(refresh.access_token)}")  # type: ignore[attr-defined]


@pytest.fixture
def make_client() -> t.Callable[[EventFlowUser], Client]:
    """Build API clients authenticated as arbitrary users."""
    return client_for


@pytest.fixture
def auth_client(user: EventFlowUser) -> Client:
    """An API client authenticated as the standard user."""
    return client_for(user)


@pytest.fixture
def other_client(other_user: EventFlowUser) -> Client:
    return client_for(other_user)


@pytest.fixture
def platform_admin_client(platform_admin: EventFlowUser) -> Client:
    """An API client authenticated as the platform admin."""
    return client_for(platform_admin)


@pytest.fixture
def next_week() -> datetime:
    today = timezone.now()
    same_time_next_week = today + timedelta(days=7)
    noon = time(hour=12, minute=0)
    return timezone.make_aware(
        datetime.combine(same_time_next_week.date(), noon),
        timezone.get_current_timezone(),
    )


@pytest.fixture
def active_subscription(user: EventFlowUser) -> Subscription:
    """A paid annual subscription for the standard user."""
    return Subscription.objects.create(
        user=user,
        plan_type=Subscription.PlanType.ANNUAL,
        status=Subscription.Status.ACTIVE,
        payment_gateway=Subscription.PaymentGateway.STRIPE,
        end_date=timezone.now() + timedelta(days=365),
        amount_paid=Decimal("99.00"),
        currency="USD",
    )


@pytest.fixture
def community(user: EventFlowUser) -> Community:
    """A parent community organized by the standard user."""
    community = Community.objects.create(name="Wikimedia Test Community", description="Editors", created_by=user)
    CommunityAdmin.objects.create(community=community, user=user, role=CommunityAdmin.Role.ORGANIZER)
    return community


@pytest.fixture
def event(user: EventFlowUser, community: Community, next_week: datetime) -> Event:
    """A published onsite event of the community, organized by the standard user."""
    return Event.objects.create(
        event_type=Event.EventType.ONSITE,
        title="Editathon Berlin",
        short_description="Improve articles together",
        full_description="A full day of editing.",
        category="editathon",
        start_datetime=next_week,
        end_datetime=next_week + timedelta(hours=4),
        status=Event.EventStatus.PUBLISHED,
        primary_organizer=user,
        community=community,
        contact_email=user.email,
        published_at=timezone.now(),
    )
