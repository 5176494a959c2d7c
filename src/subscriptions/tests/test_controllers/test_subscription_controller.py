import typing as t

import orjson
import pytest
from django.test.client import Client
from django.urls import reverse

from accounts.models import EventFlowUser
from subscriptions.models import Subscription, SubscriptionRequest

pytestmark = pytest.mark.django_db

REQUEST_PAYLOAD = {
    "wikimedia_username": "TestEditor",
    "wikimedia_profile_url": "https://meta.wikimedia.org/wiki/User:TestEditor",
    "years_active": 5,
    "contribution_type": "organizer",
    "purpose_statement": "I organize editathons in my city.",
    "edit_count": 12000,
}


def test_create_subscription_request(auth_client: Client, user: EventFlowUser) -> None:
    response = auth_client.post(
        reverse("api:create_subscription_request"),
        data=orjson.dumps(REQUEST_PAYLOAD),
        content_type="application/json",
    )

    assert response.status_code == 201, response.content
    data = response.json()
    assert data["success"] is True
    assert data["message"].startswith("Subscription request submitted successfully.")
    request = SubscriptionRequest.objects.get(pk=data["request_id"])
    assert request.user == user
    assert request.status == SubscriptionRequest.Status.PENDING


def test_create_subscription_request_short_purpose(auth_client: Client) -> None:
    response = auth_client.post(
        reverse("api:create_subscription_request"),
        data=orjson.dumps({**REQUEST_PAYLOAD, "purpose_statement": "short"}),
        content_type="application/json",
    )

    assert response.status_code == 422


def test_create_subscription_request_requires_auth() -> None:
    response = Client().post(
        reverse("api:create_subscription_request"),
        data=orjson.dumps(REQUEST_PAYLOAD),
        content_type="application/json",
    )

    assert response.status_code == 401


def test_my_subscription_request(auth_client: Client, pending_request: SubscriptionRequest) -> None:
    response = auth_client.get(reverse("api:my_subscription_request"))

    assert response.status_code == 200
    data = response.json()
    assert data["has_request"] is True
    assert data["request"]["id"] == str(pending_request.id)
    assert data["request"]["status"] == "pending"


def test_my_subscription_without_subscription(auth_client: Client, settings: t.Any) -> None:
    settings.IS_MEDIA_WIKI = False

    response = auth_client.get(reverse("api:my_subscription"))

    assert response.status_code == 200
    assert response.json() == {
        "has_subscription": False,
        "subscription": None,
        "user_type": "registered_user",
        "gate_type": "payment",
    }


def test_my_subscription_and_check(auth_client: Client, active_subscription: Subscription) -> None:
    data = auth_client.get(reverse("api:my_subscription")).json()
    assert data["has_subscription"] is True
    assert data["subscription"]["id"] == str(active_subscription.id)
    assert data["subscription"]["is_active"] is True

    response = auth_client.get(reverse("api:check_subscription"))
    assert response.json() == {"has_active_subscription": True}


def test_cancel_subscription(auth_client: Client, active_subscription: Subscription) -> None:
    response = auth_client.post(reverse("api:cancel_subscription"))

    assert response.status_code == 200
    assert response.json()["message"].startswith("Subscription cancelled.")
    active_subscription.refresh_from_db()
    assert active_subscription.auto_renew is False


def test_cancel_without_subscription(auth_client: Client) -> None:
    response = auth_client.post(reverse("api:cancel_subscription"))

    assert response.status_code == 404
    assert response.json()["detail"] == "No active subscription found"
