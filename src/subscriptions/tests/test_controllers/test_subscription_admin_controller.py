import orjson
import pytest
from django.test.client import Client
from django.urls import reverse

from accounts.models import EventFlowUser
from subscriptions.models import PaymentTransaction, Subscription, SubscriptionRequest

pytestmark = pytest.mark.django_db


def test_list_requests_requires_admin(auth_client: Client, pending_request: SubscriptionRequest) -> None:
    response = auth_client.get(reverse("api:list_subscription_requests"))

    assert response.status_code == 403


def test_list_requests_filtered_by_status(
    platform_admin_client: Client, pending_request: SubscriptionRequest, other_user: EventFlowUser
) -> None:
    SubscriptionRequest.objects.create(
        user=other_user,
        wikimedia_username="Other",
        contribution_type=SubscriptionRequest.ContributionType.DEVELOPER,
        purpose_statement="I build tools for editors.",
        status=SubscriptionRequest.Status.REJECTED,
    )

    response = platform_admin_client.get(reverse("api:list_subscription_requests"), {"status": "pending"})

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 1
    assert data["results"][0]["id"] == str(pending_request.id)
    assert data["results"][0]["user"]["email"] == pending_request.user.email


def test_get_request(platform_admin_client: Client, pending_request: SubscriptionRequest) -> None:
    response = platform_admin_client.get(
        reverse("api:get_subscription_request", kwargs={"request_id": pending_request.id})
    )

    assert response.status_code == 200
    assert response.json()["wikimedia_username"] == "TestEditor"


def test_approve_request(
    platform_admin_client: Client, pending_request: SubscriptionRequest, user: EventFlowUser
) -> None:
    response = platform_admin_client.post(
        reverse("api:review_subscription_request", kwargs={"request_id": pending_request.id}),
        data=orjson.dumps({"action": "approve"}),
        content_type="application/json",
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Request approved successfully"
    assert Subscription.objects.active().filter(user=user).exists()


def test_reject_request(platform_admin_client: Client, pending_request: SubscriptionRequest) -> None:
    response = platform_admin_client.post(
        reverse("api:review_subscription_request", kwargs={"request_id": pending_request.id}),
        data=orjson.dumps({"action": "reject", "admin_notes": "Not enough activity"}),
        content_type="application/json",
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Request rejected successfully"
    pending_request.refresh_from_db()
    assert pending_request.admin_notes == "Not enough activity"


def test_record_payment(platform_admin_client: Client, user: EventFlowUser) -> None:
    payload = {
        "user_id": str(user.id),
        "plan_type": "annual",
        "payment_gateway": "stripe",
        "gateway_transaction_id": "pi_123",
        "amount": "99.00",
        "currency": "usd",
        "payment_method": "card",
    }

    response = platform_admin_client.post(
        reverse("api:record_payment"), data=orjson.dumps(payload), content_type="application/json"
    )

    assert response.status_code == 201, response.content
    data = response.json()
    assert data["currency"] == "USD"
    assert data["status"] == "success"
    payment = PaymentTransaction.objects.get(pk=data["id"])
    assert payment.subscription is not None
    assert payment.subscription.plan_type == Subscription.PlanType.ANNUAL
