import pytest
from django.test import RequestFactory
from django.test.client import Client
from django.urls import reverse

from common.middleware.observability import client_ip

pytestmark = pytest.mark.django_db


def test_request_id_is_echoed() -> None:
    response = Client().get(reverse("api:healthcheck"), HTTP_X_REQUEST_ID="req-123")

    assert response["X-Request-ID"] == "req-123"


def test_request_id_is_generated() -> None:
    response = Client().get(reverse("api:healthcheck"))

    assert len(response["X-Request-ID"]) == 36


def test_client_ip_prefers_forwarded_for() -> None:
    request = RequestFactory().get("/", HTTP_X_FORWARDED_FOR="203.0.113.7, 10.0.0.1", REMOTE_ADDR="10.0.0.2")

    assert client_ip(request) == "203.0.113.7"


def test_client_ip_falls_back_to_remote_addr() -> None:
    request = RequestFactory().get("/", REMOTE_ADDR="10.0.0.2")

    assert client_ip(request) == "10.0.0.2"
