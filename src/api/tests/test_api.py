"""Tests for the top level API endpoints and exception handlers."""

import orjson
import pytest
from django.conf import settings
from django.core.exceptions import ValidationError
from django.test import RequestFactory
from django.test.client import Client
from django.urls import reverse

from api.api import EXCEPTION_HANDLERS
from api.exception_handlers import handle_django_validation_error, handle_general_exception, obfuscate
from events.exceptions import AlreadyRegisteredError, EventAtCapacityError

pytestmark = pytest.mark.django_db


def test_version() -> None:
    response = Client().get(reverse("api:version"))

    assert response.status_code == 200
    assert response.json() == {"version": settings.VERSION}


def test_healthcheck() -> None:
    response = Client().get(reverse("api:healthcheck"))

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_obfuscate_hides_sensitive_keys() -> None:
    data = {"Authorization": "Bearer abc", "password1": "secret", "email": "a@example.com"}

    obfuscated = obfuscate(data)

    assert obfuscated["Authorization"] == "********"
    assert obfuscated["password1"] == "********"
    assert obfuscated["email"] == "a@example.com"
    assert data["password1"] == "secret"


def test_validation_error_is_400() -> None:
    request = RequestFactory().post("/api/events")

    response = handle_django_validation_error(request, ValidationError({"title": ["This field is required."]}))

    assert response.status_code == 400
    assert orjson.loads(response.content) == {"errors": {"title": ["This field is required."]}}


def test_general_exception_is_500() -> None:
    request = RequestFactory().get("/api/events")
    request.user = None  # type: ignore[assignment]

    response = handle_general_exception(request, RuntimeError("boom"))

    assert response.status_code == 500
    assert orjson.loads(response.content)["detail"] == "Internal Server Error."


@pytest.mark.parametrize(
    "exc,detail",
    [
        (AlreadyRegisteredError(), "You are already registered for this event"),
        (EventAtCapacityError(), "This event is at full capacity"),
    ],
)
def test_registration_errors_map_to_400(exc: Exception, detail: str) -> None:
    response = EXCEPTION_HANDLERS[type(exc)](RequestFactory().post("/"), exc)

    assert response.status_code == 400
    assert orjson.loads(response.content) == {"detail": detail}
