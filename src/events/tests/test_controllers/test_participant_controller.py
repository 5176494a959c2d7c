import typing as t

import pytest
from django.test.client import Client
from django.urls import reverse

from accounts.models import EventFlowUser
from communities.models import Community, CommunityAdmin
from events.models import Event, EventRegistration

pytestmark = pytest.mark.django_db


def _action_url(name: str, event: Event, registration: EventRegistration) -> str:
    return reverse(f"api:{name}", kwargs={"event_id": event.id, "registration_id": registration.id})


def test_list_participants(auth_client: Client, event: Event, registration: EventRegistration) -> None:
    response = auth_client.get(reverse("api:list_participants", kwargs={"event_id": event.id}))

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 1
    assert data["removed_count"] == 0
    assert data["participants"][0]["user"]["email"] == registration.user.email
    assert data["removed_participants"] == []


def test_list_participants_forbidden_for_attendees(
    other_client: Client, event: Event, registration: EventRegistration
) -> None:
    response = other_client.get(reverse("api:list_participants", kwargs={"event_id": event.id}))

    assert response.status_code == 403


def test_list_participants_as_coorganizer(
    make_client: t.Callable[[EventFlowUser], Client],
    event: Event,
    community: Community,
    registration: EventRegistration,
    user_factory: t.Any,
) -> None:
    coorganizer = user_factory()
    CommunityAdmin.objects.create(community=community, user=coorganizer, role=CommunityAdmin.Role.COORGANIZER)

    response = make_client(coorganizer).get(reverse("api:list_participants", kwargs={"event_id": event.id}))

    assert response.status_code == 200


def test_remove_and_restore(auth_client: Client, event: Event, registration: EventRegistration) -> None:
    response = auth_client.post(_action_url("remove_participant", event, registration))

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Participant removed successfully"
    assert data["status"] == "cancelled"
    assert data["cancelled_at"] is not None

    participants = auth_client.get(reverse("api:list_participants", kwargs={"event_id": event.id})).json()
    assert participants["count"] == 0
    assert participants["removed_count"] == 1

    response = auth_client.post(_action_url("restore_participant", event, registration))

    assert response.status_code == 200
    assert response.json()["message"] == "Participant restored successfully"
    registration.refresh_from_db()
    assert registration.status == EventRegistration.RegistrationStatus.CONFIRMED
    assert registration.cancelled_at is None


def test_remove_unknown_registration(auth_client: Client, event: Event, registration: EventRegistration) -> None:
    auth_client.post(_action_url("remove_participant", event, registration))

    response = auth_client.post(_action_url("remove_participant", event, registration))

    assert response.status_code == 404


def test_restore_confirmed_registration(auth_client: Client, event: Event, registration: EventRegistration) -> None:
    response = auth_client.post(_action_url("restore_participant", event, registration))

    assert response.status_code == 404
    assert response.json()["detail"] == "Removed registration not found"


def test_remove_forbidden_for_others(other_client: Client, event: Event, registration: EventRegistration) -> None:
    response = other_client.post(_action_url("remove_participant", event, registration))

    assert response.status_code == 403
    registration.refresh_from_db()
    assert registration.status == EventRegistration.RegistrationStatus.CONFIRMED
