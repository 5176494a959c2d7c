"""Tests for event registration and participant management."""

import typing as t
import uuid

import pytest
from django.contrib.auth.models import AnonymousUser
from ninja.errors import HttpError

from accounts.models import EventFlowUser
from events.exceptions import (
    AlreadyRegisteredError,
    EventAtCapacityError,
    EventNotOpenForRegistrationError,
    RegistrationCancelledError,
)
from events.models import Event, EventRegistration
from events.service import registration_service

pytestmark = pytest.mark.django_db

Status = EventRegistration.RegistrationStatus


class TestRegister:
    def test_creates_confirmed_registration(self, event: Event, other_user: EventFlowUser) -> None:
        registration = registration_service.register(event.id, other_user)

        assert registration.status == Status.CONFIRMED
        assert registration.guest_count == 0
        assert registration.community_id == event.community_id
        assert registration.cancelled_at is None

    def test_unknown_event(self, other_user: EventFlowUser) -> None:
        with pytest.raises(HttpError) as exc_info:
            registration_service.register(uuid.uuid4(), other_user)
        assert exc_info.value.status_code == 404

    @pytest.mark.parametrize("status", [Event.EventStatus.DRAFT, Event.EventStatus.CANCELLED])
    def test_only_published_events(self, event: Event, other_user: EventFlowUser, status: str) -> None:
        Event.objects.filter(pk=event.pk).update(status=status)

        with pytest.raises(EventNotOpenForRegistrationError) as exc_info:
            registration_service.register(event.id, other_user)
        assert str(exc_info.value) == "This event is not available for registration"

    def test_event_without_community(self, event: Event, other_user: EventFlowUser) -> None:
        Event.objects.filter(pk=event.pk).update(community=None)

        with pytest.raises(HttpError) as exc_info:
            registration_service.register(event.id, other_user)
        assert exc_info.value.status_code == 400
        assert "Registration requires a community" in str(exc_info.value)

    def test_already_registered(self, event: Event, registration: EventRegistration) -> None:
        with pytest.raises(AlreadyRegisteredError):
            registration_service.register(event.id, registration.user)

    def test_removed_participant_cannot_register_again(
        self, event: Event, registration: EventRegistration
    ) -> None:
        registration_service.remove_participant(event, registration.id)

        with pytest.raises(RegistrationCancelledError):
            registration_service.register(event.id, registration.user)

    def test_capacity_counts_confirmed_only(
        self, event: Event, registration: EventRegistration, user_factory: t.Any
    ) -> None:
        Event.objects.filter(pk=event.pk).update(capacity=1)

        with pytest.raises(EventAtCapacityError):
            registration_service.register(event.id, user_factory())

        registration_service.remove_participant(event, registration.id)
        newcomer = registration_service.register(event.id, user_factory())
        assert newcomer.status == Status.CONFIRMED

    def test_unlimited_capacity(self, event: Event, user_factory: t.Any) -> None:
        for _ in range(3):
            registration_service.register(event.id, user_factory())

        assert event.registrations.confirmed().count() == 3  # type: ignore[attr-defined]


class TestRegistrationStatus:
    def test_anonymous(self, event: Event) -> None:
        assert registration_service.get_registration_status(event, AnonymousUser()) == {
            "registered": False,
            "was_removed": False,
            "registration": None,
        }

    def test_registered(self, event: Event, registration: EventRegistration) -> None:
        status = registration_service.get_registration_status(event, registration.user)

        assert status["registered"] is True
        assert status["was_removed"] is False
        assert status["registration"] == registration

    def test_removed(self, event: Event, registration: EventRegistration) -> None:
        registration_service.remove_participant(event, registration.id)

        status = registration_service.get_registration_status(event, registration.user)

        assert status["registered"] is False
        assert status["was_removed"] is True

    def test_not_registered(self, event: Event, user: EventFlowUser) -> None:
        status = registration_service.get_registration_status(event, user)

        assert status == {"registered": False, "was_removed": False, "registration": None}


def test_list_participants(event: Event, registration: EventRegistration, user_factory: t.Any) -> None:
    removed = registration_service.register(event.id, user_factory())
    registration_service.remove_participant(event, removed.id)

    participants = registration_service.list_participants(event)

    assert participants["participants"] == [registration]
    assert participants["removed_participants"] == [removed]
    assert participants["count"] == 1
    assert participants["removed_count"] == 1


class TestRemoveAndRestore:
    def test_remove_sets_cancelled_at(self, event: Event, registration: EventRegistration) -> None:
        removed = registration_service.remove_participant(event, registration.id)

        assert removed.status == Status.CANCELLED
        assert removed.cancelled_at is not None

    def test_remove_twice(self, event: Event, registration: EventRegistration) -> None:
        registration_service.remove_participant(event, registration.id)

        with pytest.raises(HttpError) as exc_info:
            registration_service.remove_participant(event, registration.id)
        assert exc_info.value.status_code == 404

    def test_remove_registration_of_other_event(
        self, event: Event, registration: EventRegistration, draft_event: Event
    ) -> None:
        with pytest.raises(HttpError) as exc_info:
            registration_service.remove_participant(draft_event, registration.id)
        assert exc_info.value.status_code == 404

    def test_restore(self, event: Event, registration: EventRegistration) -> None:
        registration_service.remove_participant(event, registration.id)

        restored = registration_service.restore_participant(event, registration.id)

        assert restored.status == Status.CONFIRMED
        assert restored.cancelled_at is None

    def test_restore_confirmed_registration(self, event: Event, registration: EventRegistration) -> None:
        with pytest.raises(HttpError) as exc_info:
            registration_service.restore_participant(event, registration.id)
        assert exc_info.value.status_code == 404
        assert str(exc_info.value) == "Removed registration not found"

    def test_restore_into_full_event(
        self, event: Event, registration: EventRegistration, user_factory: t.Any
    ) -> None:
        registration_service.remove_participant(event, registration.id)
        registration_service.register(event.id, user_factory())
        Event.objects.filter(pk=event.pk).update(capacity=1)

        with pytest.raises(EventAtCapacityError):
            registration_service.restore_participant(event, registration.id)
