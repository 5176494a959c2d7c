import typing as t
from uuid import UUID

import structlog
from django.contrib.auth.models import AnonymousUser
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from ninja.errors import HttpError

from accounts.models import EventFlowUser
from events.exceptions import (
    AlreadyRegisteredError,
    EventAtCapacityError,
    EventNotOpenForRegistrationError,
    RegistrationCancelledError,
)
from events.models import Event, EventRegistration

logger = structlog.get_logger(__name__)

RegistrationStatus = EventRegistration.RegistrationStatus


def _has_room(event: Event) -> bool:
    if event.capacity is None:
        return True
    return event.registrations.confirmed().count() < event.capacity  # type: ignore[attr-defined]


@transaction.atomic
def register(event_id: UUID, user: EventFlowUser) -> EventRegistration:
    """Register a user for a published event.

    The event row is locked for the capacity check so concurrent registrations cannot overbook it.

    Raises:
        EventNotOpenForRegistrationError: the event is not published.
        AlreadyRegisteredError: the user is already confirmed.
        RegistrationCancelledError: an organizer cancelled the user's registration.
        EventAtCapacityError: the event is full.
    """
    event = Event.objects.select_for_update().filter(pk=event_id).first()
    if event is None:
        raise HttpError(404, str(_("Event not found")))
    if event.status != Event.EventStatus.PUBLISHED:
        raise EventNotOpenForRegistrationError()
    if event.community_id is None:
        raise HttpError(
            400, str(_("This event is not associated with a community. Registration requires a community."))
        )

    existing = EventRegistration.objects.filter(event=event, user=user).first()
    if existing is not None:
        if existing.status == RegistrationStatus.CANCELLED:
            raise RegistrationCancelledError()
        raise AlreadyRegisteredError()

    if not _has_room(event):
        logger.info("event_registration_rejected_full", event_id=str(event.id), user_id=str(user.id))
        raise EventAtCapacityError()

    registration = EventRegistration.objects.create(
        event=event,
        user=user,
        community_id=event.community_id,
        status=RegistrationStatus.CONFIRMED,
        guest_count=0,
    )
    logger.info(
        "event_registration_created",
        event_id=str(event.id),
        user_id=str(user.id),
        registration_id=str(registration.id),
    )
    return registration


def get_registration_status(event: Event, user: EventFlowUser | AnonymousUser) -> dict[str, t.Any]:
    """Whether the user is registered, and whether an organizer removed them."""
    if user.is_anonymous:
        return {"registered": False, "was_removed": False, "registration": None}
    registration = EventRegistration.objects.filter(event=event, user=user).first()
    return {
        "registered": registration is not None and registration.status == RegistrationStatus.CONFIRMED,
        "was_removed": registration is not None and registration.status == RegistrationStatus.CANCELLED,
        "registration": registration,
    }


def list_participants(event: Event) -> dict[str, t.Any]:
    registrations = EventRegistration.objects.filter(event=event).select_related("user")
    participants = [r for r in registrations if r.status == RegistrationStatus.CONFIRMED]
    removed = [r for r in registrations if r.status == RegistrationStatus.CANCELLED]
    return {
        "participants": participants,
        "removed_participants": removed,
        "count": len(participants),
        "removed_count": len(removed),
    }


@transaction.atomic
def remove_participant(event: Event, registration_id: UUID) -> EventRegistration:
    """Cancel a confirmed registration."""
    registration = (
        EventRegistration.objects.select_for_update()
        .filter(pk=registration_id, event=event, status=RegistrationStatus.CONFIRMED)
        .first()
    )
    if registration is None:
        raise HttpError(404, str(_("Registration not found")))
    registration.status = RegistrationStatus.CANCELLED
    registration.cancelled_at = timezone.now()
    registration.save(update_fields=["status", "cancelled_at", "updated_at"])
    logger.info("event_participant_removed", event_id=str(event.id), registration_id=str(registration.id))
    return registration


@transaction.atomic
def restore_participant(event: Event, registration_id: UUID) -> EventRegistration:
    """Confirm a cancelled registration again, if the event still has room."""
    event = Event.objects.select_for_update().get(pk=event.pk)
    registration = EventRegistration.objects.filter(
        pk=registration_id, event=event, status=RegistrationStatus.CANCELLED
    ).first()
    if registration is None:
        raise HttpError(404, str(_("Removed registration not found")))
    if not _has_room(event):
        raise EventAtCapacityError()
    registration.status = RegistrationStatus.CONFIRMED
    registration.cancelled_at = None
    registration.save(update_fields=["status", "cancelled_at", "updated_at"])
    logger.info("event_participant_restored", event_id=str(event.id), registration_id=str(registration.id))
    return registration
