import uuid
from datetime import timedelta

import pytest
from django.core.exceptions import ValidationError
from django.db import IntegrityError

from accounts.models import EventFlowUser
from communities.models import Community
from events.models import Event, EventRegistration, EventTag, build_event_slug

pytestmark = pytest.mark.django_db


def test_build_event_slug() -> None:
    event_id = uuid.UUID("12345678-9abc-def0-1234-56789abcdef0")

    assert build_event_slug("Wiki Loves Monuments 2025!", event_id) == "wiki-loves-monuments-2025-12345678"
    assert build_event_slug("", event_id) == "12345678"


def test_slug_set_on_save(draft_event: Event) -> None:
    assert draft_event.slug == f"draft-meetup-{str(draft_event.id)[:8]}"


def test_event_url(event: Event, draft_event: Event) -> None:
    assert event.event_url == f"/community/{event.community_id}/event/{event.slug}"
    assert draft_event.event_url == f"/events/{draft_event.id}"


def test_end_must_follow_start(event: Event) -> None:
    assert event.start_datetime is not None
    event.end_datetime = event.start_datetime

    with pytest.raises(ValidationError) as exc_info:
        event.save()
    assert "end_datetime" in exc_info.value.message_dict


def test_published_event_requires_fields(draft_event: Event) -> None:
    draft_event.status = Event.EventStatus.PUBLISHED

    with pytest.raises(ValidationError) as exc_info:
        draft_event.save()
    assert {"short_description", "start_datetime", "contact_email"} <= set(exc_info.value.message_dict)


def test_type_flags(draft_event: Event) -> None:
    assert draft_event.is_onsite and not draft_event.is_online
    draft_event.event_type = Event.EventType.HYBRID
    assert draft_event.is_onsite and draft_event.is_online
    draft_event.event_type = Event.EventType.EDITATHON
    assert not draft_event.is_onsite and not draft_event.is_online


def test_tags_unique_per_event(draft_event: Event) -> None:
    EventTag.objects.create(event=draft_event, tag="wiki")

    with pytest.raises(ValidationError):
        EventTag.objects.create(event=draft_event, tag="wiki")


def test_one_registration_per_user(event: Event, registration: EventRegistration, other_user: EventFlowUser) -> None:
    assert event.community_id is not None
    with pytest.raises(ValidationError):
        EventRegistration.objects.create(event=event, user=other_user, community_id=event.community_id)

    # The constraint also holds when validation is bypassed
    with pytest.raises(IntegrityError):
        EventRegistration.objects.bulk_create(
            [EventRegistration(event=event, user=other_user, community_id=event.community_id)]
        )


def test_confirmed_count_annotation(event: Event, registration: EventRegistration, user: EventFlowUser) -> None:
    assert event.community_id is not None
    EventRegistration.objects.create(
        event=event,
        user=user,
        community_id=event.community_id,
        status=EventRegistration.RegistrationStatus.CANCELLED,
    )

    annotated = Event.objects.with_confirmed_count().get(pk=event.pk)

    assert annotated.confirmed_count == 1  # type: ignore[attr-defined]


def test_upcoming_and_published(event: Event, draft_event: Event, community: Community) -> None:
    assert event.start_datetime is not None
    past = Event.objects.create(
        event_type=Event.EventType.ONLINE,
        title="Past",
        short_description="s",
        full_description="f",
        category="c",
        start_datetime=event.start_datetime - timedelta(days=30),
        end_datetime=event.start_datetime - timedelta(days=29),
        status=Event.EventStatus.PUBLISHED,
        primary_organizer=event.primary_organizer,
        community=community,
        contact_email="org@example.com",
    )

    assert list(Event.objects.published().upcoming()) == [event]
    assert set(Event.objects.published()) == {event, past}
