import typing as t
from datetime import date, timedelta

import pytest
from django.utils import timezone

from accounts.models import EventFlowUser
from events.models import Event, EventRegistration


@pytest.fixture
def event_day() -> date:
    return timezone.now().date() + timedelta(days=30)


@pytest.fixture
def event_payload(event_day: date) -> dict[str, t.Any]:
    """A complete payload for an online event, as the frontend sends it."""
    return {
        "event_type": "online",
        "title": "Wikidata Workshop",
        "short_description": "Learn Wikidata basics",
        "full_description": "A hands-on introduction to Wikidata.",
        "category": "workshop",
        "start_date": event_day.isoformat(),
        "start_time": "10:00",
        "end_date": event_day.isoformat(),
        "end_time": "12:30",
        "timezone": "Europe/Berlin",
        "capacity": 50,
        "tags": ["wikidata", " wikidata ", "", "beginners"],
        "online": {"platform_type": "jitsi", "meeting_link": "https://meet.example.com/wikidata"},
    }


@pytest.fixture
def draft_event(user: EventFlowUser) -> Event:
    """A draft with only a title, organized by the standard user."""
    return Event.objects.create(event_type=Event.EventType.ONSITE, title="Draft Meetup", primary_organizer=user)


@pytest.fixture
def registration(event: Event, other_user: EventFlowUser) -> EventRegistration:
    """A confirmed registration of the other user for the community event."""
    assert event.community_id is not None
    return EventRegistration.objects.create(event=event, user=other_user, community_id=event.community_id)
