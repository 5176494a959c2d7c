"""Event creation, drafts, publishing and updates."""

import typing as t
from datetime import date, datetime, time
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

import structlog
from django.contrib.auth.models import AnonymousUser
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from ninja.errors import HttpError

from accounts.models import EventFlowUser
from communities.models import Community, CommunityAdmin
from events import schema
from events.models import Event, EventTag, OnlineEventMetadata, OnsiteEventMetadata

logger = structlog.get_logger(__name__)

CommunityRole = CommunityAdmin.Role

# Community admin roles that may manage any event of their community
EVENT_MANAGER_ROLES = (
    CommunityRole.OWNER,
    CommunityRole.ORGANIZER,
    CommunityRole.COORGANIZER,
    CommunityRole.EVENT_ORGANIZER,
)
# Community admin roles that may create events in their community
EVENT_CREATOR_ROLES = (CommunityRole.OWNER, CommunityRole.ORGANIZER)

REQUIRED_FIELDS = (
    "title",
    "short_description",
    "full_description",
    "category",
    "start_date",
    "start_time",
    "end_date",
    "end_time",
)

BASIC_FIELDS = (
    "title",
    "short_description",
    "full_description",
    "category",
    "language",
    "registration_type",
    "capacity",
    "contact_email",
    "contact_phone",
    "accessibility_features",
    "doors_open_time",
)
URL_FIELDS = ("banner_url", "thumbnail_url")
# an explicit None clears these, e.g. back to unlimited capacity
NULLABLE_FIELDS = ("capacity",)


def can_manage_event(user: EventFlowUser | AnonymousUser, event: Event) -> bool:
    """Primary organizer, platform admins and event-managing admins of the event's community."""
    if user.is_anonymous:
        return False
    if event.primary_organizer_id == user.id or user.is_platform_admin:  # type: ignore[union-attr]
        return True
    if event.community_id is None:
        return False
    return CommunityAdmin.objects.filter(
        community_id=event.community_id, user_id=user.id, role__in=EVENT_MANAGER_ROLES
    ).exists()


def combine_date_time(day: date, at: time, tz_name: str) -> datetime:
    """Aware datetime for a local date and time in the given time zone."""
    return timezone.make_aware(datetime.combine(day, at.replace(second=0, microsecond=0)), ZoneInfo(tz_name))


def _missing_fields(values: dict[str, t.Any], event_type: str) -> list[str]:
    required = list(REQUIRED_FIELDS)
    if event_type in (Event.EventType.ONLINE, Event.EventType.HYBRID):
        required.append("meeting_link")
    return [field for field in required if not values.get(field)]


def _raise_if_missing(values: dict[str, t.Any], event_type: str) -> None:
    if missing := _missing_fields(values, event_type):
        raise HttpError(400, str(_("Missing required fields: {fields}")).format(fields=", ".join(missing)))


def _event_window(values: dict[str, t.Any], tz_name: str) -> tuple[datetime | None, datetime | None]:
    start = end = None
    if values.get("start_date") and values.get("start_time"):
        start = combine_date_time(values["start_date"], values["start_time"], tz_name)
    if values.get("end_date") and values.get("end_time"):
        end = combine_date_time(values["end_date"], values["end_time"], tz_name)
    if start and end and end <= start:
        raise HttpError(400, str(_("End date and time must be after start date and time")))
    return start, end


def _payload_values(payload: schema.EventCreateSchema) -> dict[str, t.Any]:
    values = payload.model_dump()
    values["meeting_link"] = payload.online.meeting_link if payload.online else None
    return values


def _check_owner(user: EventFlowUser, payload: schema.EventCreateSchema) -> None:
    if payload.user_id is not None and payload.user_id != user.id:
        raise HttpError(403, str(_("You can only create events as yourself")))


def _resolve_community(user: EventFlowUser, community_id: UUID | None) -> Community | None:
    if community_id is None:
        return None
    community = Community.objects.filter(pk=community_id).first()
    if community is None:
        raise HttpError(404, str(_("Community not found")))
    if not CommunityAdmin.objects.filter(community=community, user=user, role__in=EVENT_CREATOR_ROLES).exists():
        raise HttpError(403, str(_("Only organizers of the community can create events in it")))
    return community


def _contact_email(user: EventFlowUser, payload_email: str | None) -> str:
    if payload_email:
        return payload_email
    return user.email if user.has_real_email and user.email else ""


def _apply_basic_fields(event: Event, values: dict[str, t.Any], *, only_given: bool) -> None:
    for field in BASIC_FIELDS:
        value = values.get(field)
        if value is None and field not in NULLABLE_FIELDS:
            if only_given:
                continue
            value = ""
        elif only_given and field not in values:
            continue
        setattr(event, field, value)
    for field in URL_FIELDS:
        value = values.get(field)
        if value is None and only_given:
            continue
        setattr(event, field, str(value) if value else "")


def _metadata_values(
    model: type[OnlineEventMetadata | OnsiteEventMetadata], data: dict[str, t.Any]
) -> dict[str, t.Any]:
    """Blank out missing text fields, keep missing nullable ones as None."""
    return {
        key: "" if value is None and not model._meta.get_field(key).null else value for key, value in data.items()
    }


def _save_metadata(event: Event, payload: schema.EventCreateSchema) -> None:
    """Store online details for online and hybrid events, venue details for onsite and hybrid ones."""
    if event.is_online:
        data = payload.online.model_dump(mode="json") if payload.online else {}
        OnlineEventMetadata.objects.update_or_create(
            event=event, defaults=_metadata_values(OnlineEventMetadata, data)
        )
    if event.is_onsite:
        data = payload.onsite.model_dump(mode="json") if payload.onsite else {}
        OnsiteEventMetadata.objects.update_or_create(
            event=event, defaults=_metadata_values(OnsiteEventMetadata, data)
        )


def normalize_tags(tags: t.Iterable[str]) -> list[str]:
    """Strip tags, drop blanks and duplicates, keep order."""
    seen: dict[str, None] = {}
    for tag in tags:
        if cleaned := tag.strip():
            seen.setdefault(cleaned, None)
    return list(seen)


def _replace_tags(event: Event, tags: list[str] | None) -> None:
    if tags is None:
        return
    event.tags.all().delete()
    EventTag.objects.bulk_create([EventTag(event=event, tag=tag) for tag in normalize_tags(tags)])


@transaction.atomic
def create_event(user: EventFlowUser, payload: schema.EventCreateSchema) -> Event:
    """Create an event with its type-specific details and tags.

    Every required field is checked up front so that all missing ones are reported at once.
    """
    _check_owner(user, payload)
    values = _payload_values(payload)
    _raise_if_missing(values, payload.event_type)
    contact_email = _contact_email(user, payload.contact_email)
    if not contact_email:
        raise HttpError(
            400,
            str(_("Contact email is required. Please add an email to your profile or provide it in the form.")),
        )
    tz_name = payload.timezone or "UTC"
    start, end = _event_window(values, tz_name)
    community = _resolve_community(user, payload.community_id)

    event = Event(
        id=uuid4(),
        event_type=payload.event_type,
        primary_organizer=user,
        community=community,
        timezone=tz_name,
        start_datetime=start,
        end_datetime=end,
    )
    _apply_basic_fields(event, values, only_given=False)
    event.language = payload.language or "en"
    event.registration_type = payload.registration_type or Event.RegistrationType.FREE
    event.contact_email = contact_email
    event.status = payload.status
    if event.status == Event.EventStatus.PUBLISHED:
        event.published_at = timezone.now()
    event.save()

    _save_metadata(event, payload)
    _replace_tags(event, payload.tags or [])
    logger.info(
        "event_created",
        event_id=str(event.id),
        event_type=event.event_type,
        status=event.status,
        community_id=str(community.id) if community else None,
        user_id=str(user.id),
    )
    return event


@transaction.atomic
def save_draft(user: EventFlowUser, payload: schema.EventDraftSchema) -> Event:
    """Create or update a draft. Only the title is required; everything else is stored when present."""
    _check_owner(user, payload)
    if not payload.title:
        raise HttpError(400, str(_("Missing required fields: title")))

    if payload.event_id is not None:
        event = (
            Event.objects.select_for_update()
            .filter(pk=payload.event_id, primary_organizer=user, status=Event.EventStatus.DRAFT)
            .first()
        )
        if event is None:
            raise HttpError(404, str(_("Draft not found")))
        event.event_type = payload.event_type
    else:
        event = Event(id=uuid4(), event_type=payload.event_type, primary_organizer=user)

    values = _payload_values(payload)
    if payload.timezone:
        event.timezone = payload.timezone
    start, end = _event_window(values, event.timezone)
    if start:
        event.start_datetime = start
    if end:
        event.end_datetime = end
    if payload.community_id is not None:
        event.community = _resolve_community(user, payload.community_id)

    given = {key: value for key, value in values.items() if value is not None or key in payload.model_fields_set}
    _apply_basic_fields(event, given, only_given=True)
    if not event.contact_email:
        event.contact_email = _contact_email(user, None)
    event.status = Event.EventStatus.DRAFT
    event.save()

    if payload.online is not None or payload.onsite is not None:
        _save_metadata(event, payload)
    _replace_tags(event, payload.tags)
    logger.info("event_draft_saved", event_id=str(event.id), user_id=str(user.id))
    return event


def _stored_values(event: Event) -> dict[str, t.Any]:
    """Current values of an event in the shape of a payload, for required-field checks."""
    values: dict[str, t.Any] = {field: getattr(event, field) for field in BASIC_FIELDS}
    tz = ZoneInfo(event.timezone)
    if event.start_datetime:
        local_start = timezone.localtime(event.start_datetime, tz)
        values["start_date"], values["start_time"] = local_start.date(), local_start.time()
    if event.end_datetime:
        local_end = timezone.localtime(event.end_datetime, tz)
        values["end_date"], values["end_time"] = local_end.date(), local_end.time()
    online = getattr(event, "online_metadata", None)
    values["meeting_link"] = online.meeting_link if online else None
    return values


@transaction.atomic
def publish_event(event: Event) -> Event:
    """Publish a draft after checking that every required field is filled in."""
    if event.status == Event.EventStatus.CANCELLED:
        raise HttpError(400, str(_("Cancelled events cannot be published")))
    if event.status == Event.EventStatus.PUBLISHED:
        return event
    values = _stored_values(event)
    _raise_if_missing(values, event.event_type)
    _event_window(values, event.timezone)
    if not event.contact_email:
        raise HttpError(400, str(_("Contact email is required before publishing")))

    event.status = Event.EventStatus.PUBLISHED
    event.published_at = timezone.now()
    event.save()
    logger.info("event_published", event_id=str(event.id))
    return event


@transaction.atomic
def update_event(event: Event, payload: schema.EventUpdateSchema) -> Event:
    """Partially update the basic fields of an event.

    Dates and times are recombined in the (possibly new) event time zone. Published events must still
    have every required field afterwards.
    """
    given = payload.model_dump(exclude_unset=True)
    values = _stored_values(event)
    values.update({key: value for key, value in given.items() if value is not None})

    tz_name = given.get("timezone") or event.timezone
    start, end = _event_window(values, tz_name)
    if event.status == Event.EventStatus.PUBLISHED:
        _raise_if_missing(values, event.event_type)

    event.timezone = tz_name
    event.start_datetime = start
    event.end_datetime = end
    _apply_basic_fields(event, given, only_given=True)
    event.save()
    _replace_tags(event, given.get("tags"))
    logger.info("event_updated", event_id=str(event.id), fields=sorted(given))
    return event


@transaction.atomic
def cancel_event(event: Event) -> Event:
    if event.status == Event.EventStatus.CANCELLED:
        raise HttpError(400, str(_("Event is already cancelled")))
    event.status = Event.EventStatus.CANCELLED
    event.save(update_fields=["status", "updated_at"])
    logger.info("event_cancelled", event_id=str(event.id))
    return event


def get_event_for_viewer(event_id: UUID, user: EventFlowUser | AnonymousUser) -> Event:
    """Fetch an event for display. Drafts are only visible to those who can manage them."""
    event = Event.objects.full().filter(pk=event_id).first()
    if event is None or (event.status == Event.EventStatus.DRAFT and not can_manage_event(user, event)):
        raise HttpError(404, str(_("Event not found")))
    return event
