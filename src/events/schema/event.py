"""Event-related schemas."""

import datetime
import typing as t
import zoneinfo
from decimal import Decimal
from uuid import UUID

from django.utils import timezone
from ninja import ModelSchema, Schema
from pydantic import EmailStr, Field, HttpUrl, StringConstraints, field_validator

from accounts.schema import MinimalUserSchema
from common.schema import StrippedString
from events.models import Event, OnlineEventMetadata, OnsiteEventMetadata

Tag = t.Annotated[str, StringConstraints(max_length=100, strip_whitespace=True)]


class OnlineMetadataEditSchema(Schema):
    platform_type: StrippedString | None = Field(None, max_length=50)
    meeting_link: HttpUrl | None = None
    meeting_id: StrippedString | None = Field(None, max_length=100)
    passcode: StrippedString | None = Field(None, max_length=50)
    access_control: StrippedString | None = Field(None, max_length=50)
    waiting_room_enabled: bool = False
    max_participants: int | None = Field(None, ge=1)
    recording_enabled: bool = False
    recording_availability: StrippedString | None = Field(None, max_length=50)
    recording_url: HttpUrl | None = None


class OnsiteMetadataEditSchema(Schema):
    venue_name: StrippedString | None = Field(None, max_length=100)
    venue_type: StrippedString | None = Field(None, max_length=50)
    address_line1: StrippedString | None = Field(None, max_length=200)
    address_line2: StrippedString | None = Field(None, max_length=200)
    city: StrippedString | None = Field(None, max_length=100)
    state: StrippedString | None = Field(None, max_length=100)
    postal_code: StrippedString | None = Field(None, max_length=20)
    country: StrippedString | None = Field(None, max_length=50)
    room_name: StrippedString | None = Field(None, max_length=100)
    floor_number: StrippedString | None = Field(None, max_length=20)
    latitude: Decimal | None = Field(None, ge=-90, le=90, decimal_places=8)
    longitude: Decimal | None = Field(None, ge=-180, le=180, decimal_places=8)
    google_maps_link: HttpUrl | None = None
    landmark: StrippedString | None = Field(None, max_length=100)
    parking_available: bool = False
    parking_instructions: StrippedString | None = None
    public_transport: StrippedString | None = None
    venue_capacity: int | None = Field(None, ge=1)
    seating_arrangement: StrippedString | None = Field(None, max_length=50)
    check_in_required: bool = False
    check_in_method: StrippedString | None = Field(None, max_length=50)
    id_verification: bool = False
    age_restriction: StrippedString | None = Field(None, max_length=20)
    minimum_age: int | None = Field(None, ge=0)
    dress_code: StrippedString | None = Field(None, max_length=50)
    items_not_allowed: StrippedString | None = None
    first_aid_available: bool = False
    emergency_contact: StrippedString | None = Field(None, max_length=20)


class EventBasicFieldsSchema(Schema):
    """Fields shared by every event payload. All optional so that missing ones can be reported together."""

    title: StrippedString | None = Field(None, max_length=100)
    short_description: StrippedString | None = Field(None, max_length=200)
    full_description: StrippedString | None = None
    category: StrippedString | None = Field(None, max_length=255)
    language: StrippedString | None = Field(None, max_length=10)
    start_date: datetime.date | None = None
    start_time: datetime.time | None = Field(None, description="HH:MM in the event time zone")
    end_date: datetime.date | None = None
    end_time: datetime.time | None = Field(None, description="HH:MM in the event time zone")
    timezone: str | None = None
    registration_type: Event.RegistrationType | None = None
    capacity: int | None = Field(None, ge=1, description="Leave empty for unlimited capacity")
    contact_email: EmailStr | None = None
    contact_phone: StrippedString | None = Field(None, max_length=20)
    banner_url: HttpUrl | None = None
    thumbnail_url: HttpUrl | None = None
    accessibility_features: StrippedString | None = None
    doors_open_time: StrippedString | None = Field(None, max_length=10)
    tags: list[Tag] | None = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str | None) -> str | None:
        """Only accept IANA time zones."""
        if value is None:
            return value
        try:
            zoneinfo.ZoneInfo(value)
        except (zoneinfo.ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"'{value}' is not a valid time zone.") from e
        return value


class EventCreateSchema(EventBasicFieldsSchema):
    user_id: UUID | None = Field(None, description="Must match the caller when given")
    event_type: Event.EventType
    status: t.Literal["draft", "published"] = "published"
    community_id: UUID | None = None
    online: OnlineMetadataEditSchema | None = None
    onsite: OnsiteMetadataEditSchema | None = None


class EventDraftSchema(EventCreateSchema):
    event_id: UUID | None = Field(None, description="Existing draft to update")


class EventUpdateSchema(EventBasicFieldsSchema):
    pass


class EventCreatedResponse(Schema):
    success: bool = True
    message: str
    event_id: UUID
    event_url: str
    slug: str
    community_id: UUID | None = None


class DraftSavedResponse(Schema):
    success: bool = True
    message: str
    event_id: UUID
    slug: str


class OnlineMetadataSchema(ModelSchema):
    class Meta:
        model = OnlineEventMetadata
        exclude = ["id", "event", "created_at", "updated_at"]


class OnsiteMetadataSchema(ModelSchema):
    class Meta:
        model = OnsiteEventMetadata
        exclude = ["id", "event", "created_at", "updated_at"]


class EventCommunitySchema(Schema):
    id: UUID
    name: str
    photo: str


def _local(obj: Event, value: datetime.datetime | None) -> datetime.datetime | None:
    if value is None:
        return None
    return timezone.localtime(value, zoneinfo.ZoneInfo(obj.timezone))


class EventInListSchema(ModelSchema):
    community_id: UUID | None = None
    tags: list[str] = Field(default_factory=list)

    class Meta:
        model = Event
        fields = [
            "id",
            "event_type",
            "title",
            "short_description",
            "category",
            "language",
            "start_datetime",
            "end_datetime",
            "timezone",
            "registration_type",
            "capacity",
            "status",
            "slug",
            "banner_url",
            "thumbnail_url",
        ]

    @staticmethod
    def resolve_tags(obj: Event) -> list[str]:
        return [tag.tag for tag in obj.tags.all()]


class EventDetailSchema(ModelSchema):
    """Full event, with its dates also split into local date and time in the event time zone."""

    community: EventCommunitySchema | None = None
    primary_organizer: MinimalUserSchema
    online_metadata: OnlineMetadataSchema | None = None
    onsite_metadata: OnsiteMetadataSchema | None = None
    tags: list[str] = Field(default_factory=list)
    start_date: datetime.date | None = None
    start_time: str | None = None
    end_date: datetime.date | None = None
    end_time: str | None = None
    event_url: str
    confirmed_count: int = 0

    class Meta:
        model = Event
        fields = [
            "id",
            "event_type",
            "title",
            "short_description",
            "full_description",
            "category",
            "language",
            "start_datetime",
            "end_datetime",
            "timezone",
            "registration_type",
            "capacity",
            "status",
            "contact_email",
            "contact_phone",
            "banner_url",
            "thumbnail_url",
            "slug",
            "accessibility_features",
            "doors_open_time",
            "published_at",
            "created_at",
            "updated_at",
        ]

    @staticmethod
    def resolve_online_metadata(obj: Event) -> OnlineEventMetadata | None:
        return getattr(obj, "online_metadata", None)

    @staticmethod
    def resolve_onsite_metadata(obj: Event) -> OnsiteEventMetadata | None:
        return getattr(obj, "onsite_metadata", None)

    @staticmethod
    def resolve_tags(obj: Event) -> list[str]:
        return [tag.tag for tag in obj.tags.all()]

    @staticmethod
    def resolve_start_date(obj: Event) -> datetime.date | None:
        local = _local(obj, obj.start_datetime)
        return local.date() if local else None

    @staticmethod
    def resolve_start_time(obj: Event) -> str | None:
        local = _local(obj, obj.start_datetime)
        return local.strftime("%H:%M") if local else None

    @staticmethod
    def resolve_end_date(obj: Event) -> datetime.date | None:
        local = _local(obj, obj.end_datetime)
        return local.date() if local else None

    @staticmethod
    def resolve_end_time(obj: Event) -> str | None:
        local = _local(obj, obj.end_datetime)
        return local.strftime("%H:%M") if local else None

    @staticmethod
    def resolve_confirmed_count(obj: Event) -> int:
        count = getattr(obj, "confirmed_count", None)
        if count is None:
            count = obj.registrations.confirmed().count()  # type: ignore[attr-defined]
        return int(count)
