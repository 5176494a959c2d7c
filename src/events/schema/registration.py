"""Registration and participant schemas."""

import datetime
from uuid import UUID

from ninja import ModelSchema, Schema

from accounts.schema import ContactUserSchema
from events.models import EventRegistration


class RegistrationSchema(ModelSchema):
    event_id: UUID
    community_id: UUID

    class Meta:
        model = EventRegistration
        fields = ["id", "status", "guest_count", "registered_at", "cancelled_at"]


class RegistrationCreatedResponse(Schema):
    success: bool = True
    message: str
    registration_id: UUID


class RegistrationStatusSchema(Schema):
    registered: bool = False
    was_removed: bool = False
    registration: RegistrationSchema | None = None


class ParticipantSchema(ModelSchema):
    user: ContactUserSchema

    class Meta:
        model = EventRegistration
        fields = ["id", "status", "guest_count", "registered_at", "cancelled_at"]


class ParticipantListSchema(Schema):
    participants: list[ParticipantSchema]
    removed_participants: list[ParticipantSchema]
    count: int
    removed_count: int


class ParticipantActionResponse(Schema):
    success: bool = True
    message: str
    registration_id: UUID
    status: str
    cancelled_at: datetime.datetime | None = None
