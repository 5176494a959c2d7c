import typing as t
from uuid import UUID

from django.utils.translation import gettext_lazy as _
from ninja_extra import api_controller, route

from common.authentication import EventFlowJWTAuth
from common.controllers import UserAwareController
from common.throttling import WriteThrottle
from events import models, schema
from events.service import registration_service

from .permissions import EventPermission


@api_controller(
    "/events/{event_id}/participants",
    auth=EventFlowJWTAuth(),
    tags=["Event Participants"],
    permissions=[EventPermission("manage_participants")],
)
class ParticipantController(UserAwareController):
    def get_event(self, event_id: UUID) -> models.Event:
        """The event, after checking the caller may manage it."""
        return t.cast(
            models.Event,
            self.get_object_or_exception(models.Event, pk=event_id, error_message=str(_("Event not found"))),
        )

    @route.get("", url_name="list_participants", response=schema.ParticipantListSchema)
    def list_participants(self, event_id: UUID) -> dict[str, t.Any]:
        """Confirmed participants and those removed by an organizer."""
        return registration_service.list_participants(self.get_event(event_id))

    @route.post(
        "/{registration_id}/remove",
        url_name="remove_participant",
        response=schema.ParticipantActionResponse,
        throttle=WriteThrottle(),
    )
    def remove_participant(self, event_id: UUID, registration_id: UUID) -> schema.ParticipantActionResponse:
        """Cancel a participant's registration. The participant cannot register again on their own."""
        registration = registration_service.remove_participant(self.get_event(event_id), registration_id)
        return schema.ParticipantActionResponse(
            message=str(_("Participant removed successfully")),
            registration_id=registration.id,
            status=registration.status,
            cancelled_at=registration.cancelled_at,
        )

    @route.post(
        "/{registration_id}/restore",
        url_name="restore_participant",
        response=schema.ParticipantActionResponse,
        throttle=WriteThrottle(),
    )
    def restore_participant(self, event_id: UUID, registration_id: UUID) -> schema.ParticipantActionResponse:
        """Confirm a removed participant again, if the event has room."""
        registration = registration_service.restore_participant(self.get_event(event_id), registration_id)
        return schema.ParticipantActionResponse(
            message=str(_("Participant restored successfully")),
            registration_id=registration.id,
            status=registration.status,
        )
