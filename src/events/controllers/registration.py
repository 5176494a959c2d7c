from uuid import UUID

from django.shortcuts import get_object_or_404
from django.utils.translation import gettext_lazy as _
from ninja_extra import api_controller, route, status

from common.authentication import EventFlowJWTAuth, OptionalAuth
from common.controllers import UserAwareController
from common.throttling import WriteThrottle
from events import models, schema
from events.service import registration_service


@api_controller("/events/{event_id}", tags=["Event Registration"])
class RegistrationController(UserAwareController):
    @route.post(
        "/register",
        url_name="register_for_event",
        response={201: schema.RegistrationCreatedResponse},
        auth=EventFlowJWTAuth(),
        throttle=WriteThrottle(),
    )
    def register(self, event_id: UUID) -> tuple[int, schema.RegistrationCreatedResponse]:
        """Register for a published community event.

        Fails when the event is full, when you are already registered, or when an organizer removed you.
        """
        registration = registration_service.register(event_id, self.user())
        return status.HTTP_201_CREATED, schema.RegistrationCreatedResponse(
            message=str(_("Successfully registered for the event")),
            registration_id=registration.id,
        )

    @route.get(
        "/registration-status",
        url_name="event_registration_status",
        response=schema.RegistrationStatusSchema,
        auth=OptionalAuth(),
    )
    def registration_status(self, event_id: UUID) -> dict[str, object]:
        """Whether the caller is registered. Anonymous callers are never registered."""
        event = get_object_or_404(models.Event, pk=event_id)
        return registration_service.get_registration_status(event, self.maybe_user())
