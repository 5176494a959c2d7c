from django.http import HttpRequest
from ninja_extra import ControllerBase

from common.permissions import RootPermission
from events import models
from events.service.event_service import can_manage_event


class EventPermission(RootPermission):
    message = "You don't have permission to manage this event"

    def has_object_permission(
        self,
        request: HttpRequest,
        controller: ControllerBase,
        obj: models.Event,
    ) -> bool:
        """Primary organizer, platform admins and event-managing community admins."""
        return can_manage_event(request.user, obj)  # type: ignore[arg-type]
