import typing as t
from uuid import UUID

from django.db.models import QuerySet
from django.utils.translation import gettext_lazy as _
from ninja import Query
from ninja_extra import api_controller, route, status
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_extra.searching import Searching, searching

from common.authentication import EventFlowJWTAuth, OptionalAuth
from common.controllers import UserAwareController
from common.schema import ValidationErrorResponse
from common.throttling import WriteThrottle
from events import filters, models, schema
from events.service import event_service

from .permissions import EventPermission


def _created_response(event: models.Event, message: str) -> schema.EventCreatedResponse:
    return schema.EventCreatedResponse(
        message=message,
        event_id=event.id,
        event_url=event.event_url,
        slug=event.slug,
        community_id=event.community_id,
    )


@api_controller("/events", auth=OptionalAuth(), tags=["Events"])
class EventController(UserAwareController):
    def get_queryset(self) -> QuerySet[models.Event]:
        """Published events with the relations the list renders."""
        return (
            models.Event.objects.published().select_related("community").prefetch_related("tags").distinct()
        )

    def get_managed(self, event_id: UUID) -> models.Event:
        """An event the caller may manage. 404 if missing, 403 without permission."""
        return t.cast(
            models.Event,
            self.get_object_or_exception(
                models.Event.objects.full(), pk=event_id, error_message=str(_("Event not found"))
            ),
        )

    @route.get("", url_name="list_events", response=PaginatedResponseSchema[schema.EventInListSchema])
    @paginate(PageNumberPaginationExtra, page_size=20)
    @searching(Searching, search_fields=["title", "short_description", "category", "tags__tag"])
    def list_events(
        self,
        params: filters.EventFilterSchema = Query(...),  # type: ignore[type-arg]
    ) -> QuerySet[models.Event]:
        """Browse published events.

        Only upcoming events are listed unless `upcoming=false`. Filter by community, type, category or tags,
        and search by title, description, category or tag.
        """
        return params.filter(self.get_queryset())

    @route.get(
        "/organized",
        url_name="list_organized_events",
        response=PaginatedResponseSchema[schema.EventInListSchema],
        auth=EventFlowJWTAuth(),
    )
    @paginate(PageNumberPaginationExtra, page_size=20)
    def list_organized_events(self) -> QuerySet[models.Event]:
        """Events the caller organizes, drafts and cancelled ones included."""
        return (
            models.Event.objects.filter(primary_organizer=self.user())
            .select_related("community")
            .prefetch_related("tags")
            .order_by("-created_at")
        )

    @route.get("/{event_id}", url_name="get_event", response=schema.EventDetailSchema)
    def get_event(self, event_id: UUID) -> models.Event:
        """Event details with metadata, tags, organizer and the number of confirmed registrations.

        Drafts are only visible to the people who can manage them.
        """
        return event_service.get_event_for_viewer(event_id, self.maybe_user())

    @route.post(
        "",
        url_name="create_event",
        response={201: schema.EventCreatedResponse, 400: ValidationErrorResponse},
        auth=EventFlowJWTAuth(),
        throttle=WriteThrottle(),
    )
    def create_event(self, payload: schema.EventCreateSchema) -> tuple[int, schema.EventCreatedResponse]:
        """Create an event.

        All required fields are validated together and reported in one message. Online and hybrid events
        need a meeting link. Pass `community_id` to create the event in a community you organize.
        """
        event = event_service.create_event(self.user(), payload)
        if event.status == models.Event.EventStatus.DRAFT:
            message = str(_("Draft saved successfully"))
        else:
            message = str(_("Event published successfully"))
        return status.HTTP_201_CREATED, _created_response(event, message)

    @route.post(
        "/draft",
        url_name="save_event_draft",
        response=schema.DraftSavedResponse,
        auth=EventFlowJWTAuth(),
        throttle=WriteThrottle(),
    )
    def save_draft(self, payload: schema.EventDraftSchema) -> schema.DraftSavedResponse:
        """Save the event as a draft. Only the title is required; pass `event_id` to update a draft."""
        event = event_service.save_draft(self.user(), payload)
        return schema.DraftSavedResponse(message=str(_("Draft saved successfully")), event_id=event.id, slug=event.slug)

    @route.post(
        "/{event_id}/publish",
        url_name="publish_event",
        response=schema.EventCreatedResponse,
        auth=EventFlowJWTAuth(),
        permissions=[EventPermission("publish_event")],
        throttle=WriteThrottle(),
    )
    def publish_event(self, event_id: UUID) -> schema.EventCreatedResponse:
        """Publish a draft once every required field is filled in."""
        event = event_service.publish_event(self.get_managed(event_id))
        return _created_response(event, str(_("Event published successfully")))

    @route.put(
        "/{event_id}",
        url_name="update_event",
        response={200: schema.EventDetailSchema, 400: ValidationErrorResponse},
        auth=EventFlowJWTAuth(),
        permissions=[EventPermission("edit_event")],
        throttle=WriteThrottle(),
    )
    def update_event(self, event_id: UUID, payload: schema.EventUpdateSchema) -> models.Event:
        """Update the basic fields of an event. Fields left out are unchanged."""
        event = event_service.update_event(self.get_managed(event_id), payload)
        return models.Event.objects.full().get(pk=event.pk)

    @route.post(
        "/{event_id}/cancel",
        url_name="cancel_event",
        response=schema.EventDetailSchema,
        auth=EventFlowJWTAuth(),
        permissions=[EventPermission("cancel_event")],
        throttle=WriteThrottle(),
    )
    def cancel_event(self, event_id: UUID) -> models.Event:
        """Cancel an event. Cancelled events no longer accept registrations."""
        event = event_service.cancel_event(self.get_managed(event_id))
        return models.Event.objects.full().get(pk=event.pk)
