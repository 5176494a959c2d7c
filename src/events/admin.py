"""Admin interface for events app."""

from django.contrib import admin, messages
from django.db.models import QuerySet
from django.http import HttpRequest
from ninja.errors import HttpError

from events.models import Event, EventRegistration, EventTag, OnlineEventMetadata, OnsiteEventMetadata
from events.service import event_service


class OnlineEventMetadataInline(admin.StackedInline):  # type: ignore[type-arg]
    model = OnlineEventMetadata
    extra = 0
    can_delete = False


class OnsiteEventMetadataInline(admin.StackedInline):  # type: ignore[type-arg]
    model = OnsiteEventMetadata
    extra = 0
    can_delete = False


class EventTagInline(admin.TabularInline):  # type: ignore[type-arg]
    model = EventTag
    extra = 0
    fields = ["tag"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = [
        "title",
        "event_type",
        "status",
        "community",
        "primary_organizer",
        "start_datetime",
        "confirmed_count",
    ]
    list_filter = ["status", "event_type", "registration_type", "start_datetime"]
    search_fields = ["title", "short_description", "slug", "primary_organizer__username", "community__name"]
    autocomplete_fields = ["primary_organizer", "community"]
    readonly_fields = ["id", "slug", "published_at", "created_at", "updated_at"]
    date_hierarchy = "start_datetime"
    inlines = [OnlineEventMetadataInline, OnsiteEventMetadataInline, EventTagInline]
    actions = ["publish_events", "cancel_events"]

    def get_queryset(self, request: HttpRequest) -> QuerySet[Event]:
        qs = super().get_queryset(request)
        qs = qs.with_confirmed_count()  # type: ignore[attr-defined]
        return qs.select_related("community", "primary_organizer")  # type: ignore[no-any-return]

    @admin.display(description="Confirmed", ordering="confirmed_count")
    def confirmed_count(self, obj: Event) -> int:
        return obj.confirmed_count  # type: ignore[attr-defined,no-any-return]

    @admin.action(description="Publish selected drafts")
    def publish_events(self, request: HttpRequest, queryset: QuerySet[Event]) -> None:
        published = 0
        for event in queryset.filter(status=Event.EventStatus.DRAFT):
            try:
                event_service.publish_event(event)
            except HttpError as e:
                self.message_user(request, f"{event.title}: {e}", level=messages.WARNING)
                continue
            published += 1
        self.message_user(request, f"{published} event(s) published.")

    @admin.action(description="Cancel selected events")
    def cancel_events(self, request: HttpRequest, queryset: QuerySet[Event]) -> None:
        updated = queryset.exclude(status=Event.EventStatus.CANCELLED).update(status=Event.EventStatus.CANCELLED)
        self.message_user(request, f"{updated} event(s) cancelled.")


@admin.register(EventRegistration)
class EventRegistrationAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["user", "event", "community", "status", "guest_count", "registered_at", "cancelled_at"]
    list_filter = ["status", "registered_at"]
    search_fields = ["user__username", "user__email", "event__title", "community__name"]
    autocomplete_fields = ["user", "event", "community"]
    readonly_fields = ["registered_at", "created_at", "updated_at"]
