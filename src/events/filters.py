from uuid import UUID

from django.db.models import Q
from django.utils import timezone
from ninja import Field, FilterSchema

from events.models import Event


class EventFilterSchema(FilterSchema):
    community: UUID | None = Field(None, q="community_id")  # type: ignore[call-overload]
    event_type: Event.EventType | None = None
    category: str | None = Field(None, q="category__iexact")  # type: ignore[call-overload]
    upcoming: bool | None = True
    tags: list[str] | None = None

    def filter_upcoming(self, upcoming: bool | None) -> Q:
        """Events that have not ended yet."""
        if upcoming:
            return Q(end_datetime__gte=timezone.now()) | Q(end_datetime__isnull=True)
        return Q()

    def filter_tags(self, tags: list[str] | None) -> Q:
        """Helper to find tags only."""
        if not tags:
            return Q()
        return Q(tags__tag__in=tags)
