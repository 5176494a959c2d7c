import typing as t
import uuid

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models
from django.db.models import Count, Q
from django.utils import timezone
from django.utils.text import slugify

from accounts.models import validate_timezone
from common.models import TimeStampedModel


def build_event_slug(title: str, event_id: uuid.UUID) -> str:
    """Slug of the title followed by the first eight characters of the event id."""
    return "-".join(part for part in (slugify(title)[:190], str(event_id)[:8]) if part)


class EventQuerySet(models.QuerySet["Event"]):
    def published(self) -> t.Self:
        """Events open to the public."""
        return self.filter(status=Event.EventStatus.PUBLISHED)

    def upcoming(self) -> t.Self:
        """Events that have not ended yet."""
        return self.filter(Q(end_datetime__gte=timezone.now()) | Q(end_datetime__isnull=True))

    def with_confirmed_count(self) -> t.Self:
        """Annotate the number of confirmed registrations."""
        return self.annotate(
            confirmed_count=Count("registrations", filter=Q(registrations__status="confirmed"), distinct=True)
        )

    def full(self) -> t.Self:
        """Select and prefetch everything the detail view renders."""
        return (
            self.select_related("primary_organizer", "community", "online_metadata", "onsite_metadata")
            .prefetch_related("tags")
            .with_confirmed_count()
        )


class Event(TimeStampedModel):
    class EventType(models.TextChoices):
        ONLINE = "online"
        ONSITE = "onsite"
        HYBRID = "hybrid"
        HACKATHON = "hackathon"
        EDITATHON = "editathon"

    class EventStatus(models.TextChoices):
        DRAFT = "draft"
        PUBLISHED = "published"
        CANCELLED = "cancelled"

    class RegistrationType(models.TextChoices):
        FREE = "free"
        PAID = "paid"

    # Fields a published event must carry
    PUBLISH_REQUIRED_FIELDS: t.ClassVar[tuple[str, ...]] = (
        "title",
        "short_description",
        "full_description",
        "category",
        "start_datetime",
        "end_datetime",
        "contact_email",
    )

    event_type = models.CharField(choices=EventType.choices, max_length=20, db_index=True)
    title = models.CharField(max_length=100, db_index=True)
    short_description = models.CharField(max_length=200, blank=True)
    full_description = models.TextField(blank=True)
    category = models.CharField(max_length=255, blank=True, db_index=True)
    language = models.CharField(max_length=10, default="en")
    start_datetime = models.DateTimeField(null=True, blank=True, db_index=True)
    end_datetime = models.DateTimeField(null=True, blank=True, db_index=True)
    timezone = models.CharField(max_length=50, default="UTC", validators=[validate_timezone])
    registration_type = models.CharField(
        choices=RegistrationType.choices, max_length=20, default=RegistrationType.FREE
    )
    capacity = models.PositiveIntegerField(null=True, blank=True, help_text="Leave empty for unlimited capacity")
    status = models.CharField(choices=EventStatus.choices, max_length=20, default=EventStatus.DRAFT, db_index=True)
    primary_organizer = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="organized_events"
    )
    community = models.ForeignKey(
        "communities.Community", on_delete=models.PROTECT, null=True, blank=True, related_name="events"
    )
    contact_email = models.EmailField(blank=True)
    contact_phone = models.CharField(max_length=20, blank=True)
    banner_url = models.URLField(max_length=500, blank=True)
    thumbnail_url = models.URLField(max_length=500, blank=True)
    slug = models.SlugField(max_length=200, unique=True)
    accessibility_features = models.TextField(blank=True)
    doors_open_time = models.CharField(max_length=10, blank=True)
    published_at = models.DateTimeField(null=True, blank=True)

    objects = EventQuerySet.as_manager()

    class Meta:
        ordering = ["start_datetime"]
        indexes = [
            models.Index(fields=["status", "start_datetime"], name="idx_event_status_start"),
            models.Index(fields=["community", "status"], name="idx_event_community_status"),
        ]

    def __str__(self) -> str:
        return self.title

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Derive the slug from the title on first save."""
        if not self.slug:
            self.slug = build_event_slug(self.title, self.id)
        super().save(*args, **kwargs)

    def clean(self) -> None:
        """Validate the time window and the fields a published event needs."""
        super().clean()
        if self.start_datetime and self.end_datetime and self.end_datetime <= self.start_datetime:
            raise DjangoValidationError({"end_datetime": "End date and time must be after start date and time"})
        if self.status == self.EventStatus.PUBLISHED:
            errors = {
                field: "This field is required for published events."
                for field in self.PUBLISH_REQUIRED_FIELDS
                if not getattr(self, field)
            }
            if errors:
                raise DjangoValidationError(errors)

    @property
    def is_online(self) -> bool:
        return self.event_type in (self.EventType.ONLINE, self.EventType.HYBRID)

    @property
    def is_onsite(self) -> bool:
        return self.event_type in (self.EventType.ONSITE, self.EventType.HYBRID)

    @property
    def event_url(self) -> str:
        """Frontend path of the event."""
        if self.community_id:
            return f"/community/{self.community_id}/event/{self.slug}"
        return f"/events/{self.id}"


class EventTag(TimeStampedModel):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="tags")
    tag = models.CharField(max_length=100, db_index=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(fields=["event", "tag"], name="unique_event_tag"),
        ]

    def __str__(self) -> str:
        return self.tag
