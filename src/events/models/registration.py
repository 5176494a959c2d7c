import typing as t

from django.conf import settings
from django.db import models
from django.utils import timezone

from common.models import TimeStampedModel

from .event import Event


class EventRegistrationQuerySet(models.QuerySet["EventRegistration"]):
    def confirmed(self) -> t.Self:
        return self.filter(status=EventRegistration.RegistrationStatus.CONFIRMED)

    def cancelled(self) -> t.Self:
        return self.filter(status=EventRegistration.RegistrationStatus.CANCELLED)


class EventRegistration(TimeStampedModel):
    """A user's place at an event. One per user and event."""

    class RegistrationStatus(models.TextChoices):
        CONFIRMED = "confirmed"
        CANCELLED = "cancelled"
        WAITLISTED = "waitlisted"

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="registrations")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="event_registrations")
    community = models.ForeignKey(
        "communities.Community", on_delete=models.PROTECT, related_name="event_registrations"
    )
    status = models.CharField(
        choices=RegistrationStatus.choices, max_length=20, default=RegistrationStatus.CONFIRMED, db_index=True
    )
    guest_count = models.PositiveIntegerField(default=0)
    registered_at = models.DateTimeField(default=timezone.now)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    objects = EventRegistrationQuerySet.as_manager()

    class Meta:
        ordering = ["registered_at"]
        constraints = [
            models.UniqueConstraint(fields=["event", "user"], name="unique_event_registration"),
        ]

    def __str__(self) -> str:
        return f"{self.user} at {self.event} ({self.status})"
