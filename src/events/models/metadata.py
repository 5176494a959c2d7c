from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from common.models import TimeStampedModel

from .event import Event


class OnlineEventMetadata(TimeStampedModel):
    """Meeting details of online and hybrid events."""

    event = models.OneToOneField(Event, on_delete=models.CASCADE, related_name="online_metadata")
    platform_type = models.CharField(max_length=50, blank=True)
    meeting_link = models.URLField(max_length=500, blank=True)
    meeting_id = models.CharField(max_length=100, blank=True)
    passcode = models.CharField(max_length=50, blank=True)
    access_control = models.CharField(max_length=50, blank=True)
    waiting_room_enabled = models.BooleanField(default=False)
    max_participants = models.PositiveIntegerField(null=True, blank=True)
    recording_enabled = models.BooleanField(default=False)
    recording_availability = models.CharField(max_length=50, blank=True)
    recording_url = models.URLField(max_length=500, blank=True)

    class Meta:
        verbose_name_plural = "online event metadata"

    def __str__(self) -> str:
        return f"Online details of {self.event}"


class OnsiteEventMetadata(TimeStampedModel):
    """Venue and logistics of onsite and hybrid events."""

    event = models.OneToOneField(Event, on_delete=models.CASCADE, related_name="onsite_metadata")
    venue_name = models.CharField(max_length=100, blank=True)
    venue_type = models.CharField(max_length=50, blank=True)
    address_line1 = models.CharField(max_length=200, blank=True)
    address_line2 = models.CharField(max_length=200, blank=True)
    city = models.CharField(max_length=100, blank=True, db_index=True)
    state = models.CharField(max_length=100, blank=True)
    postal_code = models.CharField(max_length=20, blank=True)
    country = models.CharField(max_length=50, blank=True)
    room_name = models.CharField(max_length=100, blank=True)
    floor_number = models.CharField(max_length=20, blank=True)
    latitude = models.DecimalField(
        max_digits=10,
        decimal_places=8,
        null=True,
        blank=True,
        validators=[MinValueValidator(-90), MaxValueValidator(90)],
    )
    longitude = models.DecimalField(
        max_digits=11,
        decimal_places=8,
        null=True,
        blank=True,
        validators=[MinValueValidator(-180), MaxValueValidator(180)],
    )
    google_maps_link = models.URLField(max_length=500, blank=True)
    landmark = models.CharField(max_length=100, blank=True)
    parking_available = models.BooleanField(default=False)
    parking_instructions = models.TextField(blank=True)
    public_transport = models.TextField(blank=True)
    venue_capacity = models.PositiveIntegerField(null=True, blank=True)
    seating_arrangement = models.CharField(max_length=50, blank=True)
    check_in_required = models.BooleanField(default=False)
    check_in_method = models.CharField(max_length=50, blank=True)
    id_verification = models.BooleanField(default=False)
    age_restriction = models.CharField(max_length=20, blank=True)
    minimum_age = models.PositiveIntegerField(null=True, blank=True)
    dress_code = models.CharField(max_length=50, blank=True)
    items_not_allowed = models.TextField(blank=True)
    first_aid_available = models.BooleanField(default=False)
    emergency_contact = models.CharField(max_length=20, blank=True)

    class Meta:
        verbose_name_plural = "onsite event metadata"

    def __str__(self) -> str:
        return f"Venue of {self.event}"
