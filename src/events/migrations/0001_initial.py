import uuid

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import accounts.models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("communities", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                (
                    "event_type",
                    models.CharField(
                        choices=[
                            ("online", "Online"),
                            ("onsite", "Onsite"),
                            ("hybrid", "Hybrid"),
                            ("hackathon", "Hackathon"),
                            ("editathon", "Editathon"),
                        ],
                        db_index=True,
                        max_length=20,
                    ),
                ),
                ("title", models.CharField(db_index=True, max_length=100)),
                ("short_description", models.CharField(blank=True, max_length=200)),
                ("full_description", models.TextField(blank=True)),
                ("category", models.CharField(blank=True, db_index=True, max_length=255)),
                ("language", models.CharField(default="en", max_length=10)),
                ("start_datetime", models.DateTimeField(blank=True, db_index=True, null=True)),
                ("end_datetime", models.DateTimeField(blank=True, db_index=True, null=True)),
                (
                    "timezone",
                    models.CharField(default="UTC", max_length=50, validators=[accounts.models.validate_timezone]),
                ),
                (
                    "registration_type",
                    models.CharField(choices=[("free", "Free"), ("paid", "Paid")], default="free", max_length=20),
                ),
                (
                    "capacity",
                    models.PositiveIntegerField(blank=True, help_text="Leave empty for unlimited capacity", null=True),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("draft", "Draft"), ("published", "Published"), ("cancelled", "Cancelled")],
                        db_index=True,
                        default="draft",
                        max_length=20,
                    ),
                ),
                ("contact_email", models.EmailField(blank=True, max_length=254)),
                ("contact_phone", models.CharField(blank=True, max_length=20)),
                ("banner_url", models.URLField(blank=True, max_length=500)),
                ("thumbnail_url", models.URLField(blank=True, max_length=500)),
                ("slug", models.SlugField(max_length=200, unique=True)),
                ("accessibility_features", models.TextField(blank=True)),
                ("doors_open_time", models.CharField(blank=True, max_length=10)),
                ("published_at", models.DateTimeField(blank=True, null=True)),
                (
                    "community",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="events",
                        to="communities.community",
                    ),
                ),
                (
                    "primary_organizer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="organized_events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["start_datetime"],
                "indexes": [
                    models.Index(fields=["status", "start_datetime"], name="idx_event_status_start"),
                    models.Index(fields=["community", "status"], name="idx_event_community_status"),
                ],
            },
        ),
        migrations.CreateModel(
            name="EventTag",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("tag", models.CharField(db_index=True, max_length=100)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="tags", to="events.event"
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "constraints": [models.UniqueConstraint(fields=("event", "tag"), name="unique_event_tag")],
            },
        ),
        migrations.CreateModel(
            name="OnlineEventMetadata",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("platform_type", models.CharField(blank=True, max_length=50)),
                ("meeting_link", models.URLField(blank=True, max_length=500)),
                ("meeting_id", models.CharField(blank=True, max_length=100)),
                ("passcode", models.CharField(blank=True, max_length=50)),
                ("access_control", models.CharField(blank=True, max_length=50)),
                ("waiting_room_enabled", models.BooleanField(default=False)),
                ("max_participants", models.PositiveIntegerField(blank=True, null=True)),
                ("recording_enabled", models.BooleanField(default=False)),
                ("recording_availability", models.CharField(blank=True, max_length=50)),
                ("recording_url", models.URLField(blank=True, max_length=500)),
                (
                    "event",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE, related_name="online_metadata", to="events.event"
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "online event metadata",
            },
        ),
        migrations.CreateModel(
            name="OnsiteEventMetadata",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("venue_name", models.CharField(blank=True, max_length=100)),
                ("venue_type", models.CharField(blank=True, max_length=50)),
                ("address_line1", models.CharField(blank=True, max_length=200)),
                ("address_line2", models.CharField(blank=True, max_length=200)),
                ("city", models.CharField(blank=True, db_index=True, max_length=100)),
                ("state", models.CharField(blank=True, max_length=100)),
                ("postal_code", models.CharField(blank=True, max_length=20)),
                ("country", models.CharField(blank=True, max_length=50)),
                ("room_name", models.CharField(blank=True, max_length=100)),
                ("floor_number", models.CharField(blank=True, max_length=20)),
                (
                    "latitude",
                    models.DecimalField(
                        blank=True,
                        decimal_places=8,
                        max_digits=10,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(-90),
                            django.core.validators.MaxValueValidator(90),
                        ],
                    ),
                ),
                (
                    "longitude",
                    models.DecimalField(
                        blank=True,
                        decimal_places=8,
                        max_digits=11,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(-180),
                            django.core.validators.MaxValueValidator(180),
                        ],
                    ),
                ),
                ("google_maps_link", models.URLField(blank=True, max_length=500)),
                ("landmark", models.CharField(blank=True, max_length=100)),
                ("parking_available", models.BooleanField(default=False)),
                ("parking_instructions", models.TextField(blank=True)),
                ("public_transport", models.TextField(blank=True)),
                ("venue_capacity", models.PositiveIntegerField(blank=True, null=True)),
                ("seating_arrangement", models.CharField(blank=True, max_length=50)),
                ("check_in_required", models.BooleanField(default=False)),
                ("check_in_method", models.CharField(blank=True, max_length=50)),
                ("id_verification", models.BooleanField(default=False)),
                ("age_restriction", models.CharField(blank=True, max_length=20)),
                ("minimum_age", models.PositiveIntegerField(blank=True, null=True)),
                ("dress_code", models.CharField(blank=True, max_length=50)),
                ("items_not_allowed", models.TextField(blank=True)),
                ("first_aid_available", models.BooleanField(default=False)),
                ("emergency_contact", models.CharField(blank=True, max_length=20)),
                (
                    "event",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE, related_name="onsite_metadata", to="events.event"
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "onsite event metadata",
            },
        ),
        migrations.CreateModel(
            name="EventRegistration",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("confirmed", "Confirmed"), ("cancelled", "Cancelled"), ("waitlisted", "Waitlisted")],
                        db_index=True,
                        default="confirmed",
                        max_length=20,
                    ),
                ),
                ("guest_count", models.PositiveIntegerField(default=0)),
                ("registered_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                (
                    "community",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="event_registrations",
                        to="communities.community",
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="registrations", to="events.event"
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_registrations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["registered_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("event", "user"), name="unique_event_registration"),
                ],
            },
        ),
    ]
