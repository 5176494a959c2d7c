import typing as t

from django.conf import settings
from django.db import models
from django.db.models import Count

from common.models import TimeStampedModel


class CommunityQuerySet(models.QuerySet["Community"]):
    def with_counts(self) -> t.Self:
        """Annotate the number of admins and members."""
        return self.annotate(
            admin_count=Count("admins", distinct=True),
            member_count=Count("members", distinct=True),
        )

    def administered_by(self, user: t.Any, roles: t.Iterable[str] | None = None) -> t.Self:
        """Communities where the user holds one of the given admin roles (any role if None)."""
        lookup: dict[str, t.Any] = {"admins__user": user}
        if roles is not None:
            lookup["admins__role__in"] = list(roles)
        return self.filter(**lookup).distinct()


class Community(TimeStampedModel):
    """A community. Communities without a parent are parent communities."""

    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True)
    photo = models.URLField(max_length=2048, blank=True)
    parent_community = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="child_communities",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_communities",
    )

    objects = CommunityQuerySet.as_manager()

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "communities"

    def __str__(self) -> str:
        return self.name

    @property
    def is_parent(self) -> bool:
        """Whether this is a top-level community."""
        return self.parent_community_id is None


class CommunityAdmin(TimeStampedModel):
    """Governance role of a user within a community."""

    class Role(models.TextChoices):
        OWNER = "owner", "Owner"
        ORGANIZER = "organizer", "Organizer"
        COORGANIZER = "coorganizer", "Co-organizer"
        EVENT_ORGANIZER = "event_organizer", "Event organizer"
        ADMIN = "admin", "Admin"
        MODERATOR = "moderator", "Moderator"
        MENTOR = "mentor", "Mentor"

    ROLE_RANKS: t.ClassVar[dict[str, int]] = {
        Role.OWNER: 7,
        Role.ORGANIZER: 6,
        Role.COORGANIZER: 5,
        Role.EVENT_ORGANIZER: 4,
        Role.ADMIN: 3,
        Role.MODERATOR: 2,
        Role.MENTOR: 1,
    }

    community = models.ForeignKey(Community, on_delete=models.CASCADE, related_name="admins")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="community_admin_roles")
    role = models.CharField(max_length=32, choices=Role.choices, default=Role.OWNER, db_index=True)
    assigned_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["assigned_at"]
        constraints = [
            models.UniqueConstraint(fields=["community", "user"], name="unique_community_admin"),
        ]

    def __str__(self) -> str:
        return f"{self.user} ({self.role}) in {self.community}"

    @property
    def rank(self) -> int:
        """Position of the role in the hierarchy, higher is more powerful."""
        return self.ROLE_RANKS.get(self.role, 0)


class CommunityMember(TimeStampedModel):
    """Membership of a user in a community."""

    class Role(models.TextChoices):
        CO_ORGANIZER = "co-organizer", "Co-organizer"
        ENVOY = "envoy", "Envoy"
        CORE_TEAM = "core-team", "Core team"
        VOLUNTEER = "volunteer", "Volunteer"
        MEMBER = "member", "Member"

    community = models.ForeignKey(Community, on_delete=models.CASCADE, related_name="members")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="community_memberships")
    role = models.CharField(max_length=32, choices=Role.choices, default=Role.MEMBER, db_index=True)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["joined_at"]
        constraints = [
            models.UniqueConstraint(fields=["community", "user"], name="unique_community_member"),
        ]

    def __str__(self) -> str:
        return f"{self.user} ({self.role}) in {self.community}"
