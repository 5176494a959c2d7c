"""Admin interface for accounts app."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from accounts.models import EventFlowUser, LinkedAccount, VerificationToken


class LinkedAccountInline(admin.TabularInline):  # type: ignore[type-arg]
    """Inline for the identity providers linked to a user."""

    model = LinkedAccount
    extra = 0
    can_delete = True
    fields = ["provider", "provider_account_id", "type", "access_token_expires_at", "created_at"]
    readonly_fields = ["provider", "provider_account_id", "type", "access_token_expires_at", "created_at"]


@admin.register(EventFlowUser)
class EventFlowUserAdmin(UserAdmin):  # type: ignore[type-arg]
    """Admin for EventFlowUser with identity and role management."""

    list_display = [
        "username",
        "email",
        "display_name_display",
        "mediawiki_username",
        "email_verified_display",
        "role",
        "user_type",
        "is_staff",
        "date_joined",
        "linked_account_count",
    ]
    list_filter = ["role", "user_type", "email_verified", "is_staff", "is_superuser", "is_active", "date_joined"]
    search_fields = ["username", "email", "name", "first_name", "last_name", "mediawiki_username"]
    ordering = ["-date_joined"]
    date_hierarchy = "date_joined"

    readonly_fields = ["id", "date_joined", "last_login", "email_verified_at", "mediawiki_username_verified_at"]

    fieldsets = (
        (
            "Personal Information",
            {
                "fields": (
                    "id",
                    ("username", "email"),
                    ("name", "first_name", "last_name"),
                    "image",
                    "bio",
                    "timezone",
                )
            },
        ),
        (
            "Identity",
            {
                "fields": (
                    "password",
                    ("email_verified", "email_verified_at", "email_skipped_at"),
                    ("mediawiki_username", "mediawiki_username_verified_at"),
                    ("date_joined", "last_login"),
                )
            },
        ),
        (
            "Platform Role",
            {"fields": (("role", "user_type"),)},
        ),
        (
            "Permissions",
            {
                "fields": (
                    ("is_active", "is_staff", "is_superuser"),
                    "groups",
                    "user_permissions",
                ),
                "classes": ["collapse"],
            },
        ),
    )

    inlines = [LinkedAccountInline]

    @admin.display(description="Display Name", ordering="name")
    def display_name_display(self, obj: EventFlowUser) -> str:
        return obj.display_name

    @admin.display(description="Email Verified", boolean=True)
    def email_verified_display(self, obj: EventFlowUser) -> bool:
        return obj.email_verified

    @admin.display(description="Linked Accounts")
    def linked_account_count(self, obj: EventFlowUser) -> int:
        return obj.linked_accounts.count()


@admin.register(LinkedAccount)
class LinkedAccountAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["user", "provider", "provider_account_id", "type", "created_at"]
    list_filter = ["provider", "type"]
    search_fields = ["user__email", "user__username", "provider_account_id"]
    autocomplete_fields = ["user"]
    readonly_fields = ["created_at", "updated_at"]
    exclude = ["access_token", "refresh_token", "id_token"]


@admin.register(VerificationToken)
class VerificationTokenAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["identifier", "expires_at", "created_at"]
    search_fields = ["identifier"]
    readonly_fields = ["identifier", "value", "expires_at", "created_at"]
