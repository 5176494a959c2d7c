"""Admin interface for communities app."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from communities.models import Community, CommunityAdmin, CommunityMember


class CommunityAdminInline(admin.TabularInline):  # type: ignore[type-arg]
    model = CommunityAdmin
    extra = 0
    autocomplete_fields = ["user"]
    fields = ["user", "role", "assigned_at"]
    readonly_fields = ["assigned_at"]


class CommunityMemberInline(admin.TabularInline):  # type: ignore[type-arg]
    model = CommunityMember
    extra = 0
    autocomplete_fields = ["user"]
    fields = ["user", "role", "joined_at"]
    readonly_fields = ["joined_at"]


@admin.register(Community)
class CommunityModelAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["name", "parent_community", "created_by", "admin_count", "member_count", "created_at"]
    list_filter = ["created_at"]
    search_fields = ["name", "description"]
    autocomplete_fields = ["parent_community", "created_by"]
    readonly_fields = ["id", "created_at", "updated_at"]
    inlines = [CommunityAdminInline, CommunityMemberInline]

    def get_queryset(self, request: HttpRequest) -> QuerySet[Community]:
        qs = super().get_queryset(request)
        qs = qs.with_counts()  # type: ignore[attr-defined]
        return qs.select_related("parent_community", "created_by")  # type: ignore[no-any-return]

    @admin.display(description="Admins", ordering="admin_count")
    def admin_count(self, obj: Community) -> int:
        return obj.admin_count  # type: ignore[attr-defined,no-any-return]

    @admin.display(description="Members", ordering="member_count")
    def member_count(self, obj: Community) -> int:
        return obj.member_count  # type: ignore[attr-defined,no-any-return]


@admin.register(CommunityAdmin)
class CommunityAdminModelAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["user", "community", "role", "assigned_at"]
    list_filter = ["role"]
    search_fields = ["user__username", "user__email", "user__name", "community__name"]
    autocomplete_fields = ["user", "community"]


@admin.register(CommunityMember)
class CommunityMemberModelAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["user", "community", "role", "joined_at"]
    list_filter = ["role"]
    search_fields = ["user__username", "user__email", "user__name", "community__name"]
    autocomplete_fields = ["user", "community"]
