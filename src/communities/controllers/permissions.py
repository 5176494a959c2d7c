from django.http import HttpRequest
from ninja_extra import ControllerBase

from common.permissions import RootPermission
from communities.models import Community, CommunityAdmin

Role = CommunityAdmin.Role

ACTION_ROLES: dict[str, tuple[str, ...]] = {
    "edit_community": (Role.OWNER, Role.ORGANIZER),
    "view_roster": (Role.OWNER, Role.ORGANIZER, Role.COORGANIZER),
}


class CommunityPermission(RootPermission):
    message = "You don't have permission to manage this community"

    def has_object_permission(
        self,
        request: HttpRequest,
        controller: ControllerBase,
        obj: Community,
    ) -> bool:
        """The user must hold one of the admin roles allowed for the action."""
        return CommunityAdmin.objects.filter(
            community=obj,
            user_id=request.user.id,
            role__in=ACTION_ROLES[self.action],
        ).exists()
