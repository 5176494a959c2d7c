from uuid import UUID

from django.db.models import QuerySet
from django.utils.translation import gettext_lazy as _
from ninja_extra import api_controller, route

from common.authentication import EventFlowJWTAuth
from common.controllers import UserAwareController
from common.throttling import WriteThrottle
from communities import schema
from communities.models import Community, CommunityAdmin, CommunityMember
from communities.service import community_service

from .permissions import CommunityPermission


@api_controller(
    "/community-admin/{community_id}", auth=EventFlowJWTAuth(), tags=["Community Admin"], throttle=WriteThrottle()
)
class CommunityAdminController(UserAwareController):
    def get_one(self, community_id: UUID) -> Community:
        """Get one community, checking the route's permissions against it."""
        return self.get_object_or_exception(  # type: ignore[no-any-return]
            Community, id=community_id, error_message=str(_("Community not found"))
        )

    @route.get(
        "/admins",
        url_name="list_community_admins",
        response=list[schema.CommunityAdminSchema],
        permissions=[CommunityPermission("view_roster")],
    )
    def list_admins(self, community_id: UUID) -> QuerySet[CommunityAdmin]:
        """Admins of the community with their contact details, oldest assignment first."""
        community = self.get_one(community_id)
        return community.admins.select_related("user").order_by("assigned_at")

    @route.get(
        "/members",
        url_name="list_community_members",
        response=list[schema.CommunityMemberSchema],
        permissions=[CommunityPermission("view_roster")],
    )
    def list_members(self, community_id: UUID) -> QuerySet[CommunityMember]:
        """Members of the community with their contact details, earliest joiners first."""
        community = self.get_one(community_id)
        return community.members.select_related("user").order_by("joined_at")

    @route.put("/admins/{admin_id}/role", url_name="change_admin_role", response=schema.RoleChangeResponse)
    def change_admin_role(
        self, community_id: UUID, admin_id: UUID, payload: schema.RoleUpdateSchema
    ) -> schema.RoleChangeResponse:
        """Change an admin's role.

        Owners may assign any role. Organizers may assign roles up to coorganizer and cannot change an
        owner's role. The last owner cannot step down.
        """
        community = self.get_one(community_id)
        admin = community_service.change_admin_role(community, self.user(), admin_id, payload.role)
        return schema.RoleChangeResponse(
            message=str(_("Role updated successfully")), role=admin.role, updated_at=admin.updated_at
        )

    @route.put("/members/{member_id}/role", url_name="promote_member", response=schema.RoleChangeResponse)
    def promote_member(
        self, community_id: UUID, member_id: UUID, payload: schema.RoleUpdateSchema
    ) -> schema.RoleChangeResponse:
        """Give a member a community role such as envoy or volunteer. Owners and organizers only."""
        community = self.get_one(community_id)
        member = community_service.promote_member(community, self.user(), member_id, payload.role)
        return schema.RoleChangeResponse(
            message=str(_("Member role updated to {role}")).format(role=member.role),
            role=member.role,
            updated_at=member.updated_at,
        )
