from uuid import UUID

from django.db.models import QuerySet
from django.utils.translation import gettext_lazy as _
from ninja import Query
from ninja_extra import api_controller, route, status
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_extra.searching import Searching, searching

from common.authentication import EventFlowJWTAuth
from common.controllers import UserAwareController
from common.schema import ValidationErrorResponse
from common.throttling import WriteThrottle
from communities import filters, schema
from communities.models import Community
from communities.service import community_service

from .permissions import CommunityPermission


@api_controller("/communities", tags=["Communities"])
class CommunityController(UserAwareController):
    def get_queryset(self) -> QuerySet[Community]:
        """Communities with their admin and member counts."""
        return Community.objects.with_counts()

    def get_one(self, community_id: UUID) -> Community:
        """Get one community."""
        return self.get_object_or_exception(  # type: ignore[no-any-return]
            self.get_queryset(), id=community_id, error_message=str(_("Community not found"))
        )

    @route.get("", url_name="list_communities", response=PaginatedResponseSchema[schema.CommunityInListSchema])
    @paginate(PageNumberPaginationExtra, page_size=20)
    @searching(Searching, search_fields=["name", "description"])
    def list_communities(
        self,
        params: filters.CommunityFilterSchema = Query(...),  # type: ignore[type-arg]
    ) -> QuerySet[Community]:
        """Browse and search communities by name or description."""
        return params.filter(self.get_queryset())

    @route.get("/{community_id}", url_name="get_community", response=schema.CommunityRetrieveSchema)
    def get_community(self, community_id: UUID) -> Community:
        """Community details, including its child communities and admin and member counts."""
        return self.get_one(community_id)

    @route.post(
        "",
        url_name="create_community",
        response={201: schema.CommunitySchema, 400: ValidationErrorResponse},
        auth=EventFlowJWTAuth(),
        throttle=WriteThrottle(),
    )
    def create_community(self, payload: schema.CommunityCreateSchema) -> tuple[int, Community]:
        """Create a community. The creator becomes its organizer.

        Requires an active subscription. To create a child community, pass `parent_community_id`;
        only organizers of the parent may do so.
        """
        community = community_service.create_community(self.user(), payload)
        return status.HTTP_201_CREATED, community

    @route.put(
        "/{community_id}",
        url_name="update_community",
        response={200: schema.CommunitySchema, 400: ValidationErrorResponse},
        auth=EventFlowJWTAuth(),
        permissions=[CommunityPermission("edit_community")],
        throttle=WriteThrottle(),
    )
    def update_community(self, community_id: UUID, payload: schema.CommunityUpdateSchema) -> Community:
        """Update the description or photo. Only owners and organizers may do this."""
        community = self.get_one(community_id)
        return community_service.update_community(community, payload)

    @route.post(
        "/{community_id}/join",
        url_name="join_community",
        response={201: schema.JoinCommunityResponse},
        auth=EventFlowJWTAuth(),
        throttle=WriteThrottle(),
    )
    def join_community(self, community_id: UUID) -> tuple[int, schema.JoinCommunityResponse]:
        """Join the community as a member. Admins of the community cannot join it as members."""
        community = self.get_one(community_id)
        member = community_service.join_community(self.user(), community)
        return status.HTTP_201_CREATED, schema.JoinCommunityResponse(
            message=str(_("Successfully joined the community")),
            member=schema.CommunityMemberSchema.from_orm(member),
        )

    @route.get(
        "/{community_id}/my-role",
        url_name="my_community_role",
        response=schema.MyCommunityRoleSchema,
        auth=EventFlowJWTAuth(),
    )
    def my_role(self, community_id: UUID) -> schema.MyCommunityRoleSchema:
        """The caller's admin and member roles in the community."""
        return community_service.get_my_role(self.get_one(community_id), self.user())
