"""Community creation, membership and role management."""

from uuid import UUID

import structlog
from django.db import transaction
from django.utils.translation import gettext_lazy as _
from ninja.errors import HttpError

from accounts.models import EventFlowUser
from common.utils import update_db_instance
from communities.exceptions import AlreadyCommunityAdminError, AlreadyCommunityMemberError
from communities.models import Community, CommunityAdmin, CommunityMember
from communities.schema import CommunityCreateSchema, CommunityUpdateSchema, MyCommunityRoleSchema
from subscriptions.service.subscription_service import has_active_subscription

logger = structlog.get_logger(__name__)

Role = CommunityAdmin.Role

# Admin roles allowed to create child communities, edit a community and manage roles
MANAGER_ROLES = (Role.OWNER, Role.ORGANIZER)
# Admin roles allowed to see the admin and member rosters
ROSTER_ROLES = (Role.OWNER, Role.ORGANIZER, Role.COORGANIZER)


def get_admin_record(community: Community, user: EventFlowUser) -> CommunityAdmin | None:
    """The user's admin record in the community, if any."""
    return CommunityAdmin.objects.filter(community=community, user=user).first()


def is_community_manager(community: Community, user: EventFlowUser) -> bool:
    """Whether the user is an owner or organizer of the community."""
    return CommunityAdmin.objects.filter(community=community, user=user, role__in=MANAGER_ROLES).exists()


@transaction.atomic
def create_community(user: EventFlowUser, payload: CommunityCreateSchema) -> Community:
    """Create a community and make the creator its organizer.

    Requires an active subscription. A child community can only be created by an organizer (or owner)
    of the parent.
    """
    if not has_active_subscription(user):
        raise HttpError(403, str(_("Active subscription required to create communities")))

    parent: Community | None = None
    if payload.parent_community_id is not None:
        parent = Community.objects.filter(pk=payload.parent_community_id).first()
        if parent is None:
            raise HttpError(404, str(_("Parent community not found")))
        if not is_community_manager(parent, user):
            raise HttpError(
                403, str(_("You must be the organizer of the parent community to create a child community"))
            )

    community = Community.objects.create(
        name=payload.name,
        description=payload.description,
        photo=str(payload.photo) if payload.photo else "",
        parent_community=parent,
        created_by=user,
    )
    CommunityAdmin.objects.create(community=community, user=user, role=Role.ORGANIZER)
    logger.info(
        "community_created",
        community_id=str(community.id),
        parent_community_id=str(parent.id) if parent else None,
        user_id=str(user.id),
    )
    return community


@transaction.atomic
def join_community(user: EventFlowUser, community: Community) -> CommunityMember:
    """Add the user to the community as a plain member."""
    if CommunityAdmin.objects.filter(community=community, user=user).exists():
        raise AlreadyCommunityAdminError
    if CommunityMember.objects.filter(community=community, user=user).exists():
        raise AlreadyCommunityMemberError
    member = CommunityMember.objects.create(community=community, user=user, role=CommunityMember.Role.MEMBER)
    logger.info("community_joined", community_id=str(community.id), user_id=str(user.id))
    return member


def update_community(community: Community, payload: CommunityUpdateSchema) -> Community:
    """Update the description and photo. The name cannot be changed."""
    return update_db_instance(community, **payload.model_dump(exclude_unset=True, exclude_none=True))


def get_my_role(community: Community, user: EventFlowUser) -> MyCommunityRoleSchema:
    admin = get_admin_record(community, user)
    member = CommunityMember.objects.filter(community=community, user=user).first()
    return MyCommunityRoleSchema(
        community_id=community.id,
        is_admin=admin is not None,
        admin_role=admin.role if admin else None,
        is_member=member is not None,
        member_role=member.role if member else None,
    )


@transaction.atomic
def change_admin_role(community: Community, actor: EventFlowUser, admin_id: UUID, role: str) -> CommunityAdmin:
    """Change the role of an admin of the community.

    Owners may assign any role. Organizers may assign roles up to coorganizer and may not touch an owner.
    The last owner of a community cannot be demoted.
    """
    if role not in Role.values:
        raise HttpError(400, str(_("Invalid role. Must be one of: {roles}")).format(roles=", ".join(Role.values)))

    actor_admin = get_admin_record(community, actor)
    if actor_admin is None:
        raise HttpError(403, str(_("You don't have permission to manage roles")))
    if actor_admin.role not in MANAGER_ROLES:
        raise HttpError(403, str(_("Only owners and organizers can manage roles")))

    target = CommunityAdmin.objects.select_for_update().filter(community=community, pk=admin_id).first()
    if target is None:
        raise HttpError(404, str(_("Administrator record not found")))

    if actor_admin.role == Role.ORGANIZER:
        if CommunityAdmin.ROLE_RANKS[role] > CommunityAdmin.ROLE_RANKS[Role.COORGANIZER]:
            raise HttpError(403, str(_("Organizers can only assign roles up to Coorganizer")))
        if target.role == Role.OWNER:
            raise HttpError(403, str(_("Organizers cannot change the role of an owner")))

    if target.role == Role.OWNER and role != Role.OWNER:
        other_owners = CommunityAdmin.objects.filter(community=community, role=Role.OWNER).exclude(pk=target.pk)
        if not other_owners.exists():
            raise HttpError(400, str(_("Cannot demote yourself. You are the only owner. Assign another owner first.")))

    previous_role = target.role
    target.role = role
    target.save(update_fields=["role", "updated_at"])
    logger.info(
        "community_admin_role_changed",
        community_id=str(community.id),
        admin_id=str(target.id),
        previous_role=previous_role,
        role=role,
        changed_by=str(actor.id),
    )
    return target


@transaction.atomic
def promote_member(community: Community, actor: EventFlowUser, member_id: UUID, role: str) -> CommunityMember:
    """Assign a member role (co-organizer, envoy, core-team, volunteer or member)."""
    if not is_community_manager(community, actor):
        raise HttpError(403, str(_("Only organizers and owners can promote members")))
    if role not in CommunityMember.Role.values:
        raise HttpError(
            400,
            str(_("Invalid role. Must be one of: {roles}")).format(roles=", ".join(CommunityMember.Role.values)),
        )

    member = CommunityMember.objects.select_for_update().filter(community=community, pk=member_id).first()
    if member is None:
        raise HttpError(404, str(_("Member not found")))

    member.role = role
    member.save(update_fields=["role", "updated_at"])
    logger.info(
        "community_member_promoted",
        community_id=str(community.id),
        member_id=str(member.id),
        role=role,
        promoted_by=str(actor.id),
    )
    return member
