"""Tests for the community service."""

import typing as t
import uuid

import pytest
from ninja.errors import HttpError

from accounts.models import EventFlowUser
from communities.exceptions import AlreadyCommunityAdminError, AlreadyCommunityMemberError
from communities.models import Community, CommunityAdmin, CommunityMember
from communities.schema import CommunityCreateSchema, CommunityUpdateSchema
from communities.service import community_service
from subscriptions.models import Subscription

pytestmark = pytest.mark.django_db

Role = CommunityAdmin.Role


def test_create_community_requires_active_subscription(user: EventFlowUser) -> None:
    with pytest.raises(HttpError) as exc_info:
        community_service.create_community(user, CommunityCreateSchema(name="No Sub"))

    assert exc_info.value.status_code == 403
    assert str(exc_info.value) == "Active subscription required to create communities"
    assert not Community.objects.exists()


def test_create_community_makes_creator_organizer(user: EventFlowUser, active_subscription: Subscription) -> None:
    community = community_service.create_community(
        user, CommunityCreateSchema(name="  Wiki Loves Monuments  ", description="Photos")
    )

    assert community.name == "Wiki Loves Monuments"
    assert community.created_by == user
    assert community.is_parent
    admin = CommunityAdmin.objects.get(community=community)
    assert admin.user == user
    assert admin.role == Role.ORGANIZER


def test_create_child_community(user: EventFlowUser, active_subscription: Subscription, community: Community) -> None:
    child = community_service.create_community(
        user, CommunityCreateSchema(name="Local Chapter", parent_community_id=community.id)
    )

    assert child.parent_community == community
    assert list(community.child_communities.all()) == [child]


def test_create_child_community_missing_parent(user: EventFlowUser, active_subscription: Subscription) -> None:
    with pytest.raises(HttpError) as exc_info:
        community_service.create_community(
            user, CommunityCreateSchema(name="Orphan", parent_community_id=uuid.uuid4())
        )
    assert exc_info.value.status_code == 404


def test_create_child_community_requires_parent_organizer(
    user: EventFlowUser, active_subscription: Subscription, community: Community
) -> None:
    CommunityAdmin.objects.filter(community=community, user=user).update(role=Role.COORGANIZER)

    with pytest.raises(HttpError) as exc_info:
        community_service.create_community(user, CommunityCreateSchema(name="Child", parent_community_id=community.id))

    assert exc_info.value.status_code == 403
    assert Community.objects.count() == 1


def test_join_community(community: Community, other_user: EventFlowUser) -> None:
    member = community_service.join_community(other_user, community)

    assert member.role == CommunityMember.Role.MEMBER
    with pytest.raises(AlreadyCommunityMemberError):
        community_service.join_community(other_user, community)


def test_admin_cannot_join_as_member(community: Community, user: EventFlowUser) -> None:
    with pytest.raises(AlreadyCommunityAdminError):
        community_service.join_community(user, community)
    assert not CommunityMember.objects.exists()


def test_update_community_keeps_name(community: Community) -> None:
    updated = community_service.update_community(
        community, CommunityUpdateSchema(description="New description", photo=None)
    )

    updated.refresh_from_db()
    assert updated.description == "New description"
    assert updated.name == "Wikimedia Test Community"


def test_get_my_role(community: Community, user: EventFlowUser, other_user: EventFlowUser) -> None:
    mine = community_service.get_my_role(community, user)
    theirs = community_service.get_my_role(community, other_user)

    assert mine.is_admin and mine.admin_role == Role.ORGANIZER
    assert not mine.is_member
    assert not theirs.is_admin and not theirs.is_member


class TestChangeAdminRole:
    def test_invalid_role(self, community: Community, user: EventFlowUser, owner_admin: CommunityAdmin) -> None:
        with pytest.raises(HttpError) as exc_info:
            community_service.change_admin_role(community, user, owner_admin.id, "superuser")
        assert exc_info.value.status_code == 400
        assert str(exc_info.value).startswith("Invalid role. Must be one of: owner, organizer")

    def test_non_admin_forbidden(
        self, community: Community, other_user: EventFlowUser, organizer_admin: CommunityAdmin
    ) -> None:
        with pytest.raises(HttpError) as exc_info:
            community_service.change_admin_role(community, other_user, organizer_admin.id, Role.MENTOR)
        assert exc_info.value.status_code == 403
        assert str(exc_info.value) == "You don't have permission to manage roles"

    def test_coorganizer_forbidden(
        self, community: Community, user_factory: t.Any, organizer_admin: CommunityAdmin
    ) -> None:
        coorganizer = user_factory()
        CommunityAdmin.objects.create(community=community, user=coorganizer, role=Role.COORGANIZER)

        with pytest.raises(HttpError) as exc_info:
            community_service.change_admin_role(community, coorganizer, organizer_admin.id, Role.MENTOR)
        assert exc_info.value.status_code == 403
        assert str(exc_info.value) == "Only owners and organizers can manage roles"

    def test_organizer_assigns_up_to_coorganizer(
        self, community: Community, user: EventFlowUser, user_factory: t.Any
    ) -> None:
        target = CommunityAdmin.objects.create(community=community, user=user_factory(), role=Role.MENTOR)

        updated = community_service.change_admin_role(community, user, target.id, Role.COORGANIZER)
        assert updated.role == Role.COORGANIZER

        with pytest.raises(HttpError) as exc_info:
            community_service.change_admin_role(community, user, target.id, Role.ORGANIZER)
        assert exc_info.value.status_code == 403
        assert str(exc_info.value) == "Organizers can only assign roles up to Coorganizer"

    def test_organizer_cannot_touch_owner(
        self, community: Community, user: EventFlowUser, owner_admin: CommunityAdmin
    ) -> None:
        with pytest.raises(HttpError) as exc_info:
            community_service.change_admin_role(community, user, owner_admin.id, Role.MENTOR)
        assert exc_info.value.status_code == 403
        owner_admin.refresh_from_db()
        assert owner_admin.role == Role.OWNER

    def test_owner_assigns_any_role(
        self, community: Community, owner_admin: CommunityAdmin, organizer_admin: CommunityAdmin
    ) -> None:
        updated = community_service.change_admin_role(community, owner_admin.user, organizer_admin.id, Role.OWNER)
        assert updated.role == Role.OWNER

    def test_last_owner_cannot_step_down(self, community: Community, owner_admin: CommunityAdmin) -> None:
        with pytest.raises(HttpError) as exc_info:
            community_service.change_admin_role(community, owner_admin.user, owner_admin.id, Role.ORGANIZER)
        assert exc_info.value.status_code == 400
        assert "You are the only owner" in str(exc_info.value)

    def test_owner_steps_down_when_another_owner_exists(
        self, community: Community, owner_admin: CommunityAdmin, user_factory: t.Any
    ) -> None:
        CommunityAdmin.objects.create(community=community, user=user_factory(), role=Role.OWNER)

        updated = community_service.change_admin_role(community, owner_admin.user, owner_admin.id, Role.ORGANIZER)
        assert updated.role == Role.ORGANIZER

    def test_unknown_admin(self, community: Community, user: EventFlowUser) -> None:
        with pytest.raises(HttpError) as exc_info:
            community_service.change_admin_role(community, user, uuid.uuid4(), Role.MENTOR)
        assert exc_info.value.status_code == 404


class TestPromoteMember:
    def test_promote(self, community: Community, user: EventFlowUser, member: CommunityMember) -> None:
        promoted = community_service.promote_member(community, user, member.id, CommunityMember.Role.ENVOY)
        assert promoted.role == CommunityMember.Role.ENVOY

    def test_invalid_role(self, community: Community, user: EventFlowUser, member: CommunityMember) -> None:
        with pytest.raises(HttpError) as exc_info:
            community_service.promote_member(community, user, member.id, "owner")
        assert exc_info.value.status_code == 400

    def test_requires_manager(
        self, community: Community, other_user: EventFlowUser, member: CommunityMember
    ) -> None:
        with pytest.raises(HttpError) as exc_info:
            community_service.promote_member(community, other_user, member.id, CommunityMember.Role.ENVOY)
        assert exc_info.value.status_code == 403
        assert str(exc_info.value) == "Only organizers and owners can promote members"
