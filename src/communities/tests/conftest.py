import typing as t

import pytest

from accounts.models import EventFlowUser
from communities.models import Community, CommunityAdmin, CommunityMember


@pytest.fixture
def owner_admin(community: Community, user_factory: t.Any) -> CommunityAdmin:
    """An owner of the community, besides the organizer from the community fixture."""
    return CommunityAdmin.objects.create(community=community, user=user_factory(), role=CommunityAdmin.Role.OWNER)


@pytest.fixture
def organizer_admin(community: Community, user: EventFlowUser) -> CommunityAdmin:
    return CommunityAdmin.objects.get(community=community, user=user)


@pytest.fixture
def member(community: Community, other_user: EventFlowUser) -> CommunityMember:
    return CommunityMember.objects.create(community=community, user=other_user)
