import datetime
import typing as t
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import Field, HttpUrl

from accounts.schema import ContactUserSchema
from common.schema import OneToTwoFiftyFiveString, StrippedString

from .models import Community, CommunityAdmin, CommunityMember


class CommunityCreateSchema(Schema):
    name: OneToTwoFiftyFiveString
    description: StrippedString = ""
    photo: HttpUrl | t.Literal[""] = ""
    parent_community_id: UUID | None = None


class CommunityUpdateSchema(Schema):
    description: StrippedString | None = None
    photo: StrippedString | None = Field(None, max_length=2048)


class CommunitySchema(ModelSchema):
    parent_community_id: UUID | None = None

    class Meta:
        model = Community
        fields = ["id", "name", "description", "photo", "created_at", "updated_at"]


class CommunityInListSchema(ModelSchema):
    parent_community_id: UUID | None = None
    member_count: int = 0

    class Meta:
        model = Community
        fields = ["id", "name", "description", "photo", "created_at"]


class ChildCommunitySchema(ModelSchema):
    class Meta:
        model = Community
        fields = ["id", "name", "photo"]


class CommunityRetrieveSchema(ModelSchema):
    parent_community_id: UUID | None = None
    admin_count: int = 0
    member_count: int = 0
    child_communities: list[ChildCommunitySchema] = Field(default_factory=list)

    class Meta:
        model = Community
        fields = ["id", "name", "description", "photo", "created_at", "updated_at"]

    @staticmethod
    def resolve_child_communities(obj: Community) -> list[Community]:
        return list(obj.child_communities.all())


class CommunityAdminSchema(ModelSchema):
    user: ContactUserSchema

    class Meta:
        model = CommunityAdmin
        fields = ["id", "role", "assigned_at"]


class CommunityMemberSchema(ModelSchema):
    user: ContactUserSchema

    class Meta:
        model = CommunityMember
        fields = ["id", "role", "joined_at"]


class MyCommunityRoleSchema(Schema):
    community_id: UUID
    is_admin: bool
    admin_role: str | None = None
    is_member: bool
    member_role: str | None = None


class RoleUpdateSchema(Schema):
    # Validated in the service so that an unknown role is a 400, not a 422
    role: StrippedString


class JoinCommunityResponse(Schema):
    success: bool = True
    message: str
    member: CommunityMemberSchema


class RoleChangeResponse(Schema):
    success: bool = True
    message: str
    role: str
    updated_at: datetime.datetime | None = None
