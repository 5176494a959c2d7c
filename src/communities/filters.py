from uuid import UUID

from django.db.models import Q
from ninja import Field, FilterSchema


class CommunityFilterSchema(FilterSchema):
    parent_community: UUID | None = Field(None, q="parent_community_id")  # type: ignore[call-overload]
    parents_only: bool | None = None

    def filter_parents_only(self, parents_only: bool | None) -> Q:
        """Top-level communities only."""
        if parents_only:
            return Q(parent_community__isnull=True)
        return Q()
