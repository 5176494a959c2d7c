import typing as t

from django.contrib.auth.models import AnonymousUser
from ninja_extra import ControllerBase

from accounts.models import EventFlowUser


class UserAwareController(ControllerBase):
    def maybe_user(self) -> EventFlowUser | AnonymousUser:
        """Get the user for this request."""
        return t.cast(EventFlowUser | AnonymousUser, self.context.request.user)  # type: ignore[union-attr]

    def user(self) -> EventFlowUser:
        """Get the user for this request."""
        return t.cast(EventFlowUser, self.context.request.user)  # type: ignore[union-attr]
