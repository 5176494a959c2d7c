from django.http import HttpRequest
from ninja_extra import ControllerBase
from ninja_extra.permissions import BasePermission


class RootPermission(BasePermission):
    """Object permission keyed by an action name.

    Controllers attach it with the action they perform, e.g. ``EventPermission("edit_event")``,
    and subclasses decide in ``has_object_permission`` once the object is loaded.
    """

    message = "You don't have permission to perform this action"

    def __init__(self, action: str) -> None:
        self.action = action

    def has_permission(self, request: HttpRequest, controller: ControllerBase) -> bool:
        """Always allow here; the decision is made per object."""
        return True
