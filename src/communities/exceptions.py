class AlreadyCommunityMemberError(Exception):
    """Raised when a user tries to join a community they already belong to."""


class AlreadyCommunityAdminError(Exception):
    """Raised when an admin of a community tries to join it as a member."""
