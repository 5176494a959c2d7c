class EmailAlreadyInUseError(Exception):
    """Raised when an email address already belongs to another user."""


class AccountAlreadyLinkedError(Exception):
    """Raised when a provider account is already linked to a different user."""


class MediaWikiOAuthError(Exception):
    """Raised when the MediaWiki OAuth exchange fails or returns unusable data."""
