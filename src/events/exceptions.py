class EventNotOpenForRegistrationError(Exception):
    """Raised when registering for an event that is not published."""

    def __init__(self, message: str = "This event is not available for registration") -> None:
        super().__init__(message)


class AlreadyRegisteredError(Exception):
    """Raised when a user already holds a registration for the event."""


class RegistrationCancelledError(Exception):
    """Raised when a user whose registration was cancelled tries to register again."""


class EventAtCapacityError(Exception):
    """Raised when an event has no room for another confirmed registration."""
