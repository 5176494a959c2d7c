"""Request rate limits. Anonymous limits key on client IP, user limits on user id."""

from ninja_extra.throttling import AnonRateThrottle, UserRateThrottle


class AnonDefaultThrottle(AnonRateThrottle):
    rate = "60/min"


class UserDefaultThrottle(UserRateThrottle):
    rate = "100/min"


class AuthThrottle(AnonRateThrottle):
    """Login, token refresh and OAuth callbacks."""

    rate = "100/min"


class UserRegistrationThrottle(AnonRateThrottle):
    rate = "100/day"


class WriteThrottle(UserRateThrottle):
    """Creating or changing communities, events and registrations."""

    rate = "100/min"


class EmailVerificationThrottle(UserRateThrottle):
    rate = "20/hour"


class SubscriptionRequestThrottle(UserRateThrottle):
    rate = "20/hour"
