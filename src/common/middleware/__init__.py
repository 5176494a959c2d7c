"""Common middleware for EventFlow."""

from .observability import StructlogContextMiddleware
from .timezone import TimezoneResetMiddleware

__all__ = ["StructlogContextMiddleware", "TimezoneResetMiddleware"]
