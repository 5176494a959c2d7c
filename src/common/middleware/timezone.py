import typing as t

from django.http import HttpRequest, HttpResponse
from django.utils import timezone


class TimezoneResetMiddleware:
    """Reset the active time zone once the response is built.

    The user's zone is activated during JWT authentication (see common.authentication),
    which happens inside the view. The activation is thread-local, so it is cleared here
    to keep it from leaking into the next request served by the same worker.
    """

    def __init__(self, get_response: t.Callable[[HttpRequest], HttpResponse]) -> None:
        """Initialize the middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Process the request and deactivate the time zone afterwards."""
        response = self.get_response(request)
        timezone.deactivate()
        return response
