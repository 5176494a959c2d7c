"""Root URLs: the API under /api/, the Django admin under ADMIN_URL and, in DEBUG, / redirecting to the docs."""

from django.conf import settings
from django.contrib import admin
from django.urls import path
from django.views.generic import RedirectView

from api.api import api

admin.site.site_header = admin.site.site_title = f"{settings.SITE_NAME} v{settings.VERSION}"
admin.site.index_title = "Communities, events and subscriptions"

urlpatterns = [
    path("api/", api.urls),
]

if settings.ADMIN_URL:  # pragma: no cover
    urlpatterns.append(path(settings.ADMIN_URL, admin.site.urls))

if settings.DEBUG:  # pragma: no cover
    urlpatterns.append(path("", RedirectView.as_view(pattern_name="api:openapi-view"), name="redirect_to_docs"))
