from django.conf import settings
from django.contrib import admin
from django.urls import include
from django.urls import path
from django.urls import re_path
from drf_spectacular.views import SpectacularAPIView
from drf_spectacular.views import SpectacularSwaggerView

from .health import health as health_view

urlpatterns = [
    # Django Admin, use {% url 'admin:index' %}
    path(settings.ADMIN_URL, admin.site.urls),
    re_path(r"^health/?$", health_view, name="health"),
]

# API URLS
urlpatterns += [
    path(
        "api/auth/",
        include("campus_events.users.api.auth_urls", namespace="auth"),
    ),
    path("api/", include("config.api_router", namespace="api")),
    path(
        "api/schema/",
        SpectacularAPIView.as_view(),
        name="api-schema",
    ),
    path(
        "api/docs/",
        SpectacularSwaggerView.as_view(url_name="api-schema"),
        name="api-docs",
    ),
]

handler404 = "campus_events.core.views.page_not_found"
handler500 = "campus_events.core.views.server_error"
