from django.urls import re_path

from .views import RecentAuditView

app_name = "audit"

# Mounted under /api/audit/ by config.api_router.
urlpatterns = [
    re_path(r"^recent/?$", RecentAuditView.as_view(), name="recent"),
]
