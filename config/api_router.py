from django.urls import include
from django.urls import path
from rest_framework.routers import SimpleRouter

from campus_events.events.api.views import EventViewSet
from campus_events.registrations.api.views import RegistrationViewSet
from campus_events.users.api.views import UserViewSet

router = SimpleRouter()
# Trailing slashes are optional on every routed endpoint.
router.trailing_slash = "/?"

router.register("events", EventViewSet, basename="event")
router.register("registrations", RegistrationViewSet, basename="registration")
router.register("users", UserViewSet)


app_name = "api"
urlpatterns = [
    path(
        "audit/",
        include(("campus_events.audit.api.urls", "audit"), namespace="audit"),
    ),
    *router.urls,
]
