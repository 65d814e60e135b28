from django.urls import re_path

from .auth_views import ChangePasswordView
from .auth_views import LoginView
from .auth_views import LogoutView
from .auth_views import ProfileView
from .auth_views import RegisterView
from .auth_views import UserStatsView

app_name = "auth"

# Trailing slashes are optional so SPA clients can call either form.
urlpatterns = [
    re_path(r"^register/?$", RegisterView.as_view(), name="register"),
    re_path(r"^login/?$", LoginView.as_view(), name="login"),
    re_path(r"^logout/?$", LogoutView.as_view(), name="logout"),
    re_path(r"^profile/?$", ProfileView.as_view(), name="profile"),
    re_path(
        r"^change-password/?$",
        ChangePasswordView.as_view(),
        name="change-password",
    ),
    re_path(r"^stats/?$", UserStatsView.as_view(), name="stats"),
]
