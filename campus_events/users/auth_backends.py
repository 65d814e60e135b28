from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend


class EmailBackend(ModelBackend):
    """Sign in by email, matched case-insensitively.

    An unknown email still pays for one password hash, so it cannot be told
    apart from a wrong password by timing.
    """

    def authenticate(self, request, username=None, password=None, email=None, **kwargs):
        email = email if email is not None else username
        if not email or password is None:
            return None

        user_model = get_user_model()
        try:
            user = user_model._default_manager.get_by_natural_key(email)  # noqa: SLF001
        except user_model.DoesNotExist:
            user_model().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
