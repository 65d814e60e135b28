from django.http import Http404
from rest_framework.exceptions import NotFound


class NamedNotFoundMixin:
    """Report a missing lookup as ``"<Model> not found"`` instead of DRF's default."""

    not_found_message = "Not found"

    def get_object(self):
        try:
            return super().get_object()
        except Http404 as exc:
            raise NotFound(self.not_found_message) from exc
