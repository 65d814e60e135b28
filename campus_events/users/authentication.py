"""Bearer-token authentication for the REST API."""

from __future__ import annotations

import logging

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from campus_events.core.exceptions import InvalidToken
from campus_events.core.exceptions import TokenExpired

logger = logging.getLogger(__name__)


def issue_token(user) -> str:
    """Sign an access token naming ``user``."""
    return str(AccessToken.for_user(user))


class BearerJWTAuthentication(JWTAuthentication):
    """``Authorization: Bearer <token>`` resolved to an active user.

    Expired tokens raise ``TokenExpired``; anything else that fails to verify,
    including a token whose user has since been deleted, is ``InvalidToken``.
    """

    www_authenticate_realm = "api"

    def get_validated_token(self, raw_token):
        try:
            return AccessToken(raw_token)
        except TokenError as exc:
            if "expired" in str(exc).lower():
                raise TokenExpired from exc
            raise InvalidToken from exc

    def get_user(self, validated_token):
        try:
            user_id = validated_token[api_settings.USER_ID_CLAIM]
        except KeyError as exc:
            raise InvalidToken from exc

        try:
            user = self.user_model.objects.get(**{api_settings.USER_ID_FIELD: user_id})
        except self.user_model.DoesNotExist as exc:
            raise InvalidToken from exc

        if not user.is_active:
            raise InvalidToken
        return user


class OptionalJWTAuthentication(BearerJWTAuthentication):
    """Like ``BearerJWTAuthentication`` but never rejects the request.

    Used on endpoints that serve anonymous callers and only personalise the
    response when a valid token is present.
    """

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except (InvalidToken, TokenExpired) as exc:
            logger.warning("Ignoring unusable bearer token: %s", exc.detail)
            return None


class OptionalAuthActionsMixin:
    """Per-action switch to ``OptionalJWTAuthentication`` on a ViewSet.

    Actions listed in ``optional_auth_actions`` serve anonymous callers; every
    other action keeps the strict default authenticators.
    """

    optional_auth_actions: tuple[str, ...] = ()

    def get_authenticators(self):
        action_map = getattr(self, "action_map", None) or {}
        request = getattr(self, "request", None)
        method = getattr(request, "method", "") or ""
        if action_map.get(method.lower()) in self.optional_auth_actions:
            return [OptionalJWTAuthentication()]
        return super().get_authenticators()
