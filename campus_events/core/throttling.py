"""Rate limiting for the credential endpoints.

Attempts are counted per (client IP, submitted email) in the Django cache,
which is Redis in production so windows are shared and keys expire.
"""

from __future__ import annotations

import hashlib

from django.conf import settings
from rest_framework.throttling import SimpleRateThrottle

from .exceptions import TooManyAttempts


def client_ip(request) -> str:
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR", "") or ""


class AuthRateThrottle(SimpleRateThrottle):
    """Sliding window of ``AUTH_RATE_LIMIT_ATTEMPTS`` per ``AUTH_RATE_LIMIT_WINDOW``."""

    scope = "auth"
    cache_format = "throttle_%(scope)s_%(ident)s"

    def get_rate(self) -> str:
        return f"{settings.AUTH_RATE_LIMIT_ATTEMPTS}/{settings.AUTH_RATE_LIMIT_WINDOW}"

    def parse_rate(self, rate):
        if rate is None:
            return (None, None)
        attempts, window = rate.split("/")
        return (int(attempts), int(window))

    def get_cache_key(self, request, view):
        email = ""
        data = getattr(request, "data", None)
        if hasattr(data, "get"):
            email = str(data.get("email") or "").strip().lower()
        digest = hashlib.sha256(f"{client_ip(request)}|{email}".encode()).hexdigest()
        return self.cache_format % {"scope": self.scope, "ident": digest}


class AuthThrottleMixin:
    """Raise ``TooManyAttempts`` instead of DRF's generic ``Throttled``."""

    throttle_classes = [AuthRateThrottle]

    def throttled(self, request, wait):
        raise TooManyAttempts(wait=wait)
