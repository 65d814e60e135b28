"""Error taxonomy raised by the domain services.

Kept free of ``rest_framework.views`` because the authentication classes
import it while DRF is still resolving its settings.
"""

from __future__ import annotations

import math

from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.exceptions import Throttled


class Conflict(APIException):
    """The operation is incompatible with the current state of a record."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("Operation conflicts with the current state.")
    default_code = "conflict"


class DuplicateKey(Conflict):
    default_detail = _("Record already exists.")
    default_code = "duplicate_key"


class InvalidState(Conflict):
    default_detail = _("Operation not allowed in the current state.")
    default_code = "invalid_state"


class AlreadyRegistered(Conflict):
    default_detail = _("You are already registered for this event")
    default_code = "already_registered"


class RegistrationClosed(Conflict):
    default_detail = _("Registration is closed for this event")
    default_code = "registration_closed"


class DeadlinePassed(Conflict):
    default_detail = _("Cannot cancel registration within 24 hours of the event")
    default_code = "deadline_passed"


class WeakSecret(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("Password must be at least 6 characters")
    default_code = "weak_secret"


class InvalidCredentials(APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = _("Invalid credentials")
    default_code = "invalid_credentials"


class IncorrectPassword(InvalidCredentials):
    """A signed-in caller re-entered the wrong password."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("Current password is incorrect")


class InvalidToken(APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = _("Invalid token")
    default_code = "invalid_token"


class TokenExpired(APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = _("Token expired")
    default_code = "token_expired"


class TooManyAttempts(Throttled):
    default_detail = _("Too many authentication attempts, please try again later")
    default_code = "too_many_attempts"

    def __init__(self, wait=None, detail=None, code=None):
        # Keep the message stable; Throttled would append the wait time.
        super().__init__(wait=None, detail=detail, code=code)
        self.wait = math.ceil(wait) if wait else None

