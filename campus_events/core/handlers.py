"""Envelope exception handler, configured as ``EXCEPTION_HANDLER``."""

from __future__ import annotations

import logging
from typing import Any

from django.conf import settings
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler
from rest_framework.views import set_rollback

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong!"


def first_error_message(detail: Any) -> str:
    """Walk a DRF error structure and return its first leaf message."""

    if isinstance(detail, dict):
        for value in detail.values():
            message = first_error_message(value)
            if message:
                return message
        return ""
    if isinstance(detail, (list, tuple)):
        for item in detail:
            message = first_error_message(item)
            if message:
                return message
        return ""
    return str(detail)


def first_error_code(detail: Any, fallback: str) -> str:
    if isinstance(detail, dict):
        for value in detail.values():
            return first_error_code(value, fallback)
        return fallback
    if isinstance(detail, (list, tuple)):
        for item in detail:
            return first_error_code(item, fallback)
        return fallback
    return getattr(detail, "code", None) or fallback


def envelope_exception_handler(exc: Exception, context: dict[str, Any]):
    """Render every error as ``{success: false, message, code}``.

    Validation errors are flattened to the first message. Anything DRF does
    not know about is logged and reported as a generic 500.
    """

    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.exception(
            "Unhandled error in %s",
            type(view).__name__ if view is not None else "request",
        )
        body: dict[str, Any] = {
            "success": False,
            "message": GENERIC_ERROR_MESSAGE,
            "code": "internal_error",
        }
        if settings.DEBUG:
            body["error"] = str(exc)
        set_rollback()
        return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    detail = getattr(exc, "detail", response.data)
    fallback_code = getattr(exc, "default_code", "error")
    response.data = {
        "success": False,
        "message": first_error_message(detail) or GENERIC_ERROR_MESSAGE,
        "code": first_error_code(detail, fallback_code),
    }
    if response.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("Server error: %s", response.data["message"])
    return response
