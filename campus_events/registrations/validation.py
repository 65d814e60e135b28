"""Checks for the free-form maps attached to a registration.

Events declare their extra registration fields and feedback questions as
JSON. Submitted answers are validated against those declarations before
they are stored.
"""

from __future__ import annotations

from typing import Any

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from rest_framework.exceptions import ValidationError

FIELD_TYPES = ("text", "email", "number", "select", "checkbox", "textarea")
QUESTION_TYPES = ("rating", "text", "multiple-choice")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_answer(field: dict[str, Any], value: Any) -> None:
    name = field.get("name")
    kind = field.get("type", "text")

    if kind in ("text", "textarea"):
        if not isinstance(value, str):
            msg = f"'{name}' must be text"
            raise ValidationError(msg)
    elif kind == "email":
        try:
            validate_email(value if isinstance(value, str) else "")
        except DjangoValidationError as exc:
            msg = f"'{name}' must be a valid email address"
            raise ValidationError(msg) from exc
    elif kind == "number":
        if not _is_number(value):
            msg = f"'{name}' must be a number"
            raise ValidationError(msg)
    elif kind == "select":
        options = field.get("options") or []
        if value not in options:
            msg = f"'{name}' must be one of: {', '.join(map(str, options))}"
            raise ValidationError(msg)
    elif kind == "checkbox":
        if not isinstance(value, bool):
            msg = f"'{name}' must be true or false"
            raise ValidationError(msg)


def validate_registration_answers(
    fields: list[dict[str, Any]],
    answers: dict[str, Any] | None,
) -> dict[str, Any]:
    """Return ``answers`` after checking them against the event's field list.

    Unknown keys, missing required answers and values of the wrong type are
    rejected with the first problem found.
    """

    answers = answers or {}
    if not isinstance(answers, dict):
        msg = "Registration answers must be an object"
        raise ValidationError(msg)

    by_name = {f.get("name"): f for f in fields or [] if f.get("name")}
    for key in answers:
        if key not in by_name:
            msg = f"Unknown registration field '{key}'"
            raise ValidationError(msg)

    cleaned: dict[str, Any] = {}
    for name, field in by_name.items():
        value = answers.get(name)
        if _is_blank(value):
            if field.get("required"):
                msg = f"'{name}' is required"
                raise ValidationError(msg)
            continue
        _check_answer(field, value)
        cleaned[name] = value.strip() if isinstance(value, str) else value
    return cleaned


def validate_feedback_responses(
    questions: list[dict[str, Any]],
    responses: dict[str, Any] | None,
) -> dict[str, Any]:
    """Type-check feedback responses keyed by question text."""

    responses = responses or {}
    if not isinstance(responses, dict):
        msg = "Feedback responses must be an object"
        raise ValidationError(msg)

    by_question = {q.get("question"): q for q in questions or [] if q.get("question")}
    for key, value in responses.items():
        question = by_question.get(key)
        if question is None:
            msg = f"Unknown feedback question '{key}'"
            raise ValidationError(msg)
        if _is_blank(value):
            continue
        kind = question.get("type", "text")
        if kind == "rating":
            if not (_is_number(value) and 1 <= value <= 5):  # noqa: PLR2004
                msg = f"Response to '{key}' must be a rating from 1 to 5"
                raise ValidationError(msg)
        elif not isinstance(value, str):
            msg = f"Response to '{key}' must be text"
            raise ValidationError(msg)
    return dict(responses)
