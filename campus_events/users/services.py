"""Account lifecycle: sign-up, sign-in, password and profile changes."""

from __future__ import annotations

import logging
from typing import Any

from django.conf import settings
from django.contrib.auth import authenticate
from django.contrib.auth.signals import user_logged_in
from django.db import IntegrityError
from django.db import transaction
from django.db.models import Count
from django.db.models import Q
from rest_framework.exceptions import ValidationError

from campus_events.core.exceptions import Conflict
from campus_events.core.exceptions import DuplicateKey
from campus_events.core.exceptions import IncorrectPassword
from campus_events.core.exceptions import InvalidCredentials
from campus_events.core.exceptions import WeakSecret

from .authentication import issue_token
from .models import User

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "phone", "department", "year", "avatar", "preferences")
ADMIN_EDITABLE_FIELDS = (
    "name",
    "email",
    "role",
    "is_verified",
    "department",
    "year",
    "phone",
)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def check_secret_strength(password: str) -> None:
    if len(password or "") < settings.PASSWORD_MIN_LENGTH:
        raise WeakSecret


def _duplicate_key(exc: IntegrityError) -> DuplicateKey:
    # The unique index backs up the pre-checks when two writes race.
    if "student_id" in str(exc):
        return DuplicateKey("Student ID already exists")
    return DuplicateKey("User already exists with this email")


def register_user(  # noqa: PLR0913
    *,
    name: str,
    email: str,
    password: str,
    role: str = User.Role.STUDENT,
    student_id: str | None = None,
    department: str = "",
    year: int | None = None,
    phone: str = "",
) -> tuple[User, str]:
    email = normalize_email(email)
    student_id = (student_id or "").strip() or None
    check_secret_strength(password)

    if User.objects.filter(email__iexact=email).exists():
        msg = "User already exists with this email"
        raise DuplicateKey(msg)
    if student_id and User.objects.filter(student_id=student_id).exists():
        msg = "Student ID already exists"
        raise DuplicateKey(msg)

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                name=name.strip(),
                role=role or User.Role.STUDENT,
                student_id=student_id,
                department=department or "",
                year=year,
                phone=phone or "",
            )
    except IntegrityError as exc:
        raise _duplicate_key(exc) from exc
    logger.info("Registered user id=%s role=%s", user.pk, user.role)
    return user, issue_token(user)


def login(email: str, password: str, request=None) -> tuple[User, str]:
    user = authenticate(request, email=normalize_email(email), password=password)
    if user is None:
        logger.warning("Failed login for %s", normalize_email(email))
        raise InvalidCredentials
    # Stamps last_login and writes the audit row through the receivers.
    user_logged_in.send(sender=user.__class__, request=request, user=user)
    return user, issue_token(user)


def change_password(user: User, current_password: str, new_password: str) -> None:
    if not user.check_password(current_password or ""):
        raise IncorrectPassword
    check_secret_strength(new_password)
    user.set_password(new_password)
    user.save(update_fields=["password", "updated_at"])


def _filter_patch(patch: dict[str, Any], allowed: tuple[str, ...]) -> dict[str, Any]:
    return {key: value for key, value in patch.items() if key in allowed}


def update_profile(user: User, patch: dict[str, Any]) -> User:
    updates = _filter_patch(patch, PROFILE_FIELDS)
    if not updates:
        msg = "No valid updates provided"
        raise ValidationError(msg)
    if "preferences" in updates:
        updates["preferences"] = {**(user.preferences or {}), **updates["preferences"]}
    for key, value in updates.items():
        setattr(user, key, value)
    user.save()
    return user


def admin_update_user(user: User, patch: dict[str, Any]) -> User:
    updates = _filter_patch(patch, ADMIN_EDITABLE_FIELDS)
    if not updates:
        msg = "No valid updates provided"
        raise ValidationError(msg)
    if "email" in updates:
        email = normalize_email(updates["email"])
        taken = User.objects.filter(email__iexact=email).exclude(pk=user.pk)
        if taken.exists():
            msg = "User already exists with this email"
            raise DuplicateKey(msg)
        updates["email"] = email
    for key, value in updates.items():
        setattr(user, key, value)
    try:
        with transaction.atomic():
            user.save()
    except IntegrityError as exc:
        raise _duplicate_key(exc) from exc
    return user


def delete_user(user: User, actor: User) -> None:
    if user.pk == actor.pk:
        msg = "Cannot delete your own account"
        raise Conflict(msg)
    user.delete()


def user_stats() -> dict[str, Any]:
    by_role = (
        User.objects.values("role")
        .annotate(
            count=Count("id"),
            verified=Count("id", filter=Q(is_verified=True)),
        )
        .order_by("role")
    )
    recent = User.objects.order_by("-created_at")[:5]
    return {
        "roles": list(by_role),
        "total": User.objects.count(),
        "recent_users": recent,
    }
