"""Role-based permission classes for the REST API."""

from collections.abc import Iterable

from rest_framework.permissions import BasePermission

ROLE_STUDENT = "student"
ROLE_ADMIN = "admin"


def _user_has_role(user, roles: Iterable[str]) -> bool:
    if getattr(user, "is_superuser", False) and ROLE_ADMIN in roles:
        return True
    return getattr(user, "role", None) in set(roles)


class _RolePermission(BasePermission):
    """Base helper to gate access by role names."""

    allowed_roles: tuple[str, ...] = ()
    message = "Access denied. Insufficient permissions."

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not (user and getattr(user, "is_authenticated", False)):
            return False
        return _user_has_role(user, self.allowed_roles)


def HasRole(*roles: str) -> type[_RolePermission]:  # noqa: N802
    """Build a permission class admitting only ``roles``."""

    return type(
        "HasRole_" + "_".join(roles),
        (_RolePermission,),
        {"allowed_roles": tuple(roles)},
    )


class IsAdmin(HasRole(ROLE_ADMIN)):
    message = "Access denied. Admin privileges required."
