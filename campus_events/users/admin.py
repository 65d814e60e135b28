from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from campus_events.users.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        (
            _("Profile"),
            {"fields": ("name", "student_id", "department", "year", "phone", "avatar")},
        ),
        (_("Role"), {"fields": ("role", "is_verified", "preferences")}),
        (
            _("Permissions"),
            {"fields": ("is_active", "is_staff", "is_superuser", "groups")},
        ),
        (_("Important dates"), {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "name", "role", "password1", "password2"),
            },
        ),
    )
    list_display = ["email", "name", "role", "student_id", "is_verified", "is_active"]
    search_fields = ["email", "name", "student_id"]
    list_filter = ["role", "is_verified", "is_active"]
    ordering = ["-created_at"]
