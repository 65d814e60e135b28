from django.contrib import admin

from campus_events.registrations import models


@admin.register(models.Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "code",
        "user",
        "event",
        "status",
        "payment_status",
        "checked_in",
        "created_at",
    ]
    search_fields = ["code", "user__email", "user__name", "event__title"]
    list_filter = ["status", "payment_status", "source", "checked_in"]
    raw_id_fields = ["user", "event"]
    readonly_fields = ["code", "created_at", "updated_at"]
