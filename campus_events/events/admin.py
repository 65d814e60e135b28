from django.contrib import admin

from campus_events.events import models


@admin.register(models.Event)
class EventAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "title",
        "category",
        "status",
        "start_at",
        "current_participants",
        "max_participants",
    ]
    search_fields = ["title", "slug", "organizer_name", "venue_name"]
    list_filter = ["category", "status", "visibility", "start_at"]
    readonly_fields = ["slug", "current_participants", "views", "interests", "shares"]
