from django.contrib import admin

from campus_events.audit.models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ["created_at", "action", "actor", "model_name", "record_id"]
    list_filter = ["action", "model_name"]
    search_fields = ["message", "actor__email", "ip_address"]
    date_hierarchy = "created_at"
    list_select_related = ["actor"]

    # Rows are written by the application only.
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
