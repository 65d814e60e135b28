from rest_framework import serializers

from campus_events.audit.models import AuditLog
from campus_events.users.api.serializers import UserSummarySerializer


class AuditLogSerializer(serializers.ModelSerializer[AuditLog]):
    actor = UserSummarySerializer(read_only=True, allow_null=True)
    action_label = serializers.CharField(source="get_action_display", read_only=True)

    class Meta:
        model = AuditLog
        fields = [
            "id",
            "action",
            "action_label",
            "actor",
            "message",
            "model_name",
            "record_id",
            "before",
            "after",
            "ip_address",
            "created_at",
        ]
        read_only_fields = fields
