from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from rest_framework.views import APIView

from campus_events.audit.api.serializers import AuditLogSerializer
from campus_events.audit.models import AuditLog
from campus_events.audit.utils import clamp_recent_limit
from campus_events.core.responses import envelope
from campus_events.users.api.permissions import IsAdmin


class RecentAuditView(APIView):
    """Newest audit rows first, optionally narrowed to an action or a record."""

    permission_classes = [IsAdmin]

    @extend_schema(
        parameters=[
            OpenApiParameter("limit", OpenApiTypes.INT, description="1..50, default 5"),
            OpenApiParameter("action", OpenApiTypes.STR, enum=AuditLog.Action.values),
            OpenApiParameter("model", OpenApiTypes.STR, description="e.g. events.Event"),
            OpenApiParameter("record_id", OpenApiTypes.INT),
        ],
        responses=AuditLogSerializer(many=True),
    )
    def get(self, request):
        params = request.query_params
        limit = clamp_recent_limit(params.get("limit"))

        qs = AuditLog.objects.all()
        if params.get("action"):
            qs = qs.filter(action=params["action"])
        if params.get("model"):
            qs = qs.filter(model_name=params["model"])
        if params.get("record_id", "").isdigit():
            qs = qs.filter(record_id=int(params["record_id"]))

        rows = AuditLogSerializer(qs.recent(limit), many=True).data
        return envelope({"results": rows, "limit": limit})
