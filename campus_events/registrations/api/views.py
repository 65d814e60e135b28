from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_ipv46_address
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.viewsets import GenericViewSet

from campus_events.core.pagination import paginator_for
from campus_events.core.responses import envelope
from campus_events.core.throttling import client_ip
from campus_events.registrations import services
from campus_events.registrations.models import Registration
from campus_events.users.api.permissions import IsAdmin

from .serializers import AnalyticsQuerySerializer
from .serializers import AttendanceSerializer
from .serializers import BulkStatusSerializer
from .serializers import CancelSerializer
from .serializers import FeedbackSerializer
from .serializers import RegistrationCreateSerializer
from .serializers import RegistrationSerializer

ADMIN_ACTIONS = ("event_roster", "attendance", "analytics", "bulk_status")
STATUS_PARAM = OpenApiParameter(
    "status",
    OpenApiTypes.STR,
    enum=list(Registration.Status.values),
)


def request_metadata(request, source: str) -> dict[str, str | None]:
    ip = client_ip(request)
    try:
        validate_ipv46_address(ip)
    except DjangoValidationError:
        ip = None
    return {
        "source": source,
        "ip_address": ip,
        "user_agent": request.META.get("HTTP_USER_AGENT", ""),
        "referrer": request.META.get("HTTP_REFERER", ""),
    }


class RegistrationViewSet(GenericViewSet):
    """Enrollment endpoints for students plus the admin roster tools."""

    serializer_class = RegistrationSerializer
    queryset = Registration.objects.select_related("user", "event")
    pagination_class = paginator_for("registrations")
    lookup_value_regex = r"\d+"

    def get_permissions(self):
        if self.action in ADMIN_ACTIONS:
            return [IsAuthenticated(), IsAdmin()]
        return [IsAuthenticated()]

    def _registration_response(self, registration, message=None, code=status.HTTP_200_OK):
        return envelope(
            {"registration": RegistrationSerializer(registration).data},
            message=message,
            status=code,
        )

    @extend_schema(
        request=RegistrationCreateSerializer,
        responses={201: RegistrationSerializer},
    )
    def create(self, request):
        serializer = RegistrationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        registration = services.register_for_event(
            request.user,
            data["event_id"],
            data.get("answers") or {},
            metadata=request_metadata(request, data["source"]),
        )
        registration = services.get_registration(registration.pk)
        return self._registration_response(
            registration,
            message="Registration successful",
            code=status.HTTP_201_CREATED,
        )

    @extend_schema(responses=RegistrationSerializer)
    def retrieve(self, request, pk=None):
        registration = services.registration_detail(pk, request.user)
        return self._registration_response(registration)

    @extend_schema(parameters=[STATUS_PARAM], responses=RegistrationSerializer(many=True))
    @action(detail=False, methods=["get"], url_path="my-registrations")
    def my_registrations(self, request):
        queryset = services.my_registrations(
            request.user,
            request.query_params.get("status"),
        )
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    @extend_schema(parameters=[STATUS_PARAM], responses=RegistrationSerializer(many=True))
    @action(
        detail=False,
        methods=["get"],
        url_path=r"event/(?P<event_id>\d+)",
        url_name="event",
    )
    def event_roster(self, request, event_id=None):
        event, queryset, stats = services.event_registrations(
            event_id,
            request.query_params.get("status"),
        )
        paginator = paginator_for("registrations", default_limit=20)()
        page = paginator.paginate_queryset(queryset, request, view=self)
        data = paginator.get_paginated_data(
            RegistrationSerializer(page, many=True).data,
            event={"id": event.pk, "title": event.title, "start_at": event.start_at},
            stats=stats,
        )
        return envelope(data)

    @extend_schema(request=CancelSerializer, responses=RegistrationSerializer)
    @action(detail=True, methods=["put"])
    def cancel(self, request, pk=None):
        serializer = CancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        registration = services.cancel_registration(
            pk,
            request.user,
            serializer.validated_data["reason"],
        )
        return self._registration_response(
            registration,
            message="Registration cancelled successfully",
        )

    @extend_schema(request=FeedbackSerializer, responses=RegistrationSerializer)
    @action(detail=True, methods=["put"])
    def feedback(self, request, pk=None):
        serializer = FeedbackSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        registration = services.submit_feedback(
            pk,
            request.user,
            **serializer.validated_data,
        )
        return self._registration_response(
            registration,
            message="Feedback submitted successfully",
        )

    @extend_schema(request=AttendanceSerializer, responses=RegistrationSerializer)
    @action(detail=True, methods=["put"])
    def attendance(self, request, pk=None):
        serializer = AttendanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        check_in = serializer.validated_data["check_in"]
        registration = services.mark_attendance(
            pk,
            check_in=check_in,
            notes=serializer.validated_data["notes"],
        )
        verb = "marked" if check_in else "updated"
        return self._registration_response(
            registration,
            message=f"Attendance {verb} successfully",
        )

    @extend_schema(parameters=[AnalyticsQuerySerializer], responses={200: None})
    @action(detail=False, methods=["get"], url_path="admin/analytics")
    def analytics(self, request):
        query = AnalyticsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data
        result = services.registration_analytics(
            params.get("start_date"),
            params.get("end_date"),
            params.get("event_id"),
        )
        result["recent_registrations"] = RegistrationSerializer(
            result["recent_registrations"],
            many=True,
        ).data
        return envelope(result)

    @extend_schema(request=BulkStatusSerializer, responses={200: None})
    @action(detail=False, methods=["post"], url_path="admin/bulk-status")
    def bulk_status(self, request):
        serializer = BulkStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.bulk_override_status(
            serializer.validated_data["ids"],
            serializer.validated_data["status"],
            actor=request.user,
        )
        return envelope(result, message="Registration statuses updated")
