from django.conf import settings
from django.db import transaction
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.fields import DateTimeField
from rest_framework.permissions import AllowAny
from rest_framework.permissions import IsAuthenticated
from rest_framework.viewsets import GenericViewSet

from campus_events.audit.models import AuditLog
from campus_events.audit.utils import log_action
from campus_events.audit.utils import request_ip
from campus_events.core.pagination import paginator_for
from campus_events.core.responses import envelope
from campus_events.events import services
from campus_events.events.models import Event
from campus_events.registrations.models import Registration
from campus_events.users.api.permissions import IsAdmin
from campus_events.users.authentication import OptionalAuthActionsMixin

from .filters import EventFilter
from .serializers import EventSerializer
from .serializers import EventWriteSerializer

PUBLIC_ACTIONS = ("list", "retrieve", "upcoming", "search", "by_category")


@extend_schema_view(
    list=extend_schema(
        parameters=[
            OpenApiParameter(
                "sort_by",
                OpenApiTypes.STR,
                enum=list(services.SORTABLE_FIELDS),
            ),
            OpenApiParameter("sort_order", OpenApiTypes.STR, enum=["asc", "desc"]),
        ],
        responses=EventSerializer(many=True),
    ),
    retrieve=extend_schema(responses=EventSerializer),
    create=extend_schema(request=EventWriteSerializer, responses={201: EventSerializer}),
    update=extend_schema(request=EventWriteSerializer, responses=EventSerializer),
    destroy=extend_schema(responses={200: None}),
)
class EventViewSet(OptionalAuthActionsMixin, GenericViewSet):
    serializer_class = EventSerializer
    queryset = Event.objects.select_related("organizer")
    filterset_class = EventFilter
    pagination_class = paginator_for("events")
    lookup_value_regex = r"\d+"
    optional_auth_actions = PUBLIC_ACTIONS

    def get_permissions(self):
        if self.action in PUBLIC_ACTIONS:
            return [AllowAny()]
        return [IsAuthenticated(), IsAdmin()]

    def get_queryset(self):
        qs = super().get_queryset()
        if self.action == "list":
            params = self.request.query_params
            qs = qs.order_by(
                services.ordering_for(params.get("sort_by"), params.get("sort_order")),
                "pk",
            )
        return qs

    def _audit(self, request, action_name, event, record_id=None, after=None):
        log_action(
            action_name,
            actor=request.user,
            message=f"title={event.title}",
            model_name="events.Event",
            record_id=record_id or event.pk,
            after=after,
            ip_address=request_ip(request),
        )

    def _caller(self):
        user = self.request.user
        return user if getattr(user, "is_authenticated", False) else None

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    def retrieve(self, request, pk=None):
        event = services.get_event(pk)
        caller = self._caller()
        services.record_view(event, caller)

        registration = None
        if caller is not None:
            registration = Registration.objects.filter(user=caller, event=event).first()
        return envelope(
            {
                "event": EventSerializer(event).data,
                "is_registered": registration is not None,
                "registration": registration.summary if registration else None,
            },
        )

    def create(self, request):
        serializer = EventWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            event = services.create_event(
                serializer.validated_data,
                organizer=request.user,
            )
            self._audit(request, AuditLog.Action.EVENT_CREATED, event)
        return envelope(
            {"event": EventSerializer(event).data},
            message="Event created successfully",
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, pk=None):
        instance = services.get_event(pk)
        serializer = EventWriteSerializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            event = services.update_event(
                pk,
                serializer.validated_data,
                caller=request.user,
            )
            self._audit(
                request,
                AuditLog.Action.EVENT_UPDATED,
                event,
                after={"fields": sorted(serializer.validated_data)},
            )
        return envelope(
            {"event": EventSerializer(event).data},
            message="Event updated successfully",
        )

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        with transaction.atomic():
            event = services.delete_event(pk, caller=request.user)
            self._audit(
                request,
                AuditLog.Action.EVENT_DELETED,
                event,
                record_id=int(pk),
            )
        return envelope(message="Event deleted successfully")

    @extend_schema(
        parameters=[OpenApiParameter("limit", OpenApiTypes.INT, description="1..50")],
        responses=EventSerializer(many=True),
    )
    @action(detail=False, methods=["get"])
    def upcoming(self, request):
        events = services.upcoming_events(request.query_params.get("limit"))
        return envelope(
            {"count": len(events), "events": EventSerializer(events, many=True).data},
        )

    @extend_schema(
        parameters=[
            OpenApiParameter("q", OpenApiTypes.STR, required=True),
            OpenApiParameter("category", OpenApiTypes.STR),
            OpenApiParameter("date_from", OpenApiTypes.DATETIME),
            OpenApiParameter("date_to", OpenApiTypes.DATETIME),
        ],
        responses=EventSerializer(many=True),
    )
    @action(detail=False, methods=["get"], filterset_class=None)
    def search(self, request):
        params = request.query_params
        queryset = services.search_events(
            params.get("q"),
            category=params.get("category"),
            date_from=_parse_datetime_param(params, "date_from"),
            date_to=_parse_datetime_param(params, "date_to"),
        )
        paginator = paginator_for("results")()
        page = paginator.paginate_queryset(queryset, request, view=self)
        data = paginator.get_paginated_data(
            EventSerializer(page, many=True).data,
            query=params.get("q", "").strip(),
        )
        return envelope(data)

    @extend_schema(
        parameters=[OpenApiParameter("limit", OpenApiTypes.INT, description="1..50")],
        responses=EventSerializer(many=True),
    )
    @action(
        detail=False,
        methods=["get"],
        url_path=r"category/(?P<category>[^/.]+)",
        url_name="category",
    )
    def by_category(self, request, category=None):
        events = services.events_by_category(
            category,
            request.query_params.get("limit"),
        )
        return envelope(
            {
                "category": category,
                "count": len(events),
                "events": EventSerializer(events, many=True).data,
            },
        )

    @extend_schema(
        parameters=[
            OpenApiParameter("timeframe", OpenApiTypes.STR, description="e.g. 30d"),
        ],
        responses={200: None},
    )
    @action(detail=False, methods=["get"], url_path="admin/analytics")
    def analytics(self, request):
        days = services.parse_timeframe(
            request.query_params.get("timeframe"),
            settings.EVENT_ANALYTICS_DEFAULT_DAYS,
        )
        return envelope(services.event_analytics(days))


def _parse_datetime_param(params, name):
    raw = params.get(name)
    if not raw:
        return None
    return DateTimeField().run_validation(raw)
