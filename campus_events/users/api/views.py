from django.db import transaction
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework.mixins import DestroyModelMixin
from rest_framework.mixins import ListModelMixin
from rest_framework.mixins import RetrieveModelMixin
from rest_framework.mixins import UpdateModelMixin
from rest_framework.viewsets import GenericViewSet

from campus_events.audit.models import AuditLog
from campus_events.audit.utils import log_action
from campus_events.audit.utils import request_ip
from campus_events.core.pagination import paginator_for
from campus_events.core.responses import envelope
from campus_events.core.viewsets import NamedNotFoundMixin
from campus_events.users import services
from campus_events.users.models import User

from .filters import UserFilter
from .permissions import IsAdmin
from .serializers import AdminUserUpdateSerializer
from .serializers import UserSerializer


@extend_schema_view(
    list=extend_schema(tags=["User Management"]),
    retrieve=extend_schema(tags=["User Management"]),
    update=extend_schema(
        tags=["User Management"],
        request=AdminUserUpdateSerializer,
    ),
    partial_update=extend_schema(
        tags=["User Management"],
        request=AdminUserUpdateSerializer,
    ),
    destroy=extend_schema(tags=["User Management"]),
)
class UserViewSet(
    NamedNotFoundMixin,
    RetrieveModelMixin,
    ListModelMixin,
    UpdateModelMixin,
    DestroyModelMixin,
    GenericViewSet,
):
    """Administrative user management."""

    serializer_class = UserSerializer
    queryset = User.objects.prefetch_related("registered_events").order_by(
        "-created_at",
    )
    permission_classes = [IsAdmin]
    filterset_class = UserFilter
    pagination_class = paginator_for("users")
    lookup_value_regex = r"\d+"
    not_found_message = "User not found"

    def retrieve(self, request, *args, **kwargs):
        return envelope({"user": self.get_serializer(self.get_object()).data})

    def update(self, request, *args, **kwargs):
        user = self.get_object()
        serializer = AdminUserUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        before = {key: getattr(user, key) for key in serializer.validated_data}
        with transaction.atomic():
            user = services.admin_update_user(user, serializer.validated_data)
            log_action(
                AuditLog.Action.USER_UPDATED,
                actor=request.user,
                message=f"email={user.email}",
                model_name="users.User",
                record_id=user.pk,
                before=before,
                after=dict(serializer.validated_data),
                ip_address=request_ip(request),
            )
        return envelope(
            {"user": UserSerializer(user).data},
            message="User updated successfully",
        )

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        user_id, email = user.pk, user.email
        with transaction.atomic():
            services.delete_user(user, actor=request.user)
            log_action(
                AuditLog.Action.USER_DELETED,
                actor=request.user,
                message=f"email={email}",
                model_name="users.User",
                record_id=user_id,
                ip_address=request_ip(request),
            )
        return envelope(message="User deleted successfully")
