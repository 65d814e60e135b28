from django.contrib.auth.signals import user_logged_in
from django.dispatch import receiver

from .models import AuditLog
from .utils import log_action
from .utils import request_ip


@receiver(user_logged_in, dispatch_uid="audit_login")
def record_login(sender, request, user, **kwargs):
    agent = request.META.get("HTTP_USER_AGENT", "-") if request is not None else "-"
    log_action(
        AuditLog.Action.LOGIN,
        actor=user,
        message=f"email={user.email} role={user.role} ua={agent[:200]}",
        model_name="users.User",
        record_id=user.pk,
        ip_address=request_ip(request),
    )
