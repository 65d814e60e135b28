from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class AuditLogQuerySet(models.QuerySet):
    def for_record(self, model_name: str, record_id: int):
        return self.filter(model_name=model_name, record_id=record_id)

    def recent(self, limit: int):
        return self.select_related("actor").order_by("-created_at", "-id")[:limit]


class AuditLog(models.Model):
    """Append-only trail of sign-ins, catalog edits and enrollment overrides."""

    class Action(models.TextChoices):
        LOGIN = "login", _("Login")
        EVENT_CREATED = "event_created", _("Event created")
        EVENT_UPDATED = "event_updated", _("Event updated")
        EVENT_DELETED = "event_deleted", _("Event deleted")
        REGISTRATION_CANCELLED = "registration_cancelled", _("Registration cancelled")
        REGISTRATION_BULK_OVERRIDE = (
            "registration_bulk_override",
            _("Registration bulk override"),
        )
        USER_UPDATED = "user_updated", _("User updated")
        USER_DELETED = "user_deleted", _("User deleted")

    action = models.CharField(max_length=100, choices=Action.choices, db_index=True)
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_entries",
    )
    message = models.TextField(blank=True)
    # "<app_label>.<Model>" of the record the action touched.
    model_name = models.CharField(max_length=150, blank=True)
    record_id = models.BigIntegerField(null=True, blank=True)
    before = models.JSONField(null=True, blank=True)
    after = models.JSONField(null=True, blank=True)
    ip_address = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = AuditLogQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(
                fields=["model_name", "record_id"],
                name="audit_audit_model_n_3f9a1c_idx",
            ),
        ]

    def __str__(self) -> str:
        who = self.actor_id or "system"
        return f"[{self.created_at:%Y-%m-%d %H:%M:%S}] {who}: {self.action}"
