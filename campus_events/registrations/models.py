import secrets

from django.conf import settings
from django.core.validators import MaxValueValidator
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

CODE_PREFIX = "REG-"


def generate_registration_code() -> str:
    return CODE_PREFIX + secrets.token_hex(6).upper()


class Registration(models.Model):
    """One user's enrollment in one event."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")
        ATTENDED = "attended", _("Attended")
        NO_SHOW = "no-show", _("No show")

    class PaymentStatus(models.TextChoices):
        NOT_REQUIRED = "not-required", _("Not required")
        PENDING = "pending", _("Pending")
        PAID = "paid", _("Paid")
        FAILED = "failed", _("Failed")
        REFUNDED = "refunded", _("Refunded")

    class Source(models.TextChoices):
        WEB = "web", _("Web")
        MOBILE = "mobile", _("Mobile")
        ADMIN = "admin", _("Admin")
        BULK = "bulk", _("Bulk")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="registrations",
    )
    event = models.ForeignKey(
        "events.Event",
        on_delete=models.PROTECT,
        related_name="registrations",
    )
    answers = models.JSONField(
        default=dict,
        blank=True,
        help_text=_("Answers keyed by the event's registration field names"),
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.CONFIRMED,
        db_index=True,
    )

    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.NOT_REQUIRED,
        db_index=True,
    )
    transaction_id = models.CharField(max_length=100, blank=True)
    payment_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
    )
    payment_method = models.CharField(max_length=50, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)

    checked_in = models.BooleanField(default=False, db_index=True)
    check_in_time = models.DateTimeField(null=True, blank=True)
    checked_out = models.BooleanField(default=False)
    check_out_time = models.DateTimeField(null=True, blank=True)
    attendance_notes = models.TextField(blank=True)

    feedback_rating = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    feedback_comments = models.TextField(blank=True)
    feedback_responses = models.JSONField(default=dict, blank=True)
    feedback_submitted_at = models.DateTimeField(null=True, blank=True)

    # Stored only; nothing sends these yet.
    reminder_24h_sent = models.BooleanField(default=False)
    reminder_1h_sent = models.BooleanField(default=False)
    confirmation_sent = models.BooleanField(default=False)
    cancellation_sent = models.BooleanField(default=False)

    source = models.CharField(
        max_length=10,
        choices=Source.choices,
        default=Source.WEB,
    )
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=500, blank=True)
    referrer = models.CharField(max_length=500, blank=True)

    cancellation_reason = models.TextField(blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    code = models.CharField(
        max_length=20,
        unique=True,
        default=generate_registration_code,
        editable=False,
    )

    certificate_issued = models.BooleanField(default=False)
    certificate_issued_at = models.DateTimeField(null=True, blank=True)
    certificate_url = models.URLField(max_length=500, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "event"],
                name="unique_registration_per_user_event",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.code} ({self.status})"

    @property
    def is_counted(self) -> bool:
        return self.status in COUNTED_STATUSES

    @property
    def summary(self) -> dict:
        return {
            "id": self.pk,
            "user_id": self.user_id,
            "event_id": self.event_id,
            "status": self.status,
            "payment_status": self.payment_status,
            "registered_at": self.created_at,
            "attended": self.checked_in,
            "code": self.code,
        }


# Statuses that occupy a seat in event.current_participants.
COUNTED_STATUSES = frozenset(
    {Registration.Status.CONFIRMED, Registration.Status.ATTENDED},
)
