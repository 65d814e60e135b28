from django.contrib.auth.models import AbstractUser
from django.core.validators import MaxValueValidator
from django.core.validators import MinValueValidator
from django.core.validators import RegexValidator
from django.db import models
from django.db.models import CharField
from django.db.models import EmailField
from django.utils.translation import gettext_lazy as _

from .managers import UserManager

phone_validator = RegexValidator(
    regex=r"^\+?[\d\s\-()]+$",
    message=_("Please enter a valid phone number"),
)


def default_preferences() -> dict:
    return {
        "email_notifications": True,
        "sms_notifications": False,
        "event_categories": [],
    }


class User(AbstractUser):
    """
    Student or administrator account for campus_events.
    Authenticates by email; there is no username.
    """

    class Role(models.TextChoices):
        STUDENT = "student", _("Student")
        ADMIN = "admin", _("Admin")

    # First and last name do not cover name patterns around the globe
    name = CharField(_("Full Name"), max_length=100)
    email = EmailField(_("email address"), unique=True)
    username = None  # type: ignore[assignment]
    first_name = None  # type: ignore[assignment]
    last_name = None  # type: ignore[assignment]

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.STUDENT,
    )
    student_id = models.CharField(
        max_length=50,
        unique=True,
        null=True,
        blank=True,
        help_text=_("College-issued identifier; unique when present"),
    )
    department = models.CharField(max_length=100, blank=True)
    year = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(4)],
    )
    phone = models.CharField(max_length=30, blank=True, validators=[phone_validator])
    avatar = models.URLField(max_length=500, blank=True)
    is_verified = models.BooleanField(default=False)
    registered_events = models.ManyToManyField(
        "events.Event",
        blank=True,
        related_name="registered_users",
    )
    preferences = models.JSONField(default=default_preferences, blank=True)

    # Audit timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    objects = UserManager()

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        # Blank identifiers would collide on the unique index.
        if not (self.student_id or "").strip():
            self.student_id = None
        super().save(*args, **kwargs)

    @property
    def is_admin(self) -> bool:
        return self.role == self.Role.ADMIN or bool(self.is_superuser)
