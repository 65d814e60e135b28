from __future__ import annotations

import re
from datetime import datetime
from datetime import timedelta

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

_SLUG_STRIP = re.compile(r"[^\w\s-]", re.ASCII)
_SLUG_COLLAPSE = re.compile(r"[\s_-]+", re.ASCII)

DEFAULT_SLUG = "event"


def slugify_title(title: str) -> str:
    """Lower-case ``title`` and reduce it to ``[a-z0-9-]`` joined by single hyphens."""

    slug = _SLUG_STRIP.sub("", (title or "").lower())
    slug = _SLUG_COLLAPSE.sub("-", slug)
    return slug.strip("-")


class EventQuerySet(models.QuerySet):
    def published(self):
        return self.filter(status=Event.Status.PUBLISHED)

    def upcoming(self, now: datetime | None = None):
        return self.filter(start_at__gte=now or timezone.now())

    def in_category(self, category: str):
        return self.filter(category=category)

    def search(self, query: str):
        query = query.strip()
        return self.filter(
            models.Q(title__icontains=query)
            | models.Q(description__icontains=query)
            | models.Q(short_description__icontains=query)
            | models.Q(tags__icontains=query),
        )


class Event(models.Model):
    """A publishable campus activity students can register for."""

    class Category(models.TextChoices):
        ACADEMIC = "Academic", _("Academic")
        CULTURAL = "Cultural", _("Cultural")
        SPORTS = "Sports", _("Sports")
        TECHNICAL = "Technical", _("Technical")
        SOCIAL = "Social", _("Social")
        WORKSHOP = "Workshop", _("Workshop")
        SEMINAR = "Seminar", _("Seminar")
        COMPETITION = "Competition", _("Competition")
        FESTIVAL = "Festival", _("Festival")
        OTHER = "Other", _("Other")

    class Status(models.TextChoices):
        DRAFT = "draft", _("Draft")
        PUBLISHED = "published", _("Published")
        CANCELLED = "cancelled", _("Cancelled")
        COMPLETED = "completed", _("Completed")

    class Visibility(models.TextChoices):
        PUBLIC = "public", _("Public")
        PRIVATE = "private", _("Private")
        DEPARTMENT = "department", _("Department")

    class RecurrenceFrequency(models.TextChoices):
        DAILY = "daily", _("Daily")
        WEEKLY = "weekly", _("Weekly")
        MONTHLY = "monthly", _("Monthly")
        YEARLY = "yearly", _("Yearly")

    class RegistrationStatus(models.TextChoices):
        OPEN = "open", _("Open")
        CLOSED = "closed", _("Closed")
        EXPIRED = "expired", _("Expired")
        FULL = "full", _("Full")

    title = models.CharField(max_length=200)
    description = models.TextField(max_length=2000)
    short_description = models.CharField(max_length=500, blank=True)
    category = models.CharField(max_length=20, choices=Category.choices)
    tags = models.JSONField(default=list, blank=True)
    slug = models.SlugField(max_length=220, unique=True, editable=False)

    organizer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="organized_events",
    )
    # Snapshot taken at creation; later profile edits do not rewrite history.
    organizer_name = models.CharField(max_length=100)
    organizer_email = models.EmailField()
    organizer_department = models.CharField(max_length=100, blank=True)
    organizer_contact = models.CharField(max_length=50, blank=True)

    venue_name = models.CharField(max_length=200)
    venue_address = models.CharField(max_length=300, blank=True)
    venue_capacity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    venue_latitude = models.FloatField(null=True, blank=True)
    venue_longitude = models.FloatField(null=True, blank=True)

    start_at = models.DateTimeField(db_index=True)
    end_at = models.DateTimeField()
    registration_deadline = models.DateTimeField(db_index=True)

    registration_required = models.BooleanField(default=True)
    max_participants = models.PositiveIntegerField(
        default=0,
        help_text=_("0 means unlimited"),
    )
    current_participants = models.PositiveIntegerField(default=0, editable=False)
    fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)],
    )
    registration_fields = models.JSONField(
        default=list,
        blank=True,
        help_text=_("Extra questions: [{name, type, required, options}]"),
    )

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PUBLISHED,
        db_index=True,
    )
    visibility = models.CharField(
        max_length=20,
        choices=Visibility.choices,
        default=Visibility.PUBLIC,
    )
    target_audience = models.JSONField(default=list, blank=True)
    images = models.JSONField(default=list, blank=True)
    attachments = models.JSONField(default=list, blank=True)
    requirements = models.JSONField(default=list, blank=True)
    prizes = models.JSONField(default=list, blank=True)
    social_media = models.JSONField(default=dict, blank=True)

    views = models.PositiveIntegerField(default=0, editable=False)
    interests = models.PositiveIntegerField(default=0, editable=False)
    shares = models.PositiveIntegerField(default=0, editable=False)

    feedback_enabled = models.BooleanField(default=True)
    feedback_questions = models.JSONField(
        default=list,
        blank=True,
        help_text=_("[{question, type, required}]"),
    )

    reminder_24h = models.BooleanField(default=True)
    reminder_1h = models.BooleanField(default=True)
    update_notifications = models.BooleanField(default=True)

    is_recurring = models.BooleanField(default=False)
    recurrence_frequency = models.CharField(
        max_length=10,
        choices=RecurrenceFrequency.choices,
        blank=True,
    )
    recurrence_interval = models.PositiveIntegerField(null=True, blank=True)
    recurrence_end_date = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = EventQuerySet.as_manager()

    class Meta:
        ordering = ["start_at"]
        indexes = [
            models.Index(fields=["category"], name="events_even_categor_0b6c2e_idx"),
            models.Index(fields=["visibility"], name="events_even_visibil_5f1d3a_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    def clean(self):
        super().clean()
        errors = {}
        if self.start_at and self.end_at and self.end_at <= self.start_at:
            errors["end_at"] = _("End date must be after start date")
        if (
            self.start_at
            and self.registration_deadline
            and self.registration_deadline > self.start_at
        ):
            errors["registration_deadline"] = _(
                "Registration deadline must be before event start",
            )
        if errors:
            raise ValidationError(errors)

    def registration_status_at(self, now: datetime) -> str:
        if now > self.start_at:
            return self.RegistrationStatus.CLOSED
        if now > self.registration_deadline:
            return self.RegistrationStatus.EXPIRED
        if 0 < self.max_participants <= self.current_participants:
            return self.RegistrationStatus.FULL
        return self.RegistrationStatus.OPEN

    @property
    def registration_status(self) -> str:
        return self.registration_status_at(timezone.now())

    @property
    def is_available(self) -> bool:
        return self.registration_status == self.RegistrationStatus.OPEN

    @property
    def duration(self) -> timedelta:
        return self.end_at - self.start_at

    def assign_slug(self) -> str:
        base = slugify_title(self.title) or DEFAULT_SLUG
        taken = set(
            Event.objects.filter(slug__startswith=base)
            .exclude(pk=self.pk)
            .values_list("slug", flat=True),
        )
        slug, suffix = base, 2
        while slug in taken:
            slug = f"{base}-{suffix}"
            suffix += 1
        self.slug = slug
        return slug

    def save(self, *args, **kwargs):
        if not self.slug:
            self.assign_slug()
        super().save(*args, **kwargs)
