import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(max_length=2000)),
                ("short_description", models.CharField(blank=True, max_length=500)),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("Academic", "Academic"),
                            ("Cultural", "Cultural"),
                            ("Sports", "Sports"),
                            ("Technical", "Technical"),
                            ("Social", "Social"),
                            ("Workshop", "Workshop"),
                            ("Seminar", "Seminar"),
                            ("Competition", "Competition"),
                            ("Festival", "Festival"),
                            ("Other", "Other"),
                        ],
                        max_length=20,
                    ),
                ),
                ("tags", models.JSONField(blank=True, default=list)),
                ("slug", models.SlugField(editable=False, max_length=220, unique=True)),
                ("organizer_name", models.CharField(max_length=100)),
                ("organizer_email", models.EmailField(max_length=254)),
                ("organizer_department", models.CharField(blank=True, max_length=100)),
                ("organizer_contact", models.CharField(blank=True, max_length=50)),
                ("venue_name", models.CharField(max_length=200)),
                ("venue_address", models.CharField(blank=True, max_length=300)),
                ("venue_capacity", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("venue_latitude", models.FloatField(blank=True, null=True)),
                ("venue_longitude", models.FloatField(blank=True, null=True)),
                ("start_at", models.DateTimeField(db_index=True)),
                ("end_at", models.DateTimeField()),
                ("registration_deadline", models.DateTimeField(db_index=True)),
                ("registration_required", models.BooleanField(default=True)),
                ("max_participants", models.PositiveIntegerField(default=0, help_text="0 means unlimited")),
                ("current_participants", models.PositiveIntegerField(default=0, editable=False)),
                (
                    "fee",
                    models.DecimalField(
                        decimal_places=2,
                        default=0,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "registration_fields",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text="Extra questions: [{name, type, required, options}]",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("published", "Published"),
                            ("cancelled", "Cancelled"),
                            ("completed", "Completed"),
                        ],
                        db_index=True,
                        default="published",
                        max_length=20,
                    ),
                ),
                (
                    "visibility",
                    models.CharField(
                        choices=[
                            ("public", "Public"),
                            ("private", "Private"),
                            ("department", "Department"),
                        ],
                        default="public",
                        max_length=20,
                    ),
                ),
                ("target_audience", models.JSONField(blank=True, default=list)),
                ("images", models.JSONField(blank=True, default=list)),
                ("attachments", models.JSONField(blank=True, default=list)),
                ("requirements", models.JSONField(blank=True, default=list)),
                ("prizes", models.JSONField(blank=True, default=list)),
                ("social_media", models.JSONField(blank=True, default=dict)),
                ("views", models.PositiveIntegerField(default=0, editable=False)),
                ("interests", models.PositiveIntegerField(default=0, editable=False)),
                ("shares", models.PositiveIntegerField(default=0, editable=False)),
                ("feedback_enabled", models.BooleanField(default=True)),
                (
                    "feedback_questions",
                    models.JSONField(blank=True, default=list, help_text="[{question, type, required}]"),
                ),
                ("reminder_24h", models.BooleanField(default=True)),
                ("reminder_1h", models.BooleanField(default=True)),
                ("update_notifications", models.BooleanField(default=True)),
                ("is_recurring", models.BooleanField(default=False)),
                (
                    "recurrence_frequency",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("daily", "Daily"),
                            ("weekly", "Weekly"),
                            ("monthly", "Monthly"),
                            ("yearly", "Yearly"),
                        ],
                        max_length=10,
                    ),
                ),
                ("recurrence_interval", models.PositiveIntegerField(blank=True, null=True)),
                ("recurrence_end_date", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "organizer",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="organized_events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["start_at"],
                "indexes": [
                    models.Index(fields=["category"], name="events_even_categor_0b6c2e_idx"),
                    models.Index(fields=["visibility"], name="events_even_visibil_5f1d3a_idx"),
                ],
            },
        ),
    ]
