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
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("login", "Login"),
                            ("event_created", "Event created"),
                            ("event_updated", "Event updated"),
                            ("event_deleted", "Event deleted"),
                            ("registration_cancelled", "Registration cancelled"),
                            ("registration_bulk_override", "Registration bulk override"),
                            ("user_updated", "User updated"),
                            ("user_deleted", "User deleted"),
                        ],
                        db_index=True,
                        max_length=100,
                    ),
                ),
                ("message", models.TextField(blank=True)),
                ("model_name", models.CharField(blank=True, max_length=150)),
                ("record_id", models.BigIntegerField(blank=True, null=True)),
                ("before", models.JSONField(blank=True, null=True)),
                ("after", models.JSONField(blank=True, null=True)),
                ("ip_address", models.CharField(blank=True, max_length=64)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "actor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="audit_entries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["model_name", "record_id"], name="audit_audit_model_n_3f9a1c_idx"),
                ],
            },
        ),
    ]
