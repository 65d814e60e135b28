from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("users", "0001_initial"),
        ("events", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="user",
            name="registered_events",
            field=models.ManyToManyField(
                blank=True,
                related_name="registered_users",
                to="events.event",
            ),
        ),
    ]
