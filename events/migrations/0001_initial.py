import uuid

from django.db import migrations, models


def lookup_fields():
    return [
        ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        ("name", models.CharField(max_length=255)),
        ("event_ids", models.JSONField(blank=True, default=list)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="EventType",
            fields=lookup_fields(),
            options={"ordering": ["name"], "abstract": False},
        ),
        migrations.CreateModel(
            name="EventCategory",
            fields=lookup_fields(),
            options={"ordering": ["name"], "abstract": False, "verbose_name_plural": "event categories"},
        ),
        migrations.CreateModel(
            name="EventStatus",
            fields=lookup_fields(),
            options={"ordering": ["name"], "abstract": False, "verbose_name_plural": "event statuses"},
        ),
        migrations.CreateModel(
            name="EventVenue",
            fields=[
                *lookup_fields(),
                ("address", models.TextField(blank=True, default="")),
            ],
            options={"ordering": ["name"], "abstract": False},
        ),
        migrations.CreateModel(
            name="EventSpeaker",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                ("profile", models.TextField(blank=True, default="")),
                ("event_ids", models.JSONField(blank=True, default=list)),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("starts_at", models.DateTimeField()),
                ("ends_at", models.DateTimeField()),
                ("start_time", models.CharField(max_length=16)),
                ("end_time", models.CharField(max_length=16)),
                ("is_all_day", models.BooleanField(default=False)),
                ("event_type_id", models.UUIDField()),
                ("category_id", models.UUIDField()),
                ("status_id", models.UUIDField()),
                ("venue_id", models.UUIDField()),
                ("speaker_ids", models.JSONField(blank=True, default=list)),
                ("feedback_ids", models.JSONField(blank=True, default=list)),
                ("rsvp_ids", models.JSONField(blank=True, default=list)),
            ],
            options={
                "ordering": ["starts_at"],
                "indexes": [models.Index(fields=["starts_at"], name="event_starts_at_idx")],
            },
        ),
    ]
