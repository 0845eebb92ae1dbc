import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="City",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=120)),
                ("state", models.CharField(max_length=120)),
                ("country", models.CharField(max_length=120)),
                ("latitude", models.FloatField(blank=True, null=True)),
                ("longitude", models.FloatField(blank=True, null=True)),
            ],
            options={
                "ordering": ["name"],
                "constraints": [
                    models.UniqueConstraint(fields=("name", "state"), name="uq_city_name_state"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=120, unique=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField()),
                ("starts_at", models.DateTimeField()),
                ("ends_at", models.DateTimeField(blank=True, null=True)),
                ("location", models.CharField(max_length=255)),
                ("full_address", models.CharField(blank=True, default="", max_length=500)),
                ("latitude", models.FloatField(blank=True, null=True)),
                ("longitude", models.FloatField(blank=True, null=True)),
                ("expected_participants", models.PositiveIntegerField()),
                ("current_participants", models.PositiveIntegerField(default=0)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("upcoming", "Upcoming"),
                            ("active", "Active"),
                            ("postponed", "Postponed"),
                            ("completed", "Completed"),
                            ("not_completed", "Not completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="upcoming",
                        max_length=20,
                    ),
                ),
                ("status_reason", models.TextField(blank=True, null=True)),
                ("status_updated_by", models.CharField(blank=True, max_length=128, null=True)),
                ("status_updated_at", models.DateTimeField(blank=True, null=True)),
                ("postponed_until", models.DateTimeField(blank=True, null=True)),
                ("creator_id", models.CharField(max_length=128)),
                ("version", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "city",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="events",
                        to="drives.city",
                    ),
                ),
                ("categories", models.ManyToManyField(related_name="events", to="drives.category")),
            ],
            options={
                "ordering": ["starts_at"],
                "indexes": [
                    models.Index(fields=["city", "starts_at"], name="event_city_starts_idx"),
                    models.Index(fields=["status"], name="event_status_idx"),
                    models.Index(fields=["creator_id"], name="event_creator_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Participant",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("user_id", models.CharField(max_length=128)),
                ("joined_at", models.DateTimeField()),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="participants",
                        to="drives.event",
                    ),
                ),
            ],
            options={
                "ordering": ["joined_at"],
                "indexes": [
                    models.Index(fields=["user_id"], name="participant_user_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("event", "user_id"), name="uq_participant_event_user"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Testimonial",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("user_id", models.CharField(max_length=128)),
                ("testimonial", models.TextField()),
                ("rating", models.PositiveSmallIntegerField()),
                ("location_clear", models.BooleanField(blank=True, null=True)),
                ("org_rating", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("volunteer_impact_felt", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("would_attend_again", models.BooleanField(blank=True, null=True)),
                ("suggestions", models.TextField(blank=True, null=True)),
                ("submitted_at", models.DateTimeField()),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="testimonials",
                        to="drives.event",
                    ),
                ),
            ],
            options={
                "ordering": ["submitted_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("event", "user_id"), name="uq_testimonial_event_user"),
                ],
            },
        ),
    ]
