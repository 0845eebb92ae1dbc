"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.db import models

STATUS_CHOICES = [
    ("upcoming", "Upcoming"),
    ("active", "Active"),
    ("postponed", "Postponed"),
    ("completed", "Completed"),
    ("not_completed", "Not completed"),
    ("cancelled", "Cancelled"),
]


class City(models.Model):
    """Persistence model for cities."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=120)
    state = models.CharField(max_length=120)
    country = models.CharField(max_length=120)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(fields=["name", "state"], name="uq_city_name_state"),
        ]

    def __str__(self) -> str:
        return f"{self.name}, {self.state}"


class Category(models.Model):
    """Persistence model for drive categories."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=120, unique=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Event(models.Model):
    """Persistence model for drives.

    ``current_participants`` is only ever written by the participant ledger.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField()
    starts_at = models.DateTimeField()
    ends_at = models.DateTimeField(null=True, blank=True)
    location = models.CharField(max_length=255)
    full_address = models.CharField(max_length=500, blank=True, default="")
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    expected_participants = models.PositiveIntegerField()
    current_participants = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="upcoming")
    status_reason = models.TextField(null=True, blank=True)
    status_updated_by = models.CharField(max_length=128, null=True, blank=True)
    status_updated_at = models.DateTimeField(null=True, blank=True)
    postponed_until = models.DateTimeField(null=True, blank=True)
    creator_id = models.CharField(max_length=128)
    city = models.ForeignKey(City, on_delete=models.PROTECT, related_name="events")
    categories = models.ManyToManyField(Category, related_name="events")
    version = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["starts_at"]
        indexes = [
            models.Index(fields=["city", "starts_at"], name="event_city_starts_idx"),
            models.Index(fields=["status"], name="event_status_idx"),
            models.Index(fields=["creator_id"], name="event_creator_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class Participant(models.Model):
    """Persistence model for one user's enrollment in a drive."""

    id = models.BigAutoField(primary_key=True)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="participants")
    user_id = models.CharField(max_length=128)
    joined_at = models.DateTimeField()

    class Meta:
        ordering = ["joined_at"]
        constraints = [
            models.UniqueConstraint(fields=["event", "user_id"], name="uq_participant_event_user"),
        ]
        indexes = [
            models.Index(fields=["user_id"], name="participant_user_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} @ {self.event_id}"


class Testimonial(models.Model):
    """Persistence model for post-drive feedback."""

    id = models.BigAutoField(primary_key=True)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="testimonials")
    user_id = models.CharField(max_length=128)
    testimonial = models.TextField()
    rating = models.PositiveSmallIntegerField()
    location_clear = models.BooleanField(null=True, blank=True)
    org_rating = models.PositiveSmallIntegerField(null=True, blank=True)
    volunteer_impact_felt = models.PositiveSmallIntegerField(null=True, blank=True)
    would_attend_again = models.BooleanField(null=True, blank=True)
    suggestions = models.TextField(null=True, blank=True)
    submitted_at = models.DateTimeField()

    class Meta:
        ordering = ["submitted_at"]
        constraints = [
            models.UniqueConstraint(fields=["event", "user_id"], name="uq_testimonial_event_user"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} on {self.event_id}: {self.rating}"
