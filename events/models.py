"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.

Each entity is a separate document. References are raw UUIDs, and
back-reference collections are JSON arrays of UUID strings, so no foreign
keys tie the tables together.
"""

import uuid

from django.db import models


class Document(models.Model):
    """Common columns for every stored document."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class EventLookup(Document):
    """A named parent that keeps the ids of the events referencing it."""

    name = models.CharField(max_length=255)
    event_ids = models.JSONField(default=list, blank=True)

    class Meta:
        abstract = True
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class EventType(EventLookup):
    """Persistence model for event types."""


class EventCategory(EventLookup):
    """Persistence model for event categories."""

    class Meta(EventLookup.Meta):
        verbose_name_plural = "event categories"


class EventStatus(EventLookup):
    """Persistence model for event statuses."""

    class Meta(EventLookup.Meta):
        verbose_name_plural = "event statuses"


class EventVenue(EventLookup):
    """Persistence model for event venues."""

    address = models.TextField(blank=True, default="")


class EventSpeaker(Document):
    """Persistence model for speakers."""

    name = models.CharField(max_length=255)
    profile = models.TextField(blank=True, default="")
    event_ids = models.JSONField(default=list, blank=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Event(Document):
    """Persistence model for events."""

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    starts_at = models.DateTimeField()
    ends_at = models.DateTimeField()
    start_time = models.CharField(max_length=16)
    end_time = models.CharField(max_length=16)
    is_all_day = models.BooleanField(default=False)
    event_type_id = models.UUIDField()
    category_id = models.UUIDField()
    status_id = models.UUIDField()
    venue_id = models.UUIDField()
    speaker_ids = models.JSONField(default=list, blank=True)
    feedback_ids = models.JSONField(default=list, blank=True)
    rsvp_ids = models.JSONField(default=list, blank=True)

    class Meta:
        ordering = ["starts_at"]
        indexes = [
            models.Index(fields=["starts_at"], name="event_starts_at_idx"),
        ]

    def __str__(self) -> str:
        return self.name
