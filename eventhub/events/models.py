"""Django ORM models (persistence layer).

Attendee membership lives in the explicit ``EventAttendee`` join table. Code
outside the store reads and changes it only through ``EventStore``.
"""

import uuid

from django.conf import settings
from django.db import models

URL_MAX_LENGTH = 2048


class Event(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)
    description = models.TextField(max_length=2000)
    date = models.DateTimeField(db_index=True)
    location = models.CharField(max_length=200)
    category = models.CharField(max_length=50, db_index=True)
    cover_url = models.URLField(max_length=URL_MAX_LENGTH)
    # Ordered, duplicates allowed.
    images_url = models.JSONField(default=list, blank=True)
    creator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="created_events",
    )
    attendees = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="EventAttendee",
        related_name="attended_events",
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["date"]

    def __str__(self) -> str:
        return self.title


class EventAttendee(models.Model):
    event = models.ForeignKey(
        Event,
        on_delete=models.CASCADE,
        related_name="attendee_links",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="event_links",
    )
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["event", "user"],
                name="unique_event_attendee",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.user_id} -> {self.event_id}"
