"""
Models for the events app.

An `Event` carries its RSVP state as a set of `EventRegistration` rows
plus a denormalized ``attendees_count`` that is kept equal to the size
of that set.  Bookmarks ("saved" events) are a separate `EventBookmark`
set.  The creator of the event is stored in the `created_by` field; it
is nullable because imported/seeded events have no owner.
"""

from django.contrib.auth.models import User
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Event(models.Model):
    """A community event with optional capacity."""
    CATEGORY_COMMUNITY = "Community"
    CATEGORY_MUSIC = "Music"
    CATEGORY_SPORTS = "Sports"
    CATEGORY_EDUCATION = "Education"
    CATEGORY_SOCIAL = "Social"
    CATEGORY_FOOD = "Food"
    CATEGORY_OTHER = "Other"
    CATEGORY_CHOICES = [
        (CATEGORY_COMMUNITY, "Community"),
        (CATEGORY_MUSIC, "Music"),
        (CATEGORY_SPORTS, "Sports"),
        (CATEGORY_EDUCATION, "Education"),
        (CATEGORY_SOCIAL, "Social"),
        (CATEGORY_FOOD, "Food"),
        (CATEGORY_OTHER, "Other"),
    ]
    CATEGORY_EMOJI = {
        CATEGORY_COMMUNITY: "👥",
        CATEGORY_MUSIC: "🎵",
        CATEGORY_SPORTS: "⚽",
        CATEGORY_EDUCATION: "📚",
        CATEGORY_SOCIAL: "🎉",
        CATEGORY_FOOD: "🍽️",
        CATEGORY_OTHER: "📌",
    }

    STATUS_DRAFT = "draft"
    STATUS_PUBLISHED = "published"
    STATUS_CANCELLED = "cancelled"
    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_PUBLISHED, "Published"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    title = models.CharField(max_length=200)
    description = models.TextField(max_length=2000, blank=True, default="")
    location = models.CharField(max_length=255)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default=CATEGORY_COMMUNITY)
    # Display strings as entered by the client; ``date_time`` is the sortable value.
    date = models.CharField(max_length=64)
    time = models.CharField(max_length=64)
    date_time = models.DateTimeField(default=timezone.now)
    attendees_count = models.PositiveIntegerField(default=0)
    capacity = models.PositiveIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    attendees = models.ManyToManyField(
        User,
        through="EventRegistration",
        related_name="events_attending",
        blank=True,
    )
    saved_by = models.ManyToManyField(
        User,
        through="EventBookmark",
        related_name="saved_events",
        blank=True,
    )
    image = models.CharField(max_length=16, default="📅")
    image_url = models.URLField(max_length=500, null=True, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PUBLISHED)
    is_user_created = models.BooleanField(default=False)
    # Meta
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_events",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["date_time"]
        indexes = [
            models.Index(fields=["status", "date_time"], name="events_status_dt_idx"),
            models.Index(fields=["category"], name="events_category_idx"),
        ]

    def __str__(self):
        return self.title

    @classmethod
    def emoji_for(cls, category):
        return cls.CATEGORY_EMOJI.get(category, cls.CATEGORY_EMOJI[cls.CATEGORY_OTHER])

    @property
    def spots_remaining(self):
        if self.capacity is None:
            return None
        return max(0, self.capacity - self.attendees_count)

    @property
    def is_full(self):
        return self.capacity is not None and self.attendees_count >= self.capacity


class EventRegistration(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="registrations")
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="event_registrations")
    registered_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "event_registrations"
        unique_together = ("event", "user")
        indexes = [
            models.Index(fields=["user"], name="event_reg_user_idx"),
        ]

    def __str__(self):
        return f"{self.user_id} -> {self.event_id}"


class EventBookmark(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="bookmarks")
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="event_bookmarks")
    saved_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "event_bookmarks"
        unique_together = ("event", "user")
        indexes = [
            models.Index(fields=["user"], name="event_bookmark_user_idx"),
        ]

    def __str__(self):
        return f"{self.user_id} saved {self.event_id}"
