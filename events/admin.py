"""
Admin configuration for the events app.

Defines the list display and search fields for events, registrations and
bookmarks in the Django admin site.
"""
from django.contrib import admin

from .models import Event, EventBookmark, EventRegistration


class EventRegistrationInline(admin.TabularInline):
    model = EventRegistration
    extra = 0
    raw_id_fields = ("user",)


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("title", "category", "status", "attendees_count", "capacity", "created_by", "date_time")
    list_filter = ("status", "category")
    search_fields = ("title", "location", "description")
    readonly_fields = ("attendees_count",)
    inlines = [EventRegistrationInline]


@admin.register(EventBookmark)
class EventBookmarkAdmin(admin.ModelAdmin):
    list_display = ("event", "user", "saved_at")
    raw_id_fields = ("event", "user")
