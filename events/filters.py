"""
django-filter FilterSet for the public event listing.

Without an explicit ``status`` only published events are listed.  A
``category`` of ``All`` means no category filter.  Results are ordered by
``sort_by`` (default ``date_time``) in ``order`` direction (default
ascending).
"""
from django.db.models import Q
from django_filters import rest_framework as filters

from .models import Event


class EventFilter(filters.FilterSet):
    SORT_FIELDS = ("date_time", "created_at", "title", "attendees_count")

    category = filters.CharFilter(method="filter_category")
    status = filters.ChoiceFilter(choices=Event.STATUS_CHOICES)
    search = filters.CharFilter(method="filter_search")
    sort_by = filters.ChoiceFilter(choices=[(f, f) for f in SORT_FIELDS], method="filter_passthrough")
    order = filters.ChoiceFilter(choices=[("asc", "asc"), ("desc", "desc")], method="filter_passthrough")

    class Meta:
        model = Event
        fields = []

    def filter_category(self, queryset, name, value):
        if not value or value == "All":
            return queryset
        return queryset.filter(category=value)

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            Q(title__icontains=value)
            | Q(description__icontains=value)
            | Q(location__icontains=value)
        )

    def filter_passthrough(self, queryset, name, value):
        # applied in filter_queryset once every filter has run
        return queryset

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)
        data = self.form.cleaned_data
        if not data.get("status"):
            queryset = queryset.filter(status=Event.STATUS_PUBLISHED)
        field = data.get("sort_by") or "date_time"
        prefix = "-" if data.get("order") == "desc" else ""
        return queryset.order_by(f"{prefix}{field}", f"{prefix}id")
