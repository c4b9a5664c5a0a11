# groups/filters.py
from django.db.models import Q
from django_filters import rest_framework as filters

from .models import Group


class GroupFilter(filters.FilterSet):
    SORT_CHOICES = [
        (f"{prefix}{field}", f"{prefix}{field}")
        for field in ("created_at", "name", "member_count", "post_count")
        for prefix in ("", "-")
    ]

    category = filters.CharFilter(method="filter_category")
    search = filters.CharFilter(method="filter_search")
    sort = filters.ChoiceFilter(choices=SORT_CHOICES, method="filter_sort")

    class Meta:
        model = Group
        fields = []

    def filter_category(self, queryset, name, value):
        if not value or value == "All":
            return queryset
        return queryset.filter(category=value)

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(name__icontains=value) | Q(description__icontains=value))

    def filter_sort(self, queryset, name, value):
        return queryset.order_by(value, "-id")
