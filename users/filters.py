"""
django-filter FilterSet definitions for the users app.

The ``UserFilter`` backs both the people search under ``/api/users/``
and the chat recipient search.  The ``query`` parameter matches display
name or email, case-insensitively.
"""
from django.contrib.auth.models import User
from django.db.models import Q
from django_filters import rest_framework as filters


class UserFilter(filters.FilterSet):
    """Filter set for the User directory search."""

    query = filters.CharFilter(method="filter_query")

    class Meta:
        model = User
        fields = []

    def filter_query(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(profile__full_name__icontains=value)
            | Q(email__icontains=value)
        )


def search_users(params, exclude_user, limit):
    """Active users matching ``params['query']``, excluding the caller."""
    qs = (
        User.objects.filter(is_active=True)
        .exclude(pk=exclude_user.pk)
        .select_related("profile")
        .order_by("profile__full_name", "id")
    )
    return list(UserFilter(params, queryset=qs).qs[:limit])
