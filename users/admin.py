"""
Admin configuration for the users app.

This module unregisters the default `User` admin and re-registers it with
an inline profile form so that user profiles are editable via the Django
admin.  Fields displayed on the list include email, display name, active
status, and join date.
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import User

from .models import UserProfile


class UserProfileInline(admin.StackedInline):
    model = UserProfile
    can_delete = False


class UserAdmin(BaseUserAdmin):
    inlines = [UserProfileInline]
    list_display = ("email", "display_name", "is_active", "date_joined")
    search_fields = ("email", "profile__full_name")

    @admin.display(description="Name")
    def display_name(self, obj):
        return getattr(getattr(obj, "profile", None), "full_name", "")


admin.site.unregister(User)
admin.site.register(User, UserAdmin)
