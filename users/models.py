"""
Models for the users app.

A `UserProfile` model extends the built-in `auth.User` with the public
profile fields (display name, avatar URL, bio).  A `OneToOneField` links
each profile to its user.  The `UserProfile` is created automatically
via signals when a new user instance is saved.

Accounts use the lower-cased email as ``username`` so logins can be
resolved by email alone.
"""
from django.conf import settings
from django.contrib.auth.models import User
from django.core.validators import MinLengthValidator
from django.db import models


def default_avatar_url():
    return settings.DEFAULT_AVATAR_URL


class UserProfile(models.Model):
    """Extension of Django's built-in User model."""

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="profile")
    full_name = models.CharField(max_length=50, blank=True, validators=[MinLengthValidator(2)])
    avatar = models.URLField(max_length=500, blank=True, default=default_avatar_url)
    bio = models.CharField(max_length=200, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.full_name or self.user.email
