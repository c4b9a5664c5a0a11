"""
Authentication endpoints for the users app.

Registration, email + password login (returns access + refresh), token
refresh, profile and password management, and the public profile view.
These routes are included under ``/api/auth/``.
"""
from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    ChangePasswordView,
    LoginView,
    MeView,
    PublicUserView,
    RegisterView,
    UpdateProfileView,
)

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("me/", MeView.as_view(), name="me"),
    path("updateprofile/", UpdateProfileView.as_view(), name="update_profile"),
    path("changepassword/", ChangePasswordView.as_view(), name="change_password"),
    path("user/<int:pk>/", PublicUserView.as_view(), name="public_user"),
]
