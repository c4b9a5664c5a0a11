"""
Views for the users app.

Authentication endpoints (register, login, profile and password
management, public profile) live under ``/api/auth/``; the people
directory (avatar upload, recommendations, search, profile with events
and groups) lives under ``/api/users/``.
"""
import logging

from django.contrib.auth.models import User
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import AuthenticationFailed, NotFound, ValidationError
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from common.authentication import OptionalJWTAuthentication
from common.uploads import AvatarUploadSerializer, store_image
from events.serializers import EventLiteSerializer
from groups.serializers import GroupSerializer
from .filters import search_users
from .serializers import (
    ChangePasswordSerializer,
    LoginSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    UserSerializer,
)
from .services import recommend_users

logger = logging.getLogger(__name__)


def issue_tokens(user):
    refresh = RefreshToken.for_user(user)
    return {"token": str(refresh.access_token), "refresh": str(refresh)}


def _require(data, fields, message):
    if any(not data.get(f) for f in fields):
        raise ValidationError(message)


class RegisterView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        _require(request.data, ("name", "email", "password"), "Please provide name, email, and password")
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Registered user %s", user.pk)
        return Response(
            {
                "success": True,
                "message": "User registered successfully",
                **issue_tokens(user),
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    """
    Obtain JWT tokens using email + password.
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get_authenticate_header(self, request):
        # keeps bad credentials a 401 even though no authenticator runs here
        return 'Bearer realm="api"'

    def post(self, request, *args, **kwargs):
        _require(request.data, ("email", "password"), "Please provide email and password")
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        return Response({
            "success": True,
            "message": "Login successful",
            **issue_tokens(user),
            "user": UserSerializer(user).data,
        })


class MeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response({"success": True, "user": UserSerializer(request.user).data})


class UpdateProfileView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def put(self, request):
        serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response({
            "success": True,
            "message": "Profile updated successfully",
            "user": UserSerializer(user).data,
        })


class ChangePasswordView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def put(self, request):
        _require(
            request.data,
            ("current_password", "new_password"),
            "Please provide current and new password",
        )
        serializer = ChangePasswordSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)

        user = request.user
        if not user.check_password(serializer.validated_data["current_password"]):
            raise AuthenticationFailed("Current password is incorrect")

        user.set_password(serializer.validated_data["new_password"])
        user.save(update_fields=["password"])
        logger.info("User %s changed password", user.pk)
        return Response({"success": True, "message": "Password changed successfully"})


class PublicUserView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = [OptionalJWTAuthentication]

    def get(self, request, pk):
        user = User.objects.select_related("profile").filter(pk=pk).first()
        if user is None:
            raise NotFound("User not found")
        return Response({"success": True, "user": UserSerializer(user).data})


class UserViewSet(viewsets.GenericViewSet):
    """People directory: profiles, search, recommendations and avatars."""

    queryset = User.objects.filter(is_active=True).select_related("profile")
    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated]
    lookup_value_regex = r"\d+"

    def retrieve(self, request, pk=None):
        user = User.objects.select_related("profile").filter(pk=pk).first()
        if user is None:
            raise NotFound("User not found")
        saved = user.saved_events.order_by("date_time")
        attending = user.events_attending.order_by("date_time")
        groups = user.joined_groups.select_related("creator__profile").order_by("-created_at")[:5]
        context = self.get_serializer_context()
        return Response({
            "success": True,
            "user": {
                **UserSerializer(user).data,
                "saved_events": EventLiteSerializer(saved, many=True).data,
                "events_attending": EventLiteSerializer(attending, many=True).data,
                "groups": GroupSerializer(groups, many=True, context=context).data,
            },
        })

    @action(detail=False, methods=["get"])
    def recommendations(self, request):
        ranked = recommend_users(request.user)
        users = [{**UserSerializer(user).data, "score": score} for user, score in ranked]
        return Response({"success": True, "count": len(users), "users": users})

    @action(detail=False, methods=["get"])
    def search(self, request):
        query = (request.query_params.get("query") or "").strip()
        if len(query) < 2:
            return Response({"success": True, "users": []})
        users = search_users({"query": query}, exclude_user=request.user, limit=10)
        return Response({"success": True, "users": UserSerializer(users, many=True).data})

    @action(
        detail=False,
        methods=["post"],
        url_path="upload-avatar",
        parser_classes=[MultiPartParser, FormParser],
    )
    def upload_avatar(self, request):
        if "avatar" not in request.FILES:
            raise ValidationError("No avatar file provided")
        serializer = AvatarUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        _, url = store_image(serializer.validated_data["avatar"], "avatars", request=request)

        profile = request.user.profile
        profile.avatar = url
        profile.save(update_fields=["avatar", "updated_at"])
        logger.info("Avatar updated for user %s", request.user.pk)

        return Response({
            "success": True,
            "message": "Avatar uploaded successfully",
            "avatar_url": url,
            "user": UserSerializer(request.user).data,
        })
