"""
Serializers for the users app.

Public projections never include the credential hash: ``password`` is a
write-only field on every serializer that accepts it and is absent from
every serializer that renders a user.
"""
from django.contrib.auth import password_validation
from django.contrib.auth.models import User
from django.db import transaction
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact author/attendee projection embedded in other resources."""

    name = serializers.CharField(source="profile.full_name", read_only=True)
    avatar = serializers.CharField(source="profile.avatar", read_only=True)

    class Meta:
        model = User
        fields = ["id", "name", "email", "avatar"]
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source="profile.full_name", read_only=True)
    avatar = serializers.CharField(source="profile.avatar", read_only=True)
    bio = serializers.CharField(source="profile.bio", read_only=True)
    created_at = serializers.DateTimeField(source="date_joined", read_only=True)

    class Meta:
        model = User
        fields = ["id", "name", "email", "avatar", "bio", "is_active", "created_at"]
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=50)
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        trim_whitespace=False,
        style={"input_type": "password"},
    )

    def validate_email(self, value: str) -> str:
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("User with this email already exists")
        return value

    def validate_password(self, value: str) -> str:
        password_validation.validate_password(value)
        return value

    @transaction.atomic
    def create(self, validated_data):
        email = validated_data["email"]
        user = User.objects.create_user(
            username=email,
            email=email,
            password=validated_data["password"],
        )
        # created by the post_save signal and cached on ``user``
        profile = user.profile
        profile.full_name = validated_data["name"].strip()
        profile.save(update_fields=["full_name", "updated_at"])
        return user


class LoginSerializer(serializers.Serializer):
    """
    Resolve an account from email + password.
    POST body: {"email": "...", "password": "..."}
    """
    email = serializers.EmailField(write_only=True)
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate(self, attrs):
        try:
            user = User.objects.select_related("profile").get(email__iexact=attrs["email"])
        except User.DoesNotExist:
            raise AuthenticationFailed("Invalid credentials")

        if not user.is_active:
            raise AuthenticationFailed("Account is inactive")

        if not user.check_password(attrs["password"]):
            raise AuthenticationFailed("Invalid credentials")

        attrs["user"] = user
        return attrs


class ProfileUpdateSerializer(serializers.Serializer):
    """Partial profile update; only the keys present in the payload change."""

    name = serializers.CharField(min_length=2, max_length=50, required=False)
    bio = serializers.CharField(max_length=200, required=False, allow_blank=True)
    avatar = serializers.URLField(max_length=500, required=False)

    field_map = {"name": "full_name", "bio": "bio", "avatar": "avatar"}

    def update(self, instance, validated_data):
        profile = instance.profile
        changed = []
        for key, attr in self.field_map.items():
            if key in validated_data:
                setattr(profile, attr, validated_data[key].strip() if key == "name" else validated_data[key])
                changed.append(attr)
        if changed:
            profile.save(update_fields=changed + ["updated_at"])
        return instance


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True, trim_whitespace=False)
    new_password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate_new_password(self, value: str) -> str:
        password_validation.validate_password(value, self.context["request"].user)
        return value
