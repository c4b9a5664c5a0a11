"""
Serializers for the events app.

`EventSerializer` renders an event with its creator and attendee
projections.  `EventWriteSerializer` handles create and partial update:
on create ``title``, ``location``, ``date`` and ``time`` are required,
on update only the keys present in the payload are applied.
"""
from rest_framework import serializers

from users.serializers import UserSummarySerializer
from .models import Event


class EventSerializer(serializers.ModelSerializer):
    """Serializer for Event objects."""
    created_by = UserSummarySerializer(read_only=True)
    attendees = UserSummarySerializer(many=True, read_only=True)
    spots_remaining = serializers.IntegerField(read_only=True)
    is_full = serializers.BooleanField(read_only=True)
    is_attending = serializers.SerializerMethodField()
    is_saved = serializers.SerializerMethodField()

    class Meta:
        model = Event
        fields = [
            "id",
            "title",
            "description",
            "location",
            "latitude",
            "longitude",
            "category",
            "date",
            "time",
            "date_time",
            "attendees_count",
            "capacity",
            "spots_remaining",
            "is_full",
            "attendees",
            "image",
            "image_url",
            "status",
            "is_user_created",
            "is_attending",
            "is_saved",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def _viewer(self):
        request = self.context.get("request")
        user = getattr(request, "user", None)
        return user if user is not None and user.is_authenticated else None

    def get_is_attending(self, obj) -> bool:
        viewer = self._viewer()
        if viewer is None:
            return False
        return any(a.pk == viewer.pk for a in obj.attendees.all())

    def get_is_saved(self, obj) -> bool:
        viewer = self._viewer()
        if viewer is None:
            return False
        return obj.bookmarks.filter(user=viewer).exists()


class EventLiteSerializer(serializers.ModelSerializer):
    """Lighter projection used inside user profiles."""

    class Meta:
        model = Event
        fields = [
            "id",
            "title",
            "location",
            "category",
            "date",
            "time",
            "date_time",
            "image",
            "image_url",
            "attendees_count",
            "capacity",
            "status",
        ]
        read_only_fields = fields


class EventWriteSerializer(serializers.ModelSerializer):
    REQUIRED_ON_CREATE = ("title", "location", "date", "time")

    class Meta:
        model = Event
        fields = [
            "title",
            "description",
            "location",
            "latitude",
            "longitude",
            "category",
            "date",
            "time",
            "date_time",
            "capacity",
            "image_url",
            "status",
        ]
        extra_kwargs = {
            "title": {"required": False},
            "location": {"required": False},
            "date": {"required": False},
            "time": {"required": False},
            "description": {"allow_blank": True},
        }

    def validate_capacity(self, value):
        if self.instance is not None and value is not None and value < self.instance.attendees_count:
            raise serializers.ValidationError(
                f"Capacity cannot be lower than the current number of attendees "
                f"({self.instance.attendees_count})"
            )
        return value

    def validate(self, attrs):
        if self.instance is None:
            missing = [f for f in self.REQUIRED_ON_CREATE if not attrs.get(f)]
            if missing:
                raise serializers.ValidationError(
                    "Missing required fields: title, location, date, and time are required"
                )
        return attrs

    def create(self, validated_data):
        category = validated_data.get("category") or Event.CATEGORY_COMMUNITY
        validated_data["category"] = category
        validated_data["image"] = Event.emoji_for(category)
        validated_data["is_user_created"] = True
        return super().create(validated_data)

    def update(self, instance, validated_data):
        if "category" in validated_data:
            validated_data["image"] = Event.emoji_for(validated_data["category"])
        return super().update(instance, validated_data)


class EventStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=Event.STATUS_CHOICES,
        error_messages={
            "invalid_choice": "Invalid status value. Must be 'draft', 'published', or 'cancelled'",
            "required": "Invalid status value. Must be 'draft', 'published', or 'cancelled'",
        },
    )
