# groups/serializers.py
from rest_framework import serializers

from users.serializers import UserSummarySerializer
from .models import Comment, Group, GroupMembership, Post


class _ViewerMixin:
    def _viewer(self):
        request = self.context.get("request")
        user = getattr(request, "user", None)
        return user if user is not None and user.is_authenticated else None


class GroupSerializer(_ViewerMixin, serializers.ModelSerializer):
    creator = UserSummarySerializer(read_only=True)
    is_member = serializers.SerializerMethodField()
    is_admin = serializers.SerializerMethodField()

    class Meta:
        model = Group
        fields = [
            "id",
            "name",
            "description",
            "category",
            "creator",
            "avatar",
            "is_private",
            "member_count",
            "post_count",
            "is_member",
            "is_admin",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_is_member(self, obj) -> bool:
        viewer = self._viewer()
        return bool(viewer) and obj.is_member(viewer)

    def get_is_admin(self, obj) -> bool:
        viewer = self._viewer()
        return bool(viewer) and obj.is_admin(viewer)


class GroupDetailSerializer(GroupSerializer):
    admins = serializers.SerializerMethodField()
    members = UserSummarySerializer(many=True, read_only=True)

    class Meta(GroupSerializer.Meta):
        fields = GroupSerializer.Meta.fields + ["admins", "members"]
        read_only_fields = fields

    def get_admins(self, obj):
        admins = [
            m.user for m in obj.memberships.select_related("user__profile").filter(role=GroupMembership.ROLE_ADMIN)
        ]
        return UserSummarySerializer(admins, many=True).data


class GroupWriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = Group
        fields = ["name", "description", "category", "avatar", "is_private"]
        extra_kwargs = {
            # uniqueness is checked case-insensitively in validate_name
            "name": {"validators": [], "min_length": 3},
        }

    def validate_name(self, value: str) -> str:
        value = value.strip()
        qs = Group.objects.filter(name__iexact=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("Group name already exists")
        return value


class PostSerializer(_ViewerMixin, serializers.ModelSerializer):
    author = UserSummarySerializer(read_only=True)
    group = serializers.PrimaryKeyRelatedField(read_only=True)
    is_liked = serializers.SerializerMethodField()

    class Meta:
        model = Post
        fields = [
            "id",
            "group",
            "author",
            "content",
            "image",
            "like_count",
            "comment_count",
            "is_pinned",
            "is_liked",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id", "group", "author", "like_count", "comment_count", "is_pinned", "is_liked",
            "created_at", "updated_at",
        ]
        extra_kwargs = {"image": {"required": False, "allow_blank": True}}

    def get_is_liked(self, obj) -> bool:
        viewer = self._viewer()
        return bool(viewer) and obj.likes.filter(pk=viewer.pk).exists()


class CommentSerializer(_ViewerMixin, serializers.ModelSerializer):
    author = UserSummarySerializer(read_only=True)
    post = serializers.PrimaryKeyRelatedField(read_only=True)
    is_liked = serializers.SerializerMethodField()

    class Meta:
        model = Comment
        fields = ["id", "post", "author", "content", "like_count", "is_liked", "created_at", "updated_at"]
        read_only_fields = ["id", "post", "author", "like_count", "is_liked", "created_at", "updated_at"]

    def get_is_liked(self, obj) -> bool:
        viewer = self._viewer()
        return bool(viewer) and obj.likes.filter(pk=viewer.pk).exists()
