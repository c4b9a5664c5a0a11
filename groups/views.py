# groups/views.py
"""
ViewSets for groups, their posts and comments.

Listing and reading are public.  Members post; authors and group admins
delete posts and comments; any signed-in user may join, comment and
like.  Group updates are limited to admins and deletion to the creator.
"""
import logging

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response

from common.authentication import OptionalJWTAuthentication
from .filters import GroupFilter
from .models import Comment, Group, Post
from .permissions import GroupAdminOrReadOnly
from .serializers import (
    CommentSerializer,
    GroupDetailSerializer,
    GroupSerializer,
    GroupWriteSerializer,
    PostSerializer,
)
from . import services

logger = logging.getLogger(__name__)


class GroupViewSet(viewsets.ModelViewSet):
    authentication_classes = [OptionalJWTAuthentication]
    permission_classes = [GroupAdminOrReadOnly]
    filterset_class = GroupFilter
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        return Group.objects.select_related("creator__profile")

    def get_serializer_class(self):
        if self.action in ("create", "update", "partial_update"):
            return GroupWriteSerializer
        if self.action == "retrieve":
            return GroupDetailSerializer
        return GroupSerializer

    def filter_queryset(self, queryset):
        if self.action != "list":
            return queryset
        return super().filter_queryset(queryset)

    def _render(self, group):
        group = self.get_queryset().prefetch_related("members__profile").get(pk=group.pk)
        return GroupDetailSerializer(group, context=self.get_serializer_context()).data

    def list(self, request, *args, **kwargs):
        groups = self.filter_queryset(self.get_queryset())
        data = GroupSerializer(groups, many=True, context=self.get_serializer_context()).data
        return Response({"success": True, "count": len(data), "data": data})

    def retrieve(self, request, *args, **kwargs):
        return Response({"success": True, "data": self._render(self.get_object())})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        group = services.create_group(request.user, **serializer.validated_data)
        return Response({"success": True, "data": self._render(group)}, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        group = self.get_object()
        serializer = GroupWriteSerializer(group, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        group = serializer.save()
        return Response({"success": True, "data": self._render(group)})

    def destroy(self, request, *args, **kwargs):
        group = self.get_object()
        group_id = group.pk
        # posts, their comments and memberships cascade
        group.delete()
        logger.info("Group %s deleted by user %s", group_id, request.user.pk)
        return Response({"success": True, "message": "Group deleted successfully"})

    @action(detail=True, methods=["post"], permission_classes=[IsAuthenticated])
    def join(self, request, pk=None):
        group = services.join_group(self.get_object(), request.user)
        return Response({
            "success": True,
            "message": "Joined group successfully",
            "joined": True,
            "member_count": group.member_count,
        })

    @action(detail=True, methods=["post"], permission_classes=[IsAuthenticated])
    def leave(self, request, pk=None):
        group = services.leave_group(self.get_object(), request.user)
        return Response({
            "success": True,
            "message": "Left group successfully",
            "joined": False,
            "member_count": group.member_count,
        })

    @action(detail=True, methods=["get", "post"], permission_classes=[IsAuthenticatedOrReadOnly])
    def posts(self, request, pk=None):
        group = self.get_object()
        context = self.get_serializer_context()

        if request.method == "GET":
            qs = group.posts.select_related("author__profile")
            data = PostSerializer(qs, many=True, context=context).data
            return Response({"success": True, "count": len(data), "data": data})

        serializer = PostSerializer(data=request.data, context=context)
        serializer.is_valid(raise_exception=True)
        post = services.create_post(
            group,
            request.user,
            serializer.validated_data["content"],
            serializer.validated_data.get("image", ""),
        )
        return Response(
            {"success": True, "data": PostSerializer(post, context=context).data},
            status=status.HTTP_201_CREATED,
        )


class PostViewSet(mixins.DestroyModelMixin, viewsets.GenericViewSet):
    """Post-level operations, addressed by post id under /groups/posts/."""

    queryset = Post.objects.select_related("group", "author__profile")
    serializer_class = PostSerializer
    authentication_classes = [OptionalJWTAuthentication]
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def destroy(self, request, *args, **kwargs):
        services.delete_post(self.get_object(), request.user)
        return Response({"success": True, "message": "Post deleted successfully"})

    @action(detail=True, methods=["post"])
    def like(self, request, pk=None):
        liked, like_count = services.toggle_post_like(self.get_object(), request.user)
        return Response({"success": True, "liked": liked, "like_count": like_count})

    @action(detail=True, methods=["get", "post"], permission_classes=[IsAuthenticatedOrReadOnly])
    def comments(self, request, pk=None):
        post = self.get_object()
        context = self.get_serializer_context()

        if request.method == "GET":
            qs = post.comments.select_related("author__profile")
            data = CommentSerializer(qs, many=True, context=context).data
            return Response({"success": True, "count": len(data), "data": data})

        serializer = CommentSerializer(data=request.data, context=context)
        serializer.is_valid(raise_exception=True)
        comment = services.create_comment(post, request.user, serializer.validated_data["content"])
        return Response(
            {"success": True, "data": CommentSerializer(comment, context=context).data},
            status=status.HTTP_201_CREATED,
        )


class CommentViewSet(mixins.DestroyModelMixin, viewsets.GenericViewSet):
    queryset = Comment.objects.select_related("post__group", "author__profile")
    serializer_class = CommentSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def destroy(self, request, *args, **kwargs):
        services.delete_comment(self.get_object(), request.user)
        return Response({"success": True, "message": "Comment deleted successfully"})

    @action(detail=True, methods=["post"])
    def like(self, request, pk=None):
        liked, like_count = services.toggle_comment_like(self.get_object(), request.user)
        return Response({"success": True, "liked": liked, "like_count": like_count})
