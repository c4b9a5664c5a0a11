from django.contrib import admin

from .models import Comment, Group, GroupMembership, Post


class GroupMembershipInline(admin.TabularInline):
    model = GroupMembership
    extra = 0
    raw_id_fields = ("user",)


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "creator", "member_count", "post_count", "is_private", "created_at")
    list_filter = ("category", "is_private")
    search_fields = ("name", "description")
    readonly_fields = ("member_count", "post_count")
    inlines = [GroupMembershipInline]


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ("id", "group", "author", "like_count", "comment_count", "is_pinned", "created_at")
    list_filter = ("is_pinned",)
    raw_id_fields = ("group", "author", "likes")


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ("id", "post", "author", "like_count", "created_at")
    raw_id_fields = ("post", "author", "likes")
