# groups/models.py
from django.conf import settings
from django.core.validators import MinLengthValidator
from django.db import models


class Group(models.Model):
    CATEGORY_CHOICES = [
        ("Sports", "Sports"),
        ("Technology", "Technology"),
        ("Arts & Culture", "Arts & Culture"),
        ("Education", "Education"),
        ("Business", "Business"),
        ("Health & Wellness", "Health & Wellness"),
        ("Community Service", "Community Service"),
        ("Entertainment", "Entertainment"),
        ("Food & Dining", "Food & Dining"),
        ("Travel", "Travel"),
        ("Other", "Other"),
    ]

    name = models.CharField(max_length=100, unique=True, validators=[MinLengthValidator(3)])
    description = models.CharField(max_length=500)
    category = models.CharField(max_length=32, choices=CATEGORY_CHOICES, default="Other")
    creator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="created_groups",
    )
    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="GroupMembership",
        related_name="joined_groups",
        blank=True,
    )
    avatar = models.CharField(max_length=500, blank=True, default="")
    is_private = models.BooleanField(default=False)
    # denormalized counters
    member_count = models.PositiveIntegerField(default=0)
    post_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["category"], name="groups_category_idx"),
            models.Index(fields=["creator"], name="groups_creator_idx"),
        ]

    def __str__(self):
        return self.name

    def is_member(self, user) -> bool:
        return self.memberships.filter(user_id=user.pk).exists()

    def is_admin(self, user) -> bool:
        return self.memberships.filter(user_id=user.pk, role=GroupMembership.ROLE_ADMIN).exists()

    def refresh_member_count(self):
        self.member_count = self.memberships.count()
        self.save(update_fields=["member_count", "updated_at"])


class GroupMembership(models.Model):
    ROLE_ADMIN = "admin"
    ROLE_MEMBER = "member"
    ROLE_CHOICES = [
        (ROLE_ADMIN, "Admin"),
        (ROLE_MEMBER, "Member"),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="group_memberships")
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name="memberships")
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_MEMBER)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("user", "group")
        indexes = [
            models.Index(fields=["group", "role"], name="groups_member_role_idx"),
        ]

    def __str__(self):
        return f"{self.user} → {self.group} ({self.role})"


class Post(models.Model):
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name="posts")
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="group_posts")
    content = models.TextField(max_length=2000)
    image = models.CharField(max_length=500, blank=True, default="")
    likes = models.ManyToManyField(settings.AUTH_USER_MODEL, related_name="liked_posts", blank=True)
    like_count = models.PositiveIntegerField(default=0)
    comment_count = models.PositiveIntegerField(default=0)
    is_pinned = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-is_pinned", "-created_at", "-id"]
        indexes = [
            models.Index(fields=["group", "-created_at"], name="groups_post_recent_idx"),
        ]

    def __str__(self):
        return f"Post {self.pk} in {self.group_id}"


class Comment(models.Model):
    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name="comments")
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="group_comments")
    content = models.TextField(max_length=500)
    likes = models.ManyToManyField(settings.AUTH_USER_MODEL, related_name="liked_comments", blank=True)
    like_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["post", "-created_at"], name="groups_comment_recent_idx"),
        ]

    def __str__(self):
        return f"Comment {self.pk} on {self.post_id}"
