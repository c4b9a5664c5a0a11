# groups/permissions.py
from rest_framework.permissions import BasePermission, SAFE_METHODS


class GroupAdminOrReadOnly(BasePermission):
    """
    - READ: anyone
    - UPDATE: group admins
    - DELETE: the group's creator
    """
    message = "Not authorized to update this group"

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        if request.method == "DELETE":
            self.message = "Not authorized to delete this group"
            return obj.creator_id == request.user.id
        return obj.is_admin(request.user)
