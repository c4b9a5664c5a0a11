"""
Permissions for the events app.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsCreatorOrReadOnly(BasePermission):
    """
    - SAFE_METHODS (GET/HEAD/OPTIONS) are open.
    - Mutations allowed only for:
        * the event creator (created_by)
        * any signed-in user when the event has no creator (seeded rows)
        * staff users
    """
    message = "Not authorized to update this event"

    def has_permission(self, request, view):
        # Anyone can read; must be authenticated to write
        if request.method in SAFE_METHODS:
            return True
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        if request.method == "DELETE":
            self.message = "Not authorized to delete this event"
        elif getattr(view, "action", None) == "set_status":
            self.message = "Only the event creator can change its status"
        return bool(
            request.user
            and (
                request.user.is_staff
                or obj.created_by_id is None
                or obj.created_by_id == request.user.id
            )
        )
