# messaging/urls.py
"""
URL configuration for the messaging app.

Included under the ``/api/chat/`` prefix at the project level.
"""
from django.urls import path

from .views import ChatViewSet

app_name = "messaging"

urlpatterns = [
    path("conversations/", ChatViewSet.as_view({"get": "conversations"}), name="conversations"),
    path(
        "messages/<int:pk>/",
        ChatViewSet.as_view({"get": "history", "delete": "destroy"}),
        name="messages",
    ),
    path("send/", ChatViewSet.as_view({"post": "send"}), name="send"),
    path("unread-count/", ChatViewSet.as_view({"get": "unread_count"}), name="unread-count"),
    path("search-users/", ChatViewSet.as_view({"get": "search_users"}), name="search-users"),
]
