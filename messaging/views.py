"""
REST endpoints for direct messaging under ``/api/chat/``.

The realtime socket is the primary send path; ``send/`` is a fallback
that only persists (no push).  Reading a history marks the partner's
messages to the caller as read.
"""
from __future__ import annotations

import logging

from rest_framework import status, viewsets
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from users.filters import search_users
from users.serializers import UserSummarySerializer
from . import services
from .serializers import ConversationSerializer, MessageSerializer, SendMessageSerializer

logger = logging.getLogger(__name__)


class ChatViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def conversations(self, request):
        entries = services.conversations_for(request.user)
        return Response({
            "success": True,
            "conversations": ConversationSerializer(entries, many=True).data,
        })

    def history(self, request, pk=None):
        """``pk`` is the partner's user id."""
        messages = services.history(request.user, pk)
        return Response({"success": True, "messages": MessageSerializer(messages, many=True).data})

    def destroy(self, request, pk=None):
        """``pk`` is the message id."""
        services.delete_message(pk, request.user)
        return Response({"success": True, "message": "Message deleted successfully"})

    def send(self, request):
        serializer = SendMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        receiver = serializer.validated_data.get("receiver")
        body = serializer.validated_data.get("message")
        if not receiver or not body:
            raise ValidationError("Receiver and message are required")
        message = services.persist_message(request.user.pk, receiver, body)
        return Response(
            {"success": True, "message": services.message_payload(message)},
            status=status.HTTP_201_CREATED,
        )

    def unread_count(self, request):
        return Response({"success": True, "unread_count": services.unread_count(request.user)})

    def search_users(self, request):
        query = (request.query_params.get("query") or "").strip()
        if not query:
            raise ValidationError("Search query is required")
        users = search_users({"query": query}, exclude_user=request.user, limit=20)
        return Response({"success": True, "users": UserSummarySerializer(users, many=True).data})
