from __future__ import annotations

from rest_framework import serializers

from users.serializers import UserSummarySerializer
from .models import Message


class MessageSerializer(serializers.ModelSerializer):
    sender = UserSummarySerializer(read_only=True)
    receiver = UserSummarySerializer(read_only=True)
    conversation_key = serializers.CharField(read_only=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "sender",
            "receiver",
            "message",
            "read",
            "read_at",
            "conversation_key",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class SendMessageSerializer(serializers.Serializer):
    receiver = serializers.IntegerField(required=False)
    message = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)


class ConversationSerializer(serializers.Serializer):
    partner = UserSummarySerializer()
    last_message = MessageSerializer()
    unread_count = serializers.IntegerField()
