# messaging/services.py
"""
Synchronous ORM operations behind direct messaging.

Both the REST views and the realtime relay go through these functions;
the relay wraps them with ``database_sync_to_async``.
"""
from __future__ import annotations

import json
import logging
from typing import Iterable, List, Optional

from django.contrib.auth import get_user_model
from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from .models import Message
from .serializers import MessageSerializer

logger = logging.getLogger(__name__)

User = get_user_model()

MAX_MESSAGE_LENGTH = 1000


def coerce_user_id(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def persist_message(sender_id, receiver_id, body) -> Message:
    """Validate and store a message; nothing is written when validation fails."""
    if not sender_id or not receiver_id or not body:
        raise ValidationError("Sender, receiver, and message are required")
    if not isinstance(body, str):
        raise ValidationError("Message must be text")

    body = body.strip()
    if not body:
        raise ValidationError("Sender, receiver, and message are required")
    if len(body) > MAX_MESSAGE_LENGTH:
        raise ValidationError(f"Message cannot exceed {MAX_MESSAGE_LENGTH} characters")

    sender_pk, receiver_pk = coerce_user_id(sender_id), coerce_user_id(receiver_id)
    if sender_pk is None or receiver_pk is None:
        raise ValidationError("Sender and receiver must be user ids")
    if not User.objects.filter(pk=receiver_pk, is_active=True).exists():
        raise NotFound("Receiver not found")

    message = Message.objects.create(sender_id=sender_pk, receiver_id=receiver_pk, message=body)
    logger.info("Message %s stored (%s → %s)", message.pk, sender_pk, receiver_pk)
    return message


def message_payload(message: Message) -> dict:
    """Author-enriched, JSON-safe rendering of a message for the realtime channel."""
    message = Message.objects.select_related("sender__profile", "receiver__profile").get(pk=message.pk)
    data = MessageSerializer(message).data
    return json.loads(json.dumps(data, cls=DjangoJSONEncoder))


def mark_read(message_ids: Iterable, reader_id) -> int:
    """Mark as read the listed messages addressed to ``reader_id``; returns rows updated."""
    ids = [pk for pk in (coerce_user_id(i) for i in (message_ids or [])) if pk is not None]
    if not ids:
        return 0
    return Message.objects.filter(pk__in=ids, receiver_id=reader_id, read=False).update(
        read=True, read_at=timezone.now()
    )


def conversations_for(user) -> List[dict]:
    """One entry per partner, most recently active first.

    Each entry carries the latest message of the pair and the number of
    unread messages the partner sent to ``user``.
    """
    messages = (
        Message.objects.filter(Q(sender=user) | Q(receiver=user))
        .select_related("sender__profile", "receiver__profile")
        .order_by("-created_at", "-id")
    )
    conversations = {}
    for message in messages:
        partner_id = message.partner_id_for(user.pk)
        entry = conversations.get(partner_id)
        if entry is None:
            partner = message.receiver if message.sender_id == user.pk else message.sender
            entry = conversations[partner_id] = {
                "partner": partner,
                "last_message": message,
                "unread_count": 0,
            }
        if message.receiver_id == user.pk and not message.read:
            entry["unread_count"] += 1
    return list(conversations.values())


@transaction.atomic
def history(user, partner_id) -> List[Message]:
    """Every message between ``user`` and ``partner_id`` in send order.

    Side effect: messages from the partner that ``user`` had not read yet
    are marked read.
    """
    partner_pk = coerce_user_id(partner_id)
    if partner_pk is None or not User.objects.filter(pk=partner_pk).exists():
        raise NotFound("User not found")

    Message.objects.filter(sender_id=partner_pk, receiver=user, read=False).update(
        read=True, read_at=timezone.now()
    )
    return list(
        Message.objects.filter(
            Q(sender=user, receiver_id=partner_pk) | Q(sender_id=partner_pk, receiver=user)
        )
        .select_related("sender__profile", "receiver__profile")
        .order_by("created_at", "id")
    )


def unread_count(user) -> int:
    return Message.objects.filter(receiver=user, read=False).count()


def delete_message(message_id, user) -> None:
    message = Message.objects.filter(pk=message_id).first()
    if message is None:
        raise NotFound("Message not found")
    if message.sender_id != user.pk:
        raise PermissionDenied("Not authorized to delete this message")
    message.delete()
    logger.info("Message %s deleted by sender %s", message_id, user.pk)
