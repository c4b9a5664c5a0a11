"""
Message relay: persist-then-deliver for direct messages.

A send is written to the database first, then pushed to the receiver's
connection if the presence registry knows one.  Delivery is best-effort:
an offline receiver or a full channel is logged and otherwise ignored,
and the receiver catches up through the history endpoint.  Typing
indicators are never stored and are dropped when the receiver is
offline.
"""
from __future__ import annotations

import logging
from typing import Iterable, List

from channels.db import database_sync_to_async
from channels.exceptions import ChannelFull
from channels.layers import get_channel_layer

from . import services
from .presence import PresenceRegistry

logger = logging.getLogger(__name__)

CHAT_EVENT_TYPE = "chat.event"


class MessageRelay:
    def __init__(self, presence: PresenceRegistry, channel_layer=None):
        self.presence = presence
        self._channel_layer = channel_layer

    @property
    def channel_layer(self):
        if self._channel_layer is None:
            self._channel_layer = get_channel_layer()
        return self._channel_layer

    async def push(self, user_id, event: str, data) -> bool:
        """Deliver ``event`` to the user's registered connection; False if it went nowhere."""
        connection = self.presence.resolve(user_id)
        if connection is None:
            logger.debug("User %s offline; dropped %s", user_id, event)
            return False
        try:
            await self.channel_layer.send(connection, {"type": CHAT_EVENT_TYPE, "event": event, "data": data})
        except ChannelFull:
            logger.warning("Channel %s full; dropped %s for user %s", connection, event, user_id)
            return False
        return True

    async def send(self, sender_id, receiver_id, body) -> dict:
        """Persist a message and relay it; returns the stored message payload.

        Raises DRF ``ValidationError``/``NotFound`` before anything is
        written when the input is incomplete.
        """
        message = await database_sync_to_async(services.persist_message)(sender_id, receiver_id, body)
        payload = await database_sync_to_async(services.message_payload)(message)
        delivered = await self.push(message.receiver_id, "newMessage", payload)
        logger.info(
            "Message %s %s to user %s",
            message.pk, "delivered" if delivered else "stored for offline delivery", message.receiver_id,
        )
        return payload

    async def mark_read(self, message_ids: Iterable, reader_id) -> List:
        ids = list(message_ids or [])
        updated = await database_sync_to_async(services.mark_read)(ids, reader_id)
        logger.debug("User %s marked %s/%s messages read", reader_id, updated, len(ids))
        return ids

    async def typing(self, sender_id, receiver_id) -> bool:
        return await self.push(services.coerce_user_id(receiver_id), "userTyping", {"userId": sender_id})

    async def stop_typing(self, sender_id, receiver_id) -> bool:
        return await self.push(services.coerce_user_id(receiver_id), "userStoppedTyping", {"userId": sender_id})
