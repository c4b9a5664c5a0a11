"""
Channels consumer for realtime direct messaging.

One socket per client.  The user is authenticated by the JWT middleware
stack; anonymous sockets are closed with code 4401.  Frames are JSON
objects ``{"event": <name>, "data": <payload>}`` in both directions.

Client events: ``register``, ``sendMessage``, ``markAsRead``, ``typing``
and ``stopTyping``.  Server events: ``registered``, ``messageSent``,
``newMessage``, ``messagesMarkedRead``, ``userTyping``,
``userStoppedTyping`` and ``messageError``.
"""
from __future__ import annotations

import logging
from typing import Any

from channels.generic.websocket import AsyncJsonWebsocketConsumer
from rest_framework.exceptions import APIException

from common.exceptions import first_error_message
from .presence import PresenceRegistry
from .relay import MessageRelay
from .services import coerce_user_id

logger = logging.getLogger(__name__)

CLOSE_UNAUTHENTICATED = 4401


class ChatConsumer(AsyncJsonWebsocketConsumer):
    """Realtime WebSocket consumer for 1‑to‑1 chat."""

    presence: PresenceRegistry = None

    handlers = {
        "register": "on_register",
        "sendMessage": "on_send_message",
        "markAsRead": "on_mark_as_read",
        "typing": "on_typing",
        "stopTyping": "on_stop_typing",
    }

    def __init__(self, *args, presence: PresenceRegistry = None, **kwargs):
        super().__init__(*args, **kwargs)
        if presence is None:
            raise TypeError("ChatConsumer requires a presence registry")
        self.presence = presence
        self.relay = None
        self.user = None

    async def connect(self) -> None:
        user = self.scope.get("user")
        if not user or not user.is_authenticated:
            await self.close(code=CLOSE_UNAUTHENTICATED)
            return
        self.user = user
        self.relay = MessageRelay(self.presence, channel_layer=self.channel_layer)
        await self.accept()

    async def disconnect(self, code: int) -> None:
        user_id = self.presence.unregister(self.channel_name)
        if user_id is not None:
            logger.info("User %s disconnected (%s)", user_id, code)

    async def receive_json(self, content: Any, **kwargs: Any) -> None:
        if not isinstance(content, dict):
            await self.send_error("Malformed frame")
            return
        event = content.get("event")
        method = self.handlers.get(event)
        if method is None:
            await self.send_error(f"Unknown event: {event}")
            return
        try:
            await getattr(self, method)(content.get("data"))
        except APIException as exc:
            await self.send_error(first_error_message(exc.detail))
        except Exception:
            logger.exception("Failed to handle %s from user %s", event, self.user.pk)
            await self.send_error("Failed to process event")

    # ---------- outbound ----------
    async def send_event(self, event: str, data: Any) -> None:
        await self.send_json({"event": event, "data": data})

    async def send_error(self, error: str) -> None:
        await self.send_event("messageError", {"error": error})

    async def chat_event(self, event: dict[str, Any]) -> None:
        """Channel-layer handler for pushes addressed to this connection."""
        await self.send_event(event["event"], event["data"])

    # ---------- inbound ----------
    def _claims_other_user(self, claimed) -> bool:
        """A payload user id is optional, but when present it must be the socket's user."""
        return claimed is not None and coerce_user_id(claimed) != self.user.pk

    async def on_register(self, data: Any) -> None:
        claimed = data.get("userId") if isinstance(data, dict) else data
        if self._claims_other_user(claimed):
            await self.send_error("Cannot act on behalf of another user")
            return
        self.presence.register(self.user.pk, self.channel_name)
        logger.info("User %s registered on %s", self.user.pk, self.channel_name)
        await self.send_event("registered", {"userId": self.user.pk})

    async def on_send_message(self, data: Any) -> None:
        data = data if isinstance(data, dict) else {}
        sender = data.get("sender")
        if sender is None:
            await self.send_error("Sender, receiver, and message are required")
            return
        if self._claims_other_user(sender):
            await self.send_error("Sender does not match the authenticated user")
            return
        payload = await self.relay.send(self.user.pk, data.get("receiver"), data.get("message"))
        await self.send_event("messageSent", payload)

    async def on_mark_as_read(self, data: Any) -> None:
        data = data if isinstance(data, dict) else {}
        if self._claims_other_user(data.get("userId")):
            await self.send_error("Cannot act on behalf of another user")
            return
        message_ids = data.get("messageIds") or []
        if not isinstance(message_ids, list):
            await self.send_error("messageIds must be a list")
            return
        ids = await self.relay.mark_read(message_ids, self.user.pk)
        await self.send_event("messagesMarkedRead", {"messageIds": ids})

    async def on_typing(self, data: Any) -> None:
        data = data if isinstance(data, dict) else {}
        if self._claims_other_user(data.get("sender")):
            return
        await self.relay.typing(self.user.pk, data.get("receiver"))

    async def on_stop_typing(self, data: Any) -> None:
        data = data if isinstance(data, dict) else {}
        if self._claims_other_user(data.get("sender")):
            return
        await self.relay.stop_typing(self.user.pk, data.get("receiver"))
