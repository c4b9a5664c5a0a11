"""
WebSocket routing for the messaging app.

The chat socket is built per process around one presence registry, so
the URL patterns are produced by a factory instead of a module-level
list.  The JWT authentication middleware populates ``scope['user']``
and the consumer itself rejects anonymous connections.
"""
from django.urls import path

from .consumers import ChatConsumer


def build_websocket_urlpatterns(presence):
    return [
        path("ws/chat/", ChatConsumer.as_asgi(presence=presence)),
    ]
