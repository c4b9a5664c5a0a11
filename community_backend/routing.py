"""
Project-level Channels routing configuration.

This module builds the URL routes for all WebSocket connections and
wraps them with the JWT authentication middleware stack.
"""
from channels.routing import URLRouter

from common.channels_jwt_auth import JWTAuthMiddlewareStack
from messaging.routing import build_websocket_urlpatterns


def build_websocket_router(presence):
    return JWTAuthMiddlewareStack(
        URLRouter([
            *build_websocket_urlpatterns(presence),
        ])
    )
