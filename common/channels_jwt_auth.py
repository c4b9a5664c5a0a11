"""
JWT authentication middleware for Django Channels.

The bearer token is read from the WebSocket's ``Authorization`` header
or, for browsers that cannot set headers, from a ``token`` query
parameter.  A valid SimpleJWT access token populates ``scope['user']``
with the matching active user; anything else leaves an
``AnonymousUser`` in place and the consumer decides what to do.
"""

import logging
import urllib.parse
from typing import Callable, Optional

from channels.auth import AuthMiddlewareStack
from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

logger = logging.getLogger(__name__)

User = get_user_model()


def token_from_scope(scope) -> Optional[str]:
    headers = dict(scope.get("headers", []))
    auth_header = headers.get(b"authorization", b"").decode()
    if auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip() or None

    params = urllib.parse.parse_qs(scope.get("query_string", b"").decode())
    return params.get("token", [None])[0]


@database_sync_to_async
def get_user_from_token(token):
    """Validate token and return the active user it names, or None."""
    try:
        access = AccessToken(token)
    except TokenError as exc:
        logger.debug("Rejected websocket token: %s", exc)
        return None

    user_id = access.get(api_settings.USER_ID_CLAIM)
    if user_id is None:
        return None
    return User.objects.filter(pk=user_id, is_active=True).first()


class _JWTMiddleware(BaseMiddleware):
    """Low-level middleware to handle JWT tokens in a WebSocket scope."""

    async def __call__(self, scope, receive, send):
        scope = dict(scope)
        scope["user"] = AnonymousUser()

        token = token_from_scope(scope)
        if token:
            user = await get_user_from_token(token)
            if user:
                scope["user"] = user

        return await super().__call__(scope, receive, send)


def JWTAuthMiddlewareStack(inner: Callable):
    """Entry point for the middleware stack used by Channels routing."""
    return AuthMiddlewareStack(_JWTMiddleware(inner))
