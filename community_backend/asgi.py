"""
ASGI entry point for Django Channels.
This file configures HTTP, WebSocket and lifespan protocols by composing
the Django ASGI application and Channels routing.  The default settings
module is the development configuration.

The chat presence registry is owned here: one per process, handed to the
chat consumer, and cleared when the server shuts down.
"""

import os
import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "community_backend.settings.dev")
django.setup()
from django.conf import settings
from django.core.asgi import get_asgi_application
from django.contrib.staticfiles.handlers import ASGIStaticFilesHandler

from channels.routing import ProtocolTypeRouter
from channels.security.websocket import AllowedHostsOriginValidator

from common.lifespan import LifespanApp
from messaging.presence import PresenceRegistry
from .routing import build_websocket_router

django_asgi_app = get_asgi_application()

# Serve /static/ when using uvicorn in DEBUG mode
if settings.DEBUG:
    django_asgi_app = ASGIStaticFilesHandler(django_asgi_app)

presence = PresenceRegistry()

application = ProtocolTypeRouter({
    "http": django_asgi_app,
    "websocket": AllowedHostsOriginValidator(build_websocket_router(presence)),
    "lifespan": LifespanApp(on_shutdown=[presence.clear]),
})
