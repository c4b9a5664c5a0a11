"""
ASGI lifespan handling.

Channels' ``ProtocolTypeRouter`` does not answer ``lifespan`` scopes on
its own; this small application runs registered startup/shutdown hooks
so process-scoped state (the chat presence registry) is torn down when
the server stops.
"""
import asyncio
import logging

logger = logging.getLogger(__name__)


class LifespanApp:
    def __init__(self, on_startup=(), on_shutdown=()):
        self.on_startup = list(on_startup)
        self.on_shutdown = list(on_shutdown)

    async def _run(self, hooks):
        for hook in hooks:
            result = hook()
            if asyncio.iscoroutine(result):
                await result

    async def __call__(self, scope, receive, send):
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                try:
                    await self._run(self.on_startup)
                except Exception as exc:
                    logger.exception("Startup hook failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                try:
                    await self._run(self.on_shutdown)
                except Exception as exc:
                    logger.exception("Shutdown hook failed")
                    await send({"type": "lifespan.shutdown.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.shutdown.complete"})
                return
