"""
Presence registry: which realtime connection currently speaks for which user.

The registry is volatile and process-local.  It is created by the ASGI
application, handed to every chat consumer, and cleared on shutdown;
after a restart clients announce themselves again with ``register``.

Two maps are kept in step under one lock: ``connection -> user`` is the
primary index (so a disconnect is O(1)) and ``user -> connection`` serves
lookups on send.  The last registration for a user wins.
"""
from __future__ import annotations

import logging
import threading
from typing import Dict, Hashable, Optional

logger = logging.getLogger(__name__)


class PresenceRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_connection: Dict[str, Hashable] = {}
        self._by_user: Dict[Hashable, str] = {}

    def register(self, user_id: Hashable, connection: str) -> Optional[str]:
        """Bind ``user_id`` to ``connection``; returns the connection it replaced, if any."""
        with self._lock:
            # the connection may already speak for someone else
            previous_user = self._by_connection.get(connection)
            if previous_user is not None and previous_user != user_id:
                if self._by_user.get(previous_user) == connection:
                    del self._by_user[previous_user]

            replaced = self._by_user.get(user_id)
            if replaced is not None and replaced != connection:
                self._by_connection.pop(replaced, None)

            self._by_user[user_id] = connection
            self._by_connection[connection] = user_id

        logger.debug("User %s registered on %s", user_id, connection)
        return replaced if replaced != connection else None

    def resolve(self, user_id: Hashable) -> Optional[str]:
        with self._lock:
            return self._by_user.get(user_id)

    def unregister(self, connection: str) -> Optional[Hashable]:
        """Drop whatever pairing ``connection`` holds; returns the user it was bound to."""
        with self._lock:
            user_id = self._by_connection.pop(connection, None)
            if user_id is not None and self._by_user.get(user_id) == connection:
                del self._by_user[user_id]
        if user_id is not None:
            logger.debug("User %s unregistered from %s", user_id, connection)
        return user_id

    def clear(self) -> None:
        with self._lock:
            count = len(self._by_user)
            self._by_user.clear()
            self._by_connection.clear()
        logger.info("Presence registry cleared (%s entries)", count)
