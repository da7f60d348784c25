from __future__ import annotations

import logging
from typing import Any, Protocol

log = logging.getLogger(__name__)


class PushConnection(Protocol):
    async def send_json(self, data: Any) -> None:
        ...


class PresenceRegistry:
    """
    Process-local map of user id -> live push connections.

    Not shared between workers and lost on restart: a user connected to a
    different process simply receives nothing live and reads the stored
    notification later.
    """

    def __init__(self) -> None:
        self._connections: dict[str, set[PushConnection]] = {}

    def connect(self, user_id: str, conn: PushConnection) -> None:
        self._connections.setdefault(user_id, set()).add(conn)

    def disconnect(self, user_id: str, conn: PushConnection) -> None:
        conns = self._connections.get(user_id)
        if not conns:
            return
        conns.discard(conn)
        if not conns:
            del self._connections[user_id]

    def is_online(self, user_id: str) -> bool:
        return user_id in self._connections

    def connection_count(self, user_id: str) -> int:
        return len(self._connections.get(user_id, ()))

    async def send(self, user_id: str, event: str, payload: dict[str, Any]) -> int:
        delivered = 0
        for conn in list(self._connections.get(user_id, ())):
            try:
                await conn.send_json({"event": event, "data": payload})
                delivered += 1
            except Exception:
                log.warning("push to %s failed, dropping connection", user_id, exc_info=True)
                self.disconnect(user_id, conn)
        return delivered


presence = PresenceRegistry()
