"""WebSocket connection registry used as the real-time notification channel."""
import logging
import threading
from collections import defaultdict
from uuid import UUID

import anyio
from fastapi import WebSocket

logger = logging.getLogger("taskboard-core.realtime")


class WebSocketHub:
    """Tracks open WebSocket connections per user and pushes events to them.

    push() is called from the worker threads that run the synchronous
    endpoints, so it hands each send back to the event loop. A send that
    does not finish within send_timeout seconds counts as a failed socket.
    """

    def __init__(self, send_timeout: float = 5.0):
        self.send_timeout = send_timeout
        self._connections: dict[UUID, set[WebSocket]] = defaultdict(set)
        self._lock = threading.Lock()

    async def connect(self, user_id: UUID, websocket: WebSocket) -> None:
        await websocket.accept()
        with self._lock:
            self._connections[user_id].add(websocket)
        logger.debug(f"User {user_id} connected for live notifications")

    def disconnect(self, user_id: UUID, websocket: WebSocket) -> None:
        with self._lock:
            sockets = self._connections.get(user_id)
            if sockets is None:
                return
            sockets.discard(websocket)
            if not sockets:
                del self._connections[user_id]
        logger.debug(f"User {user_id} disconnected from live notifications")

    def connection_count(self, user_id: UUID) -> int:
        with self._lock:
            return len(self._connections.get(user_id, ()))

    async def _send(self, websocket: WebSocket, message: dict) -> None:
        with anyio.fail_after(self.send_timeout):
            await websocket.send_json(message)

    def push(self, user_id: UUID, payload: dict) -> None:
        with self._lock:
            sockets = list(self._connections.get(user_id, ()))
        message = {"event": "new_notification", "data": payload}
        for websocket in sockets:
            try:
                anyio.from_thread.run(self._send, websocket, message)
            except TimeoutError:
                logger.warning(f"Dropping live connection for user {user_id}: send timed out after {self.send_timeout}s")
                self.disconnect(user_id, websocket)
            except Exception:
                logger.warning(f"Dropping live connection for user {user_id}", exc_info=True)
                self.disconnect(user_id, websocket)
