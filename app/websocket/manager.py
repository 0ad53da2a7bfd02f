# =============================================================================
# app/websocket/manager.py - WebSocket Connection Manager
# =============================================================================
# Tracks admin notification streams per user and forwards what that admin's
# NotificationChannel emits.
#
# Usage:
#   from app.websocket import websocket_manager
#
#   await websocket_manager.connect(user_id, websocket, workspace.notifications)
#   ...
#   await websocket_manager.disconnect(user_id, websocket)
# =============================================================================

import asyncio
import logging
from typing import Dict

from fastapi import WebSocket

from core.services.notifications import NotificationChannel

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Manages WebSocket connections organized by admin user ID.

    Each admin can have multiple connected clients (e.g., multiple browser tabs).
    Every connection gets its own subscription to the admin's notification
    channel and a task forwarding it.
    """

    def __init__(self):
        # user_id -> {websocket: forwarding task}
        self.connections: Dict[str, Dict[WebSocket, asyncio.Task]] = {}
        # Track connection count for logging
        self._total_connections = 0

    async def connect(
        self,
        user_id: str,
        websocket: WebSocket,
        channel: NotificationChannel,
    ) -> None:
        """
        Accept a new WebSocket connection and start forwarding notifications.

        Args:
            user_id: The admin this connection belongs to
            websocket: The WebSocket connection
            channel: The admin's notification channel
        """
        await websocket.accept()

        queue = channel.subscribe()
        task = asyncio.create_task(self._forward(websocket, channel, queue))

        self.connections.setdefault(user_id, {})[websocket] = task
        self._total_connections += 1

        logger.info(
            f"WebSocket connected for user {user_id}. "
            f"Total connections: {self._total_connections}"
        )

    async def _forward(
        self,
        websocket: WebSocket,
        channel: NotificationChannel,
        queue: asyncio.Queue,
    ) -> None:
        try:
            while True:
                notification = await queue.get()
                await websocket.send_json({
                    "type": "notification",
                    "notification": notification.model_dump(mode="json"),
                })
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"Failed to send to WebSocket: {e}")
        finally:
            channel.unsubscribe(queue)

    async def disconnect(self, user_id: str, websocket: WebSocket) -> None:
        """
        Stop forwarding to a connection and remove it from tracking.

        Args:
            user_id: The admin this connection belonged to
            websocket: The WebSocket connection to remove
        """
        sockets = self.connections.get(user_id)
        if not sockets or websocket not in sockets:
            return

        task = sockets.pop(websocket)
        self._total_connections -= 1
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

        # Clean up empty user entries
        if not sockets:
            del self.connections[user_id]

        logger.info(
            f"WebSocket disconnected for user {user_id}. "
            f"Total connections: {self._total_connections}"
        )

    def get_connection_count(self, user_id: str = None) -> int:
        """
        Get the number of active connections.

        Args:
            user_id: If provided, count for a specific admin. Otherwise total.
        """
        if user_id:
            return len(self.connections.get(user_id, {}))
        return self._total_connections

    def get_active_users(self) -> list[str]:
        """User IDs with at least one open notification stream."""
        return list(self.connections.keys())


# Global singleton instance
websocket_manager = ConnectionManager()
