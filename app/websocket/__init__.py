# =============================================================================
# app/websocket/__init__.py - WebSocket Module
# =============================================================================
# Streams each admin's editor notifications in real time.
#
# Usage:
#   from app.websocket import websocket_manager
#
#   websocket_manager.get_connection_count(user_id)
# =============================================================================

from app.websocket.manager import ConnectionManager, websocket_manager

__all__ = [
    "ConnectionManager",
    "websocket_manager",
]
