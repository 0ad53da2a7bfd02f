# =============================================================================
# app/websocket/routes.py - WebSocket Routes
# =============================================================================
# Live stream of the admin's notifications.
#
# Connect: ws://host/ws/admin/notifications?token={jwt}
#
# Events:
#   - {"type": "connected", "user_id": "..."}
#   - {"type": "notification", "notification": {"level": "success", ...}}
# =============================================================================

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect

from app.auth.dependencies import decode_access_token, session_gate
from app.auth.session_gate import GateDecision, SessionContext
from app.dependencies import get_workspace_registry
from app.websocket.manager import websocket_manager
from core.services.workspace import WorkspaceRegistry

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws/admin/notifications")
async def admin_notifications_websocket(
    websocket: WebSocket,
    token: str = Query(..., description="JWT token for authentication"),
    registry: WorkspaceRegistry = Depends(get_workspace_registry),
):
    """
    WebSocket endpoint streaming the admin's notifications.

    Authentication is required via the `token` query parameter.

    Connection URL:
        ws://localhost:8000/ws/admin/notifications?token={jwt}

    Example event:
        {
            "type": "notification",
            "notification": {
                "level": "success",
                "title": "Success",
                "message": "Service updated successfully",
                "resource": "services",
                ...
            }
        }
    """
    # 1. Verify JWT token
    context = SessionContext()
    try:
        context.resolve(decode_access_token(token))
    except HTTPException as e:
        logger.warning(f"WebSocket auth failed: {e.detail}")
        context.resolve(None)

    if session_gate.check(context).decision != GateDecision.RENDER:
        await websocket.close(code=4001, reason="Invalid token")
        return

    user_id = str(context.user.id)
    workspace = registry.get(user_id)

    # 2. Accept connection and start forwarding
    await websocket_manager.connect(user_id, websocket, workspace.notifications)

    try:
        # Send welcome message
        await websocket.send_json({
            "type": "connected",
            "user_id": user_id,
            "message": "Connected to admin notifications"
        })

        # Keep connection alive and handle incoming messages
        while True:
            try:
                data = await websocket.receive_text()

                # Handle ping/pong for keepalive
                if data == "ping":
                    await websocket.send_text("pong")
                else:
                    logger.debug(f"WebSocket received: {data[:100]}")

            except WebSocketDisconnect:
                raise
            except Exception as e:
                logger.warning(f"WebSocket receive error: {e}")
                break

    except WebSocketDisconnect:
        logger.info(f"WebSocket client disconnected for user {user_id}")
    finally:
        await websocket_manager.disconnect(user_id, websocket)


@router.get("/ws/status")
async def websocket_status():
    """
    Get WebSocket connection statistics.
    """
    return {
        "total_connections": websocket_manager.get_connection_count(),
        "active_users": websocket_manager.get_active_users(),
        "user_count": len(websocket_manager.get_active_users())
    }
