"""WebSocket push endpoint."""

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from restoreview.infrastructure.broadcast import broadcaster

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.websocket("/ws")
async def notifications_socket(websocket: WebSocket):
    await websocket.accept()
    broadcaster.subscribe(websocket)
    try:
        await websocket.send_json({"type": "connection", "message": "Connection established"})
        # Clients do not send anything meaningful; reading keeps the socket open
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("WebSocket client disconnected")
    finally:
        broadcaster.unsubscribe(websocket)
