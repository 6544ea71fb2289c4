# lms_chat/routers/websocket_router.py
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import json
import logging

from ..services.realtime import ChannelManager, RealtimeRelay

logger = logging.getLogger(__name__)
router = APIRouter()

@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Real-time relay: clients join channels and send messages as JSON frames"""
    channels: ChannelManager = websocket.app.state.channels
    relay: RealtimeRelay = websocket.app.state.relay

    connection_id = await channels.connect(websocket)

    try:
        while True:
            data = await websocket.receive_text()
            try:
                frame = json.loads(data)
            except json.JSONDecodeError:
                await channels.send(connection_id, "error", {"message": "Invalid JSON"})
                continue

            await relay.dispatch(connection_id, frame)

    except WebSocketDisconnect:
        logger.info(f"Connection {connection_id} disconnected")
    except Exception as e:
        logger.error(f"WebSocket error for {connection_id}: {e}")
    finally:
        channels.disconnect(connection_id)
