# lms_chat/services/realtime/channel_manager.py
from typing import Any, Dict, List, Set
from uuid import uuid4
from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder
import logging

logger = logging.getLogger(__name__)


def chat_channel(chat_id: Any) -> str:
    return f"chat:{chat_id}"


def user_channel(firebase_uid: Any) -> str:
    return f"user:{firebase_uid}"


class ChannelManager:
    """Session-scoped registry of live sockets and the channels they joined.

    Nothing here is persisted; memberships disappear with the connection.
    """

    def __init__(self):
        # {connection_id: websocket}
        self.active_connections: Dict[str, WebSocket] = {}
        # {channel: {connection_ids}}
        self.channels: Dict[str, Set[str]] = {}

    async def connect(self, websocket: WebSocket) -> str:
        """Accept websocket connection and register it"""
        await websocket.accept()
        connection_id = uuid4().hex
        self.active_connections[connection_id] = websocket
        logger.info(f"Connection {connection_id} opened")
        return connection_id

    def disconnect(self, connection_id: str):
        """Remove connection and clean up its memberships"""
        if connection_id not in self.active_connections:
            return

        for members in self.channels.values():
            members.discard(connection_id)

        # Clean up empty channels
        self.channels = {
            channel: members
            for channel, members in self.channels.items()
            if members
        }

        del self.active_connections[connection_id]
        logger.info(f"Connection {connection_id} closed")

    def join(self, connection_id: str, channel: str):
        if connection_id not in self.active_connections:
            logger.warning(f"Connection {connection_id} not open, cannot join {channel}")
            return
        self.channels.setdefault(channel, set()).add(connection_id)
        logger.debug(f"Connection {connection_id} joined {channel}")

    def leave(self, connection_id: str, channel: str):
        members = self.channels.get(channel)
        if members is None:
            return
        members.discard(connection_id)
        if not members:
            del self.channels[channel]

    def members(self, channel: str) -> List[str]:
        return [
            connection_id for connection_id in self.channels.get(channel, set())
            if connection_id in self.active_connections
        ]

    async def send(self, connection_id: str, event: str, payload: Any):
        """Send one event to a single connection"""
        websocket = self.active_connections.get(connection_id)
        if websocket is None:
            return
        try:
            await websocket.send_json({"type": event, "data": jsonable_encoder(payload)})
        except Exception as e:
            logger.error(f"Error sending to {connection_id}: {e}")
            self.disconnect(connection_id)

    async def broadcast(self, channel: str, event: str, payload: Any) -> int:
        """Send an event to every connection in the channel; returns delivered count"""
        frame = {"type": event, "data": jsonable_encoder(payload)}
        disconnected = []
        sent_count = 0

        for connection_id in self.members(channel):
            # May have disconnected while an earlier send was awaiting
            websocket = self.active_connections.get(connection_id)
            if websocket is None:
                continue
            try:
                await websocket.send_json(frame)
                sent_count += 1
            except Exception as e:
                logger.error(f"Error broadcasting to {connection_id}: {e}")
                disconnected.append(connection_id)

        # Clean up dead sockets
        for connection_id in disconnected:
            self.disconnect(connection_id)

        logger.debug(f"Broadcast {event} to {channel}: sent to {sent_count} connections")
        return sent_count

    def is_connected(self, connection_id: str) -> bool:
        return connection_id in self.active_connections
