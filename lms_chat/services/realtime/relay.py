# lms_chat/services/realtime/relay.py
"""Inbound socket events mapped to handlers; persisted messages fanned out to channels."""
from typing import Any, Awaitable, Callable, Dict, Optional
from pydantic import ValidationError
import logging

from ...core.config import Settings
from ...core.database import Database
from ...schemas.realtime_schemas import InboundFrame, MessageBroadcast, SendMessagePayload
from ..chat_service import ChatService
from ..file_service import FileService
from ..identity_service import IdentityService
from ..user_service import UserService
from ..push_service import PushDispatcher, build_chat_notification
from .channel_manager import ChannelManager, chat_channel, user_channel

logger = logging.getLogger(__name__)

Handler = Callable[[str, Any], Awaitable[None]]


class RealtimeRelay:
    def __init__(
        self,
        database: Database,
        channels: ChannelManager,
        push: PushDispatcher,
        settings: Settings,
    ):
        self.database = database
        self.channels = channels
        self.push = push
        self.settings = settings
        self.handlers: Dict[str, Handler] = {
            "join_chat": self.join_chat,
            "leave_chat": self.leave_chat,
            "join_user": self.join_user,
            "send_message": self.send_message,
            "ping": self.ping,
        }

    async def dispatch(self, connection_id: str, raw: Any):
        """Route one inbound frame to its handler"""
        try:
            frame = InboundFrame.model_validate(raw)
        except ValidationError:
            await self.channels.send(connection_id, "error", {"message": "Malformed frame"})
            return

        handler = self.handlers.get(frame.type)
        if handler is None:
            await self.channels.send(
                connection_id, "error", {"message": f"Unknown message type: {frame.type}"}
            )
            return
        await handler(connection_id, frame.data)

    async def ping(self, connection_id: str, data: Any):
        """Heartbeat; frames on one connection are handled in order, so a pong
        also confirms every earlier frame was processed."""
        await self.channels.send(connection_id, "pong", data)

    async def join_chat(self, connection_id: str, chat_id: Any):
        if chat_id is None:
            return
        self.channels.join(connection_id, chat_channel(chat_id))

    async def leave_chat(self, connection_id: str, chat_id: Any):
        if chat_id is None:
            return
        self.channels.leave(connection_id, chat_channel(chat_id))

    async def join_user(self, connection_id: str, firebase_uid: Any):
        if not firebase_uid:
            return
        self.channels.join(connection_id, user_channel(firebase_uid))

    async def send_message(self, connection_id: str, data: Any):
        try:
            payload = SendMessagePayload.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Rejected send_message from {connection_id}: {e.errors()}")
            await self.channels.send(connection_id, "error", {"message": "Invalid send_message payload"})
            return

        try:
            await self.relay_message(payload)
        except Exception as e:
            # The sender gets no error event; the failure is only logged
            logger.error(f"Message Error: {e}")

    async def relay_message(self, payload: SendMessagePayload) -> Optional[MessageBroadcast]:
        """Resolve, persist, enrich, broadcast, then hand off the push notification.

        Returns the broadcast payload, or None when the message was dropped.
        """
        async with self.database.session() as session:
            sender_id, receiver_id = await IdentityService(session).resolve_pair(
                payload.sender_firebase_uid, payload.receiver_firebase_uid
            )
            if not sender_id or not receiver_id:
                logger.info(
                    f"Dropping message for chat {payload.chat_id}: unresolved participant "
                    f"{payload.sender_firebase_uid} -> {payload.receiver_firebase_uid}"
                )
                return None
            if not payload.text and not payload.attachment_file_id:
                logger.info(f"Dropping empty message for chat {payload.chat_id}")
                return None

            saved = await ChatService(session).save_message(
                chat_id=payload.chat_id,
                sender_id=sender_id,
                receiver_id=receiver_id,
                text=payload.text or "",
                attachment_file_id=payload.attachment_file_id,
            )

            broadcast = MessageBroadcast(
                message_id=saved.message_id,
                text=saved.text,
                created_at=saved.created_at,
                attachment_file_id=saved.attachment_file_id,
                chat_id=payload.chat_id,
                sender_uid=payload.sender_firebase_uid,
                receiver_uid=payload.receiver_firebase_uid,
                client_side_id=payload.client_side_id,
            )
            if payload.attachment_file_id:
                metadata = await FileService(session).get_metadata(payload.attachment_file_id)
                if metadata is not None:
                    broadcast.attachment_name, broadcast.attachment_type = metadata
                    broadcast.attachment_url = self.settings.attachment_url(payload.attachment_file_id)

        outgoing = broadcast.model_dump(exclude_none=False)
        fanout = (
            (chat_channel(payload.chat_id), "receive_message"),
            (user_channel(payload.receiver_firebase_uid), "new_notification"),
        )
        for channel, event in fanout:
            try:
                await self.channels.broadcast(channel, event, outgoing)
            except Exception as e:
                logger.error(f"Broadcast of {event} to {channel} failed: {e}")

        await self.notify_receiver(payload, sender_id, receiver_id)
        return broadcast

    async def notify_receiver(self, payload: SendMessagePayload, sender_id: int, receiver_id: int):
        """Look up the receiver's push token and dispatch without waiting on delivery"""
        if not self.push.enabled:
            return
        try:
            async with self.database.session() as session:
                users = UserService(session)
                token = await users.get_fcm_token(receiver_id)
                if not token:
                    return
                sender_name = await users.get_display_name(sender_id)
        except Exception as e:
            logger.error(f"Push lookup error: {e}")
            return

        self.push.dispatch(
            build_chat_notification(
                token=token,
                sender_name=sender_name,
                text=payload.text,
                has_attachment=bool(payload.attachment_file_id),
                chat_id=payload.chat_id,
                sender_uid=payload.sender_firebase_uid,
            )
        )
