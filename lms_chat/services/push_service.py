# lms_chat/services/push_service.py
"""Best-effort push notifications through Firebase Cloud Messaging."""
import asyncio
import logging
from typing import Dict, Optional, Protocol, Set
from pydantic import BaseModel, Field

import firebase_admin
from firebase_admin import credentials, messaging

from ..core.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New Message"
ATTACHMENT_BODY = "Sent an attachment"


class PushNotification(BaseModel):
    token: str
    title: str
    body: str
    data: Dict[str, str] = Field(default_factory=dict)


def build_chat_notification(
    token: str,
    sender_name: Optional[str],
    text: Optional[str],
    has_attachment: bool,
    chat_id: int,
    sender_uid: str,
) -> PushNotification:
    if text:
        body = text
    elif has_attachment:
        body = ATTACHMENT_BODY
    else:
        body = DEFAULT_TITLE
    return PushNotification(
        token=token,
        title=sender_name or DEFAULT_TITLE,
        body=body,
        data={"chat_id": str(chat_id), "sender_uid": sender_uid},
    )


class PushProvider(Protocol):
    async def send(self, notification: PushNotification) -> str: ...


class FirebasePushProvider:
    """Sends through firebase-admin; the SDK call blocks, so it runs in a thread."""

    def __init__(self, credentials_path: str, app_name: str = "lms_chat"):
        self.credentials_path = credentials_path
        self.app_name = app_name
        self._app: Optional[firebase_admin.App] = None

    def _get_app(self) -> firebase_admin.App:
        if self._app is None:
            try:
                self._app = firebase_admin.get_app(self.app_name)
            except ValueError:
                cred = credentials.Certificate(self.credentials_path)
                self._app = firebase_admin.initialize_app(cred, name=self.app_name)
        return self._app

    def _send_sync(self, notification: PushNotification) -> str:
        message = messaging.Message(
            token=notification.token,
            notification=messaging.Notification(
                title=notification.title,
                body=notification.body,
            ),
            data=notification.data,
        )
        return messaging.send(message, app=self._get_app())

    async def send(self, notification: PushNotification) -> str:
        return await asyncio.to_thread(self._send_sync, notification)


class PushDispatcher:
    """Fire-and-forget dispatch. Failures are logged and never retried."""

    def __init__(self, provider: Optional[PushProvider] = None):
        self.provider = provider
        self._pending: Set[asyncio.Task] = set()

    @property
    def enabled(self) -> bool:
        return self.provider is not None

    def dispatch(self, notification: PushNotification) -> Optional[asyncio.Task]:
        if not self.enabled:
            logger.debug("Push provider not configured, skipping notification")
            return None
        task = asyncio.create_task(self._deliver(notification))
        # Keep a reference until done, the loop only holds weak ones
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _deliver(self, notification: PushNotification):
        try:
            message_id = await self.provider.send(notification)
            logger.info(f"Push sent: {message_id}")
        except Exception as e:
            logger.error(f"Push send error: {e}")

    async def drain(self):
        """Wait for in-flight notifications, used on shutdown"""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


def create_push_dispatcher(settings: Settings, provider: Optional[PushProvider] = None) -> PushDispatcher:
    if provider is None and settings.push_enabled and settings.firebase_credentials_path:
        provider = FirebasePushProvider(settings.firebase_credentials_path)
    if provider is None:
        logger.warning("Push notifications disabled: no Firebase credentials configured")
    return PushDispatcher(provider)
