# lms_chat/schemas/realtime_schemas.py
"""Payloads carried by the /ws relay frames."""
from datetime import datetime
from typing import Any, Optional, Union
from pydantic import BaseModel


class InboundFrame(BaseModel):
    type: str
    data: Any = None


class SendMessagePayload(BaseModel):
    chat_id: int
    text: Optional[str] = ""
    sender_firebase_uid: Optional[str] = None
    receiver_firebase_uid: Optional[str] = None
    attachment_file_id: Optional[int] = None
    # Client-generated, echoed back untouched for optimistic UI reconciliation
    client_side_id: Optional[Union[str, int]] = None


class MessageBroadcast(BaseModel):
    message_id: int
    text: str
    created_at: Optional[datetime] = None
    attachment_file_id: Optional[int] = None
    attachment_name: Optional[str] = None
    attachment_type: Optional[str] = None
    attachment_url: Optional[str] = None
    chat_id: int
    sender_uid: str
    receiver_uid: str
    client_side_id: Optional[Union[str, int]] = None
